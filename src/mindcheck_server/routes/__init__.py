"""Route registration — mounts all routers under ``/api/v1``."""

from fastapi import FastAPI

from mindcheck_server.routes.chat import router as chat_router
from mindcheck_server.routes.counselors import router as counselors_router
from mindcheck_server.routes.history import router as history_router
from mindcheck_server.routes.progress import router as progress_router
from mindcheck_server.routes.reference import router as reference_router
from mindcheck_server.routes.sessions import router as sessions_router
from mindcheck_server.routes.steps import router as steps_router

API_PREFIX = "/api/v1"


def register_routes(app: FastAPI) -> None:
    """Include all sub-routers under the versioned API prefix."""
    app.include_router(sessions_router, prefix=API_PREFIX)
    app.include_router(steps_router, prefix=API_PREFIX)
    app.include_router(history_router, prefix=API_PREFIX)
    app.include_router(progress_router, prefix=API_PREFIX)
    app.include_router(chat_router, prefix=API_PREFIX)
    app.include_router(counselors_router, prefix=API_PREFIX)
    app.include_router(reference_router, prefix=API_PREFIX)
