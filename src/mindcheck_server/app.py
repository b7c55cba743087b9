"""Application factory and CLI entry point.

``create_app()`` builds the FastAPI application with:
  - Lifespan handler that loads the question bank and chat rules and wires
    the assessment engine, store, notifier and progress feed once
  - CORS middleware
  - Global exception handlers (ErrorKind → status, ValueError → 404/409/400)
  - All API routes mounted under ``/api/v1``
  - A ``/health`` endpoint for readiness probes

The ``cli()`` function is the ``mindcheck-server`` console-script entry point.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from mindcheck_assessment.chat import ChatResponder
from mindcheck_assessment.engine import AssessmentEngine
from mindcheck_assessment.errors import AssessmentError
from mindcheck_assessment.notifications import InMemoryChangeNotifier
from mindcheck_assessment.persistence import DatabaseAssessmentStore
from mindcheck_assessment.progress import ProgressFeed
from mindcheck_assessment.question_bank import QuestionBank
from mindcheck_assessment.scheduling import HttpSchedulingService
from mindcheck_assessment.summary import SummaryRenderer
from mindcheck_db.engine import Database
from mindcheck_db.repository import CounselorRepository

from mindcheck_server.config import ServerSettings, load_settings
from mindcheck_server.errors import (
    assessment_error_handler,
    generic_error_handler,
    value_error_handler,
)
from mindcheck_server.routes import register_routes

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Lifespan — runs once at startup/shutdown
# ------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialise shared resources at startup, tear down on shutdown.

    Startup:
      1. Load the question bank and chat rules from YAML
      2. Build the database, notifier, store, engine and progress feed
      3. Stash them on ``app.state`` for dependency injection

    Shutdown:
      1. Drop progress-feed subscriptions
      2. Dispose the database engine's connection pool
    """
    settings: ServerSettings = app.state.settings

    # --- Load content ---
    bank = QuestionBank(settings.question_bank_path).load()
    chat = ChatResponder().load()
    logger.info("Question bank and chat rules loaded")

    # --- Build services ---
    database = Database()
    notifier = InMemoryChangeNotifier()
    store = DatabaseAssessmentStore(notifier)
    feed = ProgressFeed(store, notifier, max_users=settings.progress_cache_users)

    app.state.database = database
    app.state.bank = bank
    app.state.chat = chat
    app.state.notifier = notifier
    app.state.store = store
    app.state.feed = feed
    app.state.engine = AssessmentEngine(bank, store)
    app.state.renderer = SummaryRenderer()
    app.state.counselor_repo = CounselorRepository()
    app.state.scheduler = HttpSchedulingService(
        settings.scheduler_url,
        settings.scheduler_api_key,
        timeout=settings.scheduler_timeout,
    )

    yield

    # --- Shutdown ---
    feed.close()
    await database.dispose()


# ------------------------------------------------------------------
# Factory
# ------------------------------------------------------------------

def create_app(settings: ServerSettings | None = None) -> FastAPI:
    """Build and return the configured FastAPI application."""
    if settings is None:
        settings = load_settings()

    # --- Configure logging ---
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="MindCheck API Server",
        description="REST API for the adaptive mental-wellness assessment",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store settings so the lifespan handler can read them
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Exception handlers ---
    # AssessmentError subclasses ValueError; the most specific handler wins.
    app.add_exception_handler(AssessmentError, assessment_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # --- Health check (outside /api/v1 prefix) ---
    @app.get("/health")
    async def health() -> dict:
        """Readiness probe — verifies DB connectivity."""
        try:
            async with app.state.database.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return {"status": "ok"}
        except Exception as exc:
            logger.error("Health check failed: %s", exc)
            return {"status": "error", "detail": str(exc)}

    # --- Mount all API routes ---
    register_routes(app)

    return app


# ------------------------------------------------------------------
# Module-level ASGI export (for uvicorn mindcheck_server.app:app)
# ------------------------------------------------------------------
app = create_app()


# ------------------------------------------------------------------
# CLI entry point
# ------------------------------------------------------------------

def cli() -> None:
    """Console-script entry point: ``mindcheck-server``."""
    import uvicorn

    settings = load_settings()
    uvicorn.run(
        "mindcheck_server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
