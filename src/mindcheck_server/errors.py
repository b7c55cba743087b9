"""Global exception handlers — map SDK exceptions to HTTP status codes.

SDK errors carry an :class:`ErrorKind`; the handler maps every kind to a
status code, so route handlers stay focused on the happy path.  Plain
``ValueError`` (bad input outside the taxonomy) is classified by message
as before.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from mindcheck_assessment.errors import AssessmentError, ErrorKind

logger = logging.getLogger(__name__)

# --- Exhaustive ErrorKind → (HTTP status, client-safe message) ---
_KIND_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.INVALID_OPTION: (422, "Option index is out of range for this question"),
    ErrorKind.INVALID_STATE: (409, "Assessment is already complete"),
    ErrorKind.NOT_FOUND: (404, "Resource not found"),
    ErrorKind.INSUFFICIENT_DATA: (422, "Not enough answers to classify"),
    ErrorKind.UNKNOWN_CONCERN: (500, "Assessment configuration error"),
    ErrorKind.PERSISTENCE_FAILURE: (503, "Storage is temporarily unavailable"),
}

# --- Keyword patterns in plain ValueError messages ---
# Checked in order; first match wins.
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("already exists", 409),
    ("not found", 404),
]

_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Resource already exists",
    400: "Invalid request",
}


async def assessment_error_handler(request: Request, exc: AssessmentError) -> JSONResponse:
    """Map an SDK error to its status code by ``exc.kind``.

    The raw message is logged server-side; the client gets the kind and a
    generic description.
    """
    status, detail = _KIND_RESPONSES[exc.kind]
    if status >= 500:
        logger.error("%s [%d] at %s: %s", exc.kind.value, status, request.url, exc)
    else:
        logger.warning("%s [%d] at %s: %s", exc.kind.value, status, request.url, exc)
    return JSONResponse(
        status_code=status,
        content={"detail": detail, "kind": exc.kind.value},
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map a plain ``ValueError`` to 409 / 404 / 400 by message."""
    msg = str(exc)
    status = 400
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    return JSONResponse(status_code=status, content={"detail": _SAFE_MESSAGES[status]})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
