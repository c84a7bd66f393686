# ============================================================================
# FILE: audiovault/core/exception_handlers.py
# Maps the error taxonomy onto HTTP responses
# ============================================================================
import uuid
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from audiovault.core.exceptions import (
    AudioVaultError,
    InternalError,
    UnauthenticatedError,
)
import logging

logger = logging.getLogger(__name__)

INTERNAL_DETAIL = "Internal server error"


def _internal_response(request: Request, exc: Exception) -> JSONResponse:
    error_id = uuid.uuid4().hex[:12]
    logger.error(
        f"Internal error [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"detail": INTERNAL_DETAIL, "error_id": error_id},
    )


async def audio_vault_error_handler(request: Request, exc: AudioVaultError) -> JSONResponse:
    """Translate domain errors into JSON error responses"""
    if isinstance(exc, InternalError):
        return _internal_response(request, exc)

    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}

    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never leaks the original message"""
    return _internal_response(request, exc)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application"""
    app.add_exception_handler(AudioVaultError, audio_vault_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered")
