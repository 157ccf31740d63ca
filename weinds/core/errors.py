"""
Domain errors and their HTTP rendering.

Services raise these instead of HTTPException so they stay usable outside
a request. attach_error_handlers() maps each one to a JSON response.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WeindsError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(WeindsError):
    status_code = 404


class ConflictError(WeindsError):
    status_code = 409


class ValidationFailedError(WeindsError):
    status_code = 422


class InvalidStateError(WeindsError):
    status_code = 400


class PermissionDeniedError(WeindsError):
    """
    Raised when a user touches a document they do not own.

    Carries the document path and attempted operation so the denial can
    be logged in one place.
    """
    status_code = 403

    def __init__(
        self,
        path: str,
        operation: str,
        request_resource_data: Optional[dict] = None,
        detail: str = "You do not have permission to perform this action"
    ):
        super().__init__(detail)
        self.path = path
        self.operation = operation
        self.request_resource_data = request_resource_data


class AIFlowError(WeindsError):
    """LLM call failed or returned output that does not match the flow schema."""
    status_code = 502

    def __init__(self, flow: str, detail: str):
        super().__init__(f"AI flow '{flow}' failed: {detail}")
        self.flow = flow


class StorageError(WeindsError):
    status_code = 500


def attach_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PermissionDeniedError)
    async def _permission_denied(request: Request, exc: PermissionDeniedError):
        logger.warning(
            "Permission denied: %s %s (%s %s)",
            exc.operation, exc.path, request.method, request.url.path
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "path": exc.path, "operation": exc.operation}
        )

    @app.exception_handler(AIFlowError)
    async def _ai_flow_failed(request: Request, exc: AIFlowError):
        logger.error("AI flow %s failed: %s", exc.flow, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(WeindsError)
    async def _domain_error(request: Request, exc: WeindsError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("Unhandled: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
