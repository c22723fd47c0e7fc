"""Application error taxonomy.

Services raise these; ``register_error_handlers`` turns them into JSON
responses of the form ``{"detail": message}`` at the request boundary.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MirakleError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(MirakleError):
    status_code = 401
    default_message = "Not authenticated"


class ValidationError(MirakleError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(MirakleError):
    status_code = 404
    default_message = "Not found"


class InternalError(MirakleError):
    status_code = 500
    default_message = "Server error"


async def _handle_mirakle_error(request: Request, exc: MirakleError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc.__cause__)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticated) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MirakleError, _handle_mirakle_error)
