"""
FastAPI exception handlers for authz-engine errors.

Maps the engine's error taxonomy to HTTP responses using the static
status map in ``core.exceptions.http_mapping``.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import AuthzError, create_error_response, get_http_status_code

logger = logging.getLogger(__name__)


class ExceptionHandlerRegistry:
    """Registers engine exception handlers on a FastAPI application."""

    def __init__(self, is_production: bool = True):
        """
        Args:
            is_production: Hide messages of unexpected exceptions when True
        """
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        @app.exception_handler(AuthzError)
        async def authz_exception_handler(request: Request, exc: AuthzError):
            status_code = get_http_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.message}")
            return JSONResponse(status_code=status_code, content=create_error_response(exc))

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": {
                        "code": "InternalServerError",
                        "message": message,
                        "details": {},
                        "type": exc.__class__.__name__,
                    }
                },
            )


def register_exception_handlers(app: FastAPI, is_production: bool = True) -> None:
    """Create an ExceptionHandlerRegistry and register its handlers in one call."""
    ExceptionHandlerRegistry(is_production).register_handlers(app)
