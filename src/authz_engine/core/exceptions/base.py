"""Base exceptions for authz-engine.

All exceptions inherit from AuthzError and carry an error code and a
details mapping so API layers can render them uniformly.
"""

from typing import Any, Dict, Optional


class AuthzError(Exception):
    """Base exception for all authz-engine errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code
    """
    from .http_mapping import get_http_status_code as _mapped_status_code
    return _mapped_status_code(exception)


def create_error_response(exception: AuthzError) -> Dict[str, Any]:
    """Create standardized error response from exception.

    Args:
        exception: The authz-engine exception

    Returns:
        Error response dictionary
    """
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
