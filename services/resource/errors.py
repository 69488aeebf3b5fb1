"""
Typed failures that end a request with an error envelope.

Recoverable parameter problems never use these; they become notifications.
"""
from typing import Any, Dict, List, Optional, Union

Details = Union[Dict[str, Any], List[Any]]


class ApiError(Exception):
    """Base class for every error rendered as an error envelope"""

    code = "INTERNAL_SERVER_ERROR"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[Details] = None):
        self.message = message or self.default_message
        self.details = details if details is not None else {}
        super().__init__(self.message)

    def __repr__(self):
        return f"<{self.__class__.__name__}(code={self.code!r}, message={self.message!r})>"


class ResourceNotFoundError(ApiError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ValidationFailedError(ApiError):
    code = "VALIDATION_FAILED"
    default_message = "The given data was invalid"


class UnauthorizedError(ApiError):
    code = "UNAUTHORIZED"
    default_message = "Authentication required"


class ForbiddenError(ApiError):
    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class InvalidParametersError(ApiError):
    code = "INVALID_PARAMETERS"
    default_message = "The request parameters are invalid"


class InternalServerError(ApiError):
    code = "INTERNAL_SERVER_ERROR"
    default_message = "An unexpected error occurred"
