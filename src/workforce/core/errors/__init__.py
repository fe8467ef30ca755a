"""Error handling module with RFC 7807 Problem Details."""

from workforce.core.errors.exceptions import (
    AppException,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    InvalidConfigurationError,
    NotFoundError,
    ResourceForbiddenError,
    UnauthorizedError,
    ValidationError,
)
from workforce.core.errors.handlers import (
    FieldError,
    ProblemDetail,
    register_exception_handlers,
)


__all__ = [
    # Exceptions
    "AppException",
    "BadRequestError",
    "ConflictError",
    # Handlers
    "FieldError",
    "ForbiddenError",
    "InvalidConfigurationError",
    "NotFoundError",
    "ProblemDetail",
    "ResourceForbiddenError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
]
