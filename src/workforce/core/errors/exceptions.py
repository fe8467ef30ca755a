"""Domain exceptions for the application.

These exceptions represent business-logic errors and are automatically
converted to RFC 7807 Problem Details responses by the exception handlers.
Authorization failures live here too: ``UnauthorizedError`` when no
principal could be resolved, ``ForbiddenError`` when a resolved principal
fails a role, permission or ownership rule.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    All domain exceptions should inherit from this class.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for clients
        status_code: HTTP status code for the response
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"
    status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppException):
    """Raised when a requested resource is not found.

    Example:
        raise NotFoundError("Task not found", resource="task", resource_id="42")
    """

    message = "Resource not found"
    error_code = "not_found"
    status_code = 404

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class ConflictError(AppException):
    """Raised when there's a conflict with existing data.

    Example:
        raise ConflictError("Email already registered", details={"email": email})
    """

    message = "Resource conflict"
    error_code = "conflict"
    status_code = 409


class ValidationError(AppException):
    """Raised when request data fails validation."""

    message = "Validation error"
    error_code = "validation_error"
    status_code = 422

    def __init__(
        self,
        message: str | None = None,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if errors:
            details["errors"] = errors
        super().__init__(message=message, details=details, **kwargs)


class UnauthorizedError(AppException):
    """Raised when no principal can be resolved for the request.

    Example:
        raise UnauthorizedError("Invalid access token")
    """

    message = "Authentication required"
    error_code = "unauthorized"
    status_code = 401


class ForbiddenError(AppException):
    """Raised when a principal fails a role, permission or ownership rule.

    The client always sees the same generic message so the response does not
    reveal which rule failed. ``reason`` names the resource and attempted
    action for operators and is only ever logged.

    Example:
        raise ForbiddenError(reason="attendance:update denied for user 7")
    """

    message = "Access forbidden"
    error_code = "forbidden"
    status_code = 403

    def __init__(
        self,
        reason: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.reason = reason or self.message
        super().__init__(message=None, error_code=error_code, details=details)


class ResourceForbiddenError(ForbiddenError):
    """Denial on a resource that was referenced by id.

    Renders exactly like ``NotFoundError`` so a caller cannot tell a
    foreign tenant's record apart from an id that does not exist.
    """

    message = NotFoundError.message
    error_code = NotFoundError.error_code
    status_code = NotFoundError.status_code


class BadRequestError(AppException):
    """Raised for general client errors.

    Example:
        raise BadRequestError("Already clocked in today")
    """

    message = "Bad request"
    error_code = "bad_request"
    status_code = 400


class InvalidConfigurationError(Exception):
    """Raised when a role or permission declaration is malformed.

    This is a programming error detected while routes are being declared,
    so it is never converted into an HTTP response.
    """
