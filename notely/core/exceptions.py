"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
HTTP status codes for each class live in exception_handlers.py.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found (or is soft-deleted)."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", field: str | None = None) -> None:
        self.field = field
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class IncorrectPasswordError(ApplicationError):
    """Raised when the current password does not match on a password change."""

    def __init__(self, message: str = "Current password is incorrect") -> None:
        super().__init__(message, code="AUTH_INCORRECT_PASSWORD")


class AuthorizationError(ApplicationError):
    """Raised when an authenticated user does not own the resource."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when a unique value is already taken."""

    def __init__(self, message: str = "Resource conflict", field: str | None = None) -> None:
        self.field = field
        super().__init__(message, code="RES_CONFLICT")


class InvalidStateError(ApplicationError):
    """Raised when an operation does not apply to the resource's current state."""

    def __init__(self, message: str = "Invalid resource state") -> None:
        super().__init__(message, code="RES_INVALID_STATE")


class HashingError(ApplicationError):
    """Raised when the password hashing primitive fails."""

    def __init__(self, message: str = "Password hashing failed") -> None:
        super().__init__(message, code="SYS_HASHING_ERROR")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(self, message: str = "External service error") -> None:
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
