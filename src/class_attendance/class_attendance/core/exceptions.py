class DomainError(Exception):
    """Base exception for business rule violations."""

    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    http_status = 400


class NotFoundError(DomainError):
    """Raised when a referenced student, user or period does not exist."""

    http_status = 404


class AuthenticationError(DomainError):
    """Raised when credentials or the bearer token are missing or invalid."""

    http_status = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    http_status = 403


class StorageError(DomainError):
    """Raised when the database layer fails."""

    http_status = 500
