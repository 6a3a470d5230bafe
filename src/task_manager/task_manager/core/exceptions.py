class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are invalid, missing or expired."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""


class ConflictError(DomainError):
    """Raised when a write would violate a uniqueness rule."""


class ExternalServiceError(DomainError):
    """Raised when the database or identity backend is unavailable."""
