class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the identity assertion is missing or invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class RepositoryError(DomainError):
    """Raised when the backing store fails during a read or write."""


class GeolocationError(DomainError):
    """Raised when coordinates cannot be resolved to a place."""
