class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record, payment or profile does not exist."""


class ConflictError(DomainError):
    """Raised when the current state forbids the operation (e.g. unpaid balance)."""
