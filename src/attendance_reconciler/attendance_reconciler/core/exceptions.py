class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class InvalidTransitionError(DomainError):
    """Raised when a request that was already decided is decided again."""


class SourceUnavailableError(DomainError):
    """Raised when the external time-clock API cannot be read."""


class UnmatchedEmployeeError(DomainError):
    """Raised when a punch group cannot be mapped to an internal employee."""


class NotificationError(DomainError):
    """Raised by notification sinks when a delivery fails."""


class ReconciliationError(DomainError):
    """Raised when one employee's day cannot be classified."""
