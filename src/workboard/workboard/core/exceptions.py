class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ScheduleFetchError(DomainError):
    """Raised when the items of a week cannot be loaded from the store."""


class StaleRecordError(DomainError):
    """Raised when the record to reschedule no longer exists in the store."""


class ScheduleUpdateError(DomainError):
    """Raised when the store rejects or fails a schedule update."""
