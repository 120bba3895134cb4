class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRangeError(ValidationError):
    """Raised when an end date precedes its start date."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when the referenced entity does not exist."""


class AlreadyCheckedInError(DomainError):
    pass


class AlreadyCheckedOutError(DomainError):
    pass


class NoCheckInFoundError(DomainError):
    pass


class InsufficientBalanceError(DomainError):
    pass


class AlreadyProcessedError(DomainError):
    """Raised when a leave request or payroll record already left its pending state."""


class DuplicateRecordError(DomainError):
    pass


class DuplicateKeyError(Exception):
    """Raised by the storage layer when a unique key is violated.

    Services translate it into the matching domain error.
    """
