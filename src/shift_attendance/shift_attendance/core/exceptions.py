class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when a login name is not known to the schedule."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SourceUnavailable(DomainError):
    """Raised when the timetable cannot be fetched or yields no usable data."""


class MalformedRow(DomainError):
    """Raised for a single timetable row whose time cannot be parsed."""

    def __init__(self, message: str, *, row_number: int | None = None, raw_time: object = None):
        super().__init__(message)
        self.row_number = row_number
        self.raw_time = raw_time


class StorageFailure(DomainError):
    """Raised when an attendance store read or write fails."""


class LocationError(DomainError):
    """Base for location sensor failures."""


class LocationUnavailable(LocationError):
    """No fresh reading could be produced within the timeout."""


class LocationUnsupported(LocationError):
    """The client has no location capability."""
