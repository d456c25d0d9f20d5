"""
Domain Errors

Exception taxonomy shared by repositories, services, pages and the API.
"""


class LodestoneError(Exception):
    """Base class for all Lodestone errors."""


class StoreUnavailable(LodestoneError):
    """The document store failed on a read, write or subscription."""

    def __init__(self, operation: str, path: str, cause: Exception | None = None):
        self.operation = operation
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Document store {operation} failed for '{path}'{detail}")


class ValidationError(LodestoneError):
    """Input or stored data does not satisfy the domain rules."""


class NotFoundError(LodestoneError):
    """A hub or provision id does not exist."""


class TimerRaceError(LodestoneError):
    """An auto re-enable fired after the setting was already re-enabled.

    Raised and suppressed inside the settings state machine; never surfaced.
    """
