"""
Error kinds raised by the church and service operations.

Every kind is reported to the client as the same HTTP 400 response carrying
only the kind; the message is kept for the logs.
"""


class ChurchServiceError(Exception):
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ChurchServiceError):
    """Missing or empty field, malformed date window, window over the limit."""
    kind = "validation"


class NotPermitted(ChurchServiceError):
    """
    Caller is not an admin, the church is not active, or the record does not
    exist. These are reported identically so church existence is not leaked.
    """
    kind = "not_permitted"


class ScheduleConflict(ChurchServiceError):
    kind = "conflict"


class InvalidState(ChurchServiceError):
    kind = "invalid_state"


class StoreFailure(ChurchServiceError):
    kind = "store"
