"""Error kinds raised by the ticket and redemption services.

Every error carries the HTTP status it maps to and whether the caller may
retry. Only ``StoreFailure`` is retryable; the rest are terminal.
"""
from fastapi import status


class TicketingError(Exception):
    kind = "TicketingError"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.kind, "retryable": self.retryable}


class InvalidInput(TicketingError):
    kind = "InvalidInput"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(TicketingError):
    kind = "NotFound"
    status_code = status.HTTP_404_NOT_FOUND


class Exhausted(TicketingError):
    kind = "Exhausted"
    status_code = status.HTTP_409_CONFLICT


class AlreadyRedeemed(TicketingError):
    kind = "AlreadyRedeemed"
    status_code = status.HTTP_409_CONFLICT


class StoreFailure(TicketingError):
    kind = "StoreFailure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    retryable = True
