"""Domain error codes for the tickets module."""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SOLD_OUT = "SOLD_OUT"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    ENCODING_ERROR = "ENCODING_ERROR"
    SIGNATURE_ERROR = "SIGNATURE_ERROR"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised for malformed or missing purchase input."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_ERROR, message=message)


class UnknownTicketTypeError(ValidationError):
    """Raised when a selection references a ticket type the event does not have."""

    def __init__(self, ticket_type_id: str) -> None:
        super().__init__(f"Ticket type not found: {ticket_type_id}")
        self.ticket_type_id = ticket_type_id


class InvalidPriceError(ValidationError):
    """Raised when a ticket type carries a negative or non-numeric price."""

    def __init__(self, ticket_type_name: str) -> None:
        super().__init__(f"Invalid price for ticket type: {ticket_type_name}")
        self.ticket_type_name = ticket_type_name


class QuantityLimitError(ValidationError):
    """Raised when more tickets of one type are requested than max_per_order allows."""

    def __init__(self, ticket_type_name: str, max_per_order: int) -> None:
        super().__init__(
            f"At most {max_per_order} tickets of type {ticket_type_name} per order"
        )
        self.ticket_type_name = ticket_type_name
        self.max_per_order = max_per_order


class NotFoundError(DomainError):
    """Raised when a requested record does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_FOUND, message=message)


class TicketTypesNotFoundError(NotFoundError):
    """Raised when an event has no ticket types."""

    def __init__(self, event_id: str) -> None:
        super().__init__("No ticket types found for event")
        self.event_id = event_id


class TicketNotFoundError(NotFoundError):
    def __init__(self, ticket_id: str) -> None:
        super().__init__("Ticket not found")
        self.ticket_id = ticket_id


class SoldOutError(DomainError):
    """Raised when a reservation would exceed a ticket type's capacity."""

    def __init__(self, ticket_type_name: str) -> None:
        super().__init__(
            code=ErrorCode.SOLD_OUT,
            message=f"Not enough tickets left for ticket type: {ticket_type_name}",
        )
        self.ticket_type_name = ticket_type_name


class PersistenceError(DomainError):
    """Raised when the data store rejects a write."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_ERROR, message=message)

    @classmethod
    def from_exception(cls, operation: str, error: object) -> "PersistenceError":
        return cls(f"{operation}: {format_error(error)}")


class EncodingError(DomainError):
    """Raised when a QR token cannot be produced or parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.ENCODING_ERROR, message=message)


class SignatureError(DomainError):
    """Raised when a QR token's signature does not match its payload."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.SIGNATURE_ERROR, message="Invalid signature")


class ExpiredError(DomainError):
    """Raised when a QR token is older than the freshness window."""

    def __init__(self, age_ms: int) -> None:
        super().__init__(code=ErrorCode.EXPIRED, message="Ticket QR code has expired")
        self.age_ms = age_ms


UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred"


def _with_context(message: str, details: object, hint: object) -> str:
    if details:
        return f"{message}: {details}"
    if hint:
        return f"{message} ({hint})"
    return message


def format_error(error: object) -> str:
    """Flatten an error into one human-readable string.

    Understands domain errors, database driver errors exposing ``diag``
    (message_detail / message_hint), mapping payloads with
    message/details/hint/code keys, and plain strings.
    """
    if error is None:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(error, str):
        return error
    if isinstance(error, DomainError):
        return error.message
    if isinstance(error, Mapping):
        message = error.get("message")
        if message:
            return _with_context(str(message), error.get("details"), error.get("hint"))
        for key in ("error_description", "details", "hint"):
            if error.get(key):
                return str(error[key])
        if error.get("code"):
            return f"Error {error['code']}: {UNKNOWN_ERROR_MESSAGE}"
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(error, BaseException):
        # psycopg wraps server diagnostics in ``diag``; the error itself may be
        # the __cause__ of a Django DatabaseError.
        source = error.__cause__ if getattr(error, "diag", None) is None else error
        diag = getattr(source, "diag", None)
        message = str(error).strip() or UNKNOWN_ERROR_MESSAGE
        if diag is not None:
            primary = getattr(diag, "message_primary", None) or message
            return _with_context(
                primary,
                getattr(diag, "message_detail", None),
                getattr(diag, "message_hint", None),
            )
        return message
    return UNKNOWN_ERROR_MESSAGE
