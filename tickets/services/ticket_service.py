"""Ticket read-side service: catalog lookup, user listings, QR verification."""

import logging
from typing import TypeVar

from django.core.cache.backends.base import BaseCache

from tickets.domain import EventId, Order, Ticket, TicketId, TicketType, UserId
from tickets.domain.errors import (
    EncodingError,
    TicketNotFoundError,
    ValidationError,
)
from tickets.services.qr_codec import QRCodec
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)

DEFAULT_TICKET_LIST_TTL = 300

IdT = TypeVar("IdT", EventId, TicketId, UserId)


def user_tickets_cache_key(user_id: UserId | str) -> str:
    return f"tickets:user:{user_id}"


def parse_id(id_type: type[IdT], raw: object, label: str) -> IdT:
    """Parse a UUID identifier, raising ValidationError when missing or malformed."""
    if not raw or not isinstance(raw, str):
        raise ValidationError(f"Missing or invalid {label}")
    try:
        return id_type.from_string(raw)
    except ValueError as e:
        raise ValidationError(f"Missing or invalid {label}") from e


class TicketService:
    """Service for ticket catalog, ticket listings and QR verification."""

    def __init__(
        self,
        store: TicketStore,
        codec: QRCodec,
        cache: BaseCache,
        ticket_list_ttl: int = DEFAULT_TICKET_LIST_TTL,
    ) -> None:
        self._store = store
        self._codec = codec
        self._cache = cache
        self._ticket_list_ttl = ticket_list_ttl

    def list_ticket_types(self, event_id: str) -> list[TicketType]:
        """Return an event's ticket types, cheapest first.

        An event without ticket types yields an empty list.

        Raises:
            ValidationError: If the event_id is not a valid UUID.
        """
        parsed = parse_id(EventId, event_id, "event ID")
        ticket_types = self._store.list_ticket_types(parsed)
        logger.debug(f"Fetched {len(ticket_types)} ticket types for event {event_id}")
        return ticket_types

    def list_user_tickets(self, user_id: str) -> list[Ticket]:
        """Return a user's tickets, newest first, through the ticket list cache."""
        parsed = parse_id(UserId, user_id, "user ID")
        cached = self._cache.get(user_tickets_cache_key(parsed))
        if cached is not None:
            return cached
        return self._load_user_tickets(parsed)

    def refresh_user_tickets(self, user_id: UserId) -> list[Ticket]:
        """Reload a user's tickets from the store and overwrite the cached list."""
        return self._load_user_tickets(user_id)

    def _load_user_tickets(self, user_id: UserId) -> list[Ticket]:
        tickets = self._store.list_tickets_for_user(user_id)
        self._cache.set(user_tickets_cache_key(user_id), tickets, self._ticket_list_ttl)
        logger.debug(f"Fetched {len(tickets)} tickets for user {user_id}")
        return tickets

    def list_user_orders(self, user_id: str) -> list[Order]:
        parsed = parse_id(UserId, user_id, "user ID")
        return self._store.list_orders_for_user(parsed)

    def verify_ticket(self, qr_code: str) -> Ticket:
        """Validate a scanned QR token and return the ticket it proves.

        Read-only: the ticket's status is returned as stored, never changed.

        Raises:
            EncodingError: The token is malformed or names a malformed ticket id.
            SignatureError: The token has been tampered with.
            ExpiredError: The token is older than the freshness window.
            TicketNotFoundError: No ticket with the token's id exists.
        """
        decoded = self._codec.validate(qr_code)
        try:
            ticket_id = TicketId.from_string(decoded.id)
        except ValueError as e:
            raise EncodingError("Invalid ticket ID in QR code") from e
        ticket = self._store.get_ticket(ticket_id)
        if ticket is None:
            raise TicketNotFoundError(decoded.id)
        logger.info(f"Verified QR for ticket {ticket.id} with status {ticket.status.value}")
        return ticket
