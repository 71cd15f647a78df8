"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from tickets.domain import (
    EventId,
    NewOrder,
    NewTicket,
    Order,
    Ticket,
    TicketId,
    TicketType,
    TicketTypeId,
    UserId,
)


class TicketStore(ABC):
    """Interface for ticketing persistence operations.

    Write methods raise PersistenceError when the backing store rejects them.
    """

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Return a context manager; writes inside it commit or roll back together."""
        ...

    @abstractmethod
    def list_ticket_types(self, event_id: EventId) -> list[TicketType]:
        """Return all ticket types of an event, ordered by price ascending."""
        ...

    @abstractmethod
    def reserve(self, ticket_type_id: TicketTypeId, quantity: int) -> bool:
        """Add quantity to quantity_sold if capacity allows. Return False otherwise."""
        ...

    @abstractmethod
    def create_order(self, order: NewOrder) -> Order:
        """Insert one order and return it with its generated id."""
        ...

    @abstractmethod
    def create_tickets(self, tickets: list[NewTicket]) -> list[Ticket]:
        """Bulk insert tickets and return the inserted rows."""
        ...

    @abstractmethod
    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        """Return a ticket by ID, or None if not found."""
        ...

    @abstractmethod
    def list_tickets_for_user(self, user_id: UserId) -> list[Ticket]:
        """Return a user's tickets ordered by created_at descending."""
        ...

    @abstractmethod
    def list_orders_for_user(self, user_id: UserId) -> list[Order]:
        """Return a user's orders ordered by created_at descending."""
        ...
