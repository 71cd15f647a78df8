"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in tickets/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from tickets.domain.value_objects import (
    Capacity,
    EventId,
    Money,
    OrderId,
    TicketId,
    TicketTypeId,
    UserId,
)


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class TicketStatus(str, Enum):
    """Ticket lifecycle. Tickets are minted VALID; other states are set externally."""

    VALID = "VALID"
    USED = "USED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


@dataclass(frozen=True)
class TicketType:
    """Domain representation of a TicketType.

    ``price`` is the raw persisted value; it is turned into Money when a
    purchase is priced, so a corrupt row fails the purchase, not the listing.
    """

    id: TicketTypeId
    event_id: EventId
    name: str
    price: Decimal
    quantity_available: Capacity
    quantity_sold: Capacity
    max_per_order: Capacity
    description: str = ""


@dataclass(frozen=True)
class TicketSelection:
    """A requested (ticket type, quantity) pair from the caller's cart."""

    ticket_type_id: str
    quantity: int


@dataclass(frozen=True)
class NewOrder:
    user_id: UserId
    event_id: EventId
    total: Money
    status: OrderStatus
    payment_method: str
    ticket_quantities: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Order:
    """Domain representation of an Order."""

    id: OrderId
    user_id: UserId
    event_id: EventId
    total: Money
    status: OrderStatus
    payment_method: str
    ticket_quantities: dict[str, int]
    created_at: datetime


@dataclass(frozen=True)
class NewTicket:
    id: TicketId
    order_id: OrderId
    event_id: EventId
    user_id: UserId
    ticket_type_id: TicketTypeId
    status: TicketStatus
    qr_code: str


@dataclass(frozen=True)
class Ticket:
    """Domain representation of a Ticket."""

    id: TicketId
    order_id: OrderId
    event_id: EventId
    user_id: UserId
    ticket_type_id: TicketTypeId
    status: TicketStatus
    qr_code: str
    created_at: datetime
    scanned_at: datetime | None = None
    scanned_by: str | None = None
    scan_location: str | None = None


@dataclass(frozen=True)
class PurchaseResult:
    success: bool
    order_id: OrderId
    ticket_ids: tuple[TicketId, ...]
