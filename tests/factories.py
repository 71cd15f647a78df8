"""Builders shared by the test modules."""

import uuid
from decimal import Decimal

from tickets.domain import Capacity, EventId, TicketType, TicketTypeId

NOW_MS = 1_750_000_000_000
SECRET = "test-secret"


class FakeClock:
    """Millisecond clock tests can move."""

    def __init__(self, now_ms: int = NOW_MS) -> None:
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


def make_ticket_type(
    event_id: EventId,
    name: str = "General",
    price: object = Decimal("5000"),
    quantity_available: int = 100,
    quantity_sold: int = 0,
    max_per_order: int = 10,
) -> TicketType:
    return TicketType(
        id=TicketTypeId(uuid.uuid4()),
        event_id=event_id,
        name=name,
        price=price,
        quantity_available=Capacity(quantity_available),
        quantity_sold=Capacity(quantity_sold),
        max_per_order=Capacity(max_per_order),
    )
