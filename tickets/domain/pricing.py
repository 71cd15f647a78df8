"""Cart pricing: resolve selections against ticket types and apply the service fee."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from tickets.domain.errors import (
    InvalidPriceError,
    QuantityLimitError,
    UnknownTicketTypeError,
    ValidationError,
)
from tickets.domain.models import TicketSelection, TicketType
from tickets.domain.value_objects import Money, TicketTypeId

SERVICE_FEE_RATE = Decimal("0.05")
CURRENCY_UNIT = Decimal("1")
# Applied when a ticket type carries no per-order limit.
DEFAULT_MAX_PER_ORDER = 4


@dataclass(frozen=True)
class PricedLine:
    ticket_type: TicketType
    quantity: int
    unit_price: Money

    @property
    def amount(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PriceBreakdown:
    lines: tuple[PricedLine, ...]
    subtotal: Money
    service_fee: Money
    total: Money

    @property
    def ticket_quantities(self) -> dict[str, int]:
        return {str(line.ticket_type.id): line.quantity for line in self.lines}

    @property
    def ticket_count(self) -> int:
        return sum(line.quantity for line in self.lines)


def service_fee_for(subtotal: Money, rate: Decimal = SERVICE_FEE_RATE) -> Money:
    """Fee rounded half-up to the nearest currency unit."""
    return Money((subtotal.amount * rate).quantize(CURRENCY_UNIT, rounding=ROUND_HALF_UP))


def _canonical_id(raw: str) -> str | None:
    try:
        return str(TicketTypeId.from_string(raw))
    except ValueError:
        return None


def price_selections(
    selections: Iterable[TicketSelection],
    ticket_types: Sequence[TicketType],
    fee_rate: Decimal = SERVICE_FEE_RATE,
) -> PriceBreakdown:
    """Price a cart against the event's ticket types.

    Selections with a non-positive quantity are dropped. Repeated selections
    of one ticket type are merged, keeping first-seen order. Ticket type ids
    are compared in canonical UUID form. A max_per_order of 0 falls back to
    DEFAULT_MAX_PER_ORDER.

    Raises:
        UnknownTicketTypeError: A selection names a ticket type not in ticket_types.
        InvalidPriceError: A referenced ticket type has a negative or non-numeric price.
        QuantityLimitError: The merged quantity exceeds the type's max_per_order.
        ValidationError: Nothing valid remains, or the subtotal is not positive.
    """
    by_id = {str(tt.id): tt for tt in ticket_types}
    quantities: dict[str, int] = {}
    prices: dict[str, Money] = {}

    for selection in selections:
        if selection.quantity <= 0:
            continue
        key = _canonical_id(selection.ticket_type_id)
        ticket_type = by_id.get(key) if key else None
        if ticket_type is None:
            raise UnknownTicketTypeError(selection.ticket_type_id)
        try:
            prices[key] = Money.parse(ticket_type.price)
        except ValueError as e:
            raise InvalidPriceError(ticket_type.name) from e
        quantities[key] = quantities.get(key, 0) + selection.quantity

    lines = []
    for ticket_type_id, quantity in quantities.items():
        ticket_type = by_id[ticket_type_id]
        limit = ticket_type.max_per_order.value or DEFAULT_MAX_PER_ORDER
        if quantity > limit:
            raise QuantityLimitError(ticket_type.name, limit)
        lines.append(PricedLine(ticket_type, quantity, prices[ticket_type_id]))

    if not lines:
        raise ValidationError("No valid ticket selection")

    subtotal = Money(Decimal(0))
    for line in lines:
        subtotal = subtotal + line.amount
    if subtotal.amount <= 0:
        raise ValidationError("Total amount must be greater than zero")

    service_fee = service_fee_for(subtotal, fee_rate)
    return PriceBreakdown(
        lines=tuple(lines),
        subtotal=subtotal,
        service_fee=service_fee,
        total=subtotal + service_fee,
    )
