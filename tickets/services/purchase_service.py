"""Purchase service - turns a cart of ticket selections into an order and tickets.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import uuid
from collections.abc import Sequence
from decimal import Decimal

from tickets.domain import (
    EventId,
    NewOrder,
    NewTicket,
    OrderId,
    OrderStatus,
    PurchaseResult,
    TicketId,
    TicketSelection,
    TicketStatus,
    TicketTypeId,
    UserId,
)
from tickets.domain.errors import (
    EncodingError,
    SoldOutError,
    TicketTypesNotFoundError,
    ValidationError,
)
from tickets.domain.pricing import SERVICE_FEE_RATE, PriceBreakdown, price_selections
from tickets.services.qr_codec import QRCodec
from tickets.services.ticket_service import TicketService, parse_id
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


class PurchaseService:
    """Service for the ticket purchase transaction."""

    def __init__(
        self,
        store: TicketStore,
        codec: QRCodec,
        tickets: TicketService | None = None,
        fee_rate: Decimal = SERVICE_FEE_RATE,
    ) -> None:
        self._store = store
        self._codec = codec
        self._tickets = tickets
        self._fee_rate = fee_rate

    def purchase_tickets(
        self,
        user_id: str,
        event_id: str,
        selections: Sequence[TicketSelection],
        payment_method: str,
    ) -> PurchaseResult:
        """Price the selections, then persist one order and one ticket per unit.

        The capacity reservation, order insert and ticket insert share one
        store transaction: either all of them commit or none do.

        Raises:
            ValidationError: Bad input, unknown ticket type, bad price,
                quantity over the per-order limit, or a non-positive total.
            TicketTypesNotFoundError: The event has no ticket types.
            SoldOutError: A ticket type has too few tickets left.
            EncodingError: A QR token could not be produced.
            PersistenceError: The store rejected a write.
        """
        parsed_user = parse_id(UserId, user_id, "user ID")
        parsed_event = parse_id(EventId, event_id, "event ID")
        self._check_cart(selections, payment_method)

        logger.info(
            f"Starting ticket purchase for user {user_id}, event {event_id}, "
            f"{len(selections)} selections, payment method {payment_method!r}"
        )

        ticket_types = self._store.list_ticket_types(parsed_event)
        if not ticket_types:
            raise TicketTypesNotFoundError(event_id)

        breakdown = price_selections(selections, ticket_types, self._fee_rate)
        logger.info(
            f"Priced {breakdown.ticket_count} tickets: subtotal {breakdown.subtotal}, "
            f"service fee {breakdown.service_fee}, total {breakdown.total}"
        )

        with self._store.atomic():
            self._reserve(breakdown)
            order = self._store.create_order(
                NewOrder(
                    user_id=parsed_user,
                    event_id=parsed_event,
                    total=breakdown.total,
                    status=OrderStatus.COMPLETED,
                    payment_method=payment_method,
                    ticket_quantities=breakdown.ticket_quantities,
                )
            )
            logger.info(f"Order {order.id} created for user {user_id}")

            staged = [
                self._mint(order.id, parsed_event, parsed_user, line.ticket_type.id)
                for line in breakdown.lines
                for _ in range(line.quantity)
            ]
            created = self._store.create_tickets(staged)

        logger.info(f"Purchase completed: order {order.id}, {len(created)} tickets")
        self._refresh_ticket_list(parsed_user)
        return PurchaseResult(
            success=True,
            order_id=order.id,
            ticket_ids=tuple(ticket.id for ticket in created),
        )

    def _check_cart(self, selections: Sequence[TicketSelection], payment_method: str) -> None:
        if not selections:
            raise ValidationError("No tickets selected")
        if not payment_method or not isinstance(payment_method, str):
            raise ValidationError("Missing payment method")
        for selection in selections:
            if not selection.ticket_type_id or not isinstance(selection.ticket_type_id, str):
                raise ValidationError("Invalid ticket type ID")
            if isinstance(selection.quantity, bool) or not isinstance(selection.quantity, int):
                raise ValidationError("Invalid ticket quantity")

    def _reserve(self, breakdown: PriceBreakdown) -> None:
        for line in breakdown.lines:
            if not self._store.reserve(line.ticket_type.id, line.quantity):
                logger.warning(
                    f"Reservation of {line.quantity} x {line.ticket_type.name} refused"
                )
                raise SoldOutError(line.ticket_type.name)

    def _mint(
        self,
        order_id: OrderId,
        event_id: EventId,
        user_id: UserId,
        ticket_type_id: TicketTypeId,
    ) -> NewTicket:
        ticket_id = TicketId(uuid.uuid4())
        try:
            qr_code = self._codec.generate(str(ticket_id))
        except EncodingError:
            logger.error(f"QR generation failed for ticket {ticket_id}")
            raise
        return NewTicket(
            id=ticket_id,
            order_id=order_id,
            event_id=event_id,
            user_id=user_id,
            ticket_type_id=ticket_type_id,
            status=TicketStatus.VALID,
            qr_code=qr_code,
        )

    def _refresh_ticket_list(self, user_id: UserId) -> None:
        if self._tickets is None:
            return
        try:
            self._tickets.refresh_user_tickets(user_id)
        except Exception as e:
            # The purchase is committed; a stale ticket list is not a failure.
            logger.warning(f"Could not refresh tickets after purchase: {e}")
