"""Django ORM implementation of the TicketStore."""

import logging
from contextlib import AbstractContextManager

from django.db import DatabaseError, transaction
from django.db.models import F

from tickets import models
from tickets.domain import (
    Capacity,
    EventId,
    Money,
    NewOrder,
    NewTicket,
    Order,
    OrderId,
    OrderStatus,
    Ticket,
    TicketId,
    TicketStatus,
    TicketType,
    TicketTypeId,
    UserId,
)
from tickets.domain.errors import PersistenceError
from tickets.stores.interfaces import TicketStore

logger = logging.getLogger(__name__)


def _ticket_type_to_domain(row: models.TicketType) -> TicketType:
    return TicketType(
        id=TicketTypeId(row.id),
        event_id=EventId(row.event_id),
        name=row.name,
        description=row.description,
        price=row.price,
        quantity_available=Capacity(row.quantity_available),
        quantity_sold=Capacity(row.quantity_sold),
        max_per_order=Capacity(row.max_per_order),
    )


def _order_to_domain(row: models.Order) -> Order:
    return Order(
        id=OrderId(row.id),
        user_id=UserId(row.user_id),
        event_id=EventId(row.event_id),
        total=Money(row.total),
        status=OrderStatus(row.status),
        payment_method=row.payment_method,
        ticket_quantities=dict(row.ticket_quantities),
        created_at=row.created_at,
    )


def _ticket_to_domain(row: models.Ticket) -> Ticket:
    return Ticket(
        id=TicketId(row.id),
        order_id=OrderId(row.order_id),
        event_id=EventId(row.event_id),
        user_id=UserId(row.user_id),
        ticket_type_id=TicketTypeId(row.ticket_type_id),
        status=TicketStatus(row.status),
        qr_code=row.qr_code,
        created_at=row.created_at,
        scanned_at=row.scanned_at,
        scanned_by=row.scanned_by,
        scan_location=row.scan_location,
    )


class DjangoTicketStore(TicketStore):
    """Relational ticket store using Django ORM."""

    def atomic(self) -> AbstractContextManager[None]:
        return transaction.atomic()

    def list_ticket_types(self, event_id: EventId) -> list[TicketType]:
        rows = models.TicketType.objects.filter(event_id=event_id.value).order_by("price")
        return [_ticket_type_to_domain(row) for row in rows]

    def reserve(self, ticket_type_id: TicketTypeId, quantity: int) -> bool:
        try:
            updated = models.TicketType.objects.filter(
                id=ticket_type_id.value,
                quantity_sold__lte=F("quantity_available") - quantity,
            ).update(quantity_sold=F("quantity_sold") + quantity)
        except DatabaseError as e:
            logger.error(f"Reserving {quantity} x {ticket_type_id} failed: {e}")
            raise PersistenceError.from_exception("Could not reserve tickets", e) from e
        return updated == 1

    def create_order(self, order: NewOrder) -> Order:
        try:
            row = models.Order.objects.create(
                user_id=order.user_id.value,
                event_id=order.event_id.value,
                total=order.total.amount,
                status=order.status.value,
                payment_method=order.payment_method,
                ticket_quantities=order.ticket_quantities,
            )
        except DatabaseError as e:
            logger.error(f"Order insert rejected: {e}")
            raise PersistenceError.from_exception("Could not create order", e) from e
        return _order_to_domain(row)

    def create_tickets(self, tickets: list[NewTicket]) -> list[Ticket]:
        rows = [
            models.Ticket(
                id=ticket.id.value,
                order_id=ticket.order_id.value,
                event_id=ticket.event_id.value,
                user_id=ticket.user_id.value,
                ticket_type_id=ticket.ticket_type_id.value,
                status=ticket.status.value,
                qr_code=ticket.qr_code,
            )
            for ticket in tickets
        ]
        try:
            created = models.Ticket.objects.bulk_create(rows)
        except DatabaseError as e:
            logger.error(f"Ticket bulk insert of {len(rows)} rows rejected: {e}")
            raise PersistenceError.from_exception("Could not create tickets", e) from e
        return [_ticket_to_domain(row) for row in created]

    def get_ticket(self, ticket_id: TicketId) -> Ticket | None:
        row = models.Ticket.objects.filter(id=ticket_id.value).first()
        return _ticket_to_domain(row) if row is not None else None

    def list_tickets_for_user(self, user_id: UserId) -> list[Ticket]:
        rows = models.Ticket.objects.filter(user_id=user_id.value).order_by("-created_at")
        return [_ticket_to_domain(row) for row in rows]

    def list_orders_for_user(self, user_id: UserId) -> list[Order]:
        rows = models.Order.objects.filter(user_id=user_id.value).order_by("-created_at")
        return [_order_to_domain(row) for row in rows]
