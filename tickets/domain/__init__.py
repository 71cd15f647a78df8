from tickets.domain.models import (
    NewOrder,
    NewTicket,
    Order,
    OrderStatus,
    PurchaseResult,
    Ticket,
    TicketSelection,
    TicketStatus,
    TicketType,
)
from tickets.domain.value_objects import (
    Capacity,
    EventId,
    Money,
    OrderId,
    TicketId,
    TicketTypeId,
    UserId,
)

__all__ = [
    "NewOrder",
    "NewTicket",
    "Order",
    "OrderStatus",
    "PurchaseResult",
    "Ticket",
    "TicketSelection",
    "TicketStatus",
    "TicketType",
    "Capacity",
    "EventId",
    "Money",
    "OrderId",
    "TicketId",
    "TicketTypeId",
    "UserId",
]
