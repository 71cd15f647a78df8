from tickets.handlers.views import (
    PurchaseView,
    TicketTypeListView,
    TicketVerifyView,
    UserOrderListView,
    UserTicketListView,
)

__all__ = [
    "PurchaseView",
    "TicketTypeListView",
    "TicketVerifyView",
    "UserOrderListView",
    "UserTicketListView",
]
