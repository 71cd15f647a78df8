from django.urls import path

from tickets.handlers import (
    PurchaseView,
    TicketTypeListView,
    TicketVerifyView,
    UserOrderListView,
    UserTicketListView,
)

urlpatterns = [
    path(
        "events/<str:event_id>/ticket-types",
        TicketTypeListView.as_view(),
        name="ticket-type-list",
    ),
    path(
        "events/<str:event_id>/purchases",
        PurchaseView.as_view(),
        name="purchase",
    ),
    path("users/<str:user_id>/tickets", UserTicketListView.as_view(), name="user-ticket-list"),
    path("users/<str:user_id>/orders", UserOrderListView.as_view(), name="user-order-list"),
    path("tickets/verify", TicketVerifyView.as_view(), name="ticket-verify"),
]
