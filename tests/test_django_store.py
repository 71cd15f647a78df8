"""Tests for the Django ORM ticket store.

Run with: pytest tests/test_django_store.py -v
"""

import uuid
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib import admin
from django.db import IntegrityError

from tickets import models
from tickets.domain import EventId, TicketSelection, TicketTypeId, UserId
from tickets.domain.errors import PersistenceError, SoldOutError
from tickets.services.purchase_service import PurchaseService
from tickets.stores.django_store import DjangoTicketStore


@pytest.fixture
def event() -> models.Event:
    return models.Event.objects.create(title="Concert", location="Dakar")


@pytest.fixture
def ticket_types(event) -> tuple[models.TicketType, models.TicketType]:
    vip = models.TicketType.objects.create(
        event=event, name="VIP", price=Decimal("5000"), quantity_available=10
    )
    general = models.TicketType.objects.create(
        event=event, name="General", price=Decimal("3000"), quantity_available=3
    )
    return vip, general


@pytest.fixture
def django_store() -> DjangoTicketStore:
    return DjangoTicketStore()


@pytest.mark.django_db
class TestDjangoTicketStore:
    """Tests for DjangoTicketStore."""

    def test_list_ticket_types_ordered_by_price(self, django_store, event, ticket_types):
        listed = django_store.list_ticket_types(EventId(event.id))
        assert [tt.name for tt in listed] == ["General", "VIP"]
        assert listed[0].price == Decimal("3000")
        assert listed[0].quantity_available.value == 3

    def test_list_ticket_types_other_event(self, django_store, ticket_types):
        assert django_store.list_ticket_types(EventId(uuid.uuid4())) == []

    def test_reserve_within_capacity(self, django_store, ticket_types):
        _, general = ticket_types
        assert django_store.reserve(TicketTypeId(general.id), 3)
        general.refresh_from_db()
        assert general.quantity_sold == 3

    def test_reserve_over_capacity_is_refused(self, django_store, ticket_types):
        _, general = ticket_types
        assert django_store.reserve(TicketTypeId(general.id), 2)
        assert not django_store.reserve(TicketTypeId(general.id), 2)
        general.refresh_from_db()
        assert general.quantity_sold == 2


@pytest.mark.django_db
class TestPurchaseAgainstDatabase:
    """PurchaseService with the ORM store."""

    def test_purchase_persists_order_and_tickets(self, django_store, codec, event, ticket_types):
        vip, general = ticket_types
        user_id = str(uuid.uuid4())
        service = PurchaseService(store=django_store, codec=codec)
        result = service.purchase_tickets(
            user_id,
            str(event.id),
            [TicketSelection(str(vip.id), 2), TicketSelection(str(general.id), 1)],
            "card",
        )
        order = models.Order.objects.get(id=result.order_id.value)
        assert order.total == Decimal("13650")
        assert order.status == models.Order.Status.COMPLETED
        assert order.ticket_quantities == {str(vip.id): 2, str(general.id): 1}
        assert order.tickets.count() == 3
        assert set(order.tickets.values_list("status", flat=True)) == {"VALID"}
        vip.refresh_from_db()
        assert vip.quantity_sold == 2

    def test_oversell_is_refused(self, django_store, codec, event, ticket_types):
        _, general = ticket_types
        service = PurchaseService(store=django_store, codec=codec)
        cart = [TicketSelection(str(general.id), 2)]
        service.purchase_tickets(str(uuid.uuid4()), str(event.id), cart, "card")
        with pytest.raises(SoldOutError):
            service.purchase_tickets(str(uuid.uuid4()), str(event.id), cart, "card")
        assert models.Order.objects.count() == 1
        assert models.Ticket.objects.count() == 2

    def test_ticket_insert_failure_rolls_back_order(self, django_store, codec, event, ticket_types):
        vip, _ = ticket_types
        service = PurchaseService(store=django_store, codec=codec)
        with mock.patch.object(
            models.Ticket.objects, "bulk_create", side_effect=IntegrityError("duplicate key")
        ):
            with pytest.raises(PersistenceError) as exc:
                service.purchase_tickets(
                    str(uuid.uuid4()), str(event.id), [TicketSelection(str(vip.id), 1)], "card"
                )
        assert exc.value.message == "Could not create tickets: duplicate key"
        assert models.Order.objects.count() == 0
        vip.refresh_from_db()
        assert vip.quantity_sold == 0

    def test_lists_user_tickets_and_orders(self, django_store, codec, event, ticket_types):
        vip, _ = ticket_types
        user_id = str(uuid.uuid4())
        service = PurchaseService(store=django_store, codec=codec)
        result = service.purchase_tickets(
            user_id, str(event.id), [TicketSelection(str(vip.id), 2)], "card"
        )
        owner = UserId.from_string(user_id)
        tickets = django_store.list_tickets_for_user(owner)
        assert {t.id for t in tickets} == set(result.ticket_ids)
        assert [o.id for o in django_store.list_orders_for_user(owner)] == [result.order_id]
        assert django_store.list_tickets_for_user(UserId(uuid.uuid4())) == []

    def test_get_ticket(self, django_store, codec, event, ticket_types):
        vip, _ = ticket_types
        service = PurchaseService(store=django_store, codec=codec)
        result = service.purchase_tickets(
            str(uuid.uuid4()), str(event.id), [TicketSelection(str(vip.id), 1)], "card"
        )
        ticket = django_store.get_ticket(result.ticket_ids[0])
        assert ticket is not None
        assert codec.validate(ticket.qr_code).id == str(ticket.id)


def test_models_registered_in_admin():
    for model in (models.Event, models.TicketType, models.Order, models.Ticket):
        assert admin.site.is_registered(model)


def test_order_columns_match_domain_order():
    """Every Order column is written by the store or managed by the database."""
    columns = {field.name for field in models.Order._meta.concrete_fields}
    assert columns == {
        "id",
        "user_id",
        "event",
        "total",
        "status",
        "payment_method",
        "ticket_quantities",
        "created_at",
        "updated_at",
    }
