"""Pytest configuration and shared fixtures."""

import uuid
from decimal import Decimal

import pytest
from django.core.cache import cache as django_cache
from rest_framework.test import APIClient

from tests.factories import FakeClock, SECRET, make_ticket_type
from tests.memory_store import InMemoryTicketStore
from tickets.domain import EventId, TicketType
from tickets.services.purchase_service import PurchaseService
from tickets.services.qr_codec import QRCodec
from tickets.services.ticket_service import TicketService


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    django_cache.clear()
    yield
    django_cache.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec(clock: FakeClock) -> QRCodec:
    return QRCodec(secret=SECRET, clock=clock)


@pytest.fixture
def event_id() -> EventId:
    return EventId(uuid.uuid4())


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def vip(event_id: EventId) -> TicketType:
    return make_ticket_type(event_id, name="VIP", price=Decimal("5000"))


@pytest.fixture
def general(event_id: EventId) -> TicketType:
    return make_ticket_type(event_id, name="General", price=Decimal("3000"))


@pytest.fixture
def store(vip: TicketType, general: TicketType) -> InMemoryTicketStore:
    return InMemoryTicketStore([vip, general])


@pytest.fixture
def ticket_service(store: InMemoryTicketStore, codec: QRCodec) -> TicketService:
    return TicketService(store=store, codec=codec, cache=django_cache)


@pytest.fixture
def purchase_service(
    store: InMemoryTicketStore, codec: QRCodec, ticket_service: TicketService
) -> PurchaseService:
    return PurchaseService(store=store, codec=codec, tickets=ticket_service)
