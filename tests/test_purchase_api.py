"""Integration tests for the ticketing HTTP API.

Run with: pytest tests/test_purchase_api.py -v
"""

import base64
import json
import uuid
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from tickets import models


@pytest.fixture
def event() -> models.Event:
    return models.Event.objects.create(title="Concert", location="Abidjan")


@pytest.fixture
def vip(event) -> models.TicketType:
    return models.TicketType.objects.create(
        event=event, name="VIP", price=Decimal("5000"), quantity_available=50, max_per_order=4
    )


@pytest.fixture
def general(event) -> models.TicketType:
    return models.TicketType.objects.create(
        event=event, name="General", price=Decimal("3000"), quantity_available=2
    )


@pytest.fixture
def user_id() -> str:
    return str(uuid.uuid4())


def _purchase(client: APIClient, event_id, user_id: str, selections: list[tuple], payment="card"):
    return client.post(
        f"/api/events/{event_id}/purchases",
        {
            "user_id": user_id,
            "payment_method": payment,
            "selections": [
                {"ticket_type_id": str(tt_id), "quantity": qty} for tt_id, qty in selections
            ],
        },
        format="json",
    )


@pytest.mark.django_db
class TestTicketTypeList:
    """Tests for GET /api/events/{id}/ticket-types"""

    def test_lists_cheapest_first(self, api_client: APIClient, event, vip, general):
        response = api_client.get(f"/api/events/{event.id}/ticket-types")
        assert response.status_code == 200
        assert [tt["name"] for tt in response.data] == ["General", "VIP"]
        assert response.data[1]["max_per_order"] == 4

    def test_invalid_event_id(self, api_client: APIClient):
        response = api_client.get("/api/events/not-a-uuid/ticket-types")
        assert response.status_code == 400
        assert response.data["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
class TestPurchase:
    """Tests for POST /api/events/{id}/purchases"""

    def test_purchase_returns_order_and_tickets(self, api_client: APIClient, event, vip, general, user_id):
        response = _purchase(api_client, event.id, user_id, [(vip.id, 2), (general.id, 1)])
        assert response.status_code == 201
        assert response.data["success"] is True
        assert len(response.data["ticket_ids"]) == 3
        order = models.Order.objects.get(id=response.data["order_id"])
        assert order.total == Decimal("13650")

    def test_unknown_event(self, api_client: APIClient, vip, user_id):
        response = _purchase(api_client, uuid.uuid4(), user_id, [(vip.id, 1)])
        assert response.status_code == 404
        assert response.data["code"] == "NOT_FOUND"
        assert models.Order.objects.count() == 0

    def test_unknown_ticket_type(self, api_client: APIClient, event, vip, user_id):
        missing = uuid.uuid4()
        response = _purchase(api_client, event.id, user_id, [(vip.id, 1), (missing, 1)])
        assert response.status_code == 400
        assert response.data["message"] == f"Ticket type not found: {missing}"
        assert models.Order.objects.count() == 0

    def test_over_max_per_order(self, api_client: APIClient, event, vip, user_id):
        response = _purchase(api_client, event.id, user_id, [(vip.id, 5)])
        assert response.status_code == 400

    def test_sold_out(self, api_client: APIClient, event, general, user_id):
        response = _purchase(api_client, event.id, user_id, [(general.id, 3)])
        assert response.status_code == 409
        assert response.data["code"] == "SOLD_OUT"

    def test_malformed_body(self, api_client: APIClient, event):
        response = api_client.post(
            f"/api/events/{event.id}/purchases", {"selections": []}, format="json"
        )
        assert response.status_code == 400
        assert "user_id" in response.data["errors"]

    def test_tickets_listed_after_purchase(self, api_client: APIClient, event, vip, user_id):
        response = _purchase(api_client, event.id, user_id, [(vip.id, 2)])
        listed = api_client.get(f"/api/users/{user_id}/tickets")
        assert listed.status_code == 200
        assert {t["id"] for t in listed.data} == set(response.data["ticket_ids"])
        assert {t["status"] for t in listed.data} == {"VALID"}

    def test_orders_listed_after_purchase(self, api_client: APIClient, event, vip, user_id):
        response = _purchase(api_client, event.id, user_id, [(vip.id, 1)])
        listed = api_client.get(f"/api/users/{user_id}/orders")
        assert listed.status_code == 200
        assert [o["id"] for o in listed.data] == [response.data["order_id"]]
        assert listed.data[0]["status"] == "completed"


@pytest.mark.django_db
class TestVerify:
    """Tests for POST /api/tickets/verify"""

    def test_verify_issued_ticket(self, api_client: APIClient, event, vip, user_id):
        purchase = _purchase(api_client, event.id, user_id, [(vip.id, 1)])
        ticket = models.Ticket.objects.get(id=purchase.data["ticket_ids"][0])
        response = api_client.post("/api/tickets/verify", {"qr_code": ticket.qr_code}, format="json")
        assert response.status_code == 200
        assert response.data["id"] == str(ticket.id)
        assert response.data["valid"] is True

    def test_used_ticket_is_reported_invalid(self, api_client: APIClient, event, vip, user_id):
        purchase = _purchase(api_client, event.id, user_id, [(vip.id, 1)])
        ticket = models.Ticket.objects.get(id=purchase.data["ticket_ids"][0])
        ticket.status = models.Ticket.Status.USED
        ticket.save()
        response = api_client.post("/api/tickets/verify", {"qr_code": ticket.qr_code}, format="json")
        assert response.status_code == 200
        assert response.data["valid"] is False

    def test_tampered_token(self, api_client: APIClient, event, vip, user_id):
        purchase = _purchase(api_client, event.id, user_id, [(vip.id, 1)])
        ticket = models.Ticket.objects.get(id=purchase.data["ticket_ids"][0])
        envelope = json.loads(base64.b64decode(ticket.qr_code))
        envelope["data"]["id"] = str(uuid.uuid4())
        forged = base64.b64encode(json.dumps(envelope).encode()).decode()
        response = api_client.post("/api/tickets/verify", {"qr_code": forged}, format="json")
        assert response.status_code == 400
        assert response.data["code"] == "SIGNATURE_ERROR"

    def test_garbage_token(self, api_client: APIClient):
        response = api_client.post("/api/tickets/verify", {"qr_code": "garbage"}, format="json")
        assert response.status_code == 400
        assert response.data["code"] == "ENCODING_ERROR"
