"""Serializers for request parsing and for rendering domain models."""

from rest_framework import serializers

from tickets.domain import TicketSelection


class TicketSelectionSerializer(serializers.Serializer):
    ticket_type_id = serializers.CharField()
    quantity = serializers.IntegerField()


class PurchaseRequestSerializer(serializers.Serializer):
    """Body of POST /api/events/{event_id}/purchases."""

    user_id = serializers.CharField()
    payment_method = serializers.CharField()
    selections = TicketSelectionSerializer(many=True, allow_empty=False)

    def to_selections(self) -> list[TicketSelection]:
        return [TicketSelection(**item) for item in self.validated_data["selections"]]


class VerifyRequestSerializer(serializers.Serializer):
    qr_code = serializers.CharField()


class TicketTypeSerializer(serializers.Serializer):
    """Serializer for TicketType domain model."""

    id = serializers.CharField(source="id.value")
    event_id = serializers.CharField(source="event_id.value")
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    quantity_available = serializers.IntegerField(source="quantity_available.value")
    quantity_sold = serializers.IntegerField(source="quantity_sold.value")
    max_per_order = serializers.IntegerField(source="max_per_order.value")


class OrderSerializer(serializers.Serializer):
    """Serializer for Order domain model."""

    id = serializers.CharField(source="id.value")
    user_id = serializers.CharField(source="user_id.value")
    event_id = serializers.CharField(source="event_id.value")
    total = serializers.DecimalField(source="total.amount", max_digits=14, decimal_places=2)
    status = serializers.CharField(source="status.value")
    payment_method = serializers.CharField()
    ticket_quantities = serializers.DictField(child=serializers.IntegerField())
    created_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.CharField(source="id.value")
    order_id = serializers.CharField(source="order_id.value")
    event_id = serializers.CharField(source="event_id.value")
    user_id = serializers.CharField(source="user_id.value")
    ticket_type_id = serializers.CharField(source="ticket_type_id.value")
    status = serializers.CharField(source="status.value")
    qr_code = serializers.CharField()
    created_at = serializers.DateTimeField()
    scanned_at = serializers.DateTimeField(allow_null=True)
    scanned_by = serializers.CharField(allow_null=True)
    scan_location = serializers.CharField(allow_null=True)


class PurchaseResultSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    order_id = serializers.CharField(source="order_id.value")
    ticket_ids = serializers.SerializerMethodField()

    def get_ticket_ids(self, result) -> list[str]:
        return [str(ticket_id) for ticket_id in result.ticket_ids]
