"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
"""

from decimal import Decimal

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from tickets.domain import TicketStatus
from tickets.domain.errors import DomainError, ErrorCode
from tickets.handlers.serializers import (
    OrderSerializer,
    PurchaseRequestSerializer,
    PurchaseResultSerializer,
    TicketSerializer,
    TicketTypeSerializer,
    VerifyRequestSerializer,
)
from tickets.services.purchase_service import PurchaseService
from tickets.services.qr_codec import QRCodec
from tickets.services.ticket_service import TicketService
from tickets.stores.django_store import DjangoTicketStore

ERROR_STATUS = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SOLD_OUT: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.ENCODING_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SIGNATURE_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EXPIRED: status.HTTP_410_GONE,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def build_qr_codec() -> QRCodec:
    return QRCodec(
        secret=settings.QR_SECRET_KEY,
        ttl_ms=settings.QR_TOKEN_TTL_MS,
        version=settings.QR_TOKEN_VERSION,
        accept_legacy=settings.QR_ACCEPT_LEGACY_TOKENS,
        legacy_secret=settings.QR_LEGACY_SECRET_KEY,
    )


def build_ticket_service() -> TicketService:
    return TicketService(
        store=DjangoTicketStore(),
        codec=build_qr_codec(),
        cache=cache,
        ticket_list_ttl=settings.TICKET_LIST_CACHE_TTL,
    )


def build_purchase_service() -> PurchaseService:
    ticket_service = build_ticket_service()
    return PurchaseService(
        store=DjangoTicketStore(),
        codec=build_qr_codec(),
        tickets=ticket_service,
        fee_rate=Decimal(settings.SERVICE_FEE_RATE),
    )


class TicketTypeListView(APIView):
    """Handler for GET /api/events/{event_id}/ticket-types"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            ticket_types = build_ticket_service().list_ticket_types(event_id)
        except DomainError as e:
            return error_response(e)
        return Response(TicketTypeSerializer(ticket_types, many=True).data)


class PurchaseView(APIView):
    """Handler for POST /api/events/{event_id}/purchases"""

    def post(self, request: Request, event_id: str) -> Response:
        serializer = PurchaseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"code": ErrorCode.VALIDATION_ERROR.value, "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            result = build_purchase_service().purchase_tickets(
                user_id=serializer.validated_data["user_id"],
                event_id=event_id,
                selections=serializer.to_selections(),
                payment_method=serializer.validated_data["payment_method"],
            )
        except DomainError as e:
            return error_response(e)
        return Response(PurchaseResultSerializer(result).data, status=status.HTTP_201_CREATED)


class UserTicketListView(APIView):
    """Handler for GET /api/users/{user_id}/tickets"""

    def get(self, request: Request, user_id: str) -> Response:
        try:
            tickets = build_ticket_service().list_user_tickets(user_id)
        except DomainError as e:
            return error_response(e)
        return Response(TicketSerializer(tickets, many=True).data)


class UserOrderListView(APIView):
    """Handler for GET /api/users/{user_id}/orders"""

    def get(self, request: Request, user_id: str) -> Response:
        try:
            orders = build_ticket_service().list_user_orders(user_id)
        except DomainError as e:
            return error_response(e)
        return Response(OrderSerializer(orders, many=True).data)


class TicketVerifyView(APIView):
    """Handler for POST /api/tickets/verify"""

    def post(self, request: Request) -> Response:
        serializer = VerifyRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"code": ErrorCode.VALIDATION_ERROR.value, "errors": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            ticket = build_ticket_service().verify_ticket(serializer.validated_data["qr_code"])
        except DomainError as e:
            return error_response(e)
        data = TicketSerializer(ticket).data
        data["valid"] = ticket.status is TicketStatus.VALID
        return Response(data)
