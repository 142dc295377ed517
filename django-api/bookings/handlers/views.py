"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import datetime as dt
import json
import logging
from dataclasses import replace

from django.http import HttpResponse
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.domain.errors import (
    CustomerNotFoundError,
    DomainError,
    ErrorCode,
    EventNotFoundError,
    HasLinkedEventsError,
    ValidationFailedError,
)
from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import ContactInfo
from bookings.handlers.permissions import AdminForListedMethods, IsSignedIn
from bookings.handlers.serializers import (
    ContactSerializer,
    CustomerInputSerializer,
    CustomerSerializer,
    EventFilterSerializer,
    EventInputSerializer,
    EventSerializer,
    ImportSerializer,
    LoginSerializer,
    warnings_payload,
)
from bookings.services import calendar_service, transfer_service
from bookings.services.linkage_service import LinkageCoordinator
from bookings.services.session_service import RoleSession
from bookings.stores import customer_repository, event_repository

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CUSTOMER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_IMPORT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.HAS_LINKED_EVENTS: status.HTTP_409_CONFLICT,
    ErrorCode.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _coordinator() -> LinkageCoordinator:
    return LinkageCoordinator(event_repository(), customer_repository())


def _get_event(event_id: str) -> Event:
    event = event_repository().get(event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


def _get_customer(customer_id: str) -> Customer:
    customer = customer_repository().get(customer_id)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return customer


class DomainAPIView(APIView):
    """Base view translating domain errors into JSON error responses."""

    permission_classes = [IsSignedIn, AdminForListedMethods]
    admin_methods: tuple[str, ...] = ()

    def handle_exception(self, exc: Exception) -> Response:
        if not isinstance(exc, DomainError):
            return super().handle_exception(exc)
        body = {"code": exc.code.value, "message": exc.message}
        if isinstance(exc, HasLinkedEventsError):
            body["eventIds"] = list(exc.event_ids)
        logger.info("%s %s failed: %s", self.request.method, self.request.path, exc)
        return Response(body, status=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST))


class LoginView(DomainAPIView):
    """Handler for POST /api/auth/login"""

    permission_classes = []

    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = RoleSession(request.session)
        if not session.login(serializer.validated_data["username"], serializer.validated_data["password"]):
            return Response({"role": session.role.value}, status=status.HTTP_401_UNAUTHORIZED)
        return Response({"role": session.role.value})


class LogoutView(DomainAPIView):
    """Handler for POST /api/auth/logout"""

    permission_classes = []

    def post(self, request: Request) -> Response:
        RoleSession(request.session).logout()
        return Response(status=status.HTTP_204_NO_CONTENT)


class SessionRoleView(DomainAPIView):
    """Handler for GET /api/auth/me"""

    permission_classes = []

    def get(self, request: Request) -> Response:
        return Response({"role": RoleSession(request.session).role.value})


class EventListView(DomainAPIView):
    """Handler for GET/POST /api/events"""

    admin_methods = ("POST",)

    def get(self, request: Request) -> Response:
        filters = EventFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        events = calendar_service.filter_events(event_repository().list(), **filters.validated_data)
        return Response(EventSerializer(events, many=True).data)

    def post(self, request: Request) -> Response:
        event_input = EventInputSerializer(data=request.data)
        event_input.is_valid(raise_exception=True)
        contact_input = ContactSerializer(data=request.data.get("contact", {}))
        contact_input.is_valid(raise_exception=True)

        result = _coordinator().create_event_with_customer(
            Event(**event_input.validated_data),
            ContactInfo(**contact_input.validated_data),
        )
        return Response(
            {
                "event": EventSerializer(result.event).data,
                "customer": CustomerSerializer(result.customer).data,
                "warnings": warnings_payload(result.warnings),
            },
            status=status.HTTP_201_CREATED,
        )


class EventDetailView(DomainAPIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    admin_methods = ("PATCH", "DELETE")

    def get(self, request: Request, event_id: str) -> Response:
        return Response(EventSerializer(_get_event(event_id)).data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        event = replace(_get_event(event_id), **serializer.validated_data)
        result = _coordinator().update_event_contact_fields(event)
        return Response(
            {
                "event": EventSerializer(result.event).data,
                "customer": CustomerSerializer(result.customer).data if result.customer else None,
                "warnings": warnings_payload(result.warnings),
            }
        )

    def delete(self, request: Request, event_id: str) -> Response:
        result = _coordinator().delete_event(_get_event(event_id))
        return Response({"warnings": warnings_payload(result.warnings)})


class CustomerListView(DomainAPIView):
    """Handler for GET/POST /api/customers"""

    admin_methods = ("POST",)

    def get(self, request: Request) -> Response:
        customers = calendar_service.search_customers(customer_repository().list(), request.query_params.get("q", ""))
        return Response(CustomerSerializer(customers, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = CustomerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = _coordinator().create_customer(Customer(**serializer.validated_data))
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class CustomerDetailView(DomainAPIView):
    """Handler for GET/PATCH/DELETE /api/customers/{customer_id}"""

    admin_methods = ("PATCH", "DELETE")

    def get(self, request: Request, customer_id: str) -> Response:
        customer = _get_customer(customer_id)
        events = event_repository().list_for_customer(customer.id)
        return Response(
            {
                **CustomerSerializer(customer).data,
                "linkedEvents": EventSerializer(events, many=True).data,
            }
        )

    def patch(self, request: Request, customer_id: str) -> Response:
        serializer = CustomerInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = _coordinator().update_customer(customer_id, serializer.validated_data)
        return Response(
            {
                "customer": CustomerSerializer(result.customer).data if result.customer else None,
                "warnings": warnings_payload(result.warnings),
            }
        )

    def delete(self, request: Request, customer_id: str) -> Response:
        force = request.query_params.get("force", "").lower() in {"1", "true", "yes"}
        result = _coordinator().delete_customer(_get_customer(customer_id), force=force)
        return Response({"warnings": warnings_payload(result.warnings)})


class CalendarMonthView(DomainAPIView):
    """Handler for GET /api/calendar/{year}/{month}"""

    def get(self, request: Request, year: int, month: int) -> Response:
        if not 1 <= month <= 12:
            raise ValidationFailedError("month", "Month must be between 1 and 12")
        filters = EventFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        events = calendar_service.filter_events(event_repository().list(), **filters.validated_data)
        buckets = calendar_service.bucket_by_day(events, year, month)
        return Response(
            {
                "weeks": [
                    [day.isoformat() if day else None for day in week]
                    for week in calendar_service.month_grid(year, month)
                ],
                "days": {
                    day.isoformat(): EventSerializer(day_events, many=True).data
                    for day, day_events in sorted(buckets.items())
                },
            }
        )


class EventCsvView(DomainAPIView):
    """Handler for GET /api/events.csv"""

    def get(self, request: Request) -> HttpResponse:
        filters = EventFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        events = calendar_service.filter_events(event_repository().list(), **filters.validated_data)
        response = HttpResponse(transfer_service.events_csv(events), content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = "attachment; filename=events.csv"
        return response


class BackupExportView(DomainAPIView):
    """Handler for GET /api/backup/export"""

    admin_methods = ("GET",)

    def get(self, request: Request) -> HttpResponse:
        now = dt.datetime.now(dt.timezone.utc)
        snapshot = transfer_service.export_snapshot(
            event_repository().collection,
            customer_repository().collection,
            now=now,
        )
        response = HttpResponse(json.dumps(snapshot, indent=2, ensure_ascii=False), content_type="application/json")
        response["Content-Disposition"] = f"attachment; filename={transfer_service.backup_filename(now)}"
        return response


class BackupImportView(DomainAPIView):
    """Handler for POST /api/backup/import"""

    admin_methods = ("POST",)

    def post(self, request: Request) -> Response:
        serializer = ImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        snapshot = transfer_service.parse_snapshot(serializer.validated_data["data"])
        transfer_service.import_snapshot(
            snapshot,
            event_repository().collection,
            customer_repository().collection,
            confirmed=serializer.validated_data["confirmed"],
        )
        return Response({"events": len(snapshot.events), "customers": len(snapshot.customers)})
