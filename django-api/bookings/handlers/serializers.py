"""Serializers for transforming request data and domain models.

The API speaks the stored document shape (camelCase keys), so output is the
domain model's document plus its id, and input is decoded field by field with
the same rules the repositories use.
"""

from collections.abc import Mapping
from typing import Any

from rest_framework import serializers

from bookings.domain.errors import LinkageWarning
from bookings.domain.models import Customer, DocumentMapped, Event, camel_case
from bookings.domain.value_objects import EventStatus


class DocumentInputSerializer(serializers.Serializer):
    """Decode a camelCase document body into domain field values."""

    model: type[DocumentMapped]
    required_fields: tuple[str, ...] = ()
    read_only_fields: tuple[str, ...] = ()

    def to_internal_value(self, data: Any) -> dict[str, Any]:
        if not isinstance(data, Mapping):
            raise serializers.ValidationError({"non_field_errors": ["Expected an object."]})
        names = {camel_case(name): name for name in self.model.field_names() if name not in self.read_only_fields}
        values: dict[str, Any] = {}
        errors: dict[str, list[str]] = {}
        for key, raw in data.items():
            name = names.get(key)
            if name is None:
                continue
            try:
                values[name] = self.model.decode(name, raw)
            except (TypeError, ValueError) as exc:
                errors[key] = [str(exc)]
        if not self.partial:
            for name in self.required_fields:
                if not str(values.get(name) or "").strip():
                    errors[camel_case(name)] = ["This field is required."]
        if errors:
            raise serializers.ValidationError(errors)
        return values


class EventInputSerializer(DocumentInputSerializer):
    model = Event
    required_fields = ("title",)
    read_only_fields = ("customer_id", "customer")


class CustomerInputSerializer(DocumentInputSerializer):
    model = Customer
    read_only_fields = ("events",)


class ContactSerializer(serializers.Serializer):
    """Contact fields captured with a new booking."""

    firstName = serializers.CharField(source="first_name", default="", allow_blank=True)
    lastName = serializers.CharField(source="last_name", default="", allow_blank=True)
    name = serializers.CharField(default="", allow_blank=True)
    company = serializers.CharField(default="", allow_blank=True)
    email = serializers.EmailField(default="", allow_blank=True)
    phone = serializers.CharField(default="", allow_blank=True)
    mobile = serializers.CharField(default="", allow_blank=True)
    streetAndNumber = serializers.CharField(source="street_and_number", default="", allow_blank=True)
    zipAndCity = serializers.CharField(source="zip_and_city", default="", allow_blank=True)
    notes = serializers.CharField(default="", allow_blank=True)


class EventFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in EventStatus], required=False)
    customer = serializers.CharField(required=False)
    q = serializers.CharField(source="query", required=False, allow_blank=True, default="")
    dateFrom = serializers.DateField(source="date_from", required=False)
    dateTo = serializers.DateField(source="date_to", required=False)

    def validate_status(self, value: str) -> EventStatus:
        return EventStatus(value)


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(trim_whitespace=False)
    password = serializers.CharField(trim_whitespace=False)


class ImportSerializer(serializers.Serializer):
    confirmed = serializers.BooleanField(default=False)
    data = serializers.JSONField()


class EventSerializer(serializers.BaseSerializer):
    """Serializer for Event domain model."""

    def to_representation(self, instance: Event) -> dict[str, Any]:
        balance = instance.outstanding_balance
        return {
            "id": instance.id,
            **instance.to_document(),
            "outstandingBalance": str(balance) if balance is not None else None,
        }


class CustomerSerializer(serializers.BaseSerializer):
    """Serializer for Customer domain model."""

    def to_representation(self, instance: Customer) -> dict[str, Any]:
        return {"id": instance.id, **instance.to_document()}


def warnings_payload(warnings: tuple[LinkageWarning, ...]) -> list[dict[str, str]]:
    return [
        {"code": warning.code.value, "message": warning.message, "entityId": warning.entity_id}
        for warning in warnings
    ]
