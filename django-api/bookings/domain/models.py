"""Domain models representing persisted state.

These are pure domain objects with no API input rules. They are stored as
schemaless documents whose keys are the camelCase form of the attribute
names (``customer_id`` -> ``customerId``); the same shape is used for backups.
Django ORM models are in bookings/models.py (persistence layer).
"""

import datetime as dt
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, ClassVar, Self

from bookings.domain.value_objects import (
    LEGACY_SERVICE_FLAGS,
    Capacity,
    ContactInfo,
    EventStatus,
    Money,
    Preferences,
    compose_name,
    service_key,
)

logger = logging.getLogger(__name__)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def encode_value(value: Any) -> Any:
    """Convert a domain attribute value to its JSON document form."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dt.date):
        return value.isoformat()
    if isinstance(value, Money):
        return str(value)
    if isinstance(value, Capacity):
        return value.value
    if isinstance(value, Preferences):
        return value.to_mapping()
    if isinstance(value, frozenset):
        return sorted(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _strings(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value if item is not None and item != "")


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "yes", "ja", "1"}
    return bool(value)


def _day(value: Any) -> dt.date | None:
    if not value:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    # Stored dates may carry a time component ("2025-06-01T00:00:00.000Z").
    return dt.date.fromisoformat(str(value)[:10])


def _services(value: Any) -> frozenset[str]:
    if isinstance(value, Mapping):
        value = [key for key, selected in value.items() if selected]
    keys = {name: service_key(name) for name in _strings(value)}
    unknown = sorted(name for name, key in keys.items() if key is None)
    if unknown:
        raise ValueError(f"Unknown service(s): {', '.join(unknown)}")
    return frozenset(keys.values())


def _preferences(value: Any) -> Preferences:
    if isinstance(value, Preferences):
        return value
    if not isinstance(value, Mapping):
        raise ValueError(f"Invalid preferences: {value!r}")
    return Preferences.from_mapping(value)


class DocumentMapped:
    """Mixin translating a frozen dataclass to and from a store document."""

    _decoders: ClassVar[dict[str, Callable[[Any], Any]]] = {}
    # Legacy document keys still read for an attribute, tried in order.
    _aliases: ClassVar[dict[str, tuple[str, ...]]] = {}

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "id")

    @classmethod
    def decode(cls, name: str, value: Any) -> Any:
        return cls._decoders.get(name, _text)(value)

    @classmethod
    def from_document(cls, doc_id: str, document: Mapping[str, Any]) -> Self:
        """Build an entity from a stored document.

        Unreadable values are logged and the attribute keeps its default.
        """
        values: dict[str, Any] = {"id": doc_id}
        for name in cls.field_names():
            raw = document.get(camel_case(name))
            for alias in cls._aliases.get(name, ()):
                if raw not in (None, ""):
                    break
                raw = document.get(alias)
            if raw is None:
                continue
            try:
                values[name] = cls.decode(name, raw)
            except (TypeError, ValueError) as exc:
                logger.warning("%s %s: ignoring %s=%r (%s)", cls.__name__, doc_id, camel_case(name), raw, exc)
        return cls(**values)

    def to_document(self) -> dict[str, Any]:
        return {camel_case(name): encode_value(getattr(self, name)) for name in self.field_names()}

    @classmethod
    def patch_document(cls, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Build a merge-patch document from attribute-named changes."""
        known = set(cls.field_names())
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(sorted(unknown))}")
        return {camel_case(name): encode_value(cls.decode(name, value)) for name, value in changes.items()}


_EVENT_MONEY_FIELDS = ("hall_price", "service_price", "total_price", "deposit", "remaining_payment")


@dataclass(frozen=True)
class Event(DocumentMapped):
    """Domain representation of a booking.

    ``customer`` is a denormalised copy of the linked customer's display name.
    A draft has an empty ``id`` and ``customer_id``.
    """

    id: str = ""
    title: str = ""
    date: dt.date | None = None
    time: str = ""
    room: str = ""
    status: EventStatus = EventStatus.PLANNED
    customer_id: str = ""
    customer: str = ""
    description: str = ""
    event_type: str = ""
    weekday: str = ""
    guest_count: Capacity | None = None
    hall_price: Money | None = None
    service_price: Money | None = None
    total_price: Money | None = None
    deposit: Money | None = None
    remaining_payment: Money | None = None
    services: frozenset[str] = frozenset()
    files: tuple[str, ...] = ()
    comments: tuple[str, ...] = ()
    assigned_staff: tuple[str, ...] = ()
    accepted_offer: bool = False
    customer_signature_date: str = ""
    venue_signature_date: str = ""
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    street_and_number: str = ""
    zip_and_city: str = ""
    notes: str = ""

    _decoders: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "date": _day,
        "status": EventStatus.parse,
        "guest_count": Capacity.parse,
        "services": _services,
        "files": _strings,
        "comments": _strings,
        "assigned_staff": _strings,
        "accepted_offer": _flag,
        **{name: Money.parse for name in _EVENT_MONEY_FIELDS},
    }
    _aliases: ClassVar[dict[str, tuple[str, ...]]] = {
        "date": ("eventDate", "veranstaltungsdatum"),
        "room": ("eventHall",),
        "event_type": ("veranstaltungsart",),
        "weekday": ("wochentag",),
        "guest_count": ("personenanzahl",),
        "hall_price": ("saalmiete",),
        "service_price": ("serviceKosten", "service"),
        "total_price": ("gesamtpreis",),
        "deposit": ("anzahlung",),
        "remaining_payment": ("restzahlung",),
        "services": ("serviceLeistungen",),
        "accepted_offer": ("angebotAngenommen",),
        "customer_signature_date": ("datumUnterschriftKunde",),
        "venue_signature_date": ("bellavueSignatureDate", "datumUnterschriftBellavue"),
        "mobile": ("mobileNumber",),
        "street_and_number": ("street", "address"),
        "zip_and_city": ("zipCity", "addressCity"),
    }

    @classmethod
    def from_document(cls, doc_id: str, document: Mapping[str, Any]) -> Self:
        event = super().from_document(doc_id, document)
        if "services" in document or "serviceLeistungen" in document:
            return event
        # Older documents store every service as a top-level boolean.
        legacy = frozenset(
            key for key, names in LEGACY_SERVICE_FLAGS.items() if any(_flag(document.get(name)) for name in names)
        )
        return replace(event, services=legacy)

    @property
    def contact(self) -> ContactInfo:
        return ContactInfo(
            first_name=self.first_name,
            last_name=self.last_name,
            name=compose_name(self.first_name, self.last_name) or self.customer,
            company=self.company,
            email=self.email,
            phone=self.phone,
            mobile=self.mobile,
            street_and_number=self.street_and_number,
            zip_and_city=self.zip_and_city,
            notes=self.notes,
        )

    @property
    def outstanding_balance(self) -> Money | None:
        if self.remaining_payment is not None:
            return self.remaining_payment
        if self.total_price is not None and self.deposit is not None:
            return self.total_price - self.deposit
        return None


@dataclass(frozen=True)
class Customer(DocumentMapped):
    """Domain representation of a booking contact.

    ``events`` is the reverse index of events whose ``customer_id`` points here.
    """

    id: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    mobile: str = ""
    address: str = ""
    street_and_number: str = ""
    zip_and_city: str = ""
    notes: str = ""
    address_bride: str = ""
    address_groom: str = ""
    nationality_bride: str = ""
    nationality_groom: str = ""
    age_bride: str = ""
    age_groom: str = ""
    tags: tuple[str, ...] = ()
    contact_person: str = ""
    budget: str = ""
    guest_count: str = ""
    special_requirements: str = ""
    preferences: Preferences = Preferences()
    events: tuple[str, ...] = ()

    _decoders: ClassVar[dict[str, Callable[[Any], Any]]] = {
        "tags": _strings,
        "events": _strings,
        "preferences": _preferences,
    }

    @property
    def display_name(self) -> str:
        return self.name.strip() or compose_name(self.first_name, self.last_name)
