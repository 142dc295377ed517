"""Store wiring: one shared collection object per name, class chosen in settings."""

from django.conf import settings
from django.utils.module_loading import import_string

from bookings.stores.interfaces import DocumentCollection
from bookings.stores.repositories import (
    CUSTOMERS_COLLECTION,
    EVENTS_COLLECTION,
    CustomerRepository,
    EventRepository,
)

_collections: dict[tuple[str, str], DocumentCollection] = {}


def get_collection(name: str) -> DocumentCollection:
    """Return the collection named ``name`` from ``VENUE_DOCUMENT_STORE``."""
    backend = settings.VENUE_DOCUMENT_STORE
    key = (backend, name)
    if key not in _collections:
        _collections[key] = import_string(backend)(name)
    return _collections[key]


def reset_collections() -> None:
    _collections.clear()


def event_repository() -> EventRepository:
    return EventRepository(get_collection(EVENTS_COLLECTION))


def customer_repository() -> CustomerRepository:
    return CustomerRepository(get_collection(CUSTOMERS_COLLECTION))
