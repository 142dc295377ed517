"""Typed repositories over document collections.

Repositories speak domain models and domain errors; collections speak
documents. No retries happen here: store failures propagate to the caller.
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from bookings.domain.errors import CustomerNotFoundError, DomainError, EventNotFoundError
from bookings.domain.models import Customer, DocumentMapped, Event, camel_case
from bookings.stores.interfaces import DocumentCollection, DocumentNotFoundError, StoredDocument, Unsubscribe

EVENTS_COLLECTION = "events"
CUSTOMERS_COLLECTION = "customers"

T = TypeVar("T", bound=DocumentMapped)


class Repository(Generic[T]):
    """CRUD and change subscription for one entity type."""

    model: type[T]
    default_order: str
    not_found: Callable[[str], DomainError]

    def __init__(self, collection: DocumentCollection) -> None:
        self.collection = collection

    def _entity(self, document: StoredDocument) -> T:
        return self.model.from_document(document.id, document.data)

    def get(self, entity_id: str) -> T | None:
        """Return an entity by ID, or None if not found."""
        if not entity_id:
            return None
        document = self.collection.get(entity_id)
        return self._entity(document) if document else None

    def create(self, entity: T) -> str:
        """Persist a new entity; any id it carries is ignored."""
        return self.collection.create(entity.to_document())

    def update(self, entity_id: str, **changes: Any) -> None:
        """Merge-patch the named fields.

        Raises:
            EventNotFoundError / CustomerNotFoundError: If the entity vanished.
        """
        patch = self.model.patch_document(changes)
        try:
            self.collection.update(entity_id, patch)
        except DocumentNotFoundError:
            raise self.not_found(entity_id) from None

    def save(self, entity: T) -> None:
        """Overwrite every field of an existing entity."""
        try:
            self.collection.update(entity.id, entity.to_document())
        except DocumentNotFoundError:
            raise self.not_found(entity.id) from None

    def delete(self, entity_id: str) -> None:
        try:
            self.collection.delete(entity_id)
        except DocumentNotFoundError:
            raise self.not_found(entity_id) from None

    def subscribe(self, callback: Callable[[list[T]], None]) -> Unsubscribe:
        """Call ``callback`` with the full ordered collection after every change."""
        return self.collection.subscribe(
            lambda documents: callback([self._entity(document) for document in documents]),
            order_by=camel_case(self.default_order),
        )

    def list(self, order_by: str | None = None, ascending: bool = True) -> list[T]:
        """Return all entities ordered by a domain field name (default ordering if omitted)."""
        documents = self.collection.list(camel_case(order_by or self.default_order), ascending)
        return [self._entity(document) for document in documents]


class EventRepository(Repository[Event]):
    """Events, ordered by date."""

    model = Event
    default_order = "date"
    not_found = EventNotFoundError

    def list_for_customer(self, customer_id: str) -> list[Event]:
        if not customer_id:
            return []
        return [event for event in self.list() if event.customer_id == customer_id]


class CustomerRepository(Repository[Customer]):
    """Customers, ordered by display name."""

    model = Customer
    default_order = "name"
    not_found = CustomerNotFoundError
