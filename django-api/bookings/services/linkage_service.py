"""Linkage service - keeps events and their customers consistent.

The store has no multi-document transactions, so every operation is a strict
sequence of single-document writes. The first write of an operation is
authoritative: if it fails the error propagates unchanged. Failures of the
follow-up writes on the other entity are downgraded to LinkageWarning values
on the result, and logged.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from bookings.domain.errors import (
    DomainError,
    ErrorCode,
    HasLinkedEventsError,
    LinkageWarning,
    ValidationFailedError,
)
from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import CONTACT_FIELDS, ContactInfo, compose_address
from bookings.stores.repositories import CustomerRepository, EventRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkageResult:
    """Entities as persisted by an operation, plus any non-fatal failures."""

    event: Event | None = None
    customer: Customer | None = None
    warnings: tuple[LinkageWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.warnings


def customer_from_contact(contact: ContactInfo, events: tuple[str, ...] = ()) -> Customer:
    """Build a new customer record from contact fields captured on a booking."""
    return Customer(
        name=contact.display_name,
        first_name=contact.first_name.strip(),
        last_name=contact.last_name.strip(),
        company=contact.company,
        email=contact.email.strip(),
        phone=contact.phone.strip(),
        mobile=contact.mobile.strip(),
        address=contact.address,
        street_and_number=contact.street_and_number.strip(),
        zip_and_city=contact.zip_and_city.strip(),
        notes=contact.notes,
        events=events,
    )


def merge_contact(customer: Customer, event: Event) -> dict[str, str]:
    """Return the customer fields an edited event should overwrite.

    Only non-blank event values are taken. A curated customer address is never
    replaced by a recomposed street/zip string.
    """
    changes = {name: getattr(event, name) for name in CONTACT_FIELDS if getattr(event, name).strip()}
    merged = replace(customer, **changes)
    address = compose_address(merged.street_and_number, merged.zip_and_city, existing=customer.address)
    if address != customer.address:
        changes["address"] = address
    if not customer.name.strip() and event.contact.display_name:
        changes["name"] = event.contact.display_name
    return {name: value for name, value in changes.items() if getattr(customer, name) != value}


def with_contact(event: Event, contact: ContactInfo) -> Event:
    """Fill the event's blank contact fields from ``contact``."""
    changes = {
        name: getattr(contact, name).strip()
        for name in CONTACT_FIELDS
        if not getattr(event, name).strip() and getattr(contact, name).strip()
    }
    return replace(event, **changes)


def _warning(code: ErrorCode, exc: DomainError, entity_id: str) -> LinkageWarning:
    return LinkageWarning(code=code, message=exc.message, entity_id=entity_id)


class LinkageCoordinator:
    """Service for all writes that touch the event/customer relationship."""

    def __init__(self, events: EventRepository, customers: CustomerRepository) -> None:
        self._events = events
        self._customers = customers

    def create_event_with_customer(self, draft: Event, contact: ContactInfo) -> LinkageResult:
        """Create a customer from ``contact``, then the event linked to it.

        Steps: create customer, create event, patch customer.events.

        Raises:
            ValidationFailedError: Before any write, if the draft has no title
                or the contact has no name.
            DomainError: If the customer or event create fails. A customer
                created before a failed event create is left in place.
        """
        if not draft.title.strip():
            raise ValidationFailedError("title", "Event title is required")
        if not contact.display_name:
            raise ValidationFailedError("name", "Customer name is required")

        customer = customer_from_contact(contact)
        customer_id = self._customers.create(customer)
        customer = replace(customer, id=customer_id)
        logger.info("Created customer %s for new event %r", customer_id, draft.title)

        event = replace(with_contact(draft, contact), id="", customer_id=customer_id, customer=customer.name)
        try:
            event_id = self._events.create(event)
        except DomainError:
            logger.error("Event create failed; customer %s left without events", customer_id)
            raise
        event = replace(event, id=event_id)
        logger.info("Created event %s linked to customer %s", event_id, customer_id)

        warnings: list[LinkageWarning] = []
        try:
            self._customers.update(customer_id, events=[event_id])
            customer = replace(customer, events=(event_id,))
        except DomainError as exc:
            logger.warning("Could not record event %s on customer %s: %s", event_id, customer_id, exc)
            warnings.append(_warning(ErrorCode.CUSTOMER_EVENTS_STALE, exc, customer_id))
        return LinkageResult(event=event, customer=customer, warnings=tuple(warnings))

    def update_event_contact_fields(self, event: Event) -> LinkageResult:
        """Persist an edited event, then push its contact fields to the customer.

        An empty or dangling ``customer_id`` gets a new customer synthesized
        from the event and the event relinked to it.
        """
        self._events.save(event)
        logger.info("Saved event %s", event.id)

        try:
            customer = self._customers.get(event.customer_id)
            if customer is not None:
                changes: dict[str, Any] = merge_contact(customer, event)
                if event.id not in customer.events:
                    changes["events"] = (*customer.events, event.id)
                if changes:
                    self._customers.update(customer.id, **changes)
                    customer = replace(customer, **changes)
                    logger.info("Synced %s onto customer %s", ", ".join(sorted(changes)), customer.id)
                return LinkageResult(event=event, customer=customer)
            return self._relink(event)
        except DomainError as exc:
            logger.warning("Customer sync for event %s failed: %s", event.id, exc)
            warning = _warning(ErrorCode.CUSTOMER_SYNC_FAILED, exc, event.customer_id)
            return LinkageResult(event=event, warnings=(warning,))

    def _relink(self, event: Event) -> LinkageResult:
        contact = event.contact
        if not contact.display_name:
            logger.info("Event %s has no contact name; no customer synthesized", event.id)
            return LinkageResult(event=event)
        if event.customer_id:
            logger.warning("Event %s references missing customer %s", event.id, event.customer_id)
        customer = customer_from_contact(contact, events=(event.id,))
        customer_id = self._customers.create(customer)
        customer = replace(customer, id=customer_id)
        self._events.update(event.id, customer_id=customer_id, customer=customer.name)
        logger.info("Linked event %s to new customer %s", event.id, customer_id)
        event = replace(event, customer_id=customer_id, customer=customer.name)
        return LinkageResult(event=event, customer=customer)

    def delete_event(self, event: Event) -> LinkageResult:
        """Delete an event and drop it from its customer's events."""
        self._events.delete(event.id)
        logger.info("Deleted event %s", event.id)
        if not event.customer_id:
            return LinkageResult()
        try:
            customer = self._customers.get(event.customer_id)
            if customer is None or event.id not in customer.events:
                return LinkageResult(customer=customer)
            remaining = tuple(event_id for event_id in customer.events if event_id != event.id)
            self._customers.update(customer.id, events=remaining)
            return LinkageResult(customer=replace(customer, events=remaining))
        except DomainError as exc:
            logger.warning("Could not unlink event %s from customer %s: %s", event.id, event.customer_id, exc)
            return LinkageResult(warnings=(_warning(ErrorCode.CUSTOMER_EVENTS_STALE, exc, event.customer_id),))

    def delete_customer(self, customer: Customer, force: bool = False) -> LinkageResult:
        """Delete a customer.

        Raises:
            HasLinkedEventsError: If events still reference the customer and
                ``force`` is not set. Nothing is written in that case.

        With ``force``, linked events have ``customer_id`` cleared afterwards.
        """
        linked = self._events.list_for_customer(customer.id)
        if linked and not force:
            raise HasLinkedEventsError(customer.id, tuple(event.id for event in linked))

        self._customers.delete(customer.id)
        logger.info("Deleted customer %s", customer.id)
        warnings: list[LinkageWarning] = []
        for event in linked:
            try:
                self._events.update(event.id, customer_id="")
            except DomainError as exc:
                logger.warning("Could not unlink event %s from deleted customer %s: %s", event.id, customer.id, exc)
                warnings.append(_warning(ErrorCode.EVENT_UNLINK_FAILED, exc, event.id))
        return LinkageResult(warnings=tuple(warnings))

    def create_customer(self, customer: Customer) -> Customer:
        """Create a customer entered directly by staff."""
        name = customer.display_name
        if not name:
            raise ValidationFailedError("name", "Customer name is required")
        customer = replace(
            customer,
            name=name,
            address=compose_address(customer.street_and_number, customer.zip_and_city, existing=customer.address),
        )
        customer_id = self._customers.create(customer)
        logger.info("Created customer %s", customer_id)
        return replace(customer, id=customer_id)

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> LinkageResult:
        """Merge-patch a customer and refresh the name copied onto its events.

        Raises:
            CustomerNotFoundError: If the customer does not exist.
            ValidationFailedError: If the change would blank the name.
        """
        if "name" in changes and not str(changes["name"] or "").strip():
            raise ValidationFailedError("name", "Customer name is required")
        self._customers.update(customer_id, **changes)
        logger.info("Updated customer %s", customer_id)
        customer = self._customers.get(customer_id)
        if customer is None or "name" not in changes:
            return LinkageResult(customer=customer)

        warnings: list[LinkageWarning] = []
        for event in self._events.list_for_customer(customer_id):
            if event.customer == customer.name:
                continue
            try:
                self._events.update(event.id, customer=customer.name)
            except DomainError as exc:
                logger.warning("Could not refresh customer name on event %s: %s", event.id, exc)
                warnings.append(_warning(ErrorCode.CUSTOMER_SYNC_FAILED, exc, event.id))
        return LinkageResult(customer=customer, warnings=tuple(warnings))
