"""Unit tests for LinkageCoordinator.

These test the event/customer consistency rules and partial-failure handling.
Run with: pytest tests/test_services.py -v
"""

import datetime as dt
import logging
from dataclasses import replace

import pytest

from bookings.domain.errors import (
    ErrorCode,
    EventNotFoundError,
    HasLinkedEventsError,
    PermissionDeniedError,
    StoreUnavailableError,
    ValidationFailedError,
)
from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import ContactInfo


@pytest.fixture
def draft() -> Event:
    return Event(title="Geburtstag Müller", date=dt.date(2025, 6, 1), room="Event 1")


@pytest.fixture
def contact() -> ContactInfo:
    return ContactInfo(
        first_name="Anna",
        last_name="Müller",
        email="a@x.de",
        phone="0123",
        street_and_number="Seeweg 2",
        zip_and_city="80331 München",
    )


def _linked_pair(events, customers, **customer_fields) -> tuple[Event, Customer]:
    customer_id = customers.create(Customer(**customer_fields))
    event_id = events.create(Event(title="Feier", customer_id=customer_id, customer=customer_fields.get("name", "")))
    customers.update(customer_id, events=[event_id])
    return events.get(event_id), customers.get(customer_id)


class TestCreateEventWithCustomer:
    """Tests for the create customer -> create event -> patch customer protocol."""

    def test_links_both_sides(self, coordinator, events, customers, draft, contact):
        result = coordinator.create_event_with_customer(draft, contact)

        assert result.ok
        assert events.get(result.event.id).customer_id == result.customer.id
        assert result.event.id in customers.get(result.customer.id).events

    def test_birthday_scenario(self, coordinator, events, customers, draft, contact):
        result = coordinator.create_event_with_customer(draft, contact)

        customer = customers.get(result.customer.id)
        event = events.get(result.event.id)
        assert customer.address == "Seeweg 2, 80331 München"
        assert customer.name == "Anna Müller"
        assert event.customer_id == customer.id
        assert event.customer == "Anna Müller"
        assert event.room == "Event 1"
        assert customer.events == (event.id,)

    def test_returns_persisted_entities(self, coordinator, events, customers, draft, contact):
        result = coordinator.create_event_with_customer(draft, contact)

        assert result.event == events.get(result.event.id)
        assert result.customer == customers.get(result.customer.id)

    def test_event_carries_contact_fields(self, coordinator, events, draft, contact):
        result = coordinator.create_event_with_customer(draft, contact)

        event = events.get(result.event.id)
        assert (event.first_name, event.last_name) == ("Anna", "Müller")
        assert event.email == "a@x.de"
        assert event.street_and_number == "Seeweg 2"
        assert event.zip_and_city == "80331 München"

    def test_event_contact_fields_already_set_are_kept(self, coordinator, events, draft, contact):
        result = coordinator.create_event_with_customer(replace(draft, email="buchung@x.de"), contact)

        event = events.get(result.event.id)
        assert event.email == "buchung@x.de"
        assert event.phone == "0123"

    def test_never_reuses_existing_customer(self, coordinator, customers, draft, contact):
        coordinator.create_event_with_customer(draft, contact)
        coordinator.create_event_with_customer(draft, contact)

        assert len(customers.list()) == 2

    def test_blank_contact_fails_before_any_write(self, coordinator, events, customers, draft):
        with pytest.raises(ValidationFailedError) as exc_info:
            coordinator.create_event_with_customer(draft, ContactInfo(email="a@x.de"))

        assert exc_info.value.field == "name"
        assert customers.list() == []
        assert events.list() == []

    def test_blank_title_fails_before_any_write(self, coordinator, customers, contact):
        with pytest.raises(ValidationFailedError):
            coordinator.create_event_with_customer(Event(title="  "), contact)

        assert customers.list() == []

    def test_customer_create_failure_propagates(self, coordinator, events, customer_collection, draft, contact):
        customer_collection.failures["create"] = PermissionDeniedError()

        with pytest.raises(PermissionDeniedError):
            coordinator.create_event_with_customer(draft, contact)

        assert events.list() == []

    def test_event_create_failure_keeps_orphan_customer(
        self, coordinator, customers, event_collection, draft, contact, caplog
    ):
        event_collection.failures["create"] = StoreUnavailableError()

        with caplog.at_level(logging.ERROR, logger="bookings.services.linkage_service"):
            with pytest.raises(StoreUnavailableError):
                coordinator.create_event_with_customer(draft, contact)

        [orphan] = customers.list()
        assert customers.get(orphan.id).events == ()
        assert orphan.id in caplog.text

    def test_customer_patch_failure_is_a_warning(
        self, coordinator, events, customers, customer_collection, draft, contact
    ):
        customer_collection.failures["update"] = StoreUnavailableError()

        result = coordinator.create_event_with_customer(draft, contact)

        assert [warning.code for warning in result.warnings] == [ErrorCode.CUSTOMER_EVENTS_STALE]
        assert events.get(result.event.id).customer_id == result.customer.id
        assert customers.get(result.customer.id).events == ()


class TestUpdateEventContactFields:
    """Tests for pushing contact edits from an event to its customer."""

    def test_non_blank_fields_overwrite_customer(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna Müller", email="old@x.de")

        coordinator.update_event_contact_fields(replace(event, email="new@x.de", mobile="0170"))

        updated = customers.get(customer.id)
        assert updated.email == "new@x.de"
        assert updated.mobile == "0170"

    def test_blank_fields_never_overwrite_customer(self, coordinator, events, customers):
        event, customer = _linked_pair(
            events, customers, name="Anna Müller", email="a@x.de", phone="0123", notes="Stammkundin"
        )

        coordinator.update_event_contact_fields(replace(event, first_name="Anna", email="", phone="   ", notes=""))

        updated = customers.get(customer.id)
        assert updated.email == "a@x.de"
        assert updated.phone == "0123"
        assert updated.notes == "Stammkundin"
        assert updated.first_name == "Anna"

    def test_event_is_saved_first(self, coordinator, events, customers):
        event, _ = _linked_pair(events, customers, name="Anna")

        coordinator.update_event_contact_fields(replace(event, title="Hochzeit", description="Saal 1"))

        saved = events.get(event.id)
        assert saved.title == "Hochzeit"
        assert saved.description == "Saal 1"

    def test_curated_address_is_kept(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna", address="Postfach 12, 80000 München")

        coordinator.update_event_contact_fields(replace(event, street_and_number="Seeweg 2", zip_and_city="80331"))

        updated = customers.get(customer.id)
        assert updated.address == "Postfach 12, 80000 München"
        assert updated.street_and_number == "Seeweg 2"

    def test_blank_address_is_composed(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna")

        coordinator.update_event_contact_fields(
            replace(event, street_and_number="Seeweg 2", zip_and_city="80331 München")
        )

        assert customers.get(customer.id).address == "Seeweg 2, 80331 München"

    def test_missing_reverse_link_is_restored(self, coordinator, events, customers):
        customer_id = customers.create(Customer(name="Anna"))
        event_id = events.create(Event(title="Feier", customer_id=customer_id))

        coordinator.update_event_contact_fields(events.get(event_id))

        assert customers.get(customer_id).events == (event_id,)

    def test_unlinked_event_gets_new_customer(self, coordinator, events, customers):
        event_id = events.create(Event(title="Feier", first_name="Max", last_name="Mustermann", email="m@x.de"))

        result = coordinator.update_event_contact_fields(events.get(event_id))

        [customer] = customers.list()
        assert customer.name == "Max Mustermann"
        assert customer.email == "m@x.de"
        assert customer.events == (event_id,)
        assert events.get(event_id).customer_id == customer.id
        assert events.get(event_id).customer == "Max Mustermann"
        assert result.event.customer_id == customer.id

    def test_dangling_customer_id_is_relinked(self, coordinator, events, customers):
        event_id = events.create(Event(title="Feier", customer_id="vanished", customer="Max"))

        coordinator.update_event_contact_fields(events.get(event_id))

        [customer] = customers.list()
        assert customer.name == "Max"
        assert events.get(event_id).customer_id == customer.id

    def test_unlinked_event_without_contact_stays_unlinked(self, coordinator, events, customers):
        event_id = events.create(Event(title="Feier"))

        result = coordinator.update_event_contact_fields(events.get(event_id))

        assert result.ok
        assert customers.list() == []

    def test_customer_failure_does_not_block_event(self, coordinator, events, customers, customer_collection):
        event, _ = _linked_pair(events, customers, name="Anna")
        customer_collection.failures["get"] = StoreUnavailableError()

        result = coordinator.update_event_contact_fields(replace(event, title="Hochzeit", email="n@x.de"))

        assert [warning.code for warning in result.warnings] == [ErrorCode.CUSTOMER_SYNC_FAILED]
        assert events.get(event.id).title == "Hochzeit"

    def test_event_failure_propagates(self, coordinator, events):
        with pytest.raises(EventNotFoundError):
            coordinator.update_event_contact_fields(Event(id="missing", title="Feier"))


class TestDeleteEvent:
    def test_removes_event_from_customer(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna")

        result = coordinator.delete_event(event)

        assert result.ok
        assert events.get(event.id) is None
        assert event.id not in customers.get(customer.id).events

    def test_keeps_other_events_of_customer(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna")
        other_id = events.create(Event(title="Zweite Feier", customer_id=customer.id))
        customers.update(customer.id, events=[event.id, other_id])

        coordinator.delete_event(event)

        assert customers.get(customer.id).events == (other_id,)

    def test_unlink_failure_is_a_warning(self, coordinator, events, customers, customer_collection):
        event, _ = _linked_pair(events, customers, name="Anna")
        customer_collection.failures["update"] = StoreUnavailableError()

        result = coordinator.delete_event(event)

        assert [warning.code for warning in result.warnings] == [ErrorCode.CUSTOMER_EVENTS_STALE]
        assert events.get(event.id) is None

    def test_vanished_event_raises(self, coordinator):
        with pytest.raises(EventNotFoundError):
            coordinator.delete_event(Event(id="missing"))


class TestDeleteCustomer:
    def _customer_with_two_events(self, events, customers) -> tuple[Customer, list[str]]:
        customer_id = customers.create(Customer(name="Anna"))
        event_ids = [events.create(Event(title=title, customer_id=customer_id)) for title in ("A", "B")]
        customers.update(customer_id, events=event_ids)
        return customers.get(customer_id), event_ids

    def test_refuses_while_events_are_linked(self, coordinator, events, customers):
        customer, event_ids = self._customer_with_two_events(events, customers)

        with pytest.raises(HasLinkedEventsError) as exc_info:
            coordinator.delete_customer(customer)

        assert set(exc_info.value.event_ids) == set(event_ids)
        assert customers.get(customer.id) is not None

    def test_force_clears_customer_id_on_events(self, coordinator, events, customers):
        customer, event_ids = self._customer_with_two_events(events, customers)

        result = coordinator.delete_customer(customer, force=True)

        assert result.ok
        assert customers.get(customer.id) is None
        assert [events.get(event_id).customer_id for event_id in event_ids] == ["", ""]

    def test_customer_without_events_is_deleted(self, coordinator, customers):
        customer_id = customers.create(Customer(name="Anna"))

        coordinator.delete_customer(customers.get(customer_id))

        assert customers.get(customer_id) is None


class TestCustomerMaintenance:
    def test_create_customer_composes_address(self, coordinator, customers):
        customer = coordinator.create_customer(
            Customer(first_name="Anna", last_name="Müller", street_and_number="Seeweg 2", zip_and_city="80331 München")
        )

        stored = customers.get(customer.id)
        assert stored.name == "Anna Müller"
        assert stored.address == "Seeweg 2, 80331 München"

    def test_create_customer_requires_name(self, coordinator):
        with pytest.raises(ValidationFailedError):
            coordinator.create_customer(Customer(email="a@x.de"))

    def test_rename_refreshes_events(self, coordinator, events, customers):
        event, customer = _linked_pair(events, customers, name="Anna")

        result = coordinator.update_customer(customer.id, {"name": "Anna Schmidt"})

        assert result.customer.name == "Anna Schmidt"
        assert events.get(event.id).customer == "Anna Schmidt"

    def test_update_rejects_blank_name(self, coordinator, events, customers):
        _, customer = _linked_pair(events, customers, name="Anna")

        with pytest.raises(ValidationFailedError):
            coordinator.update_customer(customer.id, {"name": " "})
