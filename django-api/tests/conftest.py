"""Pytest configuration and shared fixtures."""

import pytest
from django.conf import settings
from rest_framework.test import APIClient

from bookings.domain.errors import DomainError
from bookings.services.linkage_service import LinkageCoordinator
from bookings.stores import reset_collections
from bookings.stores.memory_store import InMemoryCollection
from bookings.stores.repositories import CustomerRepository, EventRepository


class FlakyCollection(InMemoryCollection):
    """In-memory collection that raises a configured error for chosen operations."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.failures: dict[str, DomainError] = {}

    def _check(self, operation: str) -> None:
        error = self.failures.get(operation)
        if error is not None:
            raise error

    def create(self, data):
        self._check("create")
        return super().create(data)

    def update(self, doc_id, changes):
        self._check("update")
        super().update(doc_id, changes)

    def delete(self, doc_id):
        self._check("delete")
        super().delete(doc_id)

    def get(self, doc_id):
        self._check("get")
        return super().get(doc_id)


@pytest.fixture(autouse=True)
def reset_store_wiring():
    reset_collections()
    yield
    reset_collections()


@pytest.fixture
def event_collection() -> FlakyCollection:
    return FlakyCollection("events")


@pytest.fixture
def customer_collection() -> FlakyCollection:
    return FlakyCollection("customers")


@pytest.fixture
def events(event_collection) -> EventRepository:
    return EventRepository(event_collection)


@pytest.fixture
def customers(customer_collection) -> CustomerRepository:
    return CustomerRepository(customer_collection)


@pytest.fixture
def coordinator(events, customers) -> LinkageCoordinator:
    return LinkageCoordinator(events, customers)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


def _login(client: APIClient, username: str) -> APIClient:
    password = settings.VENUE_CREDENTIALS[username]["password"]
    response = client.post("/api/auth/login", {"username": username, "password": password}, format="json")
    assert response.status_code == 200
    return client


@pytest.fixture
def admin_client(db, api_client) -> APIClient:
    return _login(api_client, "admin")


@pytest.fixture
def staff_client(db) -> APIClient:
    return _login(APIClient(), "mitarbeiter")
