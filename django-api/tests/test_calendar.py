"""Unit tests for calendar and list queries.

Run with: pytest tests/test_calendar.py -v
"""

import datetime as dt

from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import EventStatus
from bookings.services import calendar_service

EVENTS = [
    Event(id="1", title="Hochzeit Yilmaz", date=dt.date(2025, 6, 1), room="Event 1", customer="Ayse Yilmaz",
          status=EventStatus.CONFIRMED),
    Event(id="2", title="Geburtstag", date=dt.date(2025, 6, 1), room="Restaurant", customer="Anna Müller"),
    Event(id="3", title="Firmenfeier", date=dt.date(2025, 6, 20), room="Event 2", customer="ACME GmbH",
          description="Buffet mit Baklava", status=EventStatus.CANCELLED),
    Event(id="4", title="Verlobung", date=dt.date(2025, 7, 5), room="Event 1", customer="Anna Müller"),
    Event(id="5", title="Ohne Datum", room="Event 1"),
]


class TestMonthGrid:
    def test_weeks_start_on_monday(self):
        # June 2025 starts on a Sunday.
        grid = calendar_service.month_grid(2025, 6)

        assert grid[0] == [None] * 6 + [dt.date(2025, 6, 1)]
        assert grid[-1][0] == dt.date(2025, 6, 30)
        assert grid[-1][1:] == [None] * 6

    def test_every_day_appears_once(self):
        days = [day for week in calendar_service.month_grid(2024, 2) for day in week if day]

        assert days == [dt.date(2024, 2, n) for n in range(1, 30)]


class TestBucketing:
    def test_events_on_day(self):
        assert [event.id for event in calendar_service.events_on(EVENTS, dt.date(2025, 6, 1))] == ["1", "2"]

    def test_bucket_by_day_only_covers_month(self):
        buckets = calendar_service.bucket_by_day(EVENTS, 2025, 6)

        assert sorted(buckets) == [dt.date(2025, 6, 1), dt.date(2025, 6, 20)]
        assert [event.id for event in buckets[dt.date(2025, 6, 1)]] == ["1", "2"]


class TestFilterEvents:
    def test_no_filters_returns_everything(self):
        assert len(calendar_service.filter_events(EVENTS)) == len(EVENTS)

    def test_status_filter(self):
        result = calendar_service.filter_events(EVENTS, status=EventStatus.CONFIRMED)

        assert [event.id for event in result] == ["1"]

    def test_customer_filter(self):
        result = calendar_service.filter_events(EVENTS, customer="Anna Müller")

        assert [event.id for event in result] == ["2", "4"]

    def test_search_covers_title_customer_description_room(self):
        def ids(query):
            return [event.id for event in calendar_service.filter_events(EVENTS, query=query)]

        assert ids("hochzeit") == ["1"]
        assert ids("ACME") == ["3"]
        assert ids("baklava") == ["3"]
        assert ids("restaurant") == ["2"]

    def test_date_range_is_inclusive(self):
        result = calendar_service.filter_events(
            EVENTS, date_from=dt.date(2025, 6, 1), date_to=dt.date(2025, 6, 20)
        )

        assert [event.id for event in result] == ["1", "2", "3"]

    def test_open_ended_range_skips_undated_events(self):
        result = calendar_service.filter_events(EVENTS, date_from=dt.date(2025, 7, 1))

        assert [event.id for event in result] == ["4"]


class TestLabels:
    def test_status_label_and_color(self):
        assert calendar_service.status_label(EventStatus.CONFIRMED) == "Bestätigt"
        assert calendar_service.status_color(EventStatus.CONFIRMED) == "success"
        assert calendar_service.status_color(EventStatus.PLANNED) == "warning"
        assert calendar_service.status_color(EventStatus.CANCELLED) == "error"


class TestSearchCustomers:
    CUSTOMERS = [
        Customer(id="a", name="Anna Müller", email="anna@x.de", phone="0123 456", address="Seeweg 2, 80331 München"),
        Customer(id="b", name="ACME GmbH", email="info@acme.de", phone="089 999"),
    ]

    def test_matches_name_email_address_phone(self):
        def ids(query):
            return [customer.id for customer in calendar_service.search_customers(self.CUSTOMERS, query)]

        assert ids("müller") == ["a"]
        assert ids("ACME.DE") == ["b"]
        assert ids("seeweg") == ["a"]
        assert ids("089") == ["b"]
        assert ids("") == ["a", "b"]
