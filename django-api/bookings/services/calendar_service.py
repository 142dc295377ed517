"""Calendar and list queries over already-loaded events and customers."""

import calendar
import datetime as dt
from collections import defaultdict
from collections.abc import Iterable

from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import EventStatus

STATUS_LABELS = {
    EventStatus.PLANNED: "Geplant",
    EventStatus.CONFIRMED: "Bestätigt",
    EventStatus.CANCELLED: "Abgesagt",
}

STATUS_COLORS = {
    EventStatus.PLANNED: "warning",
    EventStatus.CONFIRMED: "success",
    EventStatus.CANCELLED: "error",
}


def status_label(status: EventStatus) -> str:
    return STATUS_LABELS[status]


def status_color(status: EventStatus) -> str:
    return STATUS_COLORS[status]


def month_grid(year: int, month: int) -> list[list[dt.date | None]]:
    """Weeks of the month, Monday first; days outside the month are None."""
    weeks = calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month)
    return [[day if day.month == month else None for day in week] for week in weeks]


def events_on(events: Iterable[Event], day: dt.date) -> list[Event]:
    return [event for event in events if event.date == day]


def bucket_by_day(events: Iterable[Event], year: int, month: int) -> dict[dt.date, list[Event]]:
    """Group the events falling in the given month by day."""
    buckets: dict[dt.date, list[Event]] = defaultdict(list)
    for event in events:
        if event.date and event.date.year == year and event.date.month == month:
            buckets[event.date].append(event)
    return dict(buckets)


def filter_events(
    events: Iterable[Event],
    status: EventStatus | None = None,
    customer: str | None = None,
    query: str = "",
    date_from: dt.date | None = None,
    date_to: dt.date | None = None,
) -> list[Event]:
    """Filter events the way the list and calendar views do.

    ``query`` matches title, customer name, description and room,
    case-insensitively. The date range is inclusive on both ends; events
    without a date never match a range.
    """
    needle = query.strip().casefold()
    result = []
    for event in events:
        if status is not None and event.status is not status:
            continue
        if customer and event.customer != customer:
            continue
        if needle and not any(
            needle in text.casefold() for text in (event.title, event.customer, event.description, event.room)
        ):
            continue
        if (date_from or date_to) and event.date is None:
            continue
        if date_from and event.date < date_from:
            continue
        if date_to and event.date > date_to:
            continue
        result.append(event)
    return result


def search_customers(customers: Iterable[Customer], query: str) -> list[Customer]:
    needle = query.strip().casefold()
    if not needle:
        return list(customers)
    return [
        customer
        for customer in customers
        if needle in customer.display_name.casefold()
        or needle in customer.email.casefold()
        or needle in customer.address.casefold()
        or query.strip() in customer.phone
    ]
