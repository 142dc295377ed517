from bookings.domain.models import Customer, Event
from bookings.domain.value_objects import (
    Capacity,
    ContactInfo,
    EventStatus,
    Money,
    Preferences,
    Role,
    compose_address,
    compose_name,
)

__all__ = [
    "Event",
    "Customer",
    "EventStatus",
    "Role",
    "ContactInfo",
    "Preferences",
    "Money",
    "Capacity",
    "compose_address",
    "compose_name",
]
