"""Domain error codes for the bookings module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    HAS_LINKED_EVENTS = "HAS_LINKED_EVENTS"
    INVALID_IMPORT = "INVALID_IMPORT"
    CUSTOMER_EVENTS_STALE = "CUSTOMER_EVENTS_STALE"
    CUSTOMER_SYNC_FAILED = "CUSTOMER_SYNC_FAILED"
    EVENT_UNLINK_FAILED = "EVENT_UNLINK_FAILED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class EventNotFoundError(DomainError):
    """Raised when an update or delete targets an event that no longer exists."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class CustomerNotFoundError(DomainError):
    """Raised when an update or delete targets a customer that no longer exists."""

    def __init__(self, customer_id: str) -> None:
        super().__init__(
            code=ErrorCode.CUSTOMER_NOT_FOUND,
            message="Customer not found",
        )
        self.customer_id = customer_id


class PermissionDeniedError(DomainError):
    """Raised when the current role or the store refuses an operation."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(code=ErrorCode.PERMISSION_DENIED, message=message)


class StoreUnavailableError(DomainError):
    """Raised when the document store cannot be reached. Never retried."""

    def __init__(self, message: str = "Document store unavailable") -> None:
        super().__init__(code=ErrorCode.STORE_UNAVAILABLE, message=message)


class ValidationFailedError(DomainError):
    """Raised before any store call when local input checks fail."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
        self.field = field


class HasLinkedEventsError(DomainError):
    """Raised when deleting a customer that events still reference."""

    def __init__(self, customer_id: str, event_ids: tuple[str, ...]) -> None:
        super().__init__(
            code=ErrorCode.HAS_LINKED_EVENTS,
            message=f"Customer still has {len(event_ids)} linked event(s)",
        )
        self.customer_id = customer_id
        self.event_ids = event_ids


class InvalidImportError(DomainError):
    """Raised when a backup document cannot be imported."""

    def __init__(self, message: str = "Invalid backup file format") -> None:
        super().__init__(code=ErrorCode.INVALID_IMPORT, message=message)


@dataclass(frozen=True)
class LinkageWarning:
    """Non-fatal failure of the secondary half of a linkage operation."""

    code: ErrorCode
    message: str
    entity_id: str = ""

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"
