"""Store interfaces (repository pattern).

A collection is a schemaless set of JSON documents keyed by an id the store
assigns. Stores must be swappable; repositories build domain models on top.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredDocument:
    """A document together with its store-assigned id."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[list[StoredDocument]], None]
Unsubscribe = Callable[[], None]


class DocumentNotFoundError(LookupError):
    """Raised by a collection when an update or delete targets a missing id."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"{collection}/{doc_id}")
        self.collection = collection
        self.doc_id = doc_id


def sort_key(order_by: str) -> Callable[[StoredDocument], tuple]:
    """Ordering used by in-process stores: missing values first, then numbers, then text."""

    def key(document: StoredDocument) -> tuple:
        value = document.data.get(order_by)
        if value is None or value == "":
            return (0, 0)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return (1, value)
        return (2, str(value))

    return key


@dataclass
class _Subscription:
    listener: Listener
    order_by: str | None
    ascending: bool


class DocumentCollection(ABC):
    """Interface for one collection of the document store.

    Subscribers receive the full, ordered collection after every successful
    write, including writes made through this same object.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscriptions: list[_Subscription] = []

    @abstractmethod
    def create(self, data: dict[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        ...

    @abstractmethod
    def update(self, doc_id: str, changes: dict[str, Any]) -> None:
        """Merge-patch a document: only the given keys are overwritten.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        ...

    @abstractmethod
    def delete(self, doc_id: str) -> None:
        """Remove a document.

        Raises:
            DocumentNotFoundError: If no document has this id.
        """
        ...

    @abstractmethod
    def get(self, doc_id: str) -> StoredDocument | None:
        """Return a document by id, or None if not found."""
        ...

    @abstractmethod
    def list(self, order_by: str | None = None, ascending: bool = True) -> list[StoredDocument]:
        """Return all documents, ordered by the given top-level key."""
        ...

    @abstractmethod
    def restore(self, documents: Iterable[StoredDocument]) -> None:
        """Replace the whole collection, keeping the given ids."""
        ...

    def subscribe(
        self,
        listener: Listener,
        order_by: str | None = None,
        ascending: bool = True,
    ) -> Unsubscribe:
        """Register a listener and deliver the current snapshot immediately."""
        subscription = _Subscription(listener, order_by, ascending)
        self._subscriptions.append(subscription)
        listener(self.list(order_by, ascending))

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self) -> None:
        """Push the current snapshot to every subscriber."""
        for subscription in list(self._subscriptions):
            snapshot = self.list(subscription.order_by, subscription.ascending)
            try:
                subscription.listener(snapshot)
            except Exception:
                logger.exception("Listener on collection %s failed", self.name)
