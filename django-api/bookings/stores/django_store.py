"""Django ORM implementation of DocumentCollection.

Change notifications are delivered through the post_save/post_delete
signals on Document (see bookings/signals.py), so every live collection
object for a name sees writes made through any other.
"""

import logging
import weakref
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from django.db import InterfaceError, OperationalError, transaction

from bookings.domain.errors import StoreUnavailableError
from bookings.models import Document
from bookings.stores.interfaces import DocumentCollection, DocumentNotFoundError, StoredDocument

logger = logging.getLogger(__name__)

_live: dict[str, weakref.WeakSet["DjangoCollection"]] = {}


def live_collections(name: str) -> list["DjangoCollection"]:
    """Return the collection objects currently bound to ``name``."""
    return list(_live.get(name, ()))


@contextmanager
def _store_errors(name: str) -> Iterator[None]:
    try:
        yield
    except (OperationalError, InterfaceError) as exc:
        logger.error("Database error on collection %s: %s", name, exc)
        raise StoreUnavailableError() from exc


class DjangoCollection(DocumentCollection):
    """Database-backed collection using Django ORM."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        _live.setdefault(name, weakref.WeakSet()).add(self)

    def _rows(self):
        return Document.objects.filter(collection=self.name)

    def create(self, data: dict[str, Any]) -> str:
        with _store_errors(self.name):
            row = Document.objects.create(collection=self.name, data=data)
        return row.doc_id

    def update(self, doc_id: str, changes: dict[str, Any]) -> None:
        with _store_errors(self.name), transaction.atomic():
            row = self._rows().select_for_update().filter(doc_id=doc_id).first()
            if row is None:
                raise DocumentNotFoundError(self.name, doc_id)
            row.data = {**row.data, **changes}
            row.save(update_fields=["data", "updated_at"])

    def delete(self, doc_id: str) -> None:
        with _store_errors(self.name):
            deleted, _ = self._rows().filter(doc_id=doc_id).delete()
        if not deleted:
            raise DocumentNotFoundError(self.name, doc_id)

    def get(self, doc_id: str) -> StoredDocument | None:
        with _store_errors(self.name):
            row = self._rows().filter(doc_id=doc_id).first()
        if row is None:
            return None
        return StoredDocument(id=row.doc_id, data=row.data)

    def list(self, order_by: str | None = None, ascending: bool = True) -> list[StoredDocument]:
        rows = self._rows()
        if order_by:
            rows = rows.order_by(f"{'' if ascending else '-'}data__{order_by}", "created_at")
        with _store_errors(self.name):
            return [StoredDocument(id=row.doc_id, data=row.data) for row in rows]

    def restore(self, documents: Iterable[StoredDocument]) -> None:
        rows = [Document(doc_id=document.id, collection=self.name, data=document.data) for document in documents]
        with _store_errors(self.name), transaction.atomic():
            self._rows().delete()
            Document.objects.bulk_create(rows)
        logger.info("Restored %d document(s) into %s", len(rows), self.name)
        # bulk_create sends no post_save.
        self.publish()
