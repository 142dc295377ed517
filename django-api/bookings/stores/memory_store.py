"""In-process implementation of DocumentCollection, used in tests and offline."""

import copy
import uuid
from collections.abc import Iterable
from typing import Any

from bookings.stores.interfaces import DocumentCollection, DocumentNotFoundError, StoredDocument, sort_key


class InMemoryCollection(DocumentCollection):
    """Dict-backed collection. Documents are deep-copied on the way in and out."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self._documents: dict[str, dict[str, Any]] = {}

    def create(self, data: dict[str, Any]) -> str:
        doc_id = uuid.uuid4().hex
        self._documents[doc_id] = copy.deepcopy(data)
        self.publish()
        return doc_id

    def update(self, doc_id: str, changes: dict[str, Any]) -> None:
        if doc_id not in self._documents:
            raise DocumentNotFoundError(self.name, doc_id)
        self._documents[doc_id].update(copy.deepcopy(changes))
        self.publish()

    def delete(self, doc_id: str) -> None:
        if self._documents.pop(doc_id, None) is None:
            raise DocumentNotFoundError(self.name, doc_id)
        self.publish()

    def get(self, doc_id: str) -> StoredDocument | None:
        data = self._documents.get(doc_id)
        if data is None:
            return None
        return StoredDocument(id=doc_id, data=copy.deepcopy(data))

    def list(self, order_by: str | None = None, ascending: bool = True) -> list[StoredDocument]:
        documents = [StoredDocument(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in self._documents.items()]
        if order_by:
            documents.sort(key=sort_key(order_by), reverse=not ascending)
        return documents

    def restore(self, documents: Iterable[StoredDocument]) -> None:
        self._documents = {document.id: copy.deepcopy(document.data) for document in documents}
        self.publish()
