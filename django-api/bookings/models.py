"""Django ORM models (persistence layer).

Every collection of the document store lives in one table; a row is one
schemaless JSON document. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


def new_document_id() -> str:
    return uuid.uuid4().hex


class Document(models.Model):
    """Persistence model for a stored document.

    ``doc_id`` is unique within its collection only.
    """

    collection = models.CharField(max_length=64)
    doc_id = models.CharField(max_length=64, default=new_document_id)
    data = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["collection", "created_at"]
        constraints = [
            models.UniqueConstraint(fields=["collection", "doc_id"], name="document_collection_doc_id_uniq"),
        ]
        indexes = [
            models.Index(fields=["collection", "created_at"], name="document_collection_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.collection}/{self.doc_id}"
