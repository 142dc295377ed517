"""Backup export/import of both collections, and the event list CSV export."""

import csv
import datetime as dt
import io
import json
import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from bookings.domain.errors import InvalidImportError, ValidationFailedError
from bookings.domain.models import Event
from bookings.services.calendar_service import status_label
from bookings.stores.interfaces import DocumentCollection, StoredDocument

logger = logging.getLogger(__name__)

CSV_COLUMNS = ("ID", "Titel", "Datum", "Zeit", "Raum", "Kunde", "Status", "Beschreibung")


@dataclass(frozen=True)
class Snapshot:
    """Parsed backup file."""

    events: tuple[StoredDocument, ...]
    customers: tuple[StoredDocument, ...]
    export_date: str = ""


def _documents(collection: DocumentCollection, order_by: str) -> list[dict[str, Any]]:
    return [{**document.data, "id": document.id} for document in collection.list(order_by)]


def export_snapshot(
    events: DocumentCollection,
    customers: DocumentCollection,
    now: dt.datetime | None = None,
) -> dict[str, Any]:
    """Return the backup document ``{events, customers, exportDate}``."""
    now = now or dt.datetime.now(dt.timezone.utc)
    return {
        "events": _documents(events, "date"),
        "customers": _documents(customers, "name"),
        "exportDate": now.isoformat(),
    }


def backup_filename(now: dt.datetime | None = None) -> str:
    now = now or dt.datetime.now(dt.timezone.utc)
    return f"venue-backup-{now.date().isoformat()}.json"


def _stored(entries: list[Any]) -> tuple[StoredDocument, ...]:
    documents: list[StoredDocument] = []
    seen: set[str] = set()
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise InvalidImportError("Backup entries must be objects")
        data = dict(entry)
        doc_id = str(data.pop("id", "") or uuid.uuid4().hex)
        if doc_id in seen:
            raise InvalidImportError(f"Duplicate id in backup: {doc_id}")
        seen.add(doc_id)
        documents.append(StoredDocument(id=doc_id, data=data))
    return tuple(documents)


def parse_snapshot(raw: str | bytes | Mapping[str, Any]) -> Snapshot:
    """Parse a backup file.

    Raises:
        InvalidImportError: If the JSON is malformed, the ``events`` or
            ``customers`` array is missing, or an id repeats within one array.
    """
    if isinstance(raw, Mapping):
        payload = raw
    else:
        try:
            payload = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            raise InvalidImportError("Backup file is not valid JSON") from None
    if not isinstance(payload, Mapping):
        raise InvalidImportError()
    events, customers = payload.get("events"), payload.get("customers")
    if not isinstance(events, list) or not isinstance(customers, list):
        raise InvalidImportError()
    return Snapshot(
        events=_stored(events),
        customers=_stored(customers),
        export_date=str(payload.get("exportDate", "")),
    )


def import_snapshot(
    snapshot: Snapshot,
    events: DocumentCollection,
    customers: DocumentCollection,
    confirmed: bool = False,
) -> None:
    """Replace both collections wholesale with the backup contents. No merging."""
    if not confirmed:
        raise ValidationFailedError("confirmed", "Import replaces all data and must be confirmed")
    events.restore(snapshot.events)
    customers.restore(snapshot.customers)
    logger.info(
        "Imported backup from %s: %d event(s), %d customer(s)",
        snapshot.export_date or "unknown date",
        len(snapshot.events),
        len(snapshot.customers),
    )


def events_csv(events: Iterable[Event]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_COLUMNS)
    for event in events:
        writer.writerow(
            [
                event.id,
                event.title,
                event.date.isoformat() if event.date else "",
                event.time,
                event.room,
                event.customer,
                status_label(event.status),
                event.description,
            ]
        )
    return output.getvalue()
