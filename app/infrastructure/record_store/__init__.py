"""Record store infrastructure."""

from app.infrastructure.record_store.airtable import AirtableRecordStore
from app.infrastructure.record_store.base import RecordStore

__all__ = [
    "RecordStore",
    "AirtableRecordStore",
]
