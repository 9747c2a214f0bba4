"""Firestore-backed shift store using the Firebase Admin SDK."""

import logging
from typing import Any, Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from shiftboard.domain.models import ShiftCollection, ShiftRecord, month_bounds
from shiftboard.store.base import ShiftStore

logger = logging.getLogger(__name__)


def create_firestore_client(credentials_info: dict[str, Any]):
    """Initialise the default Firebase app once and return a Firestore client.

    Args:
        credentials_info: Service-account info, e.g. from
            ``Settings.firebase_credentials()``.
    """
    try:
        import firebase_admin
        from firebase_admin import credentials, firestore
    except ImportError:
        raise ImportError(
            "firebase-admin is required for the Firestore store. "
            "Install with: pip install firebase-admin"
        )

    if not firebase_admin._apps:
        firebase_admin.initialize_app(credentials.Certificate(credentials_info))
        logger.info("Initialised Firebase app for project %s", credentials_info.get("project_id"))
    return firestore.client()


class FirestoreShiftStore(ShiftStore):
    """Shift store over Firestore collections.

    Example:
        >>> client = create_firestore_client(settings.firebase_credentials())
        >>> store = FirestoreShiftStore(client)
        >>> store.query_month(ShiftCollection.FINAL, 2025, 5)
    """

    def __init__(self, client):
        self.client = client

    def _collection(self, collection: ShiftCollection):
        return self.client.collection(collection.value)

    def add(self, collection: ShiftCollection, record: ShiftRecord) -> str:
        _, ref = self._collection(collection).add(record.to_dict())
        logger.debug("Added %s/%s", collection.value, ref.id)
        return ref.id

    def get(self, collection: ShiftCollection, record_id: str) -> Optional[ShiftRecord]:
        snapshot = self._collection(collection).document(record_id).get()
        if not snapshot.exists:
            return None
        return ShiftRecord.from_dict(snapshot.to_dict() or {}, doc_id=snapshot.id)

    def list_records(self, collection: ShiftCollection) -> list[ShiftRecord]:
        return [
            ShiftRecord.from_dict(doc.to_dict() or {}, doc_id=doc.id)
            for doc in self._collection(collection).stream()
        ]

    def delete(self, collection: ShiftCollection, record_id: str) -> bool:
        ref = self._collection(collection).document(record_id)
        if not ref.get().exists:
            return False
        ref.delete()
        logger.debug("Deleted %s/%s", collection.value, record_id)
        return True

    def query_month(self, collection: ShiftCollection, year: int, month: int) -> list[ShiftRecord]:
        low, high = month_bounds(year, month)
        docs = self._collection(collection)\
            .where(filter=FieldFilter("date", ">=", low))\
            .where(filter=FieldFilter("date", "<=", high))\
            .stream()
        records = [ShiftRecord.from_dict(doc.to_dict() or {}, doc_id=doc.id) for doc in docs]
        logger.info("Fetched %d %s records for %s..%s", len(records), collection.value, low, high)
        return records
