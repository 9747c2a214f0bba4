"""Shift record stores."""

from shiftboard.store.base import InMemoryShiftStore, ShiftStore
from shiftboard.store.firestore_store import FirestoreShiftStore, create_firestore_client

__all__ = [
    "FirestoreShiftStore",
    "InMemoryShiftStore",
    "ShiftStore",
    "create_firestore_client",
]
