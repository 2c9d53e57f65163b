from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional

from .bytestore import ByteStore
from .codec import decode_events, encode_events
from .errors import ByteStoreError, MalformedRecord, PersistFailure
from .models import Event, comparable_date

log = logging.getLogger(__name__)

STORE_KEY_DEFAULT = "SavedEvents"


def _event_sort_key(e: Event) -> datetime:
    return comparable_date(e.date)


def sort_events(events: Iterable[Event]) -> List[Event]:
    return sorted(events, key=_event_sort_key)


class EventStore:
    """
    Owns the in-memory event collection and mirrors it to one blob in a byte store.

    Every mutator returns a copy of the updated collection. Persisting is
    best-effort: a failed write is logged and remembered in
    ``last_persist_error`` but never raised.
    """

    def __init__(self, byte_store: ByteStore, key: str = STORE_KEY_DEFAULT) -> None:
        self.byte_store = byte_store
        self.key = key
        self._events: List[Event] = []
        self._last_persist_error: Optional[PersistFailure] = None

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    @property
    def last_persist_error(self) -> Optional[PersistFailure]:
        return self._last_persist_error

    def load_all(self) -> List[Event]:
        self._events = []
        try:
            blob = self.byte_store.get(self.key)
        except ByteStoreError as exc:
            log.warning("Could not read saved events; starting empty. Error: %s", exc)
            return self.events
        if blob is None:
            return self.events

        try:
            loaded = decode_events(blob)
        except MalformedRecord as exc:
            log.warning("Saved events are corrupt; starting empty. Error: %s", exc)
            return self.events

        self._events = sort_events(loaded)
        log.debug("Loaded %d events from %r", len(self._events), self.key)
        return self.events

    def add(self, event: Event) -> List[Event]:
        self._events = sort_events([*self._events, event])
        self._persist()
        return self.events

    def update(self, identifier: str, new_event: Event) -> List[Event]:
        for i, existing in enumerate(self._events):
            if existing.id == identifier:
                break
        else:
            log.debug("update: no event with id %s", identifier)
            return self.events

        updated = list(self._events)
        updated[i] = replace(new_event, id=existing.id)
        self._events = sort_events(updated)
        self._persist()
        return self.events

    def delete_by_id(self, identifier: str) -> List[Event]:
        self._events = [e for e in self._events if e.id != identifier]
        self._persist()
        return self.events

    def delete_by_positions(self, positions: Iterable[int]) -> List[Event]:
        doomed = set(positions)
        self._events = [e for i, e in enumerate(self._events) if i not in doomed]
        self._persist()
        return self.events

    def _persist(self) -> None:
        blob = encode_events(self._events)
        try:
            self.byte_store.set(self.key, blob)
        except (PersistFailure, OSError) as exc:
            # byte stores outside this package may raise bare OSError
            failure = exc if isinstance(exc, PersistFailure) else PersistFailure(f"Could not write {self.key!r}: {exc}")
            self._last_persist_error = failure
            log.warning("Failed to save %d events; keeping them in memory. Error: %s", len(self._events), failure)
            return
        self._last_persist_error = None
