"""In-memory repositories for reservations, delivery bookkeeping and audit."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date

from courtguard.domain.models import (
    AuditEntry,
    Reservation,
    ReservationKey,
    ReservationStatus,
)
from courtguard.errors import ReservationNotFoundError

PartitionKey = tuple[str, str, date]

DEFAULT_LEDGER_SIZE = 10_000


class ReservationRepository:
    """Dict-backed reservation store, keyed by (club_id, court_id, id).

    Reads hand out copies, so a caller holds a snapshot rather than a live
    record. Writes are unsynchronized unless the caller enters
    ``partition()`` for the (court, date) it touches.
    """

    def __init__(self) -> None:
        self._store: dict[ReservationKey, Reservation] = {}
        self._locks: dict[PartitionKey, threading.RLock] = {}
        self._lock_holders: dict[PartitionKey, int] = {}
        self._locks_guard = threading.Lock()

    def add(self, reservation: Reservation) -> None:
        self._store[reservation.key] = reservation.model_copy()

    def get(self, key: ReservationKey) -> Reservation | None:
        stored = self._store.get(key)
        return stored.model_copy() if stored is not None else None

    def list_all(self) -> list[Reservation]:
        return [r.model_copy() for r in self._store.values()]

    def query(
        self,
        club_id: str,
        court_id: str,
        *,
        date: date,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        """Return the court's reservations on ``date``, in insertion order."""
        return [
            r.model_copy()
            for r in self._store.values()
            if r.club_id == club_id
            and r.court_id == court_id
            and r.date == date
            and (status is None or r.status == status)
        ]

    def update_fields(self, key: ReservationKey, **fields) -> Reservation:
        """Partially update one record, leaving every other field untouched."""
        stored = self._store.get(key)
        if stored is None:
            raise ReservationNotFoundError(
                f"Reservation {key.reservation_id} not found",
                details=key.model_dump(),
            )
        updated = stored.model_copy(update=fields)
        self._store[key] = updated
        return updated.model_copy()

    def delete(self, key: ReservationKey) -> None:
        self._store.pop(key, None)

    @contextmanager
    def partition(self, club_id: str, court_id: str, day: date) -> Iterator[None]:
        """Hold the lock of one (court, date) partition for the block.

        A partition's lock is dropped once nobody holds or waits on it.
        """
        partition_key = (club_id, court_id, day)
        with self._locks_guard:
            lock = self._locks.setdefault(partition_key, threading.RLock())
            self._lock_holders[partition_key] = self._lock_holders.get(partition_key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                self._lock_holders[partition_key] -= 1
                if self._lock_holders[partition_key] == 0:
                    del self._lock_holders[partition_key]
                    del self._locks[partition_key]


class ProcessedEventRepository:
    """Ledger of handled message ids (at-least-once delivery).

    Keeps the most recent ``max_entries`` ids, evicting the oldest first.
    """

    def __init__(self, max_entries: int = DEFAULT_LEDGER_SIZE) -> None:
        self.max_entries = max_entries
        self._ids: OrderedDict[str, None] = OrderedDict()
        self._guard = threading.Lock()

    def already_processed(self, message_id: str) -> bool:
        return message_id in self._ids

    def mark_processed(self, message_id: str) -> None:
        with self._guard:
            self._ids[message_id] = None
            self._ids.move_to_end(message_id)
            while len(self._ids) > self.max_entries:
                self._ids.popitem(last=False)


class AuditRepository:
    """List-backed store for AuditEntry instances."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def add(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    def list_for_reservation(self, reservation_id: str) -> list[AuditEntry]:
        return sorted(
            [e for e in self._entries if e.reservation_id == reservation_id],
            key=lambda e: e.timestamp,
        )
