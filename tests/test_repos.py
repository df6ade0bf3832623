"""Tests for the in-memory repositories."""

from __future__ import annotations

import threading
from datetime import date

from courtguard.repos.memory import ProcessedEventRepository, ReservationRepository

_DAY = date(2024, 6, 1)


def test_partition_lock_is_dropped_after_use():
    repo = ReservationRepository()

    with repo.partition("club-1", "R1", _DAY):
        with repo.partition("club-1", "R1", _DAY):
            assert len(repo._locks) == 1
        assert len(repo._locks) == 1

    assert repo._locks == {}
    assert repo._lock_holders == {}


def test_partition_lock_survives_while_another_thread_waits():
    repo = ReservationRepository()
    entered = threading.Event()
    release = threading.Event()
    order: list[str] = []

    def _hold():
        with repo.partition("club-1", "R1", _DAY):
            entered.set()
            release.wait(timeout=5)
            order.append("first")

    def _wait():
        with repo.partition("club-1", "R1", _DAY):
            order.append("second")

    holder = threading.Thread(target=_hold)
    holder.start()
    entered.wait(timeout=5)
    waiter = threading.Thread(target=_wait)
    waiter.start()
    release.set()
    holder.join(timeout=5)
    waiter.join(timeout=5)

    assert order == ["first", "second"]
    assert repo._locks == {}


def test_partitions_are_independent():
    repo = ReservationRepository()
    with repo.partition("club-1", "R1", _DAY):
        with repo.partition("club-1", "R2", _DAY):
            assert len(repo._locks) == 2
    assert repo._locks == {}


def test_ledger_evicts_oldest_ids():
    ledger = ProcessedEventRepository(max_entries=2)
    ledger.mark_processed("a")
    ledger.mark_processed("b")
    ledger.mark_processed("c")

    assert ledger.already_processed("a") is False
    assert ledger.already_processed("b") is True
    assert ledger.already_processed("c") is True


def test_ledger_refreshes_repeated_ids():
    ledger = ProcessedEventRepository(max_entries=2)
    ledger.mark_processed("a")
    ledger.mark_processed("b")
    ledger.mark_processed("a")
    ledger.mark_processed("c")

    assert ledger.already_processed("a") is True
    assert ledger.already_processed("b") is False
