"""Tests for the conflict scanner."""

from datetime import date

import pytest

from courtguard.domain.models import Reservation, ReservationStatus
from courtguard.errors import MalformedReservationError, StoreError
from courtguard.repos.memory import ReservationRepository
from courtguard.services.conflicts import find_conflict, load_siblings, scan

_DAY = date(2024, 6, 1)


def _make_reservation(start_time: str | None, duration: int | None, **overrides) -> Reservation:
    defaults = dict(
        club_id="club-1",
        court_id="R1",
        date=_DAY,
        start_time=start_time,
        duration_minutes=duration,
    )
    defaults.update(overrides)
    return Reservation(**defaults)


def test_no_overlap():
    """Reservations that don't overlap should not be reported."""
    existing = [_make_reservation("08:00", 60)]
    new = _make_reservation("10:00", 60)
    assert find_conflict(new, existing) is None


def test_partial_overlap():
    """A reservation that partially overlaps is reported."""
    existing = [_make_reservation("10:00", 60)]
    new = _make_reservation("10:30", 30)
    assert find_conflict(new, existing) is existing[0]


def test_exact_boundary_no_conflict():
    """When existing end == new start, there is no conflict."""
    existing = [_make_reservation("10:00", 60)]
    new = _make_reservation("11:00", 30)
    assert find_conflict(new, existing) is None


def test_self_is_never_a_conflict():
    new = _make_reservation("10:00", 60)
    assert find_conflict(new, [new.model_copy()]) is None


def test_first_overlapping_sibling_in_store_order_is_reported():
    first = _make_reservation("09:30", 60, id="first")
    second = _make_reservation("10:15", 30, id="second")
    new = _make_reservation("10:00", 60)
    assert find_conflict(new, [_make_reservation("07:00", 30), first, second]).id == "first"


def test_malformed_sibling_raises():
    new = _make_reservation("10:00", 60)
    broken = _make_reservation(None, 60)
    with pytest.raises(MalformedReservationError):
        find_conflict(new, [broken])


def test_load_siblings_filters_court_date_and_status():
    repo = ReservationRepository()
    new = _make_reservation("10:00", 60)
    active = _make_reservation("12:00", 60)
    repo.add(new)
    repo.add(active)
    repo.add(_make_reservation("10:00", 60, status=ReservationStatus.CANCELLED))
    repo.add(_make_reservation("10:00", 60, court_id="R2"))
    repo.add(_make_reservation("10:00", 60, date=date(2024, 6, 2)))

    siblings = load_siblings(repo, new)

    assert sorted(s.id for s in siblings) == sorted([new.id, active.id])


def test_cancelled_overlap_is_ignored_by_scan():
    repo = ReservationRepository()
    repo.add(_make_reservation("10:00", 60, status=ReservationStatus.CANCELLED))
    new = _make_reservation("10:00", 60)
    repo.add(new)
    assert scan(repo, new) is None


class _BrokenRepository(ReservationRepository):
    def query(self, *args, **kwargs):
        raise StoreError("store unavailable")


def test_scan_surfaces_query_failures():
    repo = _BrokenRepository()
    with pytest.raises(StoreError):
        scan(repo, _make_reservation("10:00", 60))
