"""Tests for the resolution engine."""

from datetime import date

from courtguard.domain.models import (
    REASON_SLOT_TAKEN,
    REASON_VALIDATION_ERROR,
    Reservation,
    ReservationStatus,
)
from courtguard.services.resolution import fail_closed_verdict, resolve


def _make_reservation(**overrides) -> Reservation:
    defaults = dict(
        club_id="club-1",
        court_id="R1",
        date=date(2024, 6, 1),
        start_time="10:00",
        duration_minutes=60,
    )
    defaults.update(overrides)
    return Reservation(**defaults)


def test_conflict_invalidates_with_reason():
    existing = _make_reservation()
    verdict = resolve(_make_reservation(start_time="10:30", duration_minutes=30), existing)

    assert verdict.status == ReservationStatus.INVALID
    assert verdict.reason == REASON_SLOT_TAKEN
    assert verdict.conflicting_id == existing.id
    assert verdict.applied is False


def test_no_conflict_stays_active():
    verdict = resolve(_make_reservation(), None)
    assert verdict.status == ReservationStatus.ACTIVE
    assert verdict.reason is None


def test_already_invalid_keeps_original_reason():
    """Resolving an invalid reservation again is a no-op."""
    reservation = _make_reservation(
        status=ReservationStatus.INVALID, invalid_reason=REASON_VALIDATION_ERROR
    )
    verdict = resolve(reservation, _make_reservation())
    assert verdict.status == ReservationStatus.INVALID
    assert verdict.reason == REASON_VALIDATION_ERROR
    assert verdict.conflicting_id is None


def test_cancelled_is_never_reactivated():
    reservation = _make_reservation(status=ReservationStatus.CANCELLED)
    assert resolve(reservation, None).status == ReservationStatus.CANCELLED


def test_fail_closed_verdict():
    verdict = fail_closed_verdict()
    assert verdict.is_invalid
    assert verdict.reason == "Validation error"
