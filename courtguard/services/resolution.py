"""First-valid-wins resolution of a reservation against a detected conflict."""

from __future__ import annotations

from courtguard.domain.models import (
    REASON_SLOT_TAKEN,
    REASON_VALIDATION_ERROR,
    Reservation,
    ReservationStatus,
    Verdict,
)


def resolve(reservation: Reservation, conflict: Reservation | None) -> Verdict:
    """Decide whether ``reservation`` keeps its slot.

    A reservation that is no longer active keeps its current status and
    reason; resolution only ever moves ``active`` to ``invalid``.
    """
    if not reservation.is_active:
        return Verdict(status=reservation.status, reason=reservation.invalid_reason)
    if conflict is not None:
        return Verdict(
            status=ReservationStatus.INVALID,
            reason=REASON_SLOT_TAKEN,
            conflicting_id=conflict.id,
        )
    return Verdict(status=ReservationStatus.ACTIVE)


def fail_closed_verdict() -> Verdict:
    return Verdict(status=ReservationStatus.INVALID, reason=REASON_VALIDATION_ERROR)
