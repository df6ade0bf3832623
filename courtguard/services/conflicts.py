"""Service for detecting overlaps between a new reservation and its siblings."""

from __future__ import annotations

from collections.abc import Iterable

from courtguard.domain.models import Reservation, ReservationStatus
from courtguard.repos.memory import ReservationRepository
from courtguard.services.intervals import overlaps


def find_conflict(
    reservation: Reservation,
    siblings: Iterable[Reservation],
) -> Reservation | None:
    """Return the first sibling whose interval overlaps the reservation's.

    Overlap rule: conflict if new_start < sibling_end AND sibling_start < new_end.
    The reservation itself is skipped by id if the store returned it.
    Raises ``MalformedReservationError`` when either side has no usable interval.
    """
    start, end = reservation.interval()
    for sibling in siblings:
        if sibling.id == reservation.id:
            continue
        sibling_start, sibling_end = sibling.interval()
        if overlaps(start, end, sibling_start, sibling_end):
            return sibling
    return None


def load_siblings(
    repo: ReservationRepository, reservation: Reservation
) -> list[Reservation]:
    """Fetch the active reservations sharing the court and date.

    Store failures propagate; this never reports an empty set in their place.
    """
    return repo.query(
        reservation.club_id,
        reservation.court_id,
        date=reservation.date,
        status=ReservationStatus.ACTIVE,
    )


def scan(repo: ReservationRepository, reservation: Reservation) -> Reservation | None:
    return find_conflict(reservation, load_siblings(repo, reservation))
