"""Validation of a freshly created reservation against its court and day.

Runs once per ``ReservationCreated`` delivery. The reservation only ever
invalidates itself; siblings it collides with are left untouched. Any
failure on the way fails closed: the reservation is marked invalid with
``"Validation error"`` rather than left looking active.
"""

from __future__ import annotations

import logging
from contextlib import nullcontext

from courtguard.domain.events import ReservationCreated
from courtguard.domain.models import Reservation, ReservationKey, Verdict
from courtguard.repos.memory import ProcessedEventRepository, ReservationRepository
from courtguard.services.conflicts import scan
from courtguard.services.resolution import fail_closed_verdict, resolve

logger = logging.getLogger(__name__)


def validate_booking(
    event: ReservationCreated,
    repo: ReservationRepository,
    *,
    serialize: bool = True,
    processed: ProcessedEventRepository | None = None,
) -> Verdict | None:
    """Resolve the created reservation and write its verdict back.

    Returns the verdict, or ``None`` when the delivery was a duplicate or
    there was no record to validate. A delivery with no record is left
    unprocessed so a redelivery can validate it once the store catches up.
    """
    if processed is not None and processed.already_processed(event.message_id):
        logger.info("Skipping duplicate delivery %s", event.message_id)
        return None

    key = ReservationKey(
        club_id=event.club_id,
        court_id=event.court_id,
        reservation_id=event.reservation_id,
    )
    try:
        verdict = _validate(repo, key, event.reservation, serialize=serialize)
    except Exception:
        logger.exception("Error validating reservation %s", key.reservation_id)
        verdict = _commit(repo, key, fail_closed_verdict())

    if processed is not None and verdict is not None:
        processed.mark_processed(event.message_id)
    return verdict


def _validate(
    repo: ReservationRepository,
    key: ReservationKey,
    snapshot: Reservation | None,
    *,
    serialize: bool,
) -> Verdict | None:
    reservation = repo.get(key)
    if reservation is None:
        if snapshot is None:
            logger.warning("Reservation %s not found, nothing to validate", key.reservation_id)
            return None
        logger.info("Reservation %s not readable yet, using event snapshot", key.reservation_id)
        reservation = snapshot

    guard = (
        repo.partition(key.club_id, key.court_id, reservation.date)
        if serialize
        else nullcontext()
    )
    with guard:
        if serialize:
            # Re-read under the lock; a concurrent writer may have moved it.
            reservation = repo.get(key) or reservation
        if not reservation.is_active:
            logger.info(
                "Reservation %s already %s, leaving it unchanged",
                key.reservation_id,
                reservation.status,
            )
            return resolve(reservation, None)

        conflict = scan(repo, reservation)
        verdict = resolve(reservation, conflict)
        if not verdict.is_invalid:
            logger.info("Reservation %s validated", key.reservation_id)
            return verdict

        logger.info(
            "Overlap detected: %s with %s", key.reservation_id, verdict.conflicting_id
        )
        return _commit(repo, key, verdict)


def _commit(repo: ReservationRepository, key: ReservationKey, verdict: Verdict) -> Verdict:
    """Write the verdict's status and reason to this reservation only. No retry."""
    try:
        repo.update_fields(key, status=verdict.status, invalid_reason=verdict.reason)
    except Exception as exc:
        logger.error(
            "Failed to record %s for reservation %s: %s",
            verdict.status,
            key.reservation_id,
            exc,
        )
        return verdict
    return verdict.model_copy(update={"applied": True})
