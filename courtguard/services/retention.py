"""Service for purging stale reservations on a fixed schedule."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from courtguard.domain.models import Reservation, ReservationStatus
from courtguard.repos.memory import ReservationRepository

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30
DEFAULT_SWEEP_INTERVAL = timedelta(hours=24)


class RetentionPolicy(BaseModel):
    """Which reservations are old enough, and in a state, to be removed.

    Active reservations are kept unless a policy opts in to them.
    """

    retention_days: int = Field(default=DEFAULT_RETENTION_DAYS, gt=0)
    statuses: frozenset[ReservationStatus] = frozenset(
        {ReservationStatus.CANCELLED, ReservationStatus.INVALID}
    )

    def cutoff(self, now: datetime) -> date:
        return (now - timedelta(days=self.retention_days)).date()

    def is_expired(self, reservation: Reservation, now: datetime) -> bool:
        return reservation.status in self.statuses and reservation.date < self.cutoff(now)


def sweep(
    repo: ReservationRepository,
    now: datetime,
    policy: RetentionPolicy | None = None,
) -> list[Reservation]:
    """Delete every reservation the policy considers expired.

    Returns the removed reservations.
    """
    policy = policy or RetentionPolicy()
    expired = [r for r in repo.list_all() if policy.is_expired(r, now)]
    for reservation in expired:
        repo.delete(reservation.key)
    logger.info(
        "Retention sweep removed %d reservation(s) dated before %s",
        len(expired),
        policy.cutoff(now),
    )
    return expired


class SweepSchedule:
    """Fixed-interval trigger for the retention sweep."""

    def __init__(self, interval: timedelta = DEFAULT_SWEEP_INTERVAL) -> None:
        self.interval = interval
        self.last_run: datetime | None = None

    def due(self, now: datetime) -> bool:
        return self.last_run is None or now - self.last_run >= self.interval

    def mark_ran(self, now: datetime) -> None:
        self.last_run = now
