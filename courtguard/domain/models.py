"""Domain models for court reservations."""

from __future__ import annotations

import datetime as dt
import uuid
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

from courtguard.errors import MalformedReservationError
from courtguard.services.intervals import MINUTES_PER_DAY, interval_of, to_minutes

REASON_SLOT_TAKEN = "Time slot no longer available"
REASON_VALIDATION_ERROR = "Validation error"


class ReservationStatus(StrEnum):
    ACTIVE = "active"
    INVALID = "invalid"
    CANCELLED = "cancelled"


class AuditEntryType(StrEnum):
    CREATED = "created"
    VALIDATED = "validated"
    INVALIDATED = "invalidated"
    CANCELLED = "cancelled"
    PURGED = "purged"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class ReservationKey(BaseModel, frozen=True):
    club_id: str
    court_id: str
    reservation_id: str


class Reservation(BaseModel):
    """A stored booking of one court on one day.

    The store takes unvalidated writes, so ``start_time`` and
    ``duration_minutes`` may be missing here; ``interval()`` is where
    an unusable shape surfaces.
    """

    id: str = Field(default_factory=_new_id)
    club_id: str
    court_id: str
    date: dt.date
    start_time: str | None = None
    duration_minutes: int | None = None
    status: ReservationStatus = ReservationStatus.ACTIVE
    invalid_reason: str | None = None
    created_at: dt.datetime = Field(default_factory=_utcnow)

    @property
    def key(self) -> ReservationKey:
        return ReservationKey(
            club_id=self.club_id, court_id=self.court_id, reservation_id=self.id
        )

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def interval(self) -> tuple[int, int]:
        if self.start_time is None or self.duration_minutes is None:
            raise MalformedReservationError(
                f"Reservation {self.id} has no start time or duration",
                details={"reservation_id": self.id},
            )
        try:
            return interval_of(self.start_time, self.duration_minutes)
        except ValueError as exc:
            raise MalformedReservationError(
                str(exc), details={"reservation_id": self.id}
            ) from exc


class Verdict(BaseModel):
    """Outcome of resolving one reservation against its siblings."""

    status: ReservationStatus
    reason: str | None = None
    conflicting_id: str | None = None
    # True once the verdict has been written back to the store.
    applied: bool = False

    @property
    def is_invalid(self) -> bool:
        return self.status == ReservationStatus.INVALID


class AuditEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    reservation_id: str
    timestamp: dt.datetime = Field(default_factory=_utcnow)
    type: AuditEntryType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateReservationRequest(BaseModel):
    date: dt.date
    start_time: str
    duration_minutes: int = Field(gt=0)

    @field_validator("start_time")
    @classmethod
    def _valid_time_of_day(cls, value: str) -> str:
        to_minutes(value)
        return value.strip()

    @model_validator(mode="after")
    def _ends_same_day(self) -> CreateReservationRequest:
        _, end = interval_of(self.start_time, self.duration_minutes)
        if end > MINUTES_PER_DAY:
            raise ValueError("reservation must end by midnight")
        return self
