"""Domain events emitted during the reservation lifecycle."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from courtguard.domain.models import Reservation


class ReservationCreated(BaseModel):
    """Fired once per reservation document written to the store.

    Delivery is at-least-once; ``message_id`` identifies redeliveries.
    ``reservation`` is the record as written, used when the store cannot
    return it yet.
    """

    club_id: str
    court_id: str
    reservation_id: str
    reservation: Reservation | None = None
    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))


class ReservationInvalidated(BaseModel):
    """Fired after a reservation has been marked invalid."""

    club_id: str
    court_id: str
    reservation_id: str
    reason: str
    conflicting_id: str | None = None


class RetentionSweepDue(BaseModel):
    """Fired by the fixed-interval schedule (via /tick)."""

    now: datetime
