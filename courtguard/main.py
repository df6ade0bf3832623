"""FastAPI application — entry point for the court booking validation service."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

from fastapi import FastAPI, HTTPException

from courtguard.config import configure_logging, get_settings
from courtguard.domain.bus import EventBus
from courtguard.domain.events import ReservationCreated, RetentionSweepDue
from courtguard.domain.handlers import HandlerRegistry
from courtguard.domain.models import (
    AuditEntry,
    AuditEntryType,
    CreateReservationRequest,
    Reservation,
    ReservationKey,
    ReservationStatus,
)
from courtguard.repos.memory import (
    AuditRepository,
    ProcessedEventRepository,
    ReservationRepository,
)
from courtguard.services.retention import RetentionPolicy, SweepSchedule

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Court Booking Validation Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
reservation_repo = ReservationRepository()
audit_repo = AuditRepository()
processed_repo = ProcessedEventRepository()
sweep_schedule = SweepSchedule(timedelta(hours=settings.sweep_interval_hours))

handler_registry = HandlerRegistry(
    bus=event_bus,
    reservation_repo=reservation_repo,
    audit_repo=audit_repo,
    processed_repo=processed_repo,
    retention_policy=RetentionPolicy(retention_days=settings.retention_days),
    serialize_partitions=settings.serialize_partitions,
)


def _get_or_404(club_id: str, court_id: str, booking_id: str) -> Reservation:
    key = ReservationKey(club_id=club_id, court_id=court_id, reservation_id=booking_id)
    reservation = reservation_repo.get(key)
    if reservation is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return reservation


# ── Routes ────────────────────────────────────────────────────────────


@app.post("/clubs/{club_id}/courts/{court_id}/bookings", response_model=Reservation)
def create_booking(
    club_id: str, court_id: str, body: CreateReservationRequest
) -> Reservation:
    """Store a new active booking and run validation on it.

    The booking is accepted as long as it is well-formed; the returned
    status tells whether it kept its slot.
    """
    reservation = Reservation(
        club_id=club_id,
        court_id=court_id,
        date=body.date,
        start_time=body.start_time,
        duration_minutes=body.duration_minutes,
    )
    reservation_repo.add(reservation)
    audit_repo.add(
        AuditEntry(reservation_id=reservation.id, type=AuditEntryType.CREATED)
    )

    # Publish to the event bus; runs overlap validation.
    event_bus.publish(
        ReservationCreated(
            club_id=club_id,
            court_id=court_id,
            reservation_id=reservation.id,
            reservation=reservation,
        )
    )

    return _get_or_404(club_id, court_id, reservation.id)


@app.get("/clubs/{club_id}/courts/{court_id}/bookings", response_model=list[Reservation])
def list_bookings(
    club_id: str,
    court_id: str,
    date: date,
    status: ReservationStatus | None = None,
) -> list[Reservation]:
    """Return the court's bookings for a day, optionally filtered by status."""
    return reservation_repo.query(club_id, court_id, date=date, status=status)


@app.get(
    "/clubs/{club_id}/courts/{court_id}/bookings/{booking_id}",
    response_model=Reservation,
)
def get_booking(club_id: str, court_id: str, booking_id: str) -> Reservation:
    return _get_or_404(club_id, court_id, booking_id)


@app.post(
    "/clubs/{club_id}/courts/{court_id}/bookings/{booking_id}/cancel",
    response_model=Reservation,
)
def cancel_booking(club_id: str, court_id: str, booking_id: str) -> Reservation:
    """Cancel an active booking."""
    reservation = _get_or_404(club_id, court_id, booking_id)
    if not reservation.is_active:
        raise HTTPException(
            status_code=409,
            detail=f"Booking is already {reservation.status}",
        )
    updated = reservation_repo.update_fields(
        reservation.key, status=ReservationStatus.CANCELLED
    )
    audit_repo.add(AuditEntry(reservation_id=booking_id, type=AuditEntryType.CANCELLED))
    return updated


@app.get("/bookings/{booking_id}/audit", response_model=list[AuditEntry])
def get_booking_audit(booking_id: str) -> list[AuditEntry]:
    """Return the audit trail of a booking, oldest first."""
    return audit_repo.list_for_reservation(booking_id)


@app.post("/tick")
def tick(now: datetime | None = None) -> dict:
    """Advance simulated time and run the retention sweep when it is due.

    Pass *now* as a query param to control the simulated clock; a value
    without an offset is read as UTC. Defaults to ``datetime.now(timezone.utc)``
    when omitted.
    """
    current_time = now or datetime.now(timezone.utc)
    if current_time.tzinfo is None:
        current_time = current_time.replace(tzinfo=timezone.utc)
    swept = False
    if sweep_schedule.due(current_time):
        event_bus.publish(RetentionSweepDue(now=current_time))
        sweep_schedule.mark_ran(current_time)
        swept = True
    else:
        logger.debug("Retention sweep not due at %s", current_time.isoformat())

    return {"time": current_time.isoformat(), "retention_sweep_ran": swept}


@app.get("/health")
def health() -> dict:
    return {"ok": True}
