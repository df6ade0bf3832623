"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

from courtguard.domain.bus import EventBus
from courtguard.domain.events import (
    ReservationCreated,
    ReservationInvalidated,
    RetentionSweepDue,
)
from courtguard.domain.models import AuditEntry, AuditEntryType, ReservationStatus
from courtguard.repos.memory import (
    AuditRepository,
    ProcessedEventRepository,
    ReservationRepository,
)
from courtguard.services.retention import RetentionPolicy, sweep
from courtguard.services.validation import validate_booking


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to all repositories."""

    def __init__(
        self,
        bus: EventBus,
        reservation_repo: ReservationRepository,
        audit_repo: AuditRepository,
        processed_repo: ProcessedEventRepository,
        retention_policy: RetentionPolicy | None = None,
        serialize_partitions: bool = True,
    ) -> None:
        self.bus = bus
        self.reservation_repo = reservation_repo
        self.audit_repo = audit_repo
        self.processed_repo = processed_repo
        self.retention_policy = retention_policy or RetentionPolicy()
        self.serialize_partitions = serialize_partitions
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(ReservationCreated, self.on_reservation_created)
        self.bus.subscribe(ReservationInvalidated, self.on_reservation_invalidated)
        self.bus.subscribe(RetentionSweepDue, self.on_retention_sweep_due)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_reservation_created(self, event: ReservationCreated) -> None:
        verdict = validate_booking(
            event,
            self.reservation_repo,
            serialize=self.serialize_partitions,
            processed=self.processed_repo,
        )
        if verdict is None:
            return

        if verdict.is_invalid and verdict.applied:
            self.bus.publish(
                ReservationInvalidated(
                    club_id=event.club_id,
                    court_id=event.court_id,
                    reservation_id=event.reservation_id,
                    reason=verdict.reason or "",
                    conflicting_id=verdict.conflicting_id,
                )
            )
        elif verdict.status == ReservationStatus.ACTIVE:
            self.audit_repo.add(
                AuditEntry(
                    reservation_id=event.reservation_id,
                    type=AuditEntryType.VALIDATED,
                )
            )

    def on_reservation_invalidated(self, event: ReservationInvalidated) -> None:
        self.audit_repo.add(
            AuditEntry(
                reservation_id=event.reservation_id,
                type=AuditEntryType.INVALIDATED,
                payload={"reason": event.reason, "conflicting_id": event.conflicting_id},
            )
        )

    def on_retention_sweep_due(self, event: RetentionSweepDue) -> None:
        removed = sweep(self.reservation_repo, event.now, self.retention_policy)
        for reservation in removed:
            self.audit_repo.add(
                AuditEntry(
                    reservation_id=reservation.id,
                    type=AuditEntryType.PURGED,
                    payload={"status": reservation.status, "date": reservation.date.isoformat()},
                )
            )
