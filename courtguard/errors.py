"""Domain exceptions raised by the reservation store and the validation path."""

from __future__ import annotations

from typing import Any


class CourtguardError(Exception):
    """Base exception for all courtguard errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class StoreError(CourtguardError):
    """Raised when the reservation store cannot serve a query or a write."""


class ReservationNotFoundError(CourtguardError):
    """Raised when a reservation key does not resolve to a stored record."""


class MalformedReservationError(CourtguardError):
    """Raised when a stored reservation lacks a usable start time or duration."""
