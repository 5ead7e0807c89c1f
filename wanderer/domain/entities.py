"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Connection``: enforces valid lifecycle transitions
  (PENDING -> ACCEPTED | DECLINED | CANCELLED) and who may trigger them.
- Same pattern on ``Booking`` (PENDING -> CONFIRMED -> CANCELLED).
- ``Location`` is an immutable value object shared by the ranker and the
  jitter generator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

from .enums import (
    BOOKING_ACTORS,
    BOOKING_TRANSITIONS,
    CONNECTION_TRANSITIONS,
    REJECTED_ALIAS,
    TRANSITION_ACTORS,
    BookingStatus,
    ConnectionStatus,
    UserRole,
)
from .errors import ForbiddenError, InvalidTransitionError, ValidationError


# ── Value Object ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float

    @classmethod
    def maybe(
        cls, latitude: Optional[float], longitude: Optional[float]
    ) -> Optional["Location"]:
        """Build a location, or ``None`` if either coordinate is missing/NaN."""
        if latitude is None or longitude is None:
            return None
        if math.isnan(latitude) or math.isnan(longitude):
            return None
        return cls(latitude, longitude)


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Connection:
    id: Optional[int] = None
    from_user_id: int = 0
    to_user_id: int = 0
    status: ConnectionStatus = ConnectionStatus.PENDING
    message: Optional[str] = None
    trip_details: Optional[str] = None
    budget: Optional[float] = None
    resolved_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.from_user_id, self.to_user_id)

    def role_of(self, user_id: int) -> Optional[UserRole]:
        if user_id == self.to_user_id:
            return UserRole.GUIDE
        if user_id == self.from_user_id:
            return UserRole.TOURIST
        return None

    def resolve_status(self, requested: str, acting_user_id: int) -> ConnectionStatus:
        """
        Turn a requested status string into a concrete target status.

        ``"rejected"`` is kept as an input alias: coming from the guide it
        means *declined*, coming from the tourist it means *cancelled*.
        """
        if requested == REJECTED_ALIAS:
            role = self.role_of(acting_user_id)
            if role is None:
                raise ForbiddenError("Action not permitted")
            return (
                ConnectionStatus.DECLINED
                if role is UserRole.GUIDE
                else ConnectionStatus.CANCELLED
            )
        try:
            return ConnectionStatus(requested)
        except ValueError:
            raise ValidationError(f"Unknown connection status: {requested!r}") from None

    def check_transition(self, new_status: ConnectionStatus, acting_user_id: int) -> None:
        """
        Raise unless *acting_user_id* may move this connection to *new_status*.

        Order matters: outsiders always get ``ForbiddenError`` (nothing about
        the connection leaks), participants hitting a resolved connection get
        ``InvalidTransitionError``, and a participant on the wrong side of a
        pending one gets ``ForbiddenError``.
        """
        role = self.role_of(acting_user_id)
        if role is None:
            raise ForbiddenError("Action not permitted")

        allowed = CONNECTION_TRANSITIONS.get(self.status, set())
        if not allowed:
            raise InvalidTransitionError(
                f"Connection is already {self.status.value}"
            )

        required = TRANSITION_ACTORS.get(new_status)
        if required is None or new_status not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        if role is not required:
            raise ForbiddenError("Action not permitted")

    def transition_to(
        self,
        new_status: ConnectionStatus,
        acting_user_id: int,
        now: Optional[datetime] = None,
    ) -> None:
        """Move to *new_status* if the actor and the transition are legal, else raise."""
        self.check_transition(new_status, acting_user_id)
        self.status = new_status
        self.resolved_by = acting_user_id
        self.updated_at = now or datetime.now(timezone.utc)


@dataclass
class Booking:
    id: Optional[int] = None
    tourist_id: int = 0
    guide_id: int = 0
    place_id: Optional[int] = None
    tour_date: Optional[date] = None
    status: BookingStatus = BookingStatus.PENDING
    notes: Optional[str] = None
    resolved_by: Optional[int] = None
    updated_at: Optional[datetime] = None

    def role_of(self, user_id: int) -> Optional[UserRole]:
        if user_id == self.guide_id:
            return UserRole.GUIDE
        if user_id == self.tourist_id:
            return UserRole.TOURIST
        return None

    def check_transition(self, new_status: BookingStatus, acting_user_id: int) -> None:
        """Same check order as ``Connection.check_transition``."""
        role = self.role_of(acting_user_id)
        if role is None:
            raise ForbiddenError("Action not permitted")
        if new_status not in BOOKING_TRANSITIONS.get(self.status, set()):
            raise InvalidTransitionError(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        if role not in BOOKING_ACTORS.get(new_status, frozenset()):
            raise ForbiddenError("Action not permitted")

    def transition_to(
        self,
        new_status: BookingStatus,
        acting_user_id: int,
        now: Optional[datetime] = None,
    ) -> None:
        self.check_transition(new_status, acting_user_id)
        self.status = new_status
        self.resolved_by = acting_user_id
        self.updated_at = now or datetime.now(timezone.utc)


def check_trip_dates(start: date, end: date) -> None:
    if end < start:
        raise ValidationError("end_date cannot be before start_date")
