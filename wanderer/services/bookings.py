"""
Guide bookings
==============

A booking is a dated tour a tourist asks a guide for, optionally at a
catalogued place.  The guide confirms it; either side may cancel it, also
after confirmation.  Status changes use the same conditional UPDATE as
connections, so a confirm racing a cancel has a single winner.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.domain.entities import Booking
from wanderer.domain.enums import BookingStatus, UserRole
from wanderer.domain.errors import (
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from wanderer.infrastructure.models import BookingModel
from wanderer.infrastructure.repositories import (
    BookingRepository,
    PlaceRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


def to_entity(model: BookingModel) -> Booking:
    return Booking(
        id=model.id,
        tourist_id=model.tourist_id,
        guide_id=model.guide_id,
        place_id=model.place_id,
        tour_date=model.tour_date,
        status=BookingStatus(model.status),
        notes=model.notes,
        resolved_by=model.resolved_by,
        updated_at=model.updated_at,
    )


class BookingService:
    def __init__(self, session: AsyncSession):
        self.bookings = BookingRepository(session)
        self.users = UserRepository(session)
        self.places = PlaceRepository(session)

    async def create(
        self,
        tourist_id: int,
        guide_id: int,
        tour_date: date,
        place_id: Optional[int] = None,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> BookingModel:
        today = today or datetime.now(timezone.utc).date()
        if tour_date < today:
            raise ValidationError("Tours cannot be booked in the past")

        tourist = await self.users.get_by_id(tourist_id)
        if tourist is None or tourist.role != UserRole.TOURIST:
            raise ValidationError("Only tourists can book a guide")
        guide = await self.users.get_by_id(guide_id)
        if guide is None or guide.role != UserRole.GUIDE:
            raise ValidationError(f"Unknown guide: {guide_id}")
        if place_id is not None and await self.places.get_by_id(place_id) is None:
            raise ValidationError(f"Unknown place: {place_id}")

        created = await self.bookings.create_booking(
            tourist_id=tourist_id,
            guide_id=guide_id,
            tour_date=tour_date,
            place_id=place_id,
            notes=notes,
        )
        logger.info(
            "Booking %d created: tourist %d -> guide %d on %s",
            created.id, tourist_id, guide_id, tour_date.isoformat(),
        )
        return await self.bookings.get_by_id(created.id)

    async def find_by_participant(self, user_id: int) -> list[BookingModel]:
        return await self.bookings.get_for_participant(user_id)

    async def set_status(
        self, booking_id: int, new_status: BookingStatus, acting_user_id: int
    ) -> BookingModel:
        model = await self.bookings.get_by_id(booking_id)
        if model is None:
            raise NotFoundError("Booking not found")

        booking = to_entity(model)
        booking.check_transition(new_status, acting_user_id)

        won = await self.bookings.compare_and_set_status(
            booking_id,
            expected=booking.status,
            new_status=new_status,
            resolved_by=acting_user_id,
        )
        if not won:
            logger.warning(
                "Booking %d: %s by user %d lost to a concurrent update",
                booking_id, new_status.value, acting_user_id,
            )
            raise InvalidTransitionError("Booking was changed concurrently")

        logger.info("Booking %d %s by user %d", booking_id, new_status.value, acting_user_id)
        return await self.bookings.get_by_id(booking_id)
