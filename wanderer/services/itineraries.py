"""Trip planning: a tourist's itineraries and their ordered stops."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.domain.entities import check_trip_dates
from wanderer.domain.errors import DuplicateError, NotFoundError, ValidationError
from wanderer.infrastructure.models import ItineraryModel
from wanderer.infrastructure.repositories import ItineraryRepository, PlaceRepository

logger = logging.getLogger(__name__)


class ItineraryService:
    def __init__(self, session: AsyncSession):
        self.itineraries = ItineraryRepository(session)
        self.places = PlaceRepository(session)

    async def create(
        self,
        owner_id: int,
        title: str,
        start_date: date,
        end_date: date,
        description: str = "",
    ) -> ItineraryModel:
        check_trip_dates(start_date, end_date)
        created = await self.itineraries.create_itinerary(
            user_id=owner_id,
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
        )
        logger.info("Itinerary %d created for user %d", created.id, owner_id)
        return await self.itineraries.get_by_id(created.id)

    async def for_owner(self, owner_id: int) -> list[ItineraryModel]:
        return await self.itineraries.get_for_user(owner_id)

    async def get(self, itinerary_id: int, acting_user_id: int) -> ItineraryModel:
        """An itinerary is only visible to the tourist who planned it."""
        itinerary = await self.itineraries.get_by_id(itinerary_id)
        if itinerary is None or itinerary.user_id != acting_user_id:
            raise NotFoundError("Itinerary not found")
        return itinerary

    async def add_place(
        self,
        itinerary_id: int,
        acting_user_id: int,
        place_id: int,
        position: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> ItineraryModel:
        """
        Add a stop.  Without *position* it goes after the last one; an
        explicit position must be free.
        """
        await self.get(itinerary_id, acting_user_id)
        if await self.places.get_by_id(place_id) is None:
            raise ValidationError(f"Unknown place: {place_id}")

        if position is None:
            position = await self.itineraries.next_position(itinerary_id)
        elif await self.itineraries.position_taken(itinerary_id, position):
            raise DuplicateError(f"Position {position} is already taken")

        try:
            await self.itineraries.add_stop(
                itinerary_id=itinerary_id,
                place_id=place_id,
                position=position,
                notes=notes,
            )
        except IntegrityError as exc:
            raise DuplicateError(f"Position {position} is already taken") from exc

        return await self.itineraries.get_by_id(itinerary_id)
