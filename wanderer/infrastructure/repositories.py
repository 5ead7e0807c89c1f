"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Relationships are declared ``lazy="raise"``,
so every query that hands out participants says up-front what it loads.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import (
    BookingModel,
    ConnectionModel,
    GuideProfileModel,
    ItineraryModel,
    ItineraryPlaceModel,
    PlaceModel,
    SavedPlaceModel,
    UserModel,
)
from wanderer.domain.enums import (
    BookingStatus,
    ConnectionStatus,
    PlaceCategory,
    UserRole,
)


def _with_participants(query):
    """Eager-load both participants and their guide profiles (no N+1)."""
    return query.options(
        selectinload(ConnectionModel.from_user).selectinload(UserModel.guide_profile),
        selectinload(ConnectionModel.to_user).selectinload(UserModel.guide_profile),
    )


class ConnectionRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_connection(
        self,
        *,
        from_user_id: int,
        to_user_id: int,
        message: str | None = None,
        trip_details: str | None = None,
        budget: float | None = None,
    ) -> ConnectionModel:
        connection = ConnectionModel(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            status=ConnectionStatus.PENDING,
            message=message,
            trip_details=trip_details,
            budget=budget,
        )
        self.session.add(connection)
        await self.session.flush()
        return connection

    async def get_by_id(self, connection_id: int) -> Optional[ConnectionModel]:
        result = await self.session.execute(
            _with_participants(select(ConnectionModel))
            .where(ConnectionModel.id == connection_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_participant(self, user_id: int) -> list[ConnectionModel]:
        result = await self.session.execute(
            _with_participants(select(ConnectionModel))
            .where(
                or_(
                    ConnectionModel.from_user_id == user_id,
                    ConnectionModel.to_user_id == user_id,
                )
            )
            .order_by(ConnectionModel.created_at.desc(), ConnectionModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def has_pending(self, from_user_id: int, to_user_id: int) -> bool:
        result = await self.session.execute(
            select(ConnectionModel.id)
            .where(
                ConnectionModel.from_user_id == from_user_id,
                ConnectionModel.to_user_id == to_user_id,
                ConnectionModel.status == ConnectionStatus.PENDING,
            )
            .limit(1)
        )
        return result.first() is not None

    async def compare_and_set_status(
        self,
        connection_id: int,
        *,
        expected: ConnectionStatus,
        new_status: ConnectionStatus,
        resolved_by: int,
    ) -> bool:
        """
        Single-statement conditional UPDATE.

        Returns ``False`` when the row is no longer in *expected*, i.e. a
        concurrent request already moved it.  Both reads and the write
        happen in one statement, so there is no read-then-write window.
        """
        result = await self.session.execute(
            update(ConnectionModel)
            .where(
                ConnectionModel.id == connection_id,
                ConnectionModel.status == expected,
            )
            .values(
                status=new_status,
                resolved_by=resolved_by,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        role: UserRole,
        phone: str | None = None,
    ) -> UserModel:
        user = UserModel(name=name, email=email, role=role, phone=phone)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel)
            .options(selectinload(UserModel.guide_profile))
            .where(UserModel.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one_or_none()

    async def get_guides(self) -> list[UserModel]:
        result = await self.session.execute(
            select(UserModel)
            .options(selectinload(UserModel.guide_profile))
            .where(UserModel.role == UserRole.GUIDE)
            .order_by(UserModel.id)
        )
        return list(result.scalars().all())

    async def get_located_guides(
        self, cells: Optional[Iterable[str]] = None
    ) -> list[UserModel]:
        """Guides with a stored position, optionally limited to H3 *cells*."""
        query = (
            select(UserModel)
            .options(selectinload(UserModel.guide_profile))
            .where(
                UserModel.role == UserRole.GUIDE,
                UserModel.current_lat.is_not(None),
                UserModel.current_lng.is_not(None),
            )
            .order_by(UserModel.id)
        )
        if cells is not None:
            query = query.where(UserModel.h3_cell.in_(list(cells)))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_location(
        self, user: UserModel, *, lat: float, lng: float, h3_cell: str
    ) -> UserModel:
        user.current_lat = lat
        user.current_lng = lng
        user.h3_cell = h3_cell
        user.last_location_update = datetime.now(timezone.utc)
        await self.session.flush()
        return user


class GuideProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int) -> Optional[GuideProfileModel]:
        result = await self.session.execute(
            select(GuideProfileModel).where(GuideProfileModel.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: int, **fields) -> GuideProfileModel:
        """Create the profile on first write, then patch the given fields."""
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            profile = GuideProfileModel(user_id=user_id)
            self.session.add(profile)
        for key, value in fields.items():
            setattr(profile, key, value)
        await self.session.flush()
        return profile


class PlaceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_place(self, **fields) -> PlaceModel:
        place = PlaceModel(**fields)
        self.session.add(place)
        await self.session.flush()
        return place

    async def get_by_id(self, place_id: int) -> Optional[PlaceModel]:
        return await self.session.get(PlaceModel, place_id)

    async def list_places(
        self, category: Optional[PlaceCategory] = None
    ) -> list[PlaceModel]:
        query = select(PlaceModel).order_by(PlaceModel.name, PlaceModel.id)
        if category is not None:
            query = query.where(PlaceModel.category == category)
        result = await self.session.execute(query)
        return list(result.scalars().all())


_STOPS_WITH_PLACES = selectinload(ItineraryModel.stops).selectinload(
    ItineraryPlaceModel.place
)


class ItineraryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_itinerary(
        self,
        *,
        user_id: int,
        title: str,
        description: str,
        start_date: date,
        end_date: date,
    ) -> ItineraryModel:
        itinerary = ItineraryModel(
            user_id=user_id,
            title=title,
            description=description,
            start_date=start_date,
            end_date=end_date,
        )
        self.session.add(itinerary)
        await self.session.flush()
        return itinerary

    async def get_by_id(self, itinerary_id: int) -> Optional[ItineraryModel]:
        result = await self.session.execute(
            select(ItineraryModel)
            .options(_STOPS_WITH_PLACES)
            .where(ItineraryModel.id == itinerary_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_user(self, user_id: int) -> list[ItineraryModel]:
        result = await self.session.execute(
            select(ItineraryModel)
            .options(_STOPS_WITH_PLACES)
            .where(ItineraryModel.user_id == user_id)
            .order_by(ItineraryModel.start_date, ItineraryModel.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def next_position(self, itinerary_id: int) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.max(ItineraryPlaceModel.position), 0)).where(
                ItineraryPlaceModel.itinerary_id == itinerary_id
            )
        )
        return result.scalar_one() + 1

    async def position_taken(self, itinerary_id: int, position: int) -> bool:
        result = await self.session.execute(
            select(ItineraryPlaceModel.id)
            .where(
                ItineraryPlaceModel.itinerary_id == itinerary_id,
                ItineraryPlaceModel.position == position,
            )
            .limit(1)
        )
        return result.first() is not None

    async def add_stop(
        self,
        *,
        itinerary_id: int,
        place_id: int,
        position: int,
        notes: str | None = None,
    ) -> ItineraryPlaceModel:
        stop = ItineraryPlaceModel(
            itinerary_id=itinerary_id, place_id=place_id, position=position, notes=notes
        )
        self.session.add(stop)
        await self.session.flush()
        return stop


def _with_booking_parties(query):
    return query.options(
        selectinload(BookingModel.tourist).selectinload(UserModel.guide_profile),
        selectinload(BookingModel.guide).selectinload(UserModel.guide_profile),
        selectinload(BookingModel.place),
    )


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_booking(
        self,
        *,
        tourist_id: int,
        guide_id: int,
        tour_date: date,
        place_id: int | None = None,
        notes: str | None = None,
    ) -> BookingModel:
        booking = BookingModel(
            tourist_id=tourist_id,
            guide_id=guide_id,
            tour_date=tour_date,
            place_id=place_id,
            notes=notes,
            status=BookingStatus.PENDING,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def get_by_id(self, booking_id: int) -> Optional[BookingModel]:
        result = await self.session.execute(
            _with_booking_parties(select(BookingModel))
            .where(BookingModel.id == booking_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_for_participant(self, user_id: int) -> list[BookingModel]:
        """Bookings on either side, soonest tour first."""
        result = await self.session.execute(
            _with_booking_parties(select(BookingModel))
            .where(
                or_(BookingModel.tourist_id == user_id, BookingModel.guide_id == user_id)
            )
            .order_by(BookingModel.tour_date, BookingModel.id)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def compare_and_set_status(
        self,
        booking_id: int,
        *,
        expected: BookingStatus,
        new_status: BookingStatus,
        resolved_by: int,
    ) -> bool:
        """Conditional UPDATE, as ``ConnectionRepository.compare_and_set_status``."""
        result = await self.session.execute(
            update(BookingModel)
            .where(BookingModel.id == booking_id, BookingModel.status == expected)
            .values(
                status=new_status,
                resolved_by=resolved_by,
                updated_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1


class SavedPlaceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(
        self, *, user_id: int, place_id: int, notes: str | None = None
    ) -> SavedPlaceModel:
        saved = SavedPlaceModel(user_id=user_id, place_id=place_id, notes=notes)
        self.session.add(saved)
        await self.session.flush()
        return saved

    async def get_by_id(self, saved_id: int) -> Optional[SavedPlaceModel]:
        result = await self.session.execute(
            select(SavedPlaceModel)
            .options(selectinload(SavedPlaceModel.place))
            .where(SavedPlaceModel.id == saved_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, user_id: int, place_id: int) -> bool:
        result = await self.session.execute(
            select(SavedPlaceModel.id)
            .where(
                SavedPlaceModel.user_id == user_id,
                SavedPlaceModel.place_id == place_id,
            )
            .limit(1)
        )
        return result.first() is not None

    async def get_for_user(self, user_id: int) -> list[SavedPlaceModel]:
        result = await self.session.execute(
            select(SavedPlaceModel)
            .options(selectinload(SavedPlaceModel.place))
            .where(SavedPlaceModel.user_id == user_id)
            .order_by(SavedPlaceModel.created_at.desc(), SavedPlaceModel.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
