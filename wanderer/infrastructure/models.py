"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``users``           -- tourists and guides
* ``guide_profiles``  -- one-to-one extension of a guide user
* ``connections``     -- a tourist's request to a guide and its outcome
* ``places``          -- attraction catalogue
* ``itineraries``     -- a tourist's trip plan; ``itinerary_places`` orders its stops
* ``bookings``        -- a dated tour with a guide
* ``saved_places``    -- a user's bookmarked attractions

Indexes
-------
* **B-Tree** on ``role``, ``h3_cell``, ``from_user_id``, ``to_user_id`` and
  ``status`` for participant look-ups and nearby-guide scans.
* **Partial unique** on ``(from_user_id, to_user_id) WHERE status = 'pending'``
  so a tourist can only have one outstanding request per guide, even under
  concurrent inserts.
* **Unique** on ``(itinerary_id, position)`` and ``(user_id, place_id)`` of
  ``saved_places``.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
    text,
)
from sqlalchemy.orm import relationship

from .database import Base
from wanderer.domain.enums import (
    BookingStatus,
    ConnectionStatus,
    PlaceCategory,
    UserRole,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _values(enum_cls):
    # persist the lowercase values ("pending"), not the member names
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(
        Enum(UserRole, name="userrole", values_callable=_values), nullable=False
    )
    phone = Column(String(32), nullable=True)

    current_lat = Column(Float, nullable=True)
    current_lng = Column(Float, nullable=True)
    h3_cell = Column(String(20), nullable=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    guide_profile = relationship(
        "GuideProfileModel", back_populates="user", uselist=False, lazy="raise"
    )

    __table_args__ = (
        Index("idx_users_role", "role"),
        Index("idx_users_cell", "h3_cell"),
    )


class GuideProfileModel(Base):
    __tablename__ = "guide_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    bio = Column(Text, nullable=False, default="")
    languages = Column(JSON, nullable=False, default=list)
    specialties = Column(JSON, nullable=False, default=list)
    location = Column(String(120), nullable=False, default="")
    experience_years = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    user = relationship("UserModel", back_populates="guide_profile", lazy="raise")


class ConnectionModel(Base):
    __tablename__ = "connections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    to_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(
        Enum(ConnectionStatus, name="connectionstatus", values_callable=_values),
        default=ConnectionStatus.PENDING,
        nullable=False,
    )
    message = Column(Text, nullable=True)
    trip_details = Column(Text, nullable=True)
    budget = Column(Float, nullable=True)
    resolved_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    from_user = relationship("UserModel", foreign_keys=[from_user_id], lazy="raise")
    to_user = relationship("UserModel", foreign_keys=[to_user_id], lazy="raise")

    __table_args__ = (
        Index("idx_connections_from", "from_user_id"),
        Index("idx_connections_to", "to_user_id"),
        Index("idx_connections_status", "status"),
        Index(
            "uq_connections_pending_pair",
            "from_user_id",
            "to_user_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )


class PlaceModel(Base):
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(120), nullable=False)
    category = Column(
        Enum(PlaceCategory, name="placecategory", values_callable=_values),
        nullable=False,
    )
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    image_url = Column(String(500), nullable=True)
    rating = Column(Float, nullable=True)
    opening_hours = Column(String(120), nullable=True)
    entry_fee = Column(String(120), nullable=True)
    best_time_to_visit = Column(String(120), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    __table_args__ = (Index("idx_places_category", "category"),)


class ItineraryModel(Base):
    __tablename__ = "itineraries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    stops = relationship(
        "ItineraryPlaceModel",
        order_by="ItineraryPlaceModel.position",
        lazy="raise",
    )

    __table_args__ = (Index("idx_itineraries_user", "user_id"),)


class ItineraryPlaceModel(Base):
    __tablename__ = "itinerary_places"

    id = Column(Integer, primary_key=True, autoincrement=True)
    itinerary_id = Column(Integer, ForeignKey("itineraries.id"), nullable=False)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False)
    position = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    place = relationship("PlaceModel", lazy="raise")

    __table_args__ = (
        UniqueConstraint(
            "itinerary_id", "position", name="uq_itinerary_places_position"
        ),
    )


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tourist_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    guide_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=True)
    tour_date = Column(Date, nullable=False)
    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=_values),
        default=BookingStatus.PENDING,
        nullable=False,
    )
    notes = Column(Text, nullable=True)
    resolved_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
    )

    tourist = relationship("UserModel", foreign_keys=[tourist_id], lazy="raise")
    guide = relationship("UserModel", foreign_keys=[guide_id], lazy="raise")
    place = relationship("PlaceModel", lazy="raise")

    __table_args__ = (
        Index("idx_bookings_tourist", "tourist_id"),
        Index("idx_bookings_guide", "guide_id"),
    )


class SavedPlaceModel(Base):
    __tablename__ = "saved_places"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    place_id = Column(Integer, ForeignKey("places.id"), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    place = relationship("PlaceModel", lazy="raise")

    __table_args__ = (
        UniqueConstraint("user_id", "place_id", name="uq_saved_places_user_place"),
    )
