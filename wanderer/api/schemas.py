"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from wanderer.domain.enums import (
    BookingStatus,
    ConnectionStatus,
    PlaceCategory,
    UserRole,
)


# ── Requests ──────────────────────────────────────────────────────────


class GuideProfileRequest(BaseModel):
    bio: str = ""
    languages: list[str] = []
    specialties: list[str] = []
    location: str = Field("", max_length=120)
    experience_years: int = Field(0, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole
    phone: Optional[str] = Field(None, max_length=32)
    guide_profile: Optional[GuideProfileRequest] = None


class LocationUpdateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ConnectionCreateRequest(BaseModel):
    to_user_id: int
    message: Optional[str] = Field(None, max_length=2000)
    trip_details: Optional[str] = Field(None, max_length=4000)
    budget: Optional[float] = Field(None, ge=0)


class ConnectionStatusRequest(BaseModel):
    status: Literal["accepted", "declined", "cancelled", "rejected"] = Field(
        ...,
        description='"rejected" declines when sent by the guide, cancels when sent by the tourist.',
    )


class PlaceCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    location: str = Field(..., min_length=1, max_length=120)
    category: PlaceCategory
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    image_url: Optional[str] = Field(None, max_length=500)
    rating: Optional[float] = Field(None, ge=0, le=5)
    opening_hours: Optional[str] = Field(None, max_length=120)
    entry_fee: Optional[str] = Field(None, max_length=120)
    best_time_to_visit: Optional[str] = Field(None, max_length=120)


class SavedPlaceRequest(BaseModel):
    place_id: int
    notes: Optional[str] = Field(None, max_length=2000)


class ItineraryCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    start_date: date
    end_date: date


class ItineraryPlaceRequest(BaseModel):
    place_id: int
    position: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = Field(None, max_length=2000)


class BookingCreateRequest(BaseModel):
    guide_id: int
    tour_date: date
    place_id: Optional[int] = None
    notes: Optional[str] = Field(None, max_length=2000)


# ── Responses ─────────────────────────────────────────────────────────


class GuideProfileResponse(BaseModel):
    bio: str
    languages: list[str]
    specialties: list[str]
    location: str
    experience_years: int
    rating: Optional[float] = None

    model_config = {"from_attributes": True}


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    current_lat: Optional[float] = None
    current_lng: Optional[float] = None
    last_location_update: Optional[datetime] = None
    guide_profile: Optional[GuideProfileResponse] = None

    model_config = {"from_attributes": True}


class ParticipantResponse(BaseModel):
    """Participant snapshot embedded in a connection."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole
    guide_profile: Optional[GuideProfileResponse] = None

    model_config = {"from_attributes": True}


class ConnectionResponse(BaseModel):
    id: int
    status: ConnectionStatus
    message: Optional[str] = None
    trip_details: Optional[str] = None
    budget: Optional[float] = None
    resolved_by: Optional[int] = None
    from_user: ParticipantResponse
    to_user: ParticipantResponse
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class NearbyGuideResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    latitude: float
    longitude: float
    distance_km: float
    guide_profile: Optional[GuideProfileResponse] = None


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str


class PlaceResponse(BaseModel):
    id: int
    name: str
    description: str
    location: str
    category: PlaceCategory
    latitude: float
    longitude: float
    image_url: Optional[str] = None
    rating: Optional[float] = None
    opening_hours: Optional[str] = None
    entry_fee: Optional[str] = None
    best_time_to_visit: Optional[str] = None

    model_config = {"from_attributes": True}


class SavedPlaceResponse(BaseModel):
    id: int
    notes: Optional[str] = None
    place: PlaceResponse
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ItineraryStopResponse(BaseModel):
    id: int
    position: int
    notes: Optional[str] = None
    place: PlaceResponse

    model_config = {"from_attributes": True}


class ItineraryResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    start_date: date
    end_date: date
    stops: list[ItineraryStopResponse] = []
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    status: BookingStatus
    tour_date: date
    notes: Optional[str] = None
    resolved_by: Optional[int] = None
    tourist: ParticipantResponse
    guide: ParticipantResponse
    place: Optional[PlaceResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
