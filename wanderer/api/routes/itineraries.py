"""
Trip planning endpoints
=======================

POST /api/v1/itineraries                        -- plan a trip
GET  /api/v1/users/{user_id}/itineraries        -- the caller's trips, soonest first
GET  /api/v1/itineraries/{itinerary_id}         -- one trip with its stops
GET  /api/v1/itineraries/{itinerary_id}/places  -- the trip's stops in order
POST /api/v1/itineraries/{itinerary_id}/places  -- add a stop

Itineraries are private: other users get 404 as if the id did not exist.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import (
    ItineraryCreateRequest,
    ItineraryPlaceRequest,
    ItineraryResponse,
    ItineraryStopResponse,
)
from wanderer.config import settings
from wanderer.services.itineraries import ItineraryService

router = APIRouter(tags=["itineraries"])


@router.post(
    "/itineraries",
    status_code=201,
    response_model=ItineraryResponse,
    summary="Create an itinerary",
)
@limiter.limit(settings.rate_limit)
async def create_itinerary(
    request: Request,
    body: ItineraryCreateRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ItineraryService(db).create(
        ctx.user_id,
        body.title,
        body.start_date,
        body.end_date,
        description=body.description,
    )


@router.get(
    "/users/{user_id}/itineraries",
    response_model=list[ItineraryResponse],
    summary="List the caller's itineraries",
)
@limiter.limit(settings.rate_limit)
async def list_itineraries(
    request: Request,
    user_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Action not permitted")
    return await ItineraryService(db).for_owner(user_id)


@router.get(
    "/itineraries/{itinerary_id}",
    response_model=ItineraryResponse,
    summary="Get an itinerary",
)
@limiter.limit(settings.rate_limit)
async def get_itinerary(
    request: Request,
    itinerary_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ItineraryService(db).get(itinerary_id, ctx.user_id)


@router.get(
    "/itineraries/{itinerary_id}/places",
    response_model=list[ItineraryStopResponse],
    summary="List an itinerary's stops",
)
@limiter.limit(settings.rate_limit)
async def list_itinerary_places(
    request: Request,
    itinerary_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    itinerary = await ItineraryService(db).get(itinerary_id, ctx.user_id)
    return itinerary.stops


@router.post(
    "/itineraries/{itinerary_id}/places",
    status_code=201,
    response_model=ItineraryResponse,
    summary="Add a stop to an itinerary",
)
@limiter.limit(settings.rate_limit)
async def add_itinerary_place(
    request: Request,
    itinerary_id: int,
    body: ItineraryPlaceRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ItineraryService(db).add_place(
        itinerary_id,
        ctx.user_id,
        body.place_id,
        position=body.position,
        notes=body.notes,
    )
