"""
Attraction endpoints
====================

GET  /api/v1/places                          -- catalogue, optionally by category
GET  /api/v1/places/{place_id}               -- one attraction
POST /api/v1/places                          -- add an attraction
POST /api/v1/saved-places                    -- bookmark an attraction
GET  /api/v1/users/{user_id}/saved-places    -- the caller's bookmarks
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import (
    PlaceCreateRequest,
    PlaceResponse,
    SavedPlaceRequest,
    SavedPlaceResponse,
)
from wanderer.config import settings
from wanderer.domain.enums import PlaceCategory
from wanderer.domain.errors import DuplicateError, ValidationError
from wanderer.infrastructure.repositories import PlaceRepository, SavedPlaceRepository

router = APIRouter(tags=["places"])


@router.get("/places", response_model=list[PlaceResponse], summary="List attractions")
@limiter.limit(settings.rate_limit)
async def list_places(
    request: Request,
    category: Optional[PlaceCategory] = None,
    db: AsyncSession = Depends(get_db),
):
    return await PlaceRepository(db).list_places(category)


@router.get("/places/{place_id}", response_model=PlaceResponse, summary="Get an attraction")
@limiter.limit(settings.rate_limit)
async def get_place(
    request: Request,
    place_id: int,
    db: AsyncSession = Depends(get_db),
):
    place = await PlaceRepository(db).get_by_id(place_id)
    if place is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return place


@router.post(
    "/places",
    status_code=201,
    response_model=PlaceResponse,
    summary="Add an attraction",
)
@limiter.limit(settings.rate_limit)
async def create_place(
    request: Request,
    body: PlaceCreateRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await PlaceRepository(db).create_place(**body.model_dump())


@router.post(
    "/saved-places",
    status_code=201,
    response_model=SavedPlaceResponse,
    summary="Bookmark an attraction",
)
@limiter.limit(settings.rate_limit)
async def save_place(
    request: Request,
    body: SavedPlaceRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if await PlaceRepository(db).get_by_id(body.place_id) is None:
        raise ValidationError(f"Unknown place: {body.place_id}")

    repo = SavedPlaceRepository(db)
    if await repo.exists(ctx.user_id, body.place_id):
        raise DuplicateError("Place already saved")
    try:
        saved = await repo.save(
            user_id=ctx.user_id, place_id=body.place_id, notes=body.notes
        )
    except IntegrityError as exc:
        raise DuplicateError("Place already saved") from exc
    return await repo.get_by_id(saved.id)


@router.get(
    "/users/{user_id}/saved-places",
    response_model=list[SavedPlaceResponse],
    summary="List the caller's saved attractions",
)
@limiter.limit(settings.rate_limit)
async def list_saved_places(
    request: Request,
    user_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Action not permitted")
    return await SavedPlaceRepository(db).get_for_user(user_id)
