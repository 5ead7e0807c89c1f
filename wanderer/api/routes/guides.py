"""
Guide endpoints
===============

GET /api/v1/guides                     -- every guide with their profile
GET /api/v1/guides/{user_id}           -- one guide with their profile
PUT /api/v1/guides/{user_id}/profile   -- guide edits their own profile
GET /api/v1/nearby/guides              -- guides closest to a point, closest first
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import (
    GuideProfileRequest,
    GuideProfileResponse,
    NearbyGuideResponse,
    UserResponse,
)
from wanderer.config import settings
from wanderer.domain.entities import Location
from wanderer.domain.enums import UserRole
from wanderer.infrastructure.repositories import GuideProfileRepository, UserRepository
from wanderer.services.guides import NearbyGuideFinder

router = APIRouter(tags=["guides"])


@router.get("/guides", response_model=list[UserResponse], summary="List guides")
@limiter.limit(settings.rate_limit)
async def list_guides(
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    return await UserRepository(db).get_guides()


@router.get("/guides/{user_id}", response_model=UserResponse, summary="Get a guide")
@limiter.limit(settings.rate_limit)
async def get_guide(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_id(user_id)
    if user is None or user.role != UserRole.GUIDE:
        raise HTTPException(status_code=404, detail="Guide not found")
    return user


@router.put(
    "/guides/{user_id}/profile",
    response_model=UserResponse,
    summary="Update the caller's guide profile",
)
@limiter.limit(settings.rate_limit)
async def update_guide_profile(
    request: Request,
    user_id: int,
    body: GuideProfileRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id or ctx.role != UserRole.GUIDE:
        raise HTTPException(status_code=403, detail="Action not permitted")

    await GuideProfileRepository(db).upsert(user_id, **body.model_dump())
    return await UserRepository(db).get_by_id(user_id)


@router.get(
    "/nearby/guides",
    response_model=list[NearbyGuideResponse],
    summary="Guides nearest to a location",
    description=(
        "Returns the ``top_k`` closest located guides.  Passing both "
        "``min_results`` and ``max_results`` returns a random number of "
        "guides within that range instead."
    ),
)
@limiter.limit(settings.rate_limit)
async def nearby_guides(
    request: Request,
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    top_k: Optional[int] = Query(None, ge=1, le=50),
    radius_km: Optional[float] = Query(None, gt=0),
    min_results: Optional[int] = Query(None, ge=0, le=50),
    max_results: Optional[int] = Query(None, ge=0, le=50),
    db: AsyncSession = Depends(get_db),
):
    if (min_results is None) != (max_results is None):
        raise HTTPException(
            status_code=422,
            detail="min_results and max_results must be given together",
        )
    if min_results is not None and min_results > max_results:
        raise HTTPException(
            status_code=422, detail="min_results cannot exceed max_results"
        )

    ranked = await NearbyGuideFinder(db).find(
        Location(latitude, longitude),
        top_k=top_k,
        radius_km=radius_km if radius_km is not None else settings.nearby_radius_km,
        min_results=min_results,
        max_results=max_results,
    )
    return [
        NearbyGuideResponse(
            id=r.guide_id,
            name=r.payload.name,
            email=r.payload.email,
            phone=r.payload.phone,
            latitude=r.location.latitude,
            longitude=r.location.longitude,
            distance_km=round(r.distance_km, 3),
            guide_profile=(
                GuideProfileResponse.model_validate(r.payload.guide_profile)
                if r.payload.guide_profile
                else None
            ),
        )
        for r in ranked
    ]
