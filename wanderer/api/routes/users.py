"""
User endpoints
==============

POST /api/v1/users                     -- register a tourist or a guide
GET  /api/v1/users/{user_id}           -- profile (with guide profile if any)
POST /api/v1/users/{user_id}/location  -- location ping from the caller's device
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import (
    LocationUpdateRequest,
    UserCreateRequest,
    UserResponse,
)
from wanderer.config import settings
from wanderer.domain.enums import UserRole
from wanderer.domain.errors import ValidationError
from wanderer.domain.spatial import location_h3_cell
from wanderer.infrastructure.repositories import GuideProfileRepository, UserRepository

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    status_code=201,
    response_model=UserResponse,
    summary="Register a user",
)
@limiter.limit(settings.rate_limit)
async def create_user(
    request: Request,
    body: UserCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    repo = UserRepository(db)
    if await repo.get_by_email(body.email):
        raise HTTPException(status_code=409, detail="Email already registered")
    if body.guide_profile is not None and body.role != UserRole.GUIDE:
        raise ValidationError("Only guides can have a guide profile")

    try:
        user = await repo.create_user(
            name=body.name, email=body.email, role=body.role, phone=body.phone
        )
    except IntegrityError as exc:
        # lost the race against a concurrent registration with this email
        raise HTTPException(status_code=409, detail="Email already registered") from exc
    if body.role == UserRole.GUIDE:
        fields = body.guide_profile.model_dump() if body.guide_profile else {}
        await GuideProfileRepository(db).upsert(user.id, **fields)
    return await repo.get_by_id(user.id)


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
@limiter.limit(settings.rate_limit)
async def get_user(
    request: Request,
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.post(
    "/{user_id}/location",
    response_model=UserResponse,
    summary="Update the caller's current location",
)
@limiter.limit(settings.rate_limit)
async def update_location(
    request: Request,
    user_id: int,
    body: LocationUpdateRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Action not permitted")

    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    await repo.update_location(
        user,
        lat=body.latitude,
        lng=body.longitude,
        h3_cell=location_h3_cell(body.latitude, body.longitude, settings.h3_resolution),
    )
    return await repo.get_by_id(user_id)
