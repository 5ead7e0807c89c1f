"""
Booking endpoints
=================

POST /api/v1/bookings                        -- tourist books a guide for a date
GET  /api/v1/users/{user_id}/bookings        -- the caller's bookings, either side
POST /api/v1/bookings/{booking_id}/confirm   -- guide confirms
POST /api/v1/bookings/{booking_id}/cancel    -- either side calls it off

Like connections, status changes answer outsiders and unknown ids with
the same 403.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import BookingCreateRequest, BookingResponse
from wanderer.config import settings
from wanderer.domain.enums import BookingStatus
from wanderer.domain.errors import ForbiddenError, NotFoundError
from wanderer.services.bookings import BookingService

router = APIRouter(tags=["bookings"])


async def _change_status(
    db: AsyncSession, booking_id: int, status: BookingStatus, ctx: RequestContext
):
    try:
        return await BookingService(db).set_status(booking_id, status, ctx.user_id)
    except (NotFoundError, ForbiddenError):
        raise HTTPException(status_code=403, detail="Action not permitted") from None


@router.post(
    "/bookings",
    status_code=201,
    response_model=BookingResponse,
    summary="Book a guide",
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await BookingService(db).create(
        ctx.user_id,
        body.guide_id,
        body.tour_date,
        place_id=body.place_id,
        notes=body.notes,
    )


@router.get(
    "/users/{user_id}/bookings",
    response_model=list[BookingResponse],
    summary="List the caller's bookings",
)
@limiter.limit(settings.rate_limit)
async def list_bookings(
    request: Request,
    user_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Action not permitted")
    return await BookingService(db).find_by_participant(user_id)


@router.post(
    "/bookings/{booking_id}/confirm",
    response_model=BookingResponse,
    summary="Confirm a pending booking (guide only)",
)
@limiter.limit(settings.rate_limit)
async def confirm_booking(
    request: Request,
    booking_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, booking_id, BookingStatus.CONFIRMED, ctx)


@router.post(
    "/bookings/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
)
@limiter.limit(settings.rate_limit)
async def cancel_booking(
    request: Request,
    booking_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, booking_id, BookingStatus.CANCELLED, ctx)
