"""
Connection endpoints
====================

POST  /api/v1/connections                        -- tourist requests a guide
GET   /api/v1/connections/{connection_id}        -- one connection (participants only)
GET   /api/v1/users/{user_id}/connections        -- all connections of the caller
POST  /api/v1/connections/{connection_id}/accept -- guide accepts
POST  /api/v1/connections/{connection_id}/reject -- guide declines / tourist cancels
POST  /api/v1/connections/{connection_id}/cancel -- tourist withdraws
PATCH /api/v1/connections/{connection_id}        -- generic status change

Status changes answer outsiders and unknown ids with the same 403 so the
endpoint does not reveal which connections exist.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.api.dependencies import RequestContext, get_current_user, get_db
from wanderer.api.middleware import limiter
from wanderer.api.schemas import (
    ConnectionCreateRequest,
    ConnectionResponse,
    ConnectionStatusRequest,
)
from wanderer.config import settings
from wanderer.domain.enums import REJECTED_ALIAS, ConnectionStatus
from wanderer.domain.errors import ForbiddenError, NotFoundError
from wanderer.services.connections import ConnectionService

router = APIRouter(tags=["connections"])


async def _change_status(
    db: AsyncSession, connection_id: int, status: str, ctx: RequestContext
):
    try:
        return await ConnectionService(db).set_status(connection_id, status, ctx.user_id)
    except (NotFoundError, ForbiddenError):
        raise HTTPException(status_code=403, detail="Action not permitted") from None


@router.post(
    "/connections",
    status_code=201,
    response_model=ConnectionResponse,
    summary="Send a connection request to a guide",
)
@limiter.limit(settings.rate_limit)
async def create_connection(
    request: Request,
    body: ConnectionCreateRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ConnectionService(db).create(
        ctx.user_id,
        body.to_user_id,
        message=body.message,
        trip_details=body.trip_details,
        budget=body.budget,
    )


@router.get(
    "/connections/{connection_id}",
    response_model=ConnectionResponse,
    summary="Get a connection",
)
@limiter.limit(settings.rate_limit)
async def get_connection(
    request: Request,
    connection_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await ConnectionService(db).get(connection_id, ctx.user_id)


@router.get(
    "/users/{user_id}/connections",
    response_model=list[ConnectionResponse],
    summary="List a user's connections, newest first",
)
@limiter.limit(settings.rate_limit)
async def list_connections(
    request: Request,
    user_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if user_id != ctx.user_id:
        raise HTTPException(status_code=403, detail="Action not permitted")
    return await ConnectionService(db).find_by_participant(user_id)


@router.post(
    "/connections/{connection_id}/accept",
    response_model=ConnectionResponse,
    summary="Accept a pending request (guide only)",
)
@limiter.limit(settings.rate_limit)
async def accept_connection(
    request: Request,
    connection_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, connection_id, ConnectionStatus.ACCEPTED, ctx)


@router.post(
    "/connections/{connection_id}/reject",
    response_model=ConnectionResponse,
    summary="Reject a pending request",
    description=(
        "Sent by the guide the request ends as ``declined``; sent by the "
        "tourist it ends as ``cancelled``."
    ),
)
@limiter.limit(settings.rate_limit)
async def reject_connection(
    request: Request,
    connection_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, connection_id, REJECTED_ALIAS, ctx)


@router.post(
    "/connections/{connection_id}/cancel",
    response_model=ConnectionResponse,
    summary="Withdraw a pending request (tourist only)",
)
@limiter.limit(settings.rate_limit)
async def cancel_connection(
    request: Request,
    connection_id: int,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, connection_id, ConnectionStatus.CANCELLED, ctx)


@router.patch(
    "/connections/{connection_id}",
    response_model=ConnectionResponse,
    summary="Change a connection's status",
)
@limiter.limit(settings.rate_limit)
async def update_connection_status(
    request: Request,
    connection_id: int,
    body: ConnectionStatusRequest,
    ctx: RequestContext = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _change_status(db, connection_id, body.status, ctx)
