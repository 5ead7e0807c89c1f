"""FastAPI dependency injection helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.domain.enums import UserRole
from wanderer.infrastructure.database import async_session_factory
from wanderer.infrastructure.repositories import UserRepository


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@dataclass(frozen=True)
class RequestContext:
    """Who is acting on this request.  Passed explicitly, never stored globally."""

    user_id: int
    role: UserRole


async def get_current_user(
    x_user_id: Optional[int] = Header(
        None, description="Id of the authenticated user, set by the auth gateway."
    ),
    db: AsyncSession = Depends(get_db),
) -> RequestContext:
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    user = await UserRepository(db).get_by_id(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return RequestContext(user_id=user.id, role=UserRole(user.role))
