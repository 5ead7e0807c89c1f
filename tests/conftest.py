"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production models are SQLite-compatible, so the
real ``Base.metadata`` and repositories are exercised directly.
"""

from typing import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from wanderer.domain.enums import PlaceCategory, UserRole
from wanderer.infrastructure.database import Base, build_session_factory
from wanderer.infrastructure.repositories import (
    GuideProfileRepository,
    PlaceRepository,
    UserRepository,
)

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Gateway of India
GATEWAY_LAT, GATEWAY_LNG = 18.9220, 72.8347


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory database per test; tables created up-front."""
    engine = create_async_engine(TEST_DB_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


async def make_people(session: AsyncSession) -> dict[str, int]:
    """Two tourists (t1, t2) and two guides (g1 with a profile, g2 without)."""
    users = UserRepository(session)
    t1 = await users.create_user(name="Aarav Sharma", email="t1@example.com", role=UserRole.TOURIST)
    t2 = await users.create_user(name="Emma Clarke", email="t2@example.com", role=UserRole.TOURIST)
    g1 = await users.create_user(
        name="Ravi Maharaj", email="g1@example.com", role=UserRole.GUIDE, phone="+91 98200 00001"
    )
    g2 = await users.create_user(name="Priya Kulkarni", email="g2@example.com", role=UserRole.GUIDE)
    await GuideProfileRepository(session).upsert(
        g1.id,
        bio="Mumbai heritage walks",
        languages=["English", "Marathi"],
        specialties=["Heritage"],
        location="Mumbai",
        experience_years=7,
        rating=4.8,
    )
    await session.commit()
    return {"t1": t1.id, "t2": t2.id, "g1": g1.id, "g2": g2.id}


@pytest_asyncio.fixture
async def people(db_session) -> dict[str, int]:
    return await make_people(db_session)


async def make_places(session: AsyncSession) -> dict[str, int]:
    """Gateway of India (monument), Elephanta Caves and Ellora Caves (heritage)."""
    places = PlaceRepository(session)
    gateway = await places.create_place(
        name="Gateway of India", location="Mumbai", category=PlaceCategory.MONUMENT,
        latitude=GATEWAY_LAT, longitude=GATEWAY_LNG,
    )
    elephanta = await places.create_place(
        name="Elephanta Caves", location="Mumbai", category=PlaceCategory.HERITAGE,
        latitude=18.9633, longitude=72.9315, entry_fee="INR 40",
    )
    ellora = await places.create_place(
        name="Ellora Caves", location="Aurangabad", category=PlaceCategory.HERITAGE,
        latitude=20.0258, longitude=75.1780,
    )
    await session.commit()
    return {"gateway": gateway.id, "elephanta": elephanta.id, "ellora": ellora.id}


@pytest_asyncio.fixture
async def places(db_session) -> dict[str, int]:
    return await make_places(db_session)
