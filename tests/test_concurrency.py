"""
Concurrency safety tests.

Demonstrates:
1. A request that validated against a stale "pending" read cannot overwrite
   a resolution committed in the meantime (conditional UPDATE).
2. Two simultaneous resolutions of the same pending connection produce
   exactly one winner.

These run against a file-backed SQLite database with one connection per
session, so the two sessions really are independent transactions.
"""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from wanderer.domain.enums import ConnectionStatus
from wanderer.domain.errors import InvalidTransitionError
from wanderer.infrastructure.database import Base, build_session_factory
from wanderer.infrastructure.repositories import ConnectionRepository
from wanderer.services.connections import ConnectionService
from tests.conftest import make_people


@pytest_asyncio.fixture
async def file_factory(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'race.db'}", poolclass=NullPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def pending(file_factory):
    """(people, connection_id) for a fresh pending t1 -> g1 request."""
    async with file_factory() as session:
        people = await make_people(session)
        conn = await ConnectionService(session).create(people["t1"], people["g1"])
        await session.commit()
        return people, conn.id


class TestAtomicTransition:
    @pytest.mark.asyncio
    async def test_stale_reader_cannot_overwrite(self, file_factory, pending):
        people, cid = pending

        async with file_factory() as stale:
            seen = await ConnectionRepository(stale).get_by_id(cid)
            assert seen.status == ConnectionStatus.PENDING

            async with file_factory() as other:
                await ConnectionService(other).set_status(cid, "accepted", people["g1"])
                await other.commit()

            won = await ConnectionRepository(stale).compare_and_set_status(
                cid,
                expected=ConnectionStatus.PENDING,
                new_status=ConnectionStatus.CANCELLED,
                resolved_by=people["t1"],
            )
            assert won is False
            await stale.rollback()

        async with file_factory() as check:
            final = await ConnectionRepository(check).get_by_id(cid)
            assert final.status == ConnectionStatus.ACCEPTED
            assert final.resolved_by == people["g1"]

    @pytest.mark.asyncio
    async def test_concurrent_accept_and_cancel_have_one_winner(
        self, file_factory, pending
    ):
        people, cid = pending

        async def resolve(status: str, actor: int) -> str:
            async with file_factory() as session:
                try:
                    conn = await ConnectionService(session).set_status(cid, status, actor)
                    await session.commit()
                    return conn.status.value
                except Exception:
                    await session.rollback()
                    raise

        results = await asyncio.gather(
            resolve("accepted", people["g1"]),
            resolve("cancelled", people["t1"]),
            return_exceptions=True,
        )

        wins = [r for r in results if isinstance(r, str)]
        losses = [r for r in results if isinstance(r, InvalidTransitionError)]
        assert len(wins) == 1
        assert len(losses) == 1

        async with file_factory() as check:
            final = await ConnectionRepository(check).get_by_id(cid)
            assert final.status.value == wins[0]

    @pytest.mark.asyncio
    async def test_compare_and_set_on_pending_succeeds_once(self, file_factory, pending):
        people, cid = pending
        async with file_factory() as session:
            repo = ConnectionRepository(session)
            first = await repo.compare_and_set_status(
                cid,
                expected=ConnectionStatus.PENDING,
                new_status=ConnectionStatus.DECLINED,
                resolved_by=people["g1"],
            )
            second = await repo.compare_and_set_status(
                cid,
                expected=ConnectionStatus.PENDING,
                new_status=ConnectionStatus.ACCEPTED,
                resolved_by=people["g1"],
            )
            await session.commit()
        assert (first, second) == (True, False)
