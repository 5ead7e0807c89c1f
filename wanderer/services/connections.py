"""
Connection lifecycle service
============================

The one place where a tourist's request to a guide is created, listed and
resolved.  Works on plain ids and returns ORM records with both participants
(and their guide profiles) already loaded, ready for serialisation.

Concurrency safety
------------------
* **Transitions** are validated against a fresh read, then persisted with a
  single conditional ``UPDATE ... WHERE status = 'pending'``.  If two
  requests race, the database lets exactly one of them change the row; the
  loser sees ``rowcount == 0`` and gets ``InvalidTransitionError``.
* **Duplicate requests** are checked up-front and backed by the partial
  unique index ``uq_connections_pending_pair`` for the racing case.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.domain.entities import Connection
from wanderer.domain.enums import ConnectionStatus, UserRole
from wanderer.domain.errors import (
    DuplicateConnectionError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from wanderer.infrastructure.models import ConnectionModel
from wanderer.infrastructure.repositories import ConnectionRepository, UserRepository

logger = logging.getLogger(__name__)


def to_entity(model: ConnectionModel) -> Connection:
    return Connection(
        id=model.id,
        from_user_id=model.from_user_id,
        to_user_id=model.to_user_id,
        status=ConnectionStatus(model.status),
        message=model.message,
        trip_details=model.trip_details,
        budget=model.budget,
        resolved_by=model.resolved_by,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class ConnectionService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.connections = ConnectionRepository(session)
        self.users = UserRepository(session)

    async def create(
        self,
        from_user_id: int,
        to_user_id: int,
        message: Optional[str] = None,
        trip_details: Optional[str] = None,
        budget: Optional[float] = None,
    ) -> ConnectionModel:
        """Open a new *pending* request from a tourist to a guide."""
        if from_user_id == to_user_id:
            raise ValidationError("A user cannot connect to themselves")

        tourist = await self.users.get_by_id(from_user_id)
        if tourist is None:
            raise ValidationError(f"Unknown user: {from_user_id}")
        guide = await self.users.get_by_id(to_user_id)
        if guide is None:
            raise ValidationError(f"Unknown user: {to_user_id}")
        if tourist.role != UserRole.TOURIST:
            raise ValidationError("Only tourists can send connection requests")
        if guide.role != UserRole.GUIDE:
            raise ValidationError("Connection requests can only be sent to guides")

        if await self.connections.has_pending(from_user_id, to_user_id):
            raise DuplicateConnectionError(
                "A request to this guide is already pending"
            )

        try:
            created = await self.connections.create_connection(
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                message=message,
                trip_details=trip_details,
                budget=budget,
            )
        except IntegrityError as exc:
            # lost the race against a concurrent identical request
            raise DuplicateConnectionError(
                "A request to this guide is already pending"
            ) from exc

        logger.info(
            "Connection %d created: tourist %d -> guide %d",
            created.id, from_user_id, to_user_id,
        )
        return await self.connections.get_by_id(created.id)

    async def find_by_participant(self, user_id: int) -> list[ConnectionModel]:
        """All connections where *user_id* is either side, newest first."""
        return await self.connections.get_for_participant(user_id)

    async def get(self, connection_id: int, acting_user_id: int) -> ConnectionModel:
        """A single connection, visible to its participants only."""
        model = await self.connections.get_by_id(connection_id)
        if model is None or not to_entity(model).is_participant(acting_user_id):
            raise NotFoundError("Connection not found")
        return model

    async def set_status(
        self,
        connection_id: int,
        new_status: Union[str, ConnectionStatus],
        acting_user_id: int,
    ) -> ConnectionModel:
        """
        Resolve a pending connection.

        *new_status* is ``accepted``, ``declined``, ``cancelled`` or the
        ``rejected`` alias.  Raises ``NotFoundError``, ``ForbiddenError``,
        ``InvalidTransitionError`` or ``ValidationError``.
        """
        model = await self.connections.get_by_id(connection_id)
        if model is None:
            raise NotFoundError("Connection not found")

        connection = to_entity(model)
        target = connection.resolve_status(new_status, acting_user_id)
        connection.check_transition(target, acting_user_id)

        won = await self.connections.compare_and_set_status(
            connection_id,
            expected=ConnectionStatus.PENDING,
            new_status=target,
            resolved_by=acting_user_id,
        )
        if not won:
            logger.warning(
                "Connection %d: %s by user %d lost to a concurrent update",
                connection_id, target.value, acting_user_id,
            )
            raise InvalidTransitionError("Connection was already resolved")

        logger.info(
            "Connection %d %s by user %d", connection_id, target.value, acting_user_id
        )
        return await self.connections.get_by_id(connection_id)
