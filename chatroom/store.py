# chatroom/store.py
# One session per call: each method is a single-record atomic step.
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from .errors import Conflict, StoreError
from .models import Message, Participant

logger = logging.getLogger(__name__)


class Store:
    def __init__(self, session_factory) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("store operation failed")
            raise StoreError(f"store operation failed: {exc.__class__.__name__}") from exc

    # Participants

    async def find_participant(self, name: str) -> Participant | None:
        async with self._session() as session:
            return await session.get(Participant, name)

    async def list_participants(self) -> list[Participant]:
        async with self._session() as session:
            return list((await session.exec(select(Participant))).all())

    async def insert_participant(self, participant: Participant) -> Participant:
        try:
            async with self._session() as session:
                session.add(participant)
                await session.commit()
        except IntegrityError as exc:
            raise Conflict(f"name {participant.name!r} is already taken") from exc
        return participant

    async def touch_participant(self, name: str, last_seen: float) -> bool:
        """Set ``last_seen`` on the existing record; False when there is none."""
        stmt = (
            update(Participant)
            .where(Participant.name == name)
            .values(last_seen=last_seen)
        )
        async with self._session() as session:
            result = await session.exec(stmt)
            await session.commit()
            return result.rowcount == 1

    async def delete_participant_if_stale(self, name: str, cutoff: float) -> bool:
        """Delete ``name`` only if its last heartbeat is still older than ``cutoff``."""
        stmt = delete(Participant).where(
            Participant.name == name,
            Participant.last_seen < cutoff,
        )
        async with self._session() as session:
            result = await session.exec(stmt)
            await session.commit()
            return result.rowcount == 1

    # Messages

    async def insert_message(self, message: Message) -> Message:
        async with self._session() as session:
            session.add(message)
            await session.commit()
            await session.refresh(message)
            return message

    async def find_message(self, message_id: int) -> Message | None:
        async with self._session() as session:
            return await session.get(Message, message_id)

    async def list_messages(self) -> list[Message]:
        async with self._session() as session:
            stmt = select(Message).order_by(Message.id)
            return list((await session.exec(stmt)).all())

    async def update_message(self, message_id: int, **values) -> Message | None:
        async with self._session() as session:
            message = await session.get(Message, message_id)
            if message is None:
                return None
            for key, value in values.items():
                setattr(message, key, value)
            session.add(message)
            await session.commit()
            await session.refresh(message)
            return message

    async def delete_message(self, message_id: int) -> bool:
        stmt = delete(Message).where(Message.id == message_id)
        async with self._session() as session:
            result = await session.exec(stmt)
            await session.commit()
            return result.rowcount == 1
