# chatroom/messages.py
import logging
import time
from typing import Any, Callable

from .errors import NotFound, UnprocessableEntity
from .guard import authorize_delete, authorize_edit
from .models import Message, display_time
from .presence import PresenceTracker
from .store import Store
from .validation import validate_limit, validate_message
from .visibility import filter_for_viewer

logger = logging.getLogger(__name__)


class MessageBoard:
    def __init__(
        self,
        store: Store,
        presence: PresenceTracker,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._presence = presence
        self._clock = clock

    async def _require_author(self, author: str | None) -> str:
        # check-then-act: a sweep may still evict the author before the write
        if not await self._presence.is_present(author):
            raise UnprocessableEntity("unknown user")
        return author

    async def post(self, author: str | None, payload: Any) -> Message:
        data = validate_message(payload)
        author = await self._require_author(author)
        message = Message(
            sender=author,
            recipient=data.to,
            text=data.text,
            kind=data.kind,
            time=display_time(self._clock()),
        )
        return await self._store.insert_message(message)

    async def list_for_viewer(self, viewer: str | None, limit: int | None = None) -> list[Message]:
        limit = validate_limit(limit)
        if viewer:
            # polling counts as a heartbeat for live participants
            await self._presence.refresh(viewer)
        return filter_for_viewer(await self._store.list_messages(), viewer, limit)

    async def edit(self, message_id: int, actor: str | None, payload: Any) -> Message:
        data = validate_message(payload)
        actor = await self._require_author(actor)
        authorize_edit(await self._store.find_message(message_id), actor, message_id)
        updated = await self._store.update_message(
            message_id, recipient=data.to, text=data.text, kind=data.kind
        )
        if updated is None:
            # deleted between the check and the update
            raise NotFound(f"message {message_id} not found")
        logger.debug("message %d edited by %s", message_id, actor)
        return updated

    async def delete(self, message_id: int, actor: str | None) -> None:
        authorize_delete(await self._store.find_message(message_id), actor, message_id)
        if not await self._store.delete_message(message_id):
            raise NotFound(f"message {message_id} not found")
        logger.debug("message %d deleted by %s", message_id, actor)
