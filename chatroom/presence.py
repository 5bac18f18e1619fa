# chatroom/presence.py
# Liveness is inferred from heartbeat recency only; there is no leave request.
# A participant silent for longer than ``stale_after`` seconds is removed by
# the next sweep, which announces the departure with a ``status`` message.
import asyncio
import logging
import time
from typing import Callable

from .errors import Conflict, NotFound, ValidationError
from .models import Message, MessageKind, Participant, display_time
from .store import Store

logger = logging.getLogger(__name__)

JOINED = "joined"
LEFT = "left"


class PresenceTracker:
    def __init__(
        self,
        store: Store,
        broadcast_target: str = "Todos",
        stale_after: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._broadcast_target = broadcast_target
        self._stale_after = stale_after
        self._clock = clock

    def _status_message(self, name: str, text: str, now: float) -> Message:
        return Message(
            sender=name,
            recipient=self._broadcast_target,
            text=text,
            kind=MessageKind.STATUS.value,
            time=display_time(now),
        )

    async def register(self, name: str) -> None:
        """Create ``name`` and announce it; raises Conflict when the name is live."""
        if name == self._broadcast_target:
            raise ValidationError([{"field": "name", "message": f"{name!r} is reserved"}])
        if await self._store.find_participant(name) is not None:
            raise Conflict(f"name {name!r} is already taken")
        now = self._clock()
        await self._store.insert_participant(Participant(name=name, last_seen=now))
        # not rolled back if the announcement fails
        await self._store.insert_message(self._status_message(name, JOINED, now))
        logger.info("participant %s joined", name)

    async def heartbeat(self, name: str) -> None:
        if not await self._store.touch_participant(name, self._clock()):
            raise NotFound(f"participant {name!r} not found")

    async def refresh(self, name: str) -> bool:
        """Heartbeat that tolerates unknown names."""
        return await self._store.touch_participant(name, self._clock())

    async def is_present(self, name: str | None) -> bool:
        if not name:
            return False
        return await self._store.find_participant(name) is not None

    async def sweep(self) -> list[str]:
        """Evict stale participants and return the names removed in this cycle."""
        now = self._clock()
        cutoff = now - self._stale_after
        evicted = []
        for participant in await self._store.list_participants():
            if now - participant.last_seen <= self._stale_after:
                continue
            try:
                # a heartbeat landing after the scan keeps the row
                removed = await self._store.delete_participant_if_stale(participant.name, cutoff)
                if not removed:
                    continue
                evicted.append(participant.name)
                await self._store.insert_message(self._status_message(participant.name, LEFT, now))
            except Exception:
                logger.exception("failed to evict participant %s", participant.name)
        if evicted:
            logger.info("evicted %d stale participant(s): %s", len(evicted), ", ".join(evicted))
        return evicted

    # last: the method name shadows the builtin for the rest of the class body
    async def list(self) -> list[Participant]:
        return await self._store.list_participants()


class Sweeper:
    """Background task running ``PresenceTracker.sweep`` on a fixed period."""

    def __init__(self, tracker: PresenceTracker, interval: float = 15.0) -> None:
        self._tracker = tracker
        self._interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="presence-sweeper")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self._tracker.sweep()
            except Exception:
                logger.exception("presence sweep failed")
