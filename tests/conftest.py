"""Shared test fixtures and helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
from fastapi import FastAPI

from chatroom.config import Settings
from chatroom.database import create_engine, init_db, make_session_factory
from chatroom.main import create_app
from chatroom.messages import MessageBoard
from chatroom.models import Message, MessageKind
from chatroom.presence import PresenceTracker
from chatroom.store import Store


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_message(
    sender: str = "Alice",
    recipient: str = "Todos",
    text: str = "hello",
    kind: MessageKind = MessageKind.PUBLIC,
    message_id: int | None = None,
) -> Message:
    return Message(
        id=message_id,
        sender=sender,
        recipient=recipient,
        text=text,
        kind=kind.value,
        time="12:00:00",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite+aiosqlite://", sweep_interval=15, stale_after=10)


@pytest.fixture
async def store() -> AsyncIterator[Store]:
    engine = create_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield Store(make_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def presence(store: Store, clock: FakeClock) -> PresenceTracker:
    return PresenceTracker(store, broadcast_target="Todos", stale_after=10, clock=clock)


@pytest.fixture
def board(store: Store, presence: PresenceTracker, clock: FakeClock) -> MessageBoard:
    return MessageBoard(store, presence, clock=clock)


@pytest.fixture
def app(settings: Settings, store: Store, clock: FakeClock) -> FastAPI:
    return create_app(settings, store=store, clock=clock, run_sweeper=False)


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
