# chatroom/main.py
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable

import uvicorn
from fastapi import Body, Depends, FastAPI, Header, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .database import create_engine, init_db, make_session_factory
from .errors import ChatError, ValidationError
from .messages import MessageBoard
from .presence import PresenceTracker, Sweeper
from .store import Store
from .validation import validate_participant, violations_from_errors

logger = logging.getLogger(__name__)


def _wire(app: FastAPI, store: Store, settings: Settings, clock: Callable[[], float]):
    presence = PresenceTracker(
        store,
        broadcast_target=settings.broadcast_target,
        stale_after=settings.stale_after,
        clock=clock,
    )
    app.state.store = store
    app.state.presence = presence
    app.state.board = MessageBoard(store, presence, clock=clock)


def get_presence(request: Request) -> PresenceTracker:
    return request.app.state.presence


def get_board(request: Request) -> MessageBoard:
    return request.app.state.board


def create_app(
    settings: Settings | None = None,
    store: Store | None = None,
    clock: Callable[[], float] = time.time,
    run_sweeper: bool = True,
) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = None
        if app.state.store is None:
            engine = create_engine(settings.database_url, echo=settings.echo_sql)
            await init_db(engine)
            _wire(app, Store(make_session_factory(engine)), settings, clock)
        sweeper = Sweeper(app.state.presence, settings.sweep_interval)
        if run_sweeper:
            sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()
            if engine is not None:
                await engine.dispose()

    app = FastAPI(title="chatroom", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = None
    if store is not None:
        _wire(app, store, settings, clock)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ChatError)
    async def handle_chat_error(request: Request, exc: ChatError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        error = ValidationError(violations_from_errors(exc.errors()))
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.post("/participants", status_code=201)
    async def register(
        payload: Any = Body(default=None),
        presence: PresenceTracker = Depends(get_presence),
    ):
        data = validate_participant(payload)
        await presence.register(data.name)
        return Response(status_code=201)

    @app.get("/participants")
    async def list_participants(presence: PresenceTracker = Depends(get_presence)):
        return [p.as_dict() for p in await presence.list()]

    @app.post("/messages", status_code=201)
    async def post_message(
        payload: Any = Body(default=None),
        user: str | None = Header(default=None),
        board: MessageBoard = Depends(get_board),
    ):
        message = await board.post(user, payload)
        return message.as_dict()

    @app.get("/messages")
    async def get_messages(
        limit: int | None = Query(default=None),
        user: str | None = Header(default=None),
        board: MessageBoard = Depends(get_board),
    ):
        return [m.as_dict() for m in await board.list_for_viewer(user, limit)]

    @app.put("/messages/{message_id}")
    async def edit_message(
        message_id: int,
        payload: Any = Body(default=None),
        user: str | None = Header(default=None),
        board: MessageBoard = Depends(get_board),
    ):
        message = await board.edit(message_id, user, payload)
        return message.as_dict()

    @app.delete("/messages/{message_id}")
    async def delete_message(
        message_id: int,
        user: str | None = Header(default=None),
        board: MessageBoard = Depends(get_board),
    ):
        await board.delete(message_id, user)
        return Response(status_code=200)

    @app.post("/status")
    async def status(
        user: str | None = Header(default=None),
        presence: PresenceTracker = Depends(get_presence),
    ):
        await presence.heartbeat(user or "")
        return Response(status_code=200)

    return app


def run():
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
