# chatroom/database.py
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.engine.url import make_url
from sqlalchemy.pool import StaticPool


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """Async engine for any async driver URL (aiosqlite, asyncpg, ...)."""
    url = make_url(database_url)
    kwargs = {}
    # only SQLite needs that arg
    opts = {"check_same_thread": False} if url.drivername.startswith("sqlite") else {}
    if url.drivername.startswith("sqlite") and url.database in (None, "", ":memory:"):
        # an in-memory database lives as long as its one connection
        kwargs["poolclass"] = StaticPool

    return create_async_engine(
        database_url,
        echo=echo,
        connect_args=opts,
        **kwargs,
    )


# Async session factory
def make_session_factory(engine: AsyncEngine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


# Initialize DB (to call on startup)
async def init_db(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
