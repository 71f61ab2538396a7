"""
Async SQLAlchemy engine and session factory for the user store.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from database.models import Base


def create_engine(db_uri: str, **engine_kwargs) -> AsyncEngine:
    """Build the process-wide engine.  Pool settings only apply to server databases."""
    if not db_uri.startswith("sqlite"):
        engine_kwargs.setdefault("pool_size", 10)
        engine_kwargs.setdefault("max_overflow", 20)
        engine_kwargs.setdefault("pool_recycle", 3600)
    return create_async_engine(db_uri, echo=False, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables (including the unique index on ``users.email``)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
