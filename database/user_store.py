"""
User store — exact-match lookup and atomic insert-if-absent for user records.

The store owns user records.  ``insert_if_absent`` is a single
``INSERT .. ON CONFLICT (email) DO NOTHING RETURNING`` statement, so two
concurrent registrations for the same email can never both create a row.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncEngine

from database.models import User
from database.session import create_session_factory

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


@dataclass(frozen=True)
class UserRecord:
    id: str
    first_name: str
    last_name: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = None


class UserStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    async def insert_if_absent(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> Optional[UserRecord]:
        """Create the record and return it, or return None if the email is taken."""
        ...


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=str(user.user_id),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        password_hash=user.password_hash,
        created_at=user.created_at,
    )


class SqlUserStore:
    """:class:`UserStore` backed by an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine) -> None:
        dialect = engine.dialect.name
        if dialect not in _INSERTS:
            raise ValueError(f"Unsupported user-store dialect: {dialect}")
        self._insert = _INSERTS[dialect]
        self._session_factory = create_session_factory(engine)

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(User).where(User.email == email)
            )
            user = result.scalar_one_or_none()
        return _to_record(user) if user is not None else None

    async def insert_if_absent(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> Optional[UserRecord]:
        record = UserRecord(
            id=str(uuid.uuid4()),
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        stmt = (
            self._insert(User)
            .values(
                user_id=uuid.UUID(record.id),
                first_name=record.first_name,
                last_name=record.last_name,
                email=record.email,
                password_hash=record.password_hash,
                created_at=record.created_at,
            )
            .on_conflict_do_nothing(index_elements=["email"])
            .returning(User.user_id)
        )
        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                inserted = result.scalar_one_or_none()
                await session.commit()
            except Exception:
                await session.rollback()
                raise

        if inserted is None:
            logger.debug("insert_if_absent: email already present")
            return None
        return record
