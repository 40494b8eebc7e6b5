"""Durable mirror of the in-memory review list.

Every accepted review is inserted into the ``reviews`` table, and the table is
replayed once at startup to seed :class:`~review_service.store.ReviewStore`.
The mirror never reads from or writes to the store itself; keeping the two in
step is the caller's job.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)

from review_service.db_core import Base
from review_service.models import ReviewRecord
from review_service.schemas import Review

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Raised when the durable store cannot be prepared, read or written."""


def _sqlite_file(database_url: str) -> Optional[Path]:
    """Return the database file behind an SQLite URL, or ``None`` for other backends."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return None
    database = url.database
    if not database or database == ":memory:" or database.startswith("file:"):
        return None
    return Path(database)


class PersistenceMirror:
    """Async SQLAlchemy access to the ``reviews`` table."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
        self._session_maker = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )

    async def initialize(self) -> None:
        """Create the database file and the ``reviews`` table if they are missing.

        Safe to call when both already exist.

        Raises:
            PersistenceError: If the file or the table cannot be created.
        """
        path = _sqlite_file(self.database_url)
        if path is not None and not path.exists():
            logger.info("Database file does not exist. Creating a new one: %s", path)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
            except OSError as exc:
                raise PersistenceError(
                    f"failed to create database file: {exc}"
                ) from exc

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to create table: {exc}") from exc
        logger.info("Database initialized (%s).", self.engine.url.get_backend_name())

    async def load_all(self) -> List[Review]:
        """Read every stored review in ascending ``id`` order.

        Rows whose columns are NULL or not text are logged and skipped.

        Raises:
            PersistenceError: If the table cannot be read.
        """
        try:
            async with self._session_maker() as session:
                stmt = select(ReviewRecord).order_by(ReviewRecord.id.asc())
                result = await session.execute(stmt)
                records = result.scalars().all()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to fetch reviews: {exc}") from exc

        reviews: List[Review] = []
        for record in records:
            try:
                reviews.append(record.to_review())
            except ValidationError as exc:
                logger.error("Failed to scan review id=%s: %s", record.id, exc)
        return reviews

    async def save(self, review: Review) -> None:
        """Insert one review; the row id is assigned by the database.

        Raises:
            PersistenceError: If the insert fails.
        """
        try:
            async with self._session_maker() as session:
                session.add(ReviewRecord(name=review.name, review=review.review))
                await session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to save review to the database: %s", exc)
            raise PersistenceError(f"failed to save review: {exc}") from exc

    async def close(self) -> None:
        await self.engine.dispose()
