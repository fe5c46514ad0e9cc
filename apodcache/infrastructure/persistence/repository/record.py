"""SQL implementation of DailyRecordRepository (SQLite and PostgreSQL)."""

import logging
import operator
import re
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from functools import reduce
from typing import Any

from sqlalchemy import case, delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apodcache.domain.apod.model.record import DailyRecord
from apodcache.domain.apod.port.repository import DailyRecordRepository
from apodcache.domain.shared.error import StorageError
from apodcache.infrastructure.persistence.mappers.record import (
    CONTENT_COLUMNS,
    record_to_dict,
    row_to_record,
)
from apodcache.infrastructure.persistence.tables import daily_records_table

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

# Search scoring weights per matched term
TITLE_WEIGHT = 2
EXPLANATION_WEIGHT = 1
MAX_SEARCH_TERMS = 10

_TERM_RE = re.compile(r"\w+")


def _search_terms(query: str) -> list[str]:
    """Lowercased distinct word terms, in first-seen order."""
    terms = dict.fromkeys(_TERM_RE.findall(query.lower()))
    return list(terms)[:MAX_SEARCH_TERMS]


def _utc_now() -> datetime:
    return datetime.now(UTC)


class SqlDailyRecordRepository(DailyRecordRepository):
    """SQLAlchemy Core implementation of DailyRecordRepository.

    Writes commit immediately: each save is its own atomic upsert, so a
    failure later in the same unit of work never un-caches earlier records.
    Driver errors roll the session back and surface as StorageError.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.session = session
        self._clock = clock

    @asynccontextmanager
    async def _storage(self, action: str) -> AsyncIterator[None]:
        try:
            yield
        except (SQLAlchemyError, OSError) as e:
            await self._rollback()
            raise StorageError(f"Failed to {action}: {e}") from e

    async def _rollback(self) -> None:
        try:
            await self.session.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.debug("Rollback after storage failure also failed: %s", e)

    def _upsert(self, values: dict[str, Any]):
        dialect = self.session.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise StorageError(f"Unsupported database dialect for upsert: {dialect}")

        stmt = insert(daily_records_table).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=[daily_records_table.c.date],
            set_={column: stmt.excluded[column] for column in (*CONTENT_COLUMNS, "updated_at")},
        ).returning(*daily_records_table.c)

    async def save(self, record: DailyRecord) -> DailyRecord:
        """Insert the record, or overwrite the row with the same date.

        created_at survives an overwrite; updated_at is always refreshed.
        """
        async with self._storage(f"save record {record.date}"):
            stmt = self._upsert(record_to_dict(record, self._clock()))
            result = await self.session.execute(stmt)
            row = result.mappings().one()
            await self.session.commit()
        return row_to_record(dict(row))

    async def find_by_date(self, date: str) -> DailyRecord | None:
        stmt = select(daily_records_table).where(daily_records_table.c.date == date)
        async with self._storage(f"find record {date}"):
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        return row_to_record(dict(row)) if row else None

    async def find_by_range(self, start: str, end: str) -> list[DailyRecord]:
        """Records with start <= date <= end, newest first."""
        stmt = (
            select(daily_records_table)
            .where(daily_records_table.c.date >= start)
            .where(daily_records_table.c.date <= end)
            .order_by(daily_records_table.c.date.desc())
        )
        async with self._storage(f"find records {start}..{end}"):
            result = await self.session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_record(dict(r)) for r in rows]

    async def find_recent(self, limit: int) -> list[DailyRecord]:
        stmt = (
            select(daily_records_table)
            .order_by(daily_records_table.c.date.desc())
            .limit(limit)
        )
        async with self._storage("find recent records"):
            result = await self.session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_record(dict(r)) for r in rows]

    async def search(self, query: str, limit: int) -> list[DailyRecord]:
        """Ranked match of query terms against title and explanation.

        A record scores TITLE_WEIGHT per term found in its title plus
        EXPLANATION_WEIGHT per term found in its explanation; records with no
        match are excluded. Ties go to the newer date.
        """
        terms = _search_terms(query)
        if not terms:
            return []

        title = func.lower(daily_records_table.c.title)
        explanation = func.lower(daily_records_table.c.explanation)
        parts = []
        for term in terms:
            parts.append(case((title.contains(term, autoescape=True), TITLE_WEIGHT), else_=0))
            parts.append(
                case((explanation.contains(term, autoescape=True), EXPLANATION_WEIGHT), else_=0)
            )
        score = reduce(operator.add, parts)

        stmt = (
            select(daily_records_table, score.label("score"))
            .where(score > 0)
            .order_by(score.desc(), daily_records_table.c.date.desc())
            .limit(limit)
        )
        async with self._storage(f"search records for {query!r}"):
            result = await self.session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_record(dict(r)) for r in rows]

    async def count(self) -> int:
        stmt = select(func.count()).select_from(daily_records_table)
        async with self._storage("count records"):
            result = await self.session.execute(stmt)
            return result.scalar_one()

    async def exists(self, date: str) -> bool:
        stmt = select(daily_records_table.c.date).where(daily_records_table.c.date == date)
        async with self._storage(f"check record {date}"):
            result = await self.session.execute(stmt)
            return result.first() is not None

    async def delete(self, date: str) -> bool:
        stmt = delete(daily_records_table).where(daily_records_table.c.date == date)
        async with self._storage(f"delete record {date}"):
            result = await self.session.execute(stmt)
            await self.session.commit()
        return result.rowcount > 0
