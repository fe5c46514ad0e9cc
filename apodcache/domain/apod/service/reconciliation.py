"""ReconciliationService - decides between cache, upstream, merge and fallback."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import logfire

from apodcache.domain.apod.model.record import DailyRecord
from apodcache.domain.apod.model.value import CacheStats, HealthReport
from apodcache.domain.apod.port.repository import DailyRecordRepository
from apodcache.domain.apod.port.upstream import UpstreamClient
from apodcache.domain.apod.validation import (
    MAX_RECENT_LIMIT,
    MAX_SEARCH_LIMIT,
    iter_dates,
    validate_count,
    validate_date,
    validate_limit,
    validate_query,
    validate_range,
)
from apodcache.domain.shared.error import ReconciliationError, UpstreamError, ValidationError
from apodcache.domain.shared.outcome import attempt
from apodcache.domain.shared.service import Service

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ReconciliationService(Service):
    """Cache-aside access to daily records.

    Point lookups are served from the cache while younger than ``ttl`` and
    fall back to a stale cached copy when upstream fails. Range lookups fetch
    the single span enclosing every missing date and merge it over the cached
    rows, fresh values winning. Random samples always go upstream. Search,
    recent and stats only read the cache.

    Storage failures never fail a request on their own; they only surface
    when upstream has also failed and the cache was the last resort.
    """

    record_repo: DailyRecordRepository
    upstream: UpstreamClient
    ttl: timedelta = DEFAULT_TTL
    clock: Callable[[], datetime] = utc_now

    async def get(
        self,
        date: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        count: int | None = None,
    ) -> DailyRecord | list[DailyRecord]:
        """Dispatch a combined query: date, range, random count, or today."""
        if date is not None:
            return await self.get_by_date(date)
        if start_date is not None or end_date is not None:
            if start_date is None or end_date is None:
                raise ValidationError(
                    "start_date and end_date must be provided together",
                    field="start_date" if start_date is None else "end_date",
                )
            return await self.get_by_range(start_date, end_date)
        if count is not None:
            return await self.get_random(count)
        return await self.get_by_date(self._today().isoformat())

    async def get_by_date(self, date: str) -> DailyRecord:
        with logfire.span("GetByDate", date=date):
            validate_date(date, today=self._today())

            cached = await attempt(self.record_repo.find_by_date(date))
            if not cached:
                logger.warning("Cache lookup failed for %s: %s", date, cached.error)
            elif cached.value is not None and cached.value.is_fresh(self.clock(), self.ttl):
                logger.debug("Cache hit for %s", date)
                return cached.value

            try:
                record = await self.upstream.fetch_by_date(date)
            except UpstreamError as e:
                logger.warning("Upstream fetch failed for %s: %s", date, e.message)
                return await self._fallback(date, e)

            await self._store(record)
            return record

    async def get_by_range(self, start: str, end: str) -> list[DailyRecord]:
        with logfire.span("GetByRange", start=start, end=end):
            start_date, end_date = validate_range(start, end, today=self._today())

            lookup = await attempt(self.record_repo.find_by_range(start, end))
            if not lookup:
                logger.warning(
                    "Cache range lookup failed for %s..%s: %s", start, end, lookup.error
                )
            cached = lookup.value or []

            present = {record.date for record in cached}
            missing = [
                day.isoformat()
                for day in iter_dates(start_date, end_date)
                if day.isoformat() not in present
            ]

            fetched: list[DailyRecord] = []
            if missing:
                # One call for the enclosing span; cached dates inside it are refetched.
                logger.debug(
                    "Range %s..%s missing %d dates, fetching %s..%s",
                    start,
                    end,
                    len(missing),
                    missing[0],
                    missing[-1],
                )
                try:
                    fetched = await self.upstream.fetch_by_range(missing[0], missing[-1])
                except UpstreamError as e:
                    if not lookup:
                        raise ReconciliationError(
                            f"Failed to get records for {start}..{end}",
                            upstream_error=e,
                            cache_error=lookup.error,
                        ) from e
                    logger.warning(
                        "Upstream range fetch failed for %s..%s, serving cache only: %s",
                        missing[0],
                        missing[-1],
                        e.message,
                    )
                else:
                    for record in fetched:
                        await self._store(record)

            merged = {record.date: record for record in cached}
            merged.update(
                {record.date: record for record in fetched if start <= record.date <= end}
            )
            return sorted(merged.values(), key=lambda record: record.date, reverse=True)

    async def get_random(self, count: int) -> list[DailyRecord]:
        with logfire.span("GetRandom", count=count):
            validate_count(count)
            records = await self.upstream.fetch_random(count)
            for record in records:
                await self._store(record)
            return records

    async def search(self, query: str, limit: int = 20) -> list[DailyRecord]:
        with logfire.span("Search", query=query, limit=limit):
            query = validate_query(query)
            validate_limit(limit, maximum=MAX_SEARCH_LIMIT)
            return await self.record_repo.search(query, limit)

    async def get_recent(self, limit: int = 10) -> list[DailyRecord]:
        validate_limit(limit, maximum=MAX_RECENT_LIMIT)
        return await self.record_repo.find_recent(limit)

    async def stats(self) -> CacheStats:
        total = await self.record_repo.count()
        latest = await self.record_repo.find_recent(1)
        return CacheStats(total_records=total, latest_date=latest[0].date if latest else None)

    async def health(self) -> HealthReport:
        counted = await attempt(self.record_repo.count())
        if not counted:
            return HealthReport(storage_ok=False, error=counted.error.message)
        return HealthReport(storage_ok=True, total_records=counted.value)

    async def forget(self, date: str) -> bool:
        """Remove one cached record. Administrative; never used by the query paths."""
        validate_date(date, today=self._today())
        removed = await self.record_repo.delete(date)
        logger.info("Removed cached record %s: %s", date, removed)
        return removed

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _today(self):
        return self.clock().date()

    async def _store(self, record: DailyRecord) -> None:
        """Best-effort write-back; storage failures are logged and dropped."""
        saved = await attempt(self.record_repo.save(record))
        if not saved:
            logger.warning("Could not cache record %s: %s", record.date, saved.error)

    async def _fallback(self, date: str, upstream_error: UpstreamError) -> DailyRecord:
        """Serve any cached copy, however stale, after an upstream failure."""
        cached = await attempt(self.record_repo.find_by_date(date))
        if cached and cached.value is not None:
            logger.info("Serving stale cached record for %s", date)
            return cached.value
        raise ReconciliationError(
            f"Failed to get record for {date}",
            upstream_error=upstream_error,
            cache_error=cached.error,
        ) from upstream_error
