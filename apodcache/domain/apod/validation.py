"""Input checks for dates, ranges and counts.

Pure functions: they return the parsed value or raise ValidationError, and
never touch the cache or the network.
"""

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta

from apodcache.domain.apod.model.value import DATE_RE, EPOCH
from apodcache.domain.shared.error import ValidationError

MAX_RANGE_DAYS = 365
MAX_RANDOM_COUNT = 100
MAX_SEARCH_LIMIT = 100
MAX_RECENT_LIMIT = 50


def utc_today() -> date:
    return datetime.now(UTC).date()


def validate_date(value: str, *, today: date | None = None, field: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` key and check it lies in ``[EPOCH, today]``."""
    if not isinstance(value, str) or not DATE_RE.match(value):
        raise ValidationError(
            f"Invalid date format: {value!r}. Expected format: YYYY-MM-DD", field=field
        )
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}", field=field) from None

    if parsed < EPOCH:
        raise ValidationError(
            f"Date cannot be before {EPOCH.isoformat()}: {value}", field=field
        )
    if parsed > (today or utc_today()):
        raise ValidationError(f"Date cannot be in the future: {value}", field=field)
    return parsed


def validate_range(start: str, end: str, *, today: date | None = None) -> tuple[date, date]:
    """Validate both ends of an inclusive range and its length."""
    today = today or utc_today()
    start_date = validate_date(start, today=today, field="start_date")
    end_date = validate_date(end, today=today, field="end_date")

    if start_date > end_date:
        raise ValidationError(
            f"Start date cannot be after end date: {start} > {end}", field="start_date"
        )
    if (end_date - start_date).days > MAX_RANGE_DAYS:
        raise ValidationError(
            f"Date range cannot exceed {MAX_RANGE_DAYS} days", field="end_date"
        )
    return start_date, end_date


def validate_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError(f"Count must be an integer: {count!r}", field="count")
    if not 1 <= count <= MAX_RANDOM_COUNT:
        raise ValidationError(
            f"Count must be between 1 and {MAX_RANDOM_COUNT}", field="count"
        )
    return count


def validate_limit(limit: int, *, maximum: int, field: str = "limit") -> int:
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(f"Limit must be an integer: {limit!r}", field=field)
    if not 1 <= limit <= maximum:
        raise ValidationError(f"Limit must be between 1 and {maximum}", field=field)
    return limit


def validate_query(query: str) -> str:
    """Return the stripped search query; blank queries are rejected."""
    stripped = query.strip() if isinstance(query, str) else ""
    if not stripped:
        raise ValidationError("Search query is required", field="q")
    return stripped


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from ``start`` to ``end``, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
