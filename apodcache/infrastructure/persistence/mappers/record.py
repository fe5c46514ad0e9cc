"""DailyRecord mapper - converts between domain and persistence."""

from datetime import UTC, datetime
from typing import Any

from apodcache.domain.apod.model.record import DailyRecord

# Columns the upstream provider owns; bookkeeping timestamps are set by the repository.
CONTENT_COLUMNS = (
    "title",
    "explanation",
    "media_type",
    "url",
    "hd_url",
    "copyright",
    "service_version",
)


def _as_utc(value: datetime | str) -> datetime:
    # SQLite hands back naive datetimes (or strings) even for timezone=True columns
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def row_to_record(row: dict[str, Any]) -> DailyRecord:
    """Convert database row to DailyRecord."""
    return DailyRecord(
        date=row["date"],
        title=row["title"],
        explanation=row["explanation"],
        media_type=row["media_type"],
        url=row["url"],
        hd_url=row.get("hd_url"),
        copyright=row.get("copyright"),
        service_version=row["service_version"],
        created_at=_as_utc(row["created_at"]),
        updated_at=_as_utc(row["updated_at"]),
    )


def record_to_dict(record: DailyRecord, now: datetime) -> dict[str, Any]:
    """Convert DailyRecord to a database dict stamped with ``now``."""
    return {
        "date": record.date,
        "title": record.title,
        "explanation": record.explanation,
        "media_type": record.media_type.value,
        "url": record.url,
        "hd_url": record.hd_url,
        "copyright": record.copyright,
        "service_version": record.service_version,
        "created_at": now,
        "updated_at": now,
    }
