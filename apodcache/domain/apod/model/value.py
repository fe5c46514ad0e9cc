"""APOD domain value objects."""

import re
from datetime import date
from enum import StrEnum

from apodcache.domain.shared.model.value import ValueObject

# The provider's archive starts on this date; nothing earlier exists upstream.
EPOCH = date(1995, 6, 16)

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
DATE_RE = re.compile(DATE_PATTERN)

URL_PATTERN = r"^https?://.+"


class MediaType(StrEnum):
    IMAGE = "image"
    VIDEO = "video"


class CacheStats(ValueObject):
    """Summary of what the local cache holds."""

    total_records: int
    latest_date: str | None = None


class HealthReport(ValueObject):
    """Storage reachability as seen by the reconciliation service."""

    storage_ok: bool
    total_records: int | None = None
    error: str | None = None
