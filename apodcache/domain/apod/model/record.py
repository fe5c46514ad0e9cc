"""DailyRecord - one astronomy picture, keyed by calendar date."""

from datetime import datetime, timedelta
from typing import Annotated

from pydantic import Field, StringConstraints

from apodcache.domain.apod.model.value import DATE_PATTERN, URL_PATTERN, MediaType
from apodcache.domain.shared.model.value import ValueObject

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Explanation = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=5000)
]
Copyright = Annotated[str, StringConstraints(strip_whitespace=True, max_length=200)]
Url = Annotated[str, StringConstraints(pattern=URL_PATTERN)]


class DailyRecord(ValueObject):
    """A single day's entry as served by the provider and stored in the cache.

    ``created_at``/``updated_at`` are cache bookkeeping: they are None on a
    record that came straight from upstream and are set by the repository on
    save. ``updated_at`` is what the TTL check reads.
    """

    date: str = Field(pattern=DATE_PATTERN)
    title: Title
    explanation: Explanation
    media_type: MediaType
    url: Url
    hd_url: Url | None = None
    copyright: Copyright | None = None
    service_version: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        """True if the record was written less than ``ttl`` before ``now``."""
        if self.updated_at is None:
            return False
        return now - self.updated_at < ttl
