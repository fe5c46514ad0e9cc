"""Global test fixtures."""

import os
from datetime import datetime
from typing import Any

import pytest

from apodcache.domain.apod.model.record import DailyRecord

# Keep a developer's own settings out of Config() during tests
for _var in ("APOD_CONFIG_FILE", "APOD_LOG_FILE", "APOD_DATA_DIR", "APOD_DATABASE__URL"):
    os.environ.pop(_var, None)


def _make_record(
    date: str = "2024-05-01",
    *,
    updated_at: datetime | None = None,
    **overrides: Any,
) -> DailyRecord:
    fields: dict[str, Any] = {
        "date": date,
        "title": f"Picture for {date}",
        "explanation": f"An astronomy picture taken on {date}.",
        "media_type": "image",
        "url": f"https://apod.example.org/image/{date}.jpg",
        "hd_url": None,
        "copyright": None,
        "service_version": "v1",
        "created_at": updated_at,
        "updated_at": updated_at,
    }
    fields.update(overrides)
    return DailyRecord(**fields)


@pytest.fixture
def make_record():
    """Factory for DailyRecord test data."""
    return _make_record
