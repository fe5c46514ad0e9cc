"""Port for the external APOD provider."""

from abc import abstractmethod
from typing import Protocol

from apodcache.domain.apod.model.record import DailyRecord
from apodcache.domain.shared.port import Port


class UpstreamClient(Port, Protocol):
    """Fetches records from the authoritative provider.

    Implementations raise UpstreamError for transport and HTTP failures and
    never retry on their own.
    """

    @abstractmethod
    async def fetch_by_date(self, date: str) -> DailyRecord: ...

    @abstractmethod
    async def fetch_by_range(self, start: str, end: str) -> list[DailyRecord]: ...

    @abstractmethod
    async def fetch_random(self, count: int) -> list[DailyRecord]: ...
