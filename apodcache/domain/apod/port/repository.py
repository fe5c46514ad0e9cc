"""DailyRecordRepository port - persistence interface for cached records."""

from abc import abstractmethod
from typing import Protocol

from apodcache.domain.apod.model.record import DailyRecord
from apodcache.domain.shared.port import Port


class DailyRecordRepository(Port, Protocol):
    """Store of DailyRecords keyed by date.

    Every method raises StorageError when the store is unavailable.
    """

    @abstractmethod
    async def save(self, record: DailyRecord) -> DailyRecord: ...

    @abstractmethod
    async def find_by_date(self, date: str) -> DailyRecord | None: ...

    @abstractmethod
    async def find_by_range(self, start: str, end: str) -> list[DailyRecord]: ...

    @abstractmethod
    async def find_recent(self, limit: int) -> list[DailyRecord]: ...

    @abstractmethod
    async def search(self, query: str, limit: int) -> list[DailyRecord]: ...

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    async def exists(self, date: str) -> bool: ...

    @abstractmethod
    async def delete(self, date: str) -> bool: ...
