"""Explicit success/failure values for soft-failable storage calls.

Cache reads and writes are allowed to fail without failing the request.
Instead of intercepting StorageError at every call site, callers run the
storage coroutine through ``attempt`` and branch on the returned Outcome.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from apodcache.domain.shared.error import StorageError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a storage call.

    Attributes:
        value: The call's return value (meaningless when ``error`` is set).
        error: The storage failure, or None on success.
    """

    value: T | None = None
    error: StorageError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        """Return True if the call succeeded."""
        return self.ok


async def attempt(call: Awaitable[T]) -> Outcome[T]:
    """Await a storage call, capturing StorageError as a failed Outcome.

    Any other exception propagates unchanged.
    """
    try:
        return Outcome(value=await call)
    except StorageError as e:
        return Outcome(error=e)
