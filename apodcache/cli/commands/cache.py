"""Commands that only read or administer the local cache."""

import sys

from apodcache.cli.console import get_console
from apodcache.cli.util import run
from apodcache.domain.apod.service.reconciliation import ReconciliationService


def search(query: str, /, limit: int = 20) -> None:
    """Search cached titles and explanations.

    Args:
        query: Words to look for; records matching more words rank higher.
        limit: Maximum number of results (1-100).
    """

    async def action(service: ReconciliationService):
        return await service.search(query, limit)

    records = run(action)
    get_console().record_list(records, title=f"Results for {query!r}")


def recent(limit: int = 10) -> None:
    """List the newest cached records.

    Args:
        limit: Maximum number of records (1-50).
    """

    async def action(service: ReconciliationService):
        return await service.get_recent(limit)

    get_console().record_list(run(action), title="Recent records")


def stats() -> None:
    """Show cache statistics."""

    async def action(service: ReconciliationService):
        return await service.stats()

    result = run(action)
    console = get_console()
    console.print(f"[bold]Records:[/bold] {result.total_records:,}")
    console.print(f"[bold]Latest:[/bold] {result.latest_date or '[dim]none[/dim]'}")


def health() -> None:
    """Check that the cache storage is reachable. Exits 1 when it is not."""

    async def action(service: ReconciliationService):
        return await service.health()

    report = run(action)
    console = get_console()
    if report.storage_ok:
        console.success(f"Storage OK ({report.total_records:,} records)")
    else:
        console.error(f"Storage unavailable: {report.error}")
        sys.exit(1)


def forget(date: str, /) -> None:
    """Remove the cached record for DATE. The next lookup refetches it.

    Args:
        date: Calendar date to remove (YYYY-MM-DD).
    """

    async def action(service: ReconciliationService):
        return await service.forget(date)

    console = get_console()
    if run(action):
        console.success(f"Removed {date}")
    else:
        console.warning(f"Nothing cached for {date}")
