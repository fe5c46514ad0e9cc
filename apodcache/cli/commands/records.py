"""Record lookup commands - by date, by range, random."""

from apodcache.cli.console import get_console
from apodcache.cli.util import run
from apodcache.domain.apod.service.reconciliation import ReconciliationService


def get(date: str | None = None, /) -> None:
    """Show the record for DATE (YYYY-MM-DD), or today's record.

    Served from the cache while fresh; refreshed from upstream otherwise.

    Args:
        date: Calendar date to show. Defaults to today (UTC).
    """

    async def action(service: ReconciliationService):
        if date is None:
            return await service.get()
        return await service.get_by_date(date)

    get_console().record_detail(run(action))


def range_(
    start: str,
    end: str,
    /,
) -> None:
    """List every record from START to END inclusive, newest first.

    Args:
        start: First date of the range (YYYY-MM-DD).
        end: Last date of the range (YYYY-MM-DD), at most 365 days after start.
    """

    async def action(service: ReconciliationService):
        return await service.get_by_range(start, end)

    records = run(action)
    get_console().record_list(records, title=f"{start} .. {end} ({len(records)} records)")


def random(count: int = 1, /) -> None:
    """Draw COUNT random records from upstream and cache them.

    Args:
        count: How many records to draw (1-100).
    """

    async def action(service: ReconciliationService):
        return await service.get_random(count)

    console = get_console()
    records = run(action)
    if len(records) == 1:
        console.record_detail(records[0])
    else:
        console.record_list(records, title=f"{len(records)} random records")
