"""Main CLI application using Cyclopts.

Every command runs in-process: it builds the DI container, opens one unit
of work and talks to the cache and upstream directly.
"""

import cyclopts

from apodcache.cli.commands import cache, records

app = cyclopts.App(
    name="apodcache",
    help="Astronomy Picture of the Day - local cache",
)

app.command(records.get, name="get")
app.command(records.range_, name="range")
app.command(records.random, name="random")
app.command(cache.search, name="search")
app.command(cache.recent, name="recent")
app.command(cache.stats, name="stats")
app.command(cache.health, name="health")
app.command(cache.forget, name="forget")


if __name__ == "__main__":
    app()
