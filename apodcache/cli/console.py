"""Console output for the CLI.

Provides a Console class that wraps rich for consistent, polished output.
All CLI output should go through this module.
"""

from datetime import UTC, datetime
from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from apodcache.domain.apod.model.record import DailyRecord


def relative_time(moment: datetime, now: datetime | None = None) -> str:
    """Convert a timestamp to relative time string (e.g., '2 hours ago')."""
    now = now or datetime.now(UTC)
    seconds = (now - moment).total_seconds()
    if seconds < 60:
        return "just now"
    elif seconds < 3600:
        mins = int(seconds // 60)
        return f"{mins} minute{'s' if mins != 1 else ''} ago"
    elif seconds < 86400:
        hours = int(seconds // 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"
    elif seconds < 604800:
        days = int(seconds // 86400)
        return f"{days} day{'s' if days != 1 else ''} ago"
    else:
        return moment.strftime("%Y-%m-%d %H:%M")


class Console:
    """CLI output manager wrapping rich.

    Provides consistent formatting for success/error messages, tables,
    and record views.
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
    ) -> None:
        """Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None).
        """
        self._console = RichConsole(
            force_terminal=force_terminal,
            stderr=False,
        )
        self._err_console = RichConsole(
            force_terminal=force_terminal,
            stderr=True,
        )

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        """Print a success message."""
        self._console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(message, markup=False, highlight=False)
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        """Print a warning message."""
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console (pass-through to rich)."""
        self._console.print(*args, **kwargs)

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
    ) -> None:
        """Print a table.

        Args:
            rows: List of dicts containing row data.
            columns: List of (key, header) tuples defining columns.
            title: Optional table title.
        """
        table = Table(title=title, show_header=True, header_style="bold")

        for _, header in columns:
            table.add_column(header)

        for row in rows:
            table.add_row(*(str(row.get(key) or "") for key, _ in columns))

        self._console.print(table)

    def record_detail(self, record: DailyRecord) -> None:
        """Print one record as a panel."""
        lines = [record.explanation, ""]

        meta_parts = [f"[cyan]Media:[/cyan] {record.media_type}"]
        if record.copyright:
            meta_parts.append(f"[cyan]©[/cyan] {record.copyright}")
        if record.updated_at:
            meta_parts.append(f"[cyan]Cached:[/cyan] {relative_time(record.updated_at)}")
        lines.append("    ".join(meta_parts))
        lines.append(f"[link={record.url}]{record.url}[/link]")
        if record.hd_url and record.hd_url != record.url:
            lines.append(f"[dim]HD:[/dim] [link={record.hd_url}]{record.hd_url}[/link]")

        self._console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold]{record.title}[/bold]",
                subtitle=f"[dim]{record.date}[/dim]",
                border_style="blue",
                padding=(1, 2),
            )
        )

    def record_list(self, records: list[DailyRecord], *, title: str | None = None) -> None:
        """Print records as a date/title/media table."""
        if not records:
            self.warning("No records found")
            return
        self.table(
            [r.model_dump(mode="json") for r in records],
            [("date", "Date"), ("title", "Title"), ("media_type", "Media")],
            title=title,
        )


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
