"""Rich terminal output for checked pull requests."""

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich import box

from .models import PRRecord

console = Console()


def _flag(value: bool) -> Text:
    return Text("Yes", style="green") if value else Text("No", style="dim")


def _status(record: PRRecord) -> Text:
    if record.is_pending:
        return Text("PENDING", style="bold yellow")
    return Text("READY", style="bold green")


def _topic_cell(record: PRRecord) -> Text:
    if not record.repo_must_have_topic:
        return Text("-", style="dim")
    return _flag(bool(record.repo_has_hacktoberfest_topic))


def display_records(records: list[PRRecord], username: str):
    """Display a summary table of a user's eligible pull requests."""
    if not records:
        console.print(f"[yellow]No eligible pull requests found for {username}.[/yellow]")
        return

    table = Table(title=f"Hacktoberfest pull requests for {username}", box=box.ROUNDED)
    table.add_column("#", width=4, justify="right")
    table.add_column("Repository", style="cyan", max_width=30)
    table.add_column("Pull request", max_width=45)
    table.add_column("Opened", width=18)
    table.add_column("Open", width=5)
    table.add_column("Merged", width=6)
    table.add_column("Approved", width=8)
    table.add_column("Accepted", width=8)
    table.add_column("Topic", width=5)
    table.add_column("Status", width=8)

    for i, r in enumerate(records, 1):
        table.add_row(
            str(i),
            r.repo_name,
            f"#{r.number}: {r.title[:38]}",
            r.created_at,
            _flag(r.open),
            _flag(r.merged),
            _flag(r.approved),
            _flag(r.has_hacktoberfest_label),
            _topic_cell(r),
            _status(r),
        )

    console.print()
    console.print(table)

    pending = sum(1 for r in records if r.is_pending)
    console.print(
        f"\n  Total: {len(records)} eligible, "
        f"[green]{len(records) - pending} ready[/green], "
        f"[yellow]{pending} pending review period[/yellow]"
    )


def display_rejections(rejections: dict[str, int]):
    if not rejections:
        return
    console.print("\n[dim]Dropped pull requests:[/dim]")
    for reason, count in sorted(rejections.items(), key=lambda item: item[1], reverse=True):
        console.print(f"  [dim]- {reason}: {count}[/dim]")
