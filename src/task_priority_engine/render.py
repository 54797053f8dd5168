"""Render task listings and statistics with rich."""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .reporting import QueueStatistics, task_info
from .task_engine import Task


def _due_cell(days: Optional[int], overdue: bool) -> str:
    if days is None:
        return "[dim]-[/dim]"
    if overdue:
        return f"[red]{-days}d late[/red]"
    if days == 0:
        return "[yellow]today[/yellow]"
    return f"in {days}d"


def task_table(tasks: Iterable[Task], now: date | datetime, *, title: Optional[str] = None) -> Table:
    """Build a table of *tasks* in the order given."""
    table = Table(title=title, show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Priority", justify="right", style="bold")
    table.add_column("Description")
    table.add_column("Due")
    table.add_column("Status")
    for position, task in enumerate(tasks, start=1):
        info = task_info(task, now)
        table.add_row(
            str(position),
            str(info.id),
            str(info.priority),
            escape(info.description),
            info.due_date.isoformat() if info.due_date else "-",
            _due_cell(info.days_until_due, info.overdue),
        )
    return table


def print_tasks(
    console: Console,
    tasks: list[Task],
    now: date | datetime,
    *,
    title: Optional[str] = None,
    empty_message: str = "No tasks in queue.",
) -> None:
    if not tasks:
        console.print(f"[dim]{empty_message}[/dim]")
        return
    console.print(task_table(tasks, now, title=title))


def print_task(
    console: Console,
    label: str,
    task: Optional[Task],
    now: date | datetime | None = None,
) -> None:
    if task is None:
        console.print(f"{label}: [dim]no task[/dim]")
        return
    text = task.describe(now) if now is not None else str(task)
    console.print(f"{label}: {text}", markup=False, highlight=False)


def print_statistics(console: Console, stats: QueueStatistics) -> None:
    table = Table(title="Task Statistics", show_header=False, box=None)
    table.add_row("Strategy:", stats.strategy)
    table.add_row("Total tasks:", str(stats.total))
    table.add_row("Overdue tasks:", str(stats.overdue))
    table.add_row(f"Due within {stats.due_soon_days} days:", str(stats.due_soon))
    for priority, n in stats.by_priority.items():
        table.add_row(f"  Priority {priority}:", f"{n} task{'s' if n != 1 else ''}")
    console.print(table)
