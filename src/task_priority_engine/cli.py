#!/usr/bin/env python3
"""Provide the CLI entrypoint for the task priority engine.

The engine itself is in-memory only; the CLI drives it either through a
scripted walk-through (``demo``) or a line-oriented session on stdin
(``shell``).
"""

from __future__ import annotations

import argparse
import shlex
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from rich.console import Console

from .config import (
    default_config_path,
    get_default_strategy,
    get_due_soon_days,
    get_log_level,
    load_engine_config,
)
from .constants import DEFAULT_STRATEGY, VALID_LOG_LEVELS
from .render import print_statistics, print_task, print_tasks
from .reporting import queue_statistics
from .task_engine import SortingStrategy, TaskStore, ValidationError
from .task_engine.model import validate_description, validate_priority
from .utils import _parse_due


def _configure_logging(level: str = "INFO") -> None:
    """Configure loguru logger with the specified level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{module}</cyan>:<cyan>{line}</cyan> - "
            "{message}"
        ),
    )


def _resolve_settings(args: argparse.Namespace) -> tuple[SortingStrategy, int, str]:
    config_path = Path(args.config) if args.config else default_config_path(Path.cwd())
    config, err = load_engine_config(config_path)
    if err:
        sys.stderr.write(f"Ignoring unreadable config {err}\n")
    strategy = args.strategy or get_default_strategy(config) or DEFAULT_STRATEGY
    level = args.log_level or get_log_level(config)
    return SortingStrategy.parse(strategy), get_due_soon_days(config), level


def _parse_due_arg(store: TaskStore, raw: Optional[str]) -> Optional[date]:
    try:
        return _parse_due(raw, store.now().date())
    except ValueError:
        raise ValidationError(f"Invalid due date '{raw}' (use YYYY-MM-DD or +N/-N days)") from None


# ---------------------------------------------------------------------------
# demo
# ---------------------------------------------------------------------------

def _demo(args: argparse.Namespace, store: TaskStore, due_soon_days: int) -> int:
    console = Console(highlight=False)
    today = store.now().date()

    console.print("[bold]1. Adding tasks...[/bold]")
    samples = [
        ("Complete project report", 1, today + timedelta(days=2)),
        ("Buy groceries", 3, today + timedelta(days=1)),
        ("Call dentist", 2, today + timedelta(days=3)),
        ("Fix car", 4, today - timedelta(days=1)),
        ("Plan vacation", 5, today + timedelta(days=7)),
        ("Submit tax documents", 1, today + timedelta(days=1)),
    ]
    for description, priority, due in samples:
        print_task(console, "Added", store.add(description, priority, due), store.now())

    console.print(f"\n[bold]2. All tasks ({store.strategy.label} order):[/bold]")
    print_tasks(console, store.list_all(), store.now())

    console.print("\n[bold]3. Next task to work on:[/bold]")
    print_task(console, "Next", store.peek(), store.now())

    console.print("\n[bold]4. Complete next task:[/bold]")
    print_task(console, "Completed", store.complete_next(), store.now())

    console.print("\n[bold]5. Switch to due date order:[/bold]")
    store.set_strategy(SortingStrategy.DUE_DATE)
    print_tasks(console, store.list_all(), store.now())

    console.print("\n[bold]6. Most urgent by due date:[/bold]")
    print_task(console, "Most urgent", store.peek(), store.now())

    console.print("\n[bold]7. Switch to composite order:[/bold]")
    store.set_strategy(SortingStrategy.COMPOSITE)
    print_tasks(console, store.list_all(), store.now())

    console.print("\n[bold]8. Task statistics:[/bold]")
    print_statistics(console, queue_statistics(store, due_soon_days))

    console.print("\n[bold]9. High priority tasks (priority 1-2):[/bold]")
    high = store.filter_by_priority(1) + store.filter_by_priority(2)
    print_tasks(console, high, store.now(), empty_message="No high priority tasks.")

    console.print("\n[bold]10. Overdue tasks:[/bold]")
    print_tasks(console, store.filter_overdue(), store.now(), empty_message="No overdue tasks!")

    console.print("\n[bold]11. Complete all remaining tasks:[/bold]")
    while not store.is_empty():
        print_task(console, "Completed", store.complete_next(), store.now())

    console.print(f"\nFinal task count: {store.count()}")
    return 0


# ---------------------------------------------------------------------------
# shell
# ---------------------------------------------------------------------------

class _UsageError(Exception):
    pass


class _ShellParser(argparse.ArgumentParser):
    """Argument parser that reports problems instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)

    def exit(self, status: int = 0, message: Optional[str] = None) -> None:  # type: ignore[override]
        raise _UsageError(message or "")


class _Session:
    def __init__(self, store: TaskStore, console: Console, due_soon_days: int) -> None:
        self.store = store
        self.console = console
        self.due_soon_days = due_soon_days

    def do_add(self, a: argparse.Namespace) -> bool:
        due = _parse_due_arg(self.store, a.due)
        task = self.store.add(" ".join(a.description), a.priority, due)
        print_task(self.console, "Added", task, self.store.now())
        return True

    def do_next(self, a: argparse.Namespace) -> bool:
        print_task(self.console, "Next", self.store.peek(), self.store.now())
        return True

    def do_complete(self, a: argparse.Namespace) -> bool:
        print_task(self.console, "Completed", self.store.complete_next(), self.store.now())
        return True

    def do_list(self, a: argparse.Namespace) -> bool:
        title = f"All tasks ({self.store.strategy.label} order)"
        print_tasks(self.console, self.store.list_all(), self.store.now(), title=title)
        return True

    def do_strategy(self, a: argparse.Namespace) -> bool:
        self.store.set_strategy(a.name)
        self.console.print(f"Sorting strategy: {self.store.strategy.value}")
        return True

    def do_overdue(self, a: argparse.Namespace) -> bool:
        print_tasks(self.console, self.store.filter_overdue(), self.store.now(), empty_message="No overdue tasks!")
        return True

    def do_due_within(self, a: argparse.Namespace) -> bool:
        tasks = self.store.filter_due_within(a.days)
        print_tasks(self.console, tasks, self.store.now(), empty_message=f"Nothing due within {a.days} days.")
        return True

    def do_priority(self, a: argparse.Namespace) -> bool:
        tasks = self.store.filter_by_priority(a.priority)
        print_tasks(self.console, tasks, self.store.now(), empty_message=f"No tasks with priority {a.priority}.")
        return True

    def do_groups(self, a: argparse.Namespace) -> bool:
        groups = self.store.group_by_priority()
        if not groups:
            self.console.print("[dim]No tasks in queue.[/dim]")
        for p, tasks in groups.items():
            print_tasks(self.console, tasks, self.store.now(), title=f"Priority {p}")
        return True

    def do_stats(self, a: argparse.Namespace) -> bool:
        print_statistics(self.console, queue_statistics(self.store, self.due_soon_days))
        return True

    def do_edit(self, a: argparse.Namespace) -> bool:
        task = self.store.get(a.task_id)
        if task is None:
            raise ValidationError(f"No queued task with id {a.task_id}")
        # Validate everything before applying anything.
        if a.due is not None and not a.due.strip():
            raise ValidationError("Empty due date; use --clear-due to remove it")
        due = _parse_due_arg(self.store, a.due) if a.due is not None else None
        if a.priority is not None:
            validate_priority(a.priority)
        if a.desc is not None:
            validate_description(a.desc)
        if a.priority is not None:
            task.set_priority(a.priority)
        if a.desc is not None:
            task.set_description(a.desc)
        if a.clear_due:
            task.set_due_date(None)
        elif due is not None:
            task.set_due_date(due)
        print_task(self.console, "Updated", task, self.store.now())
        return True

    def do_help(self, a: argparse.Namespace) -> bool:
        self.console.print(_shell_parser().format_help(), markup=False)
        return True

    def do_quit(self, a: argparse.Namespace) -> bool:
        return False


def _shell_parser() -> _ShellParser:
    parser = _ShellParser(prog="", add_help=False)
    sub = parser.add_subparsers(dest="cmd", required=True, metavar="command")

    add = sub.add_parser("add", help="Add a task", add_help=False)
    add.add_argument("description", nargs="+")
    add.add_argument("-p", "--priority", type=int, required=True)
    add.add_argument("-d", "--due", default=None)
    add.set_defaults(func=_Session.do_add)

    for name, method, text in (
        ("next", _Session.do_next, "Show the next task"),
        ("complete", _Session.do_complete, "Complete the next task"),
        ("list", _Session.do_list, "List all tasks in order"),
        ("overdue", _Session.do_overdue, "List overdue tasks"),
        ("groups", _Session.do_groups, "List tasks grouped by priority"),
        ("stats", _Session.do_stats, "Show queue statistics"),
        ("help", _Session.do_help, "Show this help"),
        ("quit", _Session.do_quit, "End the session"),
    ):
        p = sub.add_parser(name, help=text, add_help=False)
        p.set_defaults(func=method)

    strategy = sub.add_parser("strategy", help="Change the sorting strategy", add_help=False)
    strategy.add_argument("name", choices=[s.value for s in SortingStrategy])
    strategy.set_defaults(func=_Session.do_strategy)

    within = sub.add_parser("due-within", help="List tasks due within N days", add_help=False)
    within.add_argument("days", type=int)
    within.set_defaults(func=_Session.do_due_within)

    prio = sub.add_parser("priority", help="List tasks with priority P", add_help=False)
    prio.add_argument("priority", type=int)
    prio.set_defaults(func=_Session.do_priority)

    edit = sub.add_parser("edit", help="Edit a queued task", add_help=False)
    edit.add_argument("task_id", type=int)
    edit.add_argument("-p", "--priority", type=int, default=None)
    edit.add_argument("--desc", default=None)
    group = edit.add_mutually_exclusive_group()
    group.add_argument("-d", "--due", default=None)
    group.add_argument("--clear-due", action="store_true")
    edit.set_defaults(func=_Session.do_edit)

    return parser


def _run_line(session: _Session, parser: _ShellParser, line: str) -> bool:
    try:
        words = shlex.split(line)
    except ValueError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return True
    if not words:
        return True
    try:
        parsed = parser.parse_args(words)
    except _UsageError as exc:
        sys.stderr.write(f"Error: {str(exc).strip() or 'invalid command'} (try 'help')\n")
        return True
    try:
        return bool(parsed.func(session, parsed))
    except ValidationError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return True


def _shell(args: argparse.Namespace, store: TaskStore, due_soon_days: int) -> int:
    session = _Session(store, Console(highlight=False), due_soon_days)
    parser = _shell_parser()
    interactive = sys.stdin.isatty()
    while True:
        if interactive:
            sys.stdout.write("> ")
            sys.stdout.flush()
        line = sys.stdin.readline()
        if not line:
            break
        if line.lstrip().startswith("#"):
            continue
        if not _run_line(session, parser, line):
            break
    logger.debug("Shell session ended with {} tasks queued", store.count())
    return 0


# ---------------------------------------------------------------------------
# entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Task priority engine: pick the next task under a swappable ordering")
    parser.add_argument("--config", default=None, help="Path to config.yaml (default: ./.task_engine/config.yaml)")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=sorted(VALID_LOG_LEVELS),
        help="Log level (default: from config, else INFO)",
    )
    parser.add_argument(
        "--strategy",
        default=None,
        choices=[s.value for s in SortingStrategy],
        help=f"Initial sorting strategy (default: from config, else {DEFAULT_STRATEGY})",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Run a scripted walk-through")
    demo.set_defaults(func=_demo)

    shell = subparsers.add_parser("shell", help="Read commands from stdin, one per line")
    shell.set_defaults(func=_shell)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    handler: Any = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    strategy, due_soon_days, level = _resolve_settings(args)
    _configure_logging(level)
    store = TaskStore(strategy)
    logger.debug("Starting {} with strategy={}", args.command, strategy.value)
    return int(handler(args, store, due_soon_days) or 0)


if __name__ == "__main__":
    sys.exit(main())
