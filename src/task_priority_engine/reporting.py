"""Pydantic snapshots of tasks and queue statistics."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from .constants import DEFAULT_DUE_SOON_DAYS
from .task_engine import UNBOUNDED_DAYS, Task, TaskStore


class TaskInfo(BaseModel):
    """Task information evaluated against a single "now"."""

    id: int
    description: str
    priority: int
    due_date: Optional[date] = None
    created_at: datetime
    completed: bool = False
    overdue: bool = False
    days_until_due: Optional[int] = None  # None when there is no due date


class QueueStatistics(BaseModel):
    """Summary counts for the live queue."""

    strategy: str
    total: int = 0
    overdue: int = 0
    due_soon: int = 0
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS
    by_priority: dict[int, int] = Field(default_factory=dict)


def task_info(task: Task, now: date | datetime) -> TaskInfo:
    days = task.days_until_due(now)
    return TaskInfo(
        id=task.id,
        description=task.description,
        priority=task.priority,
        due_date=task.due_date,
        created_at=task.created_at,
        completed=task.completed,
        overdue=task.is_overdue(now),
        days_until_due=None if days == UNBOUNDED_DAYS else days,
    )


def queue_statistics(store: TaskStore, due_soon_days: int = DEFAULT_DUE_SOON_DAYS) -> QueueStatistics:
    """Collect counts for the statistics view.

    Args:
        store: Store to summarize.
        due_soon_days: Window (in days) for the "due soon" count.

    Returns:
        A :class:`QueueStatistics` with per-priority counts in ascending priority order.
    """
    groups = store.group_by_priority()
    return QueueStatistics(
        strategy=store.strategy.value,
        total=store.count(),
        overdue=len(store.filter_overdue()),
        due_soon=len(store.filter_due_within(due_soon_days)),
        due_soon_days=due_soon_days,
        by_priority={p: len(tasks) for p, tasks in groups.items()},
    )
