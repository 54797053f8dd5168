"""Sorting strategies: the closed set of orders the store can run under."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Callable

from .model import Task, ValidationError


def _priority_key(task: Task) -> int:
    return task.priority


def _due_date_key(task: Task) -> tuple[bool, date]:
    # Undated tasks sort after every dated one.
    if task.due_date is None:
        return (True, date.max)
    return (False, task.due_date)


def _creation_key(task: Task) -> Any:
    return task.created_at


def _composite_key(task: Task) -> tuple[Any, ...]:
    return (_priority_key(task), _due_date_key(task), _creation_key(task))


class SortingStrategy(str, Enum):
    """Which total order picks the next task."""

    PRIORITY = "priority"  # 1 first
    DUE_DATE = "due_date"  # earliest first, undated last
    CREATION_TIME = "creation_time"  # oldest first
    COMPOSITE = "composite"  # priority, then due date, then creation time

    @property
    def sort_key(self) -> Callable[[Task], Any]:
        return _SORT_KEYS[self]

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @classmethod
    def parse(cls, raw: Any) -> "SortingStrategy":
        """Coerce a member or its value (any case, hyphens allowed) to a strategy."""
        if isinstance(raw, cls):
            return raw
        text = str(raw or "").strip().lower().replace("-", "_")
        for member in cls:
            if text == member.value:
                return member
        valid = [m.value for m in cls]
        raise ValidationError(f"Unknown strategy '{raw}'. Valid strategies: {valid}")


_SORT_KEYS: dict[SortingStrategy, Callable[[Task], Any]] = {
    SortingStrategy.PRIORITY: _priority_key,
    SortingStrategy.DUE_DATE: _due_date_key,
    SortingStrategy.CREATION_TIME: _creation_key,
    SortingStrategy.COMPOSITE: _composite_key,
}
