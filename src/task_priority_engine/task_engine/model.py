"""Task model for the priority engine.

A :class:`Task` is a plain value object with a fixed identity and a few
mutable, validated fields.  Tasks are created by
:class:`~task_priority_engine.task_engine.store.TaskStore`, which also keeps
its heap consistent when a queued task is edited in place.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

from ..constants import MAX_PRIORITY, MIN_PRIORITY
from ..utils import _as_date

# Sentinel returned by ``days_until_due`` for tasks without a deadline.
UNBOUNDED_DAYS = sys.maxsize


class ValidationError(ValueError):
    """Raised when a task field or engine argument is rejected."""


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------

def validate_description(description: Any) -> str:
    if not isinstance(description, str) or not description.strip():
        raise ValidationError("Description cannot be empty")
    return description


def validate_priority(priority: Any) -> int:
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise ValidationError(f"Priority must be an integer, got {priority!r}")
    if priority < MIN_PRIORITY or priority > MAX_PRIORITY:
        raise ValidationError(
            f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {priority}"
        )
    return priority


def validate_due_date(due_date: Any) -> Optional[date]:
    if due_date is None:
        return None
    # datetime is a date subclass; keep only the calendar day
    if isinstance(due_date, datetime):
        return due_date.date()
    if not isinstance(due_date, date):
        raise ValidationError(f"Due date must be a date or None, got {due_date!r}")
    return due_date


# ---------------------------------------------------------------------------
# Task dataclass
# ---------------------------------------------------------------------------

_EDITABLE: dict[str, Callable[[Any], Any]] = {
    "description": validate_description,
    "priority": validate_priority,
    "due_date": validate_due_date,
}


@dataclass(eq=False)
class Task:
    """A unit of work ordered by the engine.

    ``id`` and ``created_at`` never change after construction.  Every write
    to ``description``, ``priority`` or ``due_date`` (plain assignment or a
    ``set_*`` call) is validated first.  While the task is queued, the
    owning store applies the write under its own lock and repairs its
    ordering.
    """

    id: int
    description: str
    priority: int
    created_at: datetime
    due_date: Optional[date] = None
    completed: bool = False

    _editor: Optional[Callable[["Task", str, Any], None]] = field(default=None, init=False, repr=False)

    def __setattr__(self, name: str, value: Any) -> None:
        validator = _EDITABLE.get(name)
        if validator is None:
            object.__setattr__(self, name, value)
            return
        value = validator(value)
        editor = getattr(self, "_editor", None)
        if editor is None:
            object.__setattr__(self, name, value)
        else:
            editor(self, name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Task):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        """Clock-free form; see :meth:`describe` for the overdue flag."""
        due = self.due_date.isoformat() if self.due_date else "none"
        return f"Task{{id={self.id}, desc='{self.description}', priority={self.priority}, due={due}}}"

    def describe(self, now: date | datetime) -> str:
        """Like ``str(task)`` plus whether the task is overdue at *now*."""
        overdue = "true" if self.is_overdue(now) else "false"
        return f"{str(self)[:-1]}, overdue={overdue}}}"

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_description(self, description: str) -> None:
        self.description = description

    def set_priority(self, priority: int) -> None:
        self.priority = priority

    def set_due_date(self, due_date: Optional[date]) -> None:
        self.due_date = due_date

    def mark_completed(self) -> None:
        """Flag the task as done and detach it from its store."""
        self.completed = True
        self._editor = None

    # ------------------------------------------------------------------
    # Deadline helpers
    # ------------------------------------------------------------------

    def is_overdue(self, now: date | datetime) -> bool:
        """True if the task has a due date strictly before ``now``'s date."""
        return self.due_date is not None and self.due_date < _as_date(now)

    def days_until_due(self, now: date | datetime) -> int:
        """Signed whole days from ``now`` to the due date.

        Returns :data:`UNBOUNDED_DAYS` when the task has no due date.
        """
        if self.due_date is None:
            return UNBOUNDED_DAYS
        return (self.due_date - _as_date(now)).days

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain JSON-friendly dict."""
        return {
            "id": self.id,
            "description": self.description,
            "priority": self.priority,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "created_at": self.created_at.isoformat(),
            "completed": self.completed,
        }
