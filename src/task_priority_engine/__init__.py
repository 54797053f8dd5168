"""Provide the public `task_priority_engine` package exports."""

from __future__ import annotations

from .task_engine import (
    UNBOUNDED_DAYS,
    IdAllocator,
    SortingStrategy,
    Task,
    TaskStore,
    ValidationError,
)

__all__ = [
    "UNBOUNDED_DAYS",
    "IdAllocator",
    "SortingStrategy",
    "Task",
    "TaskStore",
    "ValidationError",
]
