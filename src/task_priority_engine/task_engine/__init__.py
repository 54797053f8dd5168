"""Heap-backed task ordering engine.

This package provides the task model, the closed set of sorting strategies,
and the in-memory store that keeps tasks ordered under the active strategy.
"""

from .model import UNBOUNDED_DAYS, Task, ValidationError
from .store import IdAllocator, TaskStore
from .strategy import SortingStrategy

__all__ = [
    "UNBOUNDED_DAYS",
    "IdAllocator",
    "SortingStrategy",
    "Task",
    "TaskStore",
    "ValidationError",
]
