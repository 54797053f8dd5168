"""In-memory, heap-backed task store.

Tasks live in a binary heap ordered by the active
:class:`~task_priority_engine.task_engine.strategy.SortingStrategy`.  All
public operations run under a single re-entrant lock, so a strategy change
is never observed half-applied.
"""

from __future__ import annotations

import heapq
import itertools
import threading
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Callable, Iterator, Optional

from loguru import logger

from ..utils import _now_local
from .model import Task, validate_description, validate_due_date, validate_priority
from .strategy import SortingStrategy

Clock = Callable[[], datetime]


class IdAllocator:
    """Hands out increasing task ids, starting at *start*."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


class _HeapEntry:
    """Heap slot comparing tasks by a strategy key at comparison time."""

    __slots__ = ("task", "_key")

    def __init__(self, task: Task, key: Callable[[Task], Any]) -> None:
        self.task = task
        self._key = key

    def __lt__(self, other: "_HeapEntry") -> bool:
        return self._key(self.task) < self._key(other.task)


class TaskStore:
    """Priority queue of tasks with a swappable ordering.

    Parameters
    ----------
    strategy:
        Initial ordering (default: by priority).
    clock:
        Zero-argument callable returning the current ``datetime``.  Used for
        ``created_at`` stamps and for the overdue / due-soon views.
    id_allocator:
        Source of task ids.  Each store gets its own allocator by default.
    """

    def __init__(
        self,
        strategy: SortingStrategy | str = SortingStrategy.PRIORITY,
        *,
        clock: Optional[Clock] = None,
        id_allocator: Optional[IdAllocator] = None,
    ) -> None:
        self._strategy = SortingStrategy.parse(strategy)
        self._clock: Clock = clock or _now_local
        self._ids = id_allocator or IdAllocator()
        self._heap: list[_HeapEntry] = []
        self._index: dict[int, Task] = {}
        self._dirty = False
        self._lock = threading.RLock()

    # -- internal helpers ---------------------------------------------------

    def _entry(self, task: Task) -> _HeapEntry:
        return _HeapEntry(task, self._strategy.sort_key)

    def _apply_edit(self, task: Task, name: str, value: Any) -> None:
        # Field writes on a queued task land inside the store's critical section.
        with self._lock:
            object.__setattr__(task, name, value)
            if task.id in self._index:
                self._dirty = True

    def _ensure_heap(self) -> None:
        # A queued task was edited in place; restore the heap invariant.
        if self._dirty:
            heapq.heapify(self._heap)
            self._dirty = False

    def _live(self) -> Iterator[Task]:
        return (entry.task for entry in self._heap)

    # -- time -----------------------------------------------------------------

    def now(self) -> datetime:
        return self._clock()

    # -- mutations ------------------------------------------------------------

    def add(self, description: str, priority: int, due_date: Optional[date] = None) -> Task:
        """Create a task and queue it under the active strategy.

        Raises :class:`ValidationError` without touching the store (and
        without consuming an id) when a field is invalid.
        """
        validate_description(description)
        validate_priority(priority)
        due = validate_due_date(due_date)

        with self._lock:
            task = Task(
                id=self._ids.next_id(),
                description=description,
                priority=priority,
                created_at=self._clock(),
                due_date=due,
            )
            task._editor = self._apply_edit
            self._ensure_heap()
            heapq.heappush(self._heap, self._entry(task))
            self._index[task.id] = task
            logger.debug("Added task {}", task)
            return task

    def pop(self) -> Optional[Task]:
        """Remove the head task, mark it completed and return it.

        Returns None when the store is empty.
        """
        with self._lock:
            if not self._heap:
                return None
            self._ensure_heap()
            task = heapq.heappop(self._heap).task
            del self._index[task.id]
            task.mark_completed()
            logger.info("Completed task {}", task)
            return task

    complete_next = pop

    def set_strategy(self, strategy: SortingStrategy | str) -> None:
        """Switch the ordering, rebuilding the heap from the live tasks."""
        new_strategy = SortingStrategy.parse(strategy)
        with self._lock:
            if new_strategy == self._strategy:
                return
            tasks = list(self._live())
            key = new_strategy.sort_key
            rebuilt = [_HeapEntry(t, key) for t in tasks]
            heapq.heapify(rebuilt)
            old = self._strategy
            self._strategy, self._heap = new_strategy, rebuilt
            self._dirty = False
            logger.info(
                "Sorting strategy changed {} -> {} ({} tasks)",
                old.value,
                new_strategy.value,
                len(rebuilt),
            )

    # -- queries --------------------------------------------------------------

    @property
    def strategy(self) -> SortingStrategy:
        with self._lock:
            return self._strategy

    def peek(self) -> Optional[Task]:
        """Return the head task without removing it, or None when empty."""
        with self._lock:
            if not self._heap:
                return None
            self._ensure_heap()
            return self._heap[0].task

    def get(self, task_id: int) -> Optional[Task]:
        with self._lock:
            return self._index.get(task_id)

    def list_all(self) -> list[Task]:
        """All live tasks in rank order, leaving the live heap untouched."""
        with self._lock:
            self._ensure_heap()
            scratch = list(self._heap)
            ordered: list[Task] = []
            while scratch:
                ordered.append(heapq.heappop(scratch).task)
            return ordered

    def filter_by_priority(self, priority: int) -> list[Task]:
        with self._lock:
            return [t for t in self._live() if t.priority == priority]

    def filter_overdue(self) -> list[Task]:
        with self._lock:
            now = self._clock()
            return [t for t in self._live() if t.is_overdue(now)]

    def filter_due_within(self, days: int) -> list[Task]:
        """Tasks due today or within the next *days* days.

        Overdue and undated tasks are excluded.
        """
        with self._lock:
            now = self._clock()
            out: list[Task] = []
            for t in self._live():
                remaining = t.days_until_due(now)
                if 0 <= remaining <= days:
                    out.append(t)
            return out

    def group_by_priority(self) -> dict[int, list[Task]]:
        with self._lock:
            groups: dict[int, list[Task]] = defaultdict(list)
            for t in self._live():
                groups[t.priority].append(t)
        return {p: groups[p] for p in sorted(groups)}

    def count(self) -> int:
        with self._lock:
            return len(self._heap)

    def __len__(self) -> int:
        return self.count()

    def is_empty(self) -> bool:
        return self.count() == 0
