"""In-memory ordered task collection, the source of truth during a session."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from core import NotFound, Status, Task, clean_description

logger = logging.getLogger("tcr_tasks.store")


class TaskStore:
    def __init__(self, tasks: Iterable[Task] = (), next_id: Optional[int] = None):
        self._tasks: List[Task] = []
        self._next_id = 1
        self.dirty = False
        self.replace_all(tasks, next_id)
        self.dirty = False

    # -------------------- loading --------------------
    @classmethod
    def load(cls, path: Path) -> "TaskStore":
        """Read the task file at `path`; a missing file is an empty store.

        Raises ParseError when any entry is malformed (nothing is loaded).
        """
        from infrastructure.task_file_parser import TaskFileParser

        return TaskFileParser.load(Path(path))

    def replace_all(self, tasks: Iterable[Task], next_id: Optional[int] = None) -> None:
        """Swap the whole content, e.g. after the task file was reverted on disk."""
        items = list(tasks)
        seen = set()
        for task in items:
            if task.id in seen:
                raise ValueError(f"Duplicate task id: {task.id}")
            seen.add(task.id)
        floor = max(seen) + 1 if seen else 1
        self._tasks = items
        # ids are never reused: only ever move the counter forward
        self._next_id = max(self._next_id, floor, next_id or 1)
        self.dirty = False

    # -------------------- queries --------------------
    def __len__(self) -> int:
        return len(self._tasks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaskStore):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    __hash__ = None  # type: ignore[assignment]

    @property
    def next_id(self) -> int:
        return self._next_id

    def snapshot(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def index_of(self, task_id: int) -> int:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        raise NotFound(task_id)

    def get(self, task_id: int) -> Task:
        return self._tasks[self.index_of(task_id)]

    def at(self, index: int) -> Task:
        return self._tasks[index]

    # -------------------- mutations --------------------
    def add(self, description: str) -> int:
        text = clean_description(description)
        task_id = self._next_id
        self._next_id += 1
        self._tasks.append(Task(id=task_id, description=text, status=Status.PENDING))
        self.dirty = True
        logger.debug("added task %s", task_id)
        return task_id

    def update_status(self, task_id: int, status: Status) -> None:
        idx = self.index_of(task_id)
        self._tasks[idx] = self._tasks[idx].with_status(status)
        self.dirty = True

    def cycle_status(self, task_id: int) -> Status:
        status = self.get(task_id).status.next()
        self.update_status(task_id, status)
        return status

    def update_description(self, task_id: int, text: str) -> None:
        idx = self.index_of(task_id)
        self._tasks[idx] = self._tasks[idx].with_description(text)
        self.dirty = True

    def remove(self, task_id: int) -> None:
        idx = self.index_of(task_id)
        del self._tasks[idx]
        self.dirty = True
        logger.debug("removed task %s", task_id)

    def mark_clean(self) -> None:
        self.dirty = False


__all__ = ["TaskStore"]
