"""Registry logic: holds the ordered task list, id management and mutation.

Ids come from a single counter owned by the registry. The counter only
moves forward: deleted ids leave permanent gaps and are never handed out
again, including after a reload (the counter is persisted next to the tasks).
"""
import logging
import threading
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from errors import NotFound
from models import MAX_ID, Task, TaskRecord

logger = logging.getLogger(__name__)


class Registry:
    def __init__(self):
        self._tasks: List[Task] = []
        self._next_id: int = 1
        self._id_lock = threading.Lock()

    # -------------------- loading --------------------
    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], next_id: Optional[int] = None) -> "Registry":
        """Rebuild a registry from stored records.

        Unusable records and duplicate ids are skipped. The counter resumes at
        the larger of the stored ``next_id`` and one past the highest id seen;
        a stored ``next_id`` beyond the id range is ignored.
        """
        registry = cls()
        seen = set()
        for raw in records:
            task = Task.from_record(raw)
            if task is None:
                logger.warning("Skipping malformed task record: %r", raw)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id %d", task.id)
                continue
            seen.add(task.id)
            registry._tasks.append(task)
        candidates = [1]
        if seen:
            candidates.append(max(seen) + 1)
        if isinstance(next_id, int) and not isinstance(next_id, bool):
            if next_id <= MAX_ID + 1:
                candidates.append(next_id)
            else:
                logger.warning("Ignoring stored next_id %d outside the id range", next_id)
        registry._next_id = max(candidates)
        return registry

    # -------------------- id management --------------------
    def _allocate_id(self) -> int:
        with self._id_lock:
            nid = self._next_id
            self._next_id += 1
        return nid

    @property
    def next_id(self) -> int:
        return self._next_id

    # -------------------- queries --------------------
    def find_mutable(self, task_id: int) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def list(self) -> Tuple[Task, ...]:
        """Snapshot of the tasks in display order; changes to it do not stick."""
        return tuple(replace(t) for t in self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    # -------------------- task operations --------------------
    def add(self, description: str) -> int:
        task = Task(id=self._allocate_id(), description=description)
        self._tasks.append(task)
        logger.debug("Added task %d: %s", task.id, description)
        return task.id

    def remove(self, task_id: int) -> None:
        task = self._require(task_id)
        self._tasks.remove(task)
        logger.debug("Removed task %d", task_id)

    def update_description(self, task_id: int, description: str) -> None:
        task = self._require(task_id)
        task.description = description
        logger.debug("Updated task %d: %s", task_id, description)

    def mark_completed(self, task_id: int) -> None:
        task = self._require(task_id)
        task.completed = True
        logger.debug("Completed task %d", task_id)

    def _require(self, task_id: int) -> Task:
        task = self.find_mutable(task_id)
        if task is None:
            raise NotFound(task_id)
        return task

    # -------------------- serialization --------------------
    def records(self) -> List[TaskRecord]:
        return [task.to_record() for task in self._tasks]

    def __str__(self) -> str:
        done = sum(1 for t in self._tasks if t.completed)
        return f'Tasks: {len(self._tasks)}, Completed: {done}, Next id: {self._next_id}'
