"""Data models for the terminal todo list.

Only exposes the Task dataclass. Stored records use the keys "id",
"description" and "completed"; nothing else is persisted per task.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

TaskRecord = Dict[str, Any]

MAX_ID = 2 ** 64 - 1


@dataclass
class Task:
    """A single todo item.

    Fields:
        id: Unique, never reused integer handed out by the registry.
        description: Free text; may contain spaces.
        completed: False until marked done; there is no way back.
    """
    id: int
    description: str
    completed: bool = False

    def to_record(self) -> TaskRecord:
        return {
            'id': self.id,
            'description': self.description,
            'completed': self.completed,
        }

    @classmethod
    def from_record(cls, raw: Mapping[str, Any]) -> Optional["Task"]:
        """Build a Task from a stored record, or None if it is unusable."""
        tid = raw.get('id')
        description = raw.get('description')
        completed = raw.get('completed', False)
        if isinstance(tid, bool) or not isinstance(tid, int) or not 0 <= tid <= MAX_ID:
            return None
        if description is None or not isinstance(completed, bool):
            return None
        return cls(id=tid, description=str(description), completed=completed)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description}, completed={self.completed})"
