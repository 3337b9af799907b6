"""Error types raised by the registry, dispatcher and storage.

All of them are recoverable: the dispatcher turns each into one line of
output and the prompt loop carries on.
"""
from __future__ import annotations
from pathlib import Path
from typing import Union


class TodoError(Exception):
    """Base class for every todo-list failure."""


class MissingArgument(TodoError):
    def __init__(self, usage: str):
        super().__init__(usage)
        self.usage = usage


class InvalidId(TodoError):
    def __init__(self, token: str):
        super().__init__(f"Invalid id: {token!r}")
        self.token = token


class NotFound(TodoError):
    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceFailure(TodoError):
    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason
