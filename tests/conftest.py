from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

import pytest

from dispatcher import Dispatcher
from errors import PersistenceFailure
from registry import Registry
from storage import Storage


class RecordingStorage(Storage):
    """Real Storage that also counts saves; can be told to fail."""

    def __init__(self, path: Path):
        super().__init__(path)
        self.saves: List[Sequence[Mapping[str, Any]]] = []
        self.fail_with: Optional[str] = None

    def save(self, records, next_id=None) -> None:
        if self.fail_with is not None:
            raise PersistenceFailure(self.path, self.fail_with)
        self.saves.append([dict(r) for r in records])
        super().save(records, next_id)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("TODO_FILE", "TODO_LOG_LEVEL", "TODO_LOG_FILE", "TODO_PROMPT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "tasks.json"


@pytest.fixture()
def storage(tasks_path: Path) -> RecordingStorage:
    return RecordingStorage(tasks_path)


@pytest.fixture()
def registry() -> Registry:
    return Registry()


@pytest.fixture()
def dispatcher(registry: Registry, storage: RecordingStorage) -> Dispatcher:
    return Dispatcher(registry, storage)
