"""Persistence helpers (load/save) for the todo list.

The document is pretty-printed JSON:

    {"next_id": 4, "tasks": [{"id": 1, "description": "...", "completed": false}]}

A bare list of task records (older files) is still accepted on load.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from errors import PersistenceFailure
from models import TaskRecord

logger = logging.getLogger(__name__)

DEFAULT_TASKS_FILE = Path.home() / '.todo.json'

LoadResult = Tuple[List[TaskRecord], Optional[int]]


class Storage:
    def __init__(self, path: Union[str, Path] = DEFAULT_TASKS_FILE):
        self.path = Path(path).expanduser()

    def load(self) -> LoadResult:
        """Load task records and the stored id counter from disk.

        Missing file -> empty list. A file that cannot be read or parsed is
        logged and also treated as an empty list.
        """
        if not self.path.exists():
            return [], None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not load %s, starting with an empty list: %s", self.path, exc)
            return [], None
        return _unpack(data, self.path)

    def save(self, records: Sequence[Mapping[str, Any]], next_id: Optional[int] = None) -> None:
        """Persist the full task list, replacing the previous document.

        Written to a temporary file first and moved into place, so a failed
        write leaves the old document intact.
        """
        document = {'next_id': next_id, 'tasks': [dict(r) for r in records]}
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix='.todo-', suffix='.json', dir=str(self.path.parent))
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=4)
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceFailure(self.path, exc.strerror or str(exc)) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_name)
        logger.debug("Saved %d tasks to %s", len(document['tasks']), self.path)


def _unpack(data: Any, path: Path) -> LoadResult:
    if isinstance(data, list):
        tasks, next_id = data, None
    elif isinstance(data, dict):
        tasks, next_id = data.get('tasks', []), data.get('next_id')
    else:
        logger.warning("Unexpected document in %s, starting with an empty list", path)
        return [], None
    if not isinstance(tasks, list):
        logger.warning("Unexpected 'tasks' value in %s, starting with an empty list", path)
        return [], None
    if isinstance(next_id, bool) or not isinstance(next_id, int):
        next_id = None
    records = [t for t in tasks if isinstance(t, dict)]
    if len(records) != len(tasks):
        logger.warning("Ignored %d non-object entries in %s", len(tasks) - len(records), path)
    return records, next_id
