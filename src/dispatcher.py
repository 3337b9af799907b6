"""Command dispatch: command word -> registry operation -> save -> message.

Every command that changes the registry saves on success and never saves
on failure, so a rejected command leaves both memory and disk as they were.
A failed save keeps the in-memory change and is reported as a warning.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from errors import InvalidId, MissingArgument, PersistenceFailure, TodoError
from models import MAX_ID, Task
from registry import Registry
from storage import Storage
from theme import C_DONE, C_OPEN, EMPTY_COLOR, ID_COLOR, WARNING_COLOR, color

logger = logging.getLogger(__name__)
_ID_RE = re.compile(r'[0-9]+')

EMPTY_MESSAGE = "Empty todo list"
USAGE_ADD = "Usage: add <description>"
USAGE_DELETE = "Usage: delete <id>"
USAGE_UPDATE = "Usage: update <id> <new description>"
USAGE_DONE = "Usage: done <id>"

HELP_TEXT = """\
Commands:
  add <description>         Add a new task (description may contain spaces)
  show                      Display the todo list
  delete <id>               Delete the task with the given id
  update <id> <description> Replace the description of a task
  done <id>                 Mark a task as completed
  help                      Show this help
  exit                      Leave the program

Ids are the numbers shown by 'show'. They are never reused."""


class Command(Enum):
    ADD = 'add'
    SHOW = 'show'
    DELETE = 'delete'
    UPDATE = 'update'
    DONE = 'done'
    EXIT = 'exit'
    HELP = 'help'

    @classmethod
    def parse(cls, word: str) -> "Command":
        """Map a command word to a Command; anything unknown is HELP."""
        try:
            return cls(word.strip().lower())
        except ValueError:
            return cls.HELP


@dataclass
class DispatchResult:
    lines: List[str] = field(default_factory=list)
    exit: bool = False
    saved: bool = False
    ok: bool = True


def parse_id(token: str) -> int:
    """Parse a task id: ASCII digits only, within the unsigned 64-bit range."""
    token = token.strip()
    if not _ID_RE.fullmatch(token):
        raise InvalidId(token)
    value = int(token)
    if value > MAX_ID:
        raise InvalidId(token)
    return value


def _split_update_args(args: Sequence[str]) -> Tuple[int, str]:
    if len(args) >= 2:
        id_part, text = args[0], ' '.join(args[1:])
    elif args:
        parts = args[0].strip().split(None, 1)
        id_part = parts[0] if parts else ''
        text = parts[1] if len(parts) > 1 else ''
    else:
        id_part, text = '', ''
    if not id_part:
        raise MissingArgument(USAGE_UPDATE)
    task_id = parse_id(id_part)
    text = text.strip()
    if not text:
        raise MissingArgument(USAGE_UPDATE)
    return task_id, text


def _single_arg(args: Sequence[str], usage: str) -> str:
    value = ' '.join(args).strip()
    if not value:
        raise MissingArgument(usage)
    return value


class Dispatcher:
    def __init__(self, registry: Registry, storage: Storage, styled: bool = False):
        self.registry: Registry = registry
        self.storage: Storage = storage
        self.styled: bool = styled
        self._handlers: Dict[Command, Callable[[Sequence[str]], DispatchResult]] = {
            Command.ADD: self._cmd_add,
            Command.SHOW: self._cmd_show,
            Command.DELETE: self._cmd_delete,
            Command.UPDATE: self._cmd_update,
            Command.DONE: self._cmd_done,
            Command.EXIT: self._cmd_exit,
            Command.HELP: self._cmd_help,
        }

    def dispatch(self, tokens: Sequence[str]) -> DispatchResult:
        """Run one tokenized command line.

        ``tokens[0]`` is the command word; the rest are its arguments. Failures
        come back as a single message line with ``ok`` set to False.
        """
        if not tokens:
            return DispatchResult(lines=["No command provided. Type 'help' for instructions."], ok=False)
        command = Command.parse(tokens[0])
        args = [a for a in tokens[1:] if a.strip()]
        try:
            return self._handlers[command](args)
        except TodoError as exc:
            logger.debug("Command %r failed: %s", tokens[0], exc)
            return DispatchResult(lines=[str(exc)], ok=False)

    # ---- individual command helpers ----
    def _cmd_add(self, args: Sequence[str]) -> DispatchResult:
        description = _single_arg(args, USAGE_ADD)
        task_id = self.registry.add(description)
        return self._commit(f"Added task {task_id}: {description}")

    def _cmd_show(self, args: Sequence[str]) -> DispatchResult:
        return DispatchResult(lines=self.render())

    def _cmd_delete(self, args: Sequence[str]) -> DispatchResult:
        task_id = parse_id(_single_arg(args, USAGE_DELETE))
        self.registry.remove(task_id)
        return self._commit(f"Deleted task {task_id}")

    def _cmd_update(self, args: Sequence[str]) -> DispatchResult:
        task_id, text = _split_update_args(args)
        self.registry.update_description(task_id, text)
        return self._commit(f"Updated task {task_id}: {text}")

    def _cmd_done(self, args: Sequence[str]) -> DispatchResult:
        task_id = parse_id(_single_arg(args, USAGE_DONE))
        self.registry.mark_completed(task_id)
        return self._commit(f"Completed task {task_id}")

    def _cmd_exit(self, args: Sequence[str]) -> DispatchResult:
        return DispatchResult(exit=True)

    def _cmd_help(self, args: Sequence[str]) -> DispatchResult:
        return DispatchResult(lines=HELP_TEXT.splitlines())

    # -------------------- persistence --------------------
    def _commit(self, message: str) -> DispatchResult:
        result = DispatchResult(lines=[message])
        try:
            self.storage.save(self.registry.records(), self.registry.next_id)
        except PersistenceFailure as exc:
            logger.warning("Save failed, change kept in memory only: %s", exc)
            result.lines.append(self._style(f"Warning: changes not saved: {exc}", WARNING_COLOR))
        else:
            result.saved = True
        return result

    # -------------------- display --------------------
    def render(self, tasks: Optional[Sequence[Task]] = None) -> List[str]:
        tasks = self.registry.list() if tasks is None else tasks
        if not tasks:
            return [self._style(EMPTY_MESSAGE, EMPTY_COLOR)]
        return [self._render_task(t) for t in tasks]

    def _render_task(self, task: Task) -> str:
        marker = '[x]' if task.completed else '[ ]'
        text = self._style(task.description, C_DONE if task.completed else C_OPEN)
        return f"{marker} {self._style(str(task.id), ID_COLOR)} {text}"

    def _style(self, text: str, *styles: str) -> str:
        return color(text, *styles) if self.styled else text
