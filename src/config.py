"""Settings loaded from environment variables (+ optional .env file).

Priority: real environment variable > .env entry > default. Command-line
options in cli.py override whatever ends up here.
"""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

from storage import DEFAULT_TASKS_FILE

ENV_PREFIX = 'TODO'
DEFAULT_PROMPT = '(todo) > '
DEFAULT_LOG_LEVEL = 'WARNING'


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def read_dotenv(path: Union[str, Path, None] = None) -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file; blanks and # comments skipped."""
    env_path = Path(path) if path is not None else Path.cwd() / '.env'
    values: Dict[str, str] = {}
    if not env_path.is_file():
        return values
    try:
        text = env_path.read_text(encoding='utf-8')
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        values[k.strip()] = v.strip().strip('"').strip("'")
    return values


def _lookup(name: str, dotenv: Dict[str, str]) -> Optional[str]:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        raw = dotenv.get(name)
    if raw is None or raw.strip() == '':
        return None
    return raw


@dataclass(frozen=True)
class Settings:
    tasks_file: Path
    log_level: str
    log_file: Optional[Path]
    prompt: str


def load_settings(dotenv_path: Union[str, Path, None] = None) -> Settings:
    dotenv = read_dotenv(dotenv_path)
    tasks_file = _lookup(_k('FILE'), dotenv)
    log_file = _lookup(_k('LOG_FILE'), dotenv)
    return Settings(
        tasks_file=Path(tasks_file).expanduser() if tasks_file else DEFAULT_TASKS_FILE,
        log_level=(_lookup(_k('LOG_LEVEL'), dotenv) or DEFAULT_LOG_LEVEL).upper(),
        log_file=Path(log_file).expanduser() if log_file else None,
        prompt=os.environ.get(_k('PROMPT')) or dotenv.get(_k('PROMPT')) or DEFAULT_PROMPT,
    )
