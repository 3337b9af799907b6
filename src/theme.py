"""Color & style helpers for rendering the todo list.

Decisions:
- Truecolor when COLORTERM advertises it, otherwise the xterm 256-color cube.
- Off when stdout is not a TTY unless FORCE_COLOR=1; NO_COLOR always wins.
- Palette overrides: TODO_PRIMARY / TODO_OPEN / TODO_DONE as hex, from the
  environment or the .env file in the working directory.
"""
from __future__ import annotations
import os, sys

from config import read_dotenv

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_USE_TRUECOLOR = _ENABLE and any(tok in os.environ.get("COLORTERM", "").lower() for tok in ("truecolor", "24bit"))

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_OPEN_DEFAULT = '#48B3AF'
HEX_DONE_DEFAULT = '#A7E399'
PALETTE_KEYS = ('TODO_PRIMARY', 'TODO_OPEN', 'TODO_DONE')


def _sgr(*params: object) -> str:
    """ANSI select-graphic-rendition sequence, or '' when colour is off."""
    if not _ENABLE:
        return ''
    return "\033[" + ';'.join(str(p) for p in params) + "m"


def _normalize_hex(value: str | None) -> str | None:
    if not value:
        return None
    digits = value.strip().lstrip('#')
    if len(digits) != 6 or any(c not in '0123456789abcdefABCDEF' for c in digits):
        return None
    return '#' + digits


def _fg(hex_code: str) -> str:
    """Foreground sequence for a #rrggbb colour at the terminal's depth."""
    rgb = [int(hex_code[i:i + 2], 16) for i in (1, 3, 5)]
    if _USE_TRUECOLOR:
        return _sgr(38, 2, *rgb)
    r6, g6, b6 = (round(c / 255 * 5) for c in rgb)
    return _sgr(38, 5, 16 + 36 * r6 + 6 * g6 + b6)


_DOTENV = {k: v for k, v in read_dotenv().items() if k in PALETTE_KEYS}


def _resolve(name: str, default: str) -> str:
    # real env var > .env entry > default; invalid hex values are ignored
    return _normalize_hex(os.environ.get(name)) or _normalize_hex(_DOTENV.get(name)) or default


RESET = _sgr(0)
BOLD = _sgr(1)
DIM = _sgr(2)

HEX_PRIMARY = _resolve('TODO_PRIMARY', HEX_PRIMARY_DEFAULT)
HEX_OPEN = _resolve('TODO_OPEN', HEX_OPEN_DEFAULT)
HEX_DONE = _resolve('TODO_DONE', HEX_DONE_DEFAULT)

C_OPEN = _fg(HEX_OPEN)
C_DONE = _fg(HEX_DONE)
ID_COLOR = _fg(HEX_PRIMARY) + BOLD
EMPTY_COLOR = DIM + _fg(HEX_PRIMARY)
WARNING_COLOR = BOLD


def color(text: str, *styles: str) -> str:
    """Wrap text in the given styles; plain text when colour is off."""
    if not _ENABLE or not styles:
        return text
    return ''.join(styles) + text + RESET


__all__ = [
    'color', 'BOLD', 'ID_COLOR', 'EMPTY_COLOR', 'WARNING_COLOR', 'C_OPEN', 'C_DONE',
    'HEX_PRIMARY', 'HEX_OPEN', 'HEX_DONE',
]
