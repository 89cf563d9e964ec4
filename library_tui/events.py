"""Keyboard events fed to the session state machine.

Raw keystrokes come from ``click.getchar`` which reads one key at a time
with the terminal in raw mode. Only key presses are produced, so there are
no repeat or release events to filter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import click


class Key(Enum):
    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    TAB = "tab"


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: Optional[str] = None

    @classmethod
    def of_char(cls, char: str) -> "KeyEvent":
        return cls(Key.CHAR, char)


_NAMED_KEYS = {
    "\r": Key.ENTER,
    "\n": Key.ENTER,
    "\x1b": Key.ESC,
    "\x7f": Key.BACKSPACE,
    "\x08": Key.BACKSPACE,
    "\t": Key.TAB,
}


def translate(raw: str) -> Optional[KeyEvent]:
    """Map a raw keystroke to a KeyEvent, or None for keys the app ignores."""
    if raw in _NAMED_KEYS:
        return KeyEvent(_NAMED_KEYS[raw])
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent.of_char(raw)
    # arrows, function keys and other escape sequences
    return None


def read_event() -> Optional[KeyEvent]:
    """Block until the next keystroke."""
    return translate(click.getchar())
