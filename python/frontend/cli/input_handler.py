"""Single-keypress reader for the terminal frontends.

Turns raw keys into the action names the game loops understand.  Arrow
keys arrive as ``ESC [ A..D``; a lone ESC quits.  Unix uses raw tty mode,
Windows falls back to ``msvcrt``.
"""

from __future__ import annotations

import os
import sys
from typing import Callable

# Letters are matched case-insensitively.
_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "reset",
    "n": "next",
    "p": "previous",
    "m": "levels",
    "v": "save",
    "l": "load",
    "h": "help",
    "?": "help",
    "\r": "enter",
    "\n": "enter",
}

_ARROWS: dict[str, str] = {"A": "up", "B": "down", "C": "right", "D": "left"}

_ESC = "\x1b"


def _action(ch: str, read_next: Callable[[], str]) -> str:
    """Map *ch* to an action, pulling arrow-key bytes through *read_next*.

    *read_next* returns ``""`` when no further byte is available.  Unmapped
    printable characters (the level digits) come back unchanged.
    """
    if ch == _ESC:
        if read_next() != "[":
            return "quit"
        return _ARROWS.get(read_next(), "")
    return _KEY_MAP.get(ch.lower(), ch if ch.isprintable() else "")


if os.name == "nt":
    import msvcrt  # type: ignore[import-not-found]
    import time

    def _read_char() -> str:
        return msvcrt.getch().decode("utf-8", errors="ignore")

    def get_key() -> str:
        """Block for one keypress and return its action name."""
        return _action(_read_char(), _read_char)

    def get_key_timeout(timeout: float) -> str | None:
        """Like :func:`get_key`, but ``None`` if nothing arrives in *timeout*."""
        end = time.monotonic() + timeout
        while time.monotonic() < end:
            if msvcrt.kbhit():
                return get_key()
            time.sleep(0.02)
        return None

else:
    import select
    import termios
    import tty

    def _read_key(timeout: float | None) -> str | None:
        # os.read keeps the rest of an escape sequence visible to select.
        fd = sys.stdin.fileno()
        old = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            if timeout is not None and not select.select([fd], [], [], timeout)[0]:
                return None

            def read_next() -> str:
                if not select.select([fd], [], [], 0.1)[0]:
                    return ""
                return os.read(fd, 1).decode("utf-8", errors="ignore")

            return _action(os.read(fd, 1).decode("utf-8", errors="ignore"), read_next)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)

    def get_key() -> str:
        """Block for one keypress and return its action name.

        Actions: ``up`` ``down`` ``left`` ``right`` ``quit`` ``reset``
        ``next`` ``previous`` ``levels`` ``save`` ``load`` ``help``
        ``enter``, an unmapped printable character, or ``""``.
        """
        key = _read_key(None)
        assert key is not None
        return key

    def get_key_timeout(timeout: float) -> str | None:
        """Like :func:`get_key`, but ``None`` if nothing arrives in *timeout*."""
        return _read_key(timeout)
