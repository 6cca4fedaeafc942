"""Keypress to action mapping for the terminal frontends."""

from __future__ import annotations

import pytest

from frontend.cli.input_handler import _action


def _feed(*rest: str):
    pending = list(rest)
    return lambda: pending.pop(0) if pending else ""


@pytest.mark.parametrize(
    "ch, expected",
    [
        ("w", "up"),
        ("D", "right"),
        ("R", "reset"),
        ("?", "help"),
        ("\r", "enter"),
        ("\x03", "quit"),
        ("3", "3"),
        ("\x07", ""),
    ],
)
def test_plain_keys(ch: str, expected: str) -> None:
    assert _action(ch, _feed()) == expected


@pytest.mark.parametrize(
    "tail, expected",
    [(("[", "A"), "up"), (("[", "D"), "left"), (("[", "Z"), ""), ((), "quit")],
)
def test_escape_sequences(tail: tuple[str, ...], expected: str) -> None:
    assert _action("\x1b", _feed(*tail)) == expected
