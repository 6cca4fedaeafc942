"""Shipped level suite — replays a known solution for every level.

Solutions live in ``<project_root>/fixtures/solutions.json`` as one
``U``/``D``/``L``/``R`` string per level.  Each string is replayed through
a real :class:`LevelSession` over ``data/levels`` and must finish the
level with the recorded move and push counts.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.engine.gamesession import LevelSession
from backend.models.tiles import Direction

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
FIXTURES_DIR = PROJECT_ROOT / "fixtures"
LEVELS_DIR = PROJECT_ROOT / "data" / "levels"

_LETTERS: dict[str, Direction] = {
    "U": Direction.UP,
    "D": Direction.DOWN,
    "L": Direction.LEFT,
    "R": Direction.RIGHT,
}


# -- fixture loaders ----------------------------------------------------------


def _load(name: str) -> list[dict]:
    with open(FIXTURES_DIR / name) as f:
        return json.load(f)


def _ids(entry: dict) -> str:
    return entry["id"]


# Loaded once at import time; each entry becomes one parametrised case.
_SOLUTIONS = _load("solutions.json")


# -- tests --------------------------------------------------------------------


def test_every_shipped_level_has_a_solution() -> None:
    session = LevelSession.from_directory(LEVELS_DIR)
    assert session.level_count == len(_SOLUTIONS)
    assert [entry["level"] for entry in _SOLUTIONS] == list(
        range(1, session.level_count + 1)
    )


@pytest.mark.parametrize("entry", _SOLUTIONS, ids=_ids)
def test_solution_wins_level(entry: dict) -> None:
    session = LevelSession.from_directory(LEVELS_DIR, start=entry["level"] - 1)
    initial_boxes = len(session.state.boxes)

    for i, letter in enumerate(entry["moves"]):
        assert not session.won, f"Level won early at move {i} ({entry['id']})"
        outcome = session.try_move(_LETTERS[letter])
        assert outcome.moved, (
            f"Move {i} ({letter}) was {outcome.value} at "
            f"{tuple(session.state.player)}  ({entry['id']})"
        )
        assert not session.stuck, f"Stuck after move {i} ({entry['id']})"
        assert len(session.state.boxes) == initial_boxes

    assert session.won, f"Level not solved after {len(entry['moves'])} moves"
    assert session.stats.moves == len(entry["moves"])
    assert session.stats.pushes == entry["pushes"]


@pytest.mark.parametrize("entry", _SOLUTIONS, ids=_ids)
def test_reset_after_solution(entry: dict) -> None:
    session = LevelSession.from_directory(LEVELS_DIR, start=entry["level"] - 1)
    start = session.save()
    for letter in entry["moves"]:
        session.try_move(_LETTERS[letter])
    session.reset()
    assert session.save() == start
