"""Shared helpers for building small levels in ``#.$*@+`` notation."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from backend.engine.gamesession import LevelSession
from backend.engine.levelreader import LevelReader
from backend.models.level import LevelState


def level_from_rows(*rows: str, index: int = 0) -> LevelState:
    """Build a level from one string per row."""
    return LevelReader.from_ascii("\n".join(rows), level_index=index)


@pytest.fixture
def make_level() -> Callable[..., LevelState]:
    return level_from_rows


@pytest.fixture
def make_session() -> Callable[..., LevelSession]:
    """Return a factory taking one row tuple per level."""

    def _build(*levels: tuple[str, ...], start: int = 0) -> LevelSession:
        return LevelSession(
            [level_from_rows(*rows, index=i) for i, rows in enumerate(levels)],
            start=start,
        )

    return _build
