"""Shared frontend helpers: text rendering and keypress commands."""

from __future__ import annotations

from pathlib import Path

import pytest

from backend.engine.gamesession import LevelSession
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Direction, Occupant
from frontend.common import (
    QUICKSAVE,
    apply_action,
    overlay,
    quickload,
    quicksave,
    render_text,
)

LEVEL_A = ("#####", "#@$.#", "#####")
LEVEL_B = ("######", "#.$ @#", "######")


@pytest.fixture
def session(make_session) -> LevelSession:
    return make_session(LEVEL_A, LEVEL_B)


@pytest.fixture
def saves(tmp_path: Path) -> SaveGameManager:
    return SaveGameManager(tmp_path / "saves")


# -- rendering ----------------------------------------------------------------


def test_render_text_matches_source(session: LevelSession) -> None:
    assert render_text(session.state) == "\n".join(LEVEL_A)


def test_render_after_push(session: LevelSession) -> None:
    session.try_move(Direction.RIGHT)
    assert render_text(session.state).splitlines()[1] == "# @*#"


def test_overlay_hides_goal_under_player(make_level) -> None:
    state = make_level("#+$ #")
    assert overlay(state)[0][:3] == [Occupant.WALL, Occupant.PLAYER, Occupant.BOX]


# -- commands -----------------------------------------------------------------


def test_reset_action(session: LevelSession, saves: SaveGameManager) -> None:
    session.try_move(Direction.RIGHT)
    assert apply_action(session, saves, "reset") == "Level restarted."
    assert not session.won


def test_navigation_actions_report_notices(
    session: LevelSession, saves: SaveGameManager
) -> None:
    assert apply_action(session, saves, "previous") == "You are already at the first level!"
    assert apply_action(session, saves, "next") == ""
    assert session.level_index == 1
    assert apply_action(session, saves, "next") == "You are already at the last level!"


def test_digit_jumps_to_level(session: LevelSession, saves: SaveGameManager) -> None:
    apply_action(session, saves, "2")
    assert session.level_index == 1
    assert apply_action(session, saves, "2") == "That level is already selected!"
    assert apply_action(session, saves, "7") == "There is no level 7."
    assert session.level_index == 1


def test_unknown_action_is_ignored(session: LevelSession, saves: SaveGameManager) -> None:
    assert apply_action(session, saves, "x") == ""
    assert apply_action(session, saves, "0") == ""
    assert session.level_index == 0


def test_quicksave_and_quickload(session: LevelSession, saves: SaveGameManager) -> None:
    assert quickload(session, saves) == "No quick save yet."

    session.change_level(1)
    session.try_move(Direction.LEFT)
    assert quicksave(session, saves) == f"Saved to {QUICKSAVE}.json."

    session.change_level(0)
    assert quickload(session, saves) == "Loaded level 2."
    assert session.level_index == 1
    assert session.state.player.x == 3


def test_quickload_reports_corrupt_save(
    session: LevelSession, saves: SaveGameManager
) -> None:
    saves.directory.mkdir(parents=True)
    saves.path_for(QUICKSAVE).write_text("[]")
    assert quickload(session, saves).startswith("Could not load:")
    assert session.level_index == 0


def test_quickload_reports_binary_save(
    session: LevelSession, saves: SaveGameManager
) -> None:
    saves.directory.mkdir(parents=True)
    saves.path_for(QUICKSAVE).write_bytes(b"\xff\xfe{not utf8")
    assert quickload(session, saves).startswith("Could not load:")
    assert session.level_index == 0
