"""Win and corner-deadlock detection tests."""

from __future__ import annotations

from backend.engine.gamestate import CompletionChecker
from backend.models.grid import Position


def test_won_only_when_every_box_is_home(make_level) -> None:
    assert CompletionChecker.is_won(make_level("#@*#"))
    assert not CompletionChecker.is_won(make_level("#@*$.#"))


def test_box_in_wall_corner_is_stuck(make_level) -> None:
    state = make_level(
        "#####",
        "#$  #",
        "#  @#",
        "#.  #",
        "#####",
    )
    assert CompletionChecker.stuck_box(state) == Position(1, 1)
    CompletionChecker.check(state)
    assert state.stuck


def test_box_on_goal_in_corner_is_not_stuck(make_level) -> None:
    state = make_level(
        "#####",
        "#*  #",
        "#  @#",
        "#####",
    )
    assert CompletionChecker.stuck_box(state) is None


def test_box_along_one_wall_is_not_stuck(make_level) -> None:
    state = make_level(
        "######",
        "#  $ #",
        "#  @.#",
        "######",
    )
    assert CompletionChecker.stuck_box(state) is None


def test_box_against_boxes_is_not_detected(make_level) -> None:
    state = make_level(
        "#######",
        "#  .. #",
        "# $$  #",
        "# $$ @#",
        "#     #",
        "#######",
    )
    assert CompletionChecker.stuck_box(state) is None


def test_check_recomputes_flags(make_level) -> None:
    state = make_level("#@*#")
    state.stuck = True
    CompletionChecker.check(state)
    assert state.won
    assert not state.stuck
