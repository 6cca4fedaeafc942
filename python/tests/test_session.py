"""Level session tests: moves, resets, transitions, effects and saves."""

from __future__ import annotations

import pytest

from backend.engine.gameplay import MoveOutcome
from backend.engine.gamesession import Effect, LevelSession
from backend.exceptions import InvalidLevel, SnapshotCorrupt
from backend.models.grid import Position
from backend.models.tiles import Direction, EntityKind

LEVEL_A = ("#####", "#@$.#", "#####")
LEVEL_B = ("######", "#.$ @#", "######")
LEVEL_C = ("#######", "#@ $ .#", "#######")


@pytest.fixture
def session(make_session) -> LevelSession:
    return make_session(LEVEL_A, LEVEL_B, LEVEL_C)


@pytest.fixture
def effects(session: LevelSession) -> list[Effect]:
    heard: list[Effect] = []
    session.subscribe(heard.append)
    return heard


# -- construction -------------------------------------------------------------


def test_needs_a_level() -> None:
    with pytest.raises(InvalidLevel):
        LevelSession([])


def test_start_index_checked(make_session) -> None:
    with pytest.raises(InvalidLevel, match="choose 1-1"):
        make_session(LEVEL_A, start=1)


def test_levels_are_numbered_by_position(make_level) -> None:
    session = LevelSession([make_level(*LEVEL_A, index=5), make_level(*LEVEL_B, index=5)])
    assert [lvl.level_index for lvl in session.levels] == [0, 1]
    assert session.level_count == 2


def test_levels_are_detached_copies(session: LevelSession) -> None:
    listed = session.levels[0]
    assert listed is not session.state
    assert listed.dynamic_grid == session.dynamic_grid

    listed.dynamic_grid.set(listed.player, EntityKind.EMPTY)
    listed.boxes.clear()
    assert session.dynamic_grid.get(session.state.player) is EntityKind.PLAYER
    assert len(session.state.boxes) == 1


# -- play ---------------------------------------------------------------------


def test_move_updates_stats_and_emits(session: LevelSession, effects: list[Effect]) -> None:
    session.try_move(Direction.LEFT)
    assert effects == [Effect.MOVE]
    assert session.stats.moves == 0
    session.change_level(2)
    session.try_move(Direction.RIGHT)
    assert session.stats.moves == 1
    assert session.stats.pushes == 0


def test_winning_push_emits_push_then_win(session: LevelSession, effects: list[Effect]) -> None:
    assert session.try_move(Direction.RIGHT) is MoveOutcome.PUSH
    assert session.won
    assert effects == [Effect.BOX_MOVE, Effect.WIN]
    assert session.stats.pushes == 1


def test_blocked_push_still_sounds_like_a_push(make_session) -> None:
    session = make_session(("#@$$.#",))
    heard: list[Effect] = []
    session.subscribe(heard.append)
    assert session.try_move(Direction.RIGHT) is MoveOutcome.PUSH_BLOCKED
    assert heard == [Effect.BOX_MOVE]
    assert session.stats.moves == 0


def test_stuck_emitted_after_move(make_session) -> None:
    session = make_session((" $@", ".  "))
    heard: list[Effect] = []
    session.subscribe(heard.append)
    session.try_move(Direction.LEFT)
    assert session.stuck
    assert heard == [Effect.BOX_MOVE, Effect.STUCK]


def test_unsubscribe(session: LevelSession) -> None:
    heard: list[Effect] = []
    session.subscribe(heard.append)
    session.unsubscribe(heard.append)
    session.try_move(Direction.RIGHT)
    assert heard == []


# -- reset --------------------------------------------------------------------


def test_reset_restores_initial_layout(session: LevelSession, effects: list[Effect]) -> None:
    session.try_move(Direction.RIGHT)
    session.reset()
    assert not session.won
    assert not session.stuck
    assert session.state.player == Position(1, 1)
    assert session.state.boxes == [Position(2, 1)]
    assert session.stats.moves == 0
    assert effects[-1] is Effect.RESET


def test_reset_is_idempotent(session: LevelSession) -> None:
    session.try_move(Direction.RIGHT)
    session.reset()
    once = (session.dynamic_grid.rows(), list(session.state.boxes), session.state.player)
    session.reset()
    twice = (session.dynamic_grid.rows(), list(session.state.boxes), session.state.player)
    assert once == twice


def test_reset_clears_stuck(make_session) -> None:
    session = make_session((" $@", ".  "))
    session.try_move(Direction.LEFT)
    session.reset()
    assert not session.stuck
    assert session.state.boxes == [Position(1, 0)]


# -- level transitions --------------------------------------------------------


def test_next_and_previous(session: LevelSession, effects: list[Effect]) -> None:
    assert session.next()
    assert session.level_index == 1
    assert session.previous()
    assert session.level_index == 0
    assert effects == [Effect.NEW_LEVEL, Effect.NEW_LEVEL]


def test_previous_on_first_level(session: LevelSession, effects: list[Effect]) -> None:
    assert not session.previous()
    assert session.level_index == 0
    assert session.notice == "You are already at the first level!"
    assert effects == []


def test_next_on_last_level(session: LevelSession) -> None:
    session.change_level(2)
    assert not session.next()
    assert session.level_index == 2
    assert session.notice == "You are already at the last level!"


def test_change_to_same_level(session: LevelSession) -> None:
    session.try_move(Direction.RIGHT)
    assert not session.change_level(0)
    assert session.notice == "That level is already selected!"
    # The current progress is kept.
    assert session.won


def test_change_level_out_of_range(session: LevelSession) -> None:
    with pytest.raises(InvalidLevel, match="Level 4 does not exist"):
        session.change_level(3)
    with pytest.raises(InvalidLevel):
        session.change_level(-1)


def test_change_level_restarts_target(session: LevelSession) -> None:
    session.change_level(1)
    session.try_move(Direction.LEFT)
    session.change_level(0)
    session.change_level(1)
    assert session.state.player == Position(4, 1)
    assert session.state.boxes == [Position(2, 1)]


def test_next_move_clears_notice(session: LevelSession) -> None:
    session.previous()
    assert session.notice
    session.try_move(Direction.LEFT)
    assert session.notice is None


# -- persistence --------------------------------------------------------------


def test_save_then_load(session: LevelSession) -> None:
    session.change_level(2)
    session.try_move(Direction.RIGHT)
    session.try_move(Direction.RIGHT)
    data = session.save()
    before = (session.dynamic_grid.rows(), list(session.state.boxes), session.state.player)

    session.reset()
    session.change_level(0)
    state = session.load(data)

    assert session.level_index == 2
    assert session.state is state
    assert (session.dynamic_grid.rows(), list(state.boxes), state.player) == before
    session.reset()
    assert state.player == Position(1, 1)


def test_load_rejects_unknown_level(session: LevelSession, make_session) -> None:
    other = make_session(LEVEL_A, LEVEL_B, LEVEL_C, ("#@*#",), start=3)
    with pytest.raises(InvalidLevel):
        session.load(other.save())
    assert session.level_index == 0


def test_load_corrupt_data_changes_nothing(session: LevelSession) -> None:
    session.try_move(Direction.RIGHT)
    data = session.save()
    data["boxes"] = []
    with pytest.raises(SnapshotCorrupt):
        session.load(data)
    assert session.won
