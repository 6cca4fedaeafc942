"""Save-game encoding and save-slot tests."""

from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from backend.engine.gameplay import MoveResolver
from backend.engine.gamestate import CompletionChecker
from backend.exceptions import SnapshotCorrupt
from backend.models.grid import Position
from backend.models.savegame import SaveGameManager, decode_state, encode_state
from backend.models.tiles import Direction

ROWS = (
    "#######",
    "#.$ $.#",
    "#  @  #",
    "#######",
)


@pytest.fixture
def played(make_level):
    state = make_level(*ROWS, index=2)
    MoveResolver.try_move(state, Direction.UP)
    MoveResolver.try_move(state, Direction.LEFT)
    CompletionChecker.check(state)
    return state


# -- encoding -----------------------------------------------------------------


def test_encoded_layout(played) -> None:
    data = encode_state(played)
    assert data["format"] == "sokoban.level"
    assert data["version"] == 1
    assert data["level_index"] == 2
    assert data["static"][0] == ["wall"] * 7
    assert data["static"][1][1] == "redmarker"
    assert data["dynamic"][1][1] == "boxmarked"
    assert data["dynamic"][1][2] == "player"
    assert data["dynamic"][1][3] is None
    assert data["player"] == [2, 1]
    assert data["initial"]["player"] == [3, 2]
    # Must survive a trip through JSON text.
    assert json.loads(json.dumps(data)) == data


def test_decode_reproduces_state(played) -> None:
    state = decode_state(json.loads(json.dumps(encode_state(played))))
    assert state.static_grid == played.static_grid
    assert state.dynamic_grid == played.dynamic_grid
    assert state.boxes == played.boxes
    assert state.player == played.player
    assert state.goals == played.goals
    assert (state.won, state.stuck, state.level_index) == (played.won, played.stuck, 2)

    state.restore_initial()
    assert state.player == Position(3, 2)
    assert state.boxes == [Position(2, 1), Position(4, 1)]


# -- corrupt data -------------------------------------------------------------


def _corrupt(data: dict, path: tuple, value) -> dict:
    broken = copy.deepcopy(data)
    target = broken
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return broken


@pytest.mark.parametrize(
    ("path", "value"),
    [
        (("format",), "chess"),
        (("version",), 2),
        (("level_index",), "2"),
        (("level_index",), True),
        (("won",), 1),
        (("static",), []),
        (("static", 0, 0), "lava"),
        (("dynamic", 2), ["player"]),
        (("player",), [9, 9]),
        (("player",), [1]),
        (("boxes",), [[2, 1]]),
        (("boxes",), [[1, 1], [1, 1]]),
        (("initial", "boxes"), []),
        (("initial", "player"), [0, 0]),
    ],
)
def test_invalid_fields_rejected(played, path: tuple, value) -> None:
    data = _corrupt(encode_state(played), path, value)
    with pytest.raises(SnapshotCorrupt):
        decode_state(data)


def test_missing_field_rejected(played) -> None:
    data = encode_state(played)
    del data["initial"]
    with pytest.raises(SnapshotCorrupt, match="initial"):
        decode_state(data)


def test_player_inside_wall_rejected(played) -> None:
    data = encode_state(played)
    data["dynamic"][0][0] = "player"
    data["dynamic"][1][2] = None
    data["player"] = [0, 0]
    with pytest.raises(SnapshotCorrupt, match="wall"):
        decode_state(data)


def test_non_object_rejected() -> None:
    with pytest.raises(SnapshotCorrupt):
        decode_state(["not", "a", "save"])


# -- save slots ---------------------------------------------------------------


def test_save_and_load_slot(tmp_path: Path, played) -> None:
    saves = SaveGameManager(tmp_path / "saves")
    assert saves.list_saves() == []

    path = saves.save(played, "quicksave")
    assert path == tmp_path / "saves" / "quicksave.json"
    assert saves.list_saves() == ["quicksave"]

    loaded = saves.load("quicksave")
    assert loaded.dynamic_grid == played.dynamic_grid
    assert loaded.boxes == played.boxes


def test_load_missing_slot(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        SaveGameManager(tmp_path).load("nothing")


def test_load_invalid_json(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json")
    with pytest.raises(SnapshotCorrupt, match="broken.json"):
        SaveGameManager(tmp_path).load("broken")


def test_load_non_utf8_bytes(tmp_path: Path) -> None:
    (tmp_path / "binary.json").write_bytes(b"\xff\xfe{not utf8")
    with pytest.raises(SnapshotCorrupt, match="binary.json"):
        SaveGameManager.read(tmp_path / "binary.json")
