"""Level file and ASCII parsing tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from backend.engine.levelreader import LevelReader
from backend.exceptions import MalformedLevel
from backend.models.grid import Position
from backend.models.tiles import EntityKind, TileKind

MAP = "wall\nwall\nwall\nnext\nwall\nredmarker\nnull\nnext\nwall\nwall\nwall\n"
INTERACTIVE = "null\nnull\nnull\nnext\nnull\nbox\nplayer\nnext\nnull\nnull\nnull\n"


def _write_pair(directory: Path, stem: str, map_text: str = MAP, dyn: str = INTERACTIVE) -> None:
    (directory / f"{stem}_map.txt").write_text(map_text)
    (directory / f"{stem}_interactive.txt").write_text(dyn)


# -- token files --------------------------------------------------------------


def test_read_tokens_splits_rows_on_next() -> None:
    rows = LevelReader.read_tokens("wall\nnull\nnext\n\nredmarker\n")
    assert rows == [["wall", None], [None, "redmarker"]]


def test_read_tokens_without_trailing_next() -> None:
    assert LevelReader.read_tokens("wall\nnext\nwall") == [["wall"], ["wall"]]


def test_ragged_rows_rejected() -> None:
    with pytest.raises(MalformedLevel, match="Row 2"):
        LevelReader.read_tokens("wall\nwall\nnext\nwall\n")


def test_empty_layer_rejected() -> None:
    with pytest.raises(MalformedLevel):
        LevelReader.read_tokens("")


def test_unknown_token_rejected() -> None:
    with pytest.raises(MalformedLevel, match="crate"):
        LevelReader.from_texts(MAP, INTERACTIVE.replace("box", "crate"))


def test_from_texts_builds_level() -> None:
    state = LevelReader.from_texts(MAP, INTERACTIVE, level_index=3)
    assert (state.width, state.height) == (3, 3)
    assert state.level_index == 3
    assert state.player == Position(2, 1)
    assert state.goals == frozenset({Position(1, 1)})
    # A box read onto a goal is normalised to its on-goal form.
    assert state.dynamic_grid.get(Position(1, 1)) is EntityKind.BOX_ON_GOAL
    assert state.boxes == [Position(1, 1)]


def test_layer_size_mismatch_rejected() -> None:
    with pytest.raises(MalformedLevel, match="sizes differ"):
        LevelReader.from_texts(MAP, "null\nnext\nplayer\n")


def test_entity_on_wall_rejected() -> None:
    dyn = INTERACTIVE.replace("null\nnull\nnull\nnext\nnull\nbox", "player\nnull\nnull\nnext\nnull\nbox", 1)
    with pytest.raises(MalformedLevel, match="wall"):
        LevelReader.from_texts(MAP, dyn)


def test_player_count_enforced() -> None:
    with pytest.raises(MalformedLevel, match="one player"):
        LevelReader.from_texts(MAP, INTERACTIVE.replace("player", "null"))


# -- directories --------------------------------------------------------------


def test_discover_uses_natural_order(tmp_path: Path) -> None:
    for stem in ("lvl10", "lvl2", "lvl1"):
        _write_pair(tmp_path, stem)
    names = [m.name for m, _ in LevelReader.discover(tmp_path)]
    assert names == ["lvl1_map.txt", "lvl2_map.txt", "lvl10_map.txt"]

    levels = LevelReader.load_directory(tmp_path)
    assert [lvl.level_index for lvl in levels] == [0, 1, 2]


def test_missing_interactive_file(tmp_path: Path) -> None:
    (tmp_path / "lvl1_map.txt").write_text(MAP)
    with pytest.raises(MalformedLevel, match="lvl1_interactive.txt"):
        LevelReader.discover(tmp_path)


def test_file_errors_name_the_file(tmp_path: Path) -> None:
    _write_pair(tmp_path, "broken", dyn="null\n")
    with pytest.raises(MalformedLevel, match="broken_map.txt"):
        LevelReader.load_directory(tmp_path)


def test_non_utf8_level_file(tmp_path: Path) -> None:
    _write_pair(tmp_path, "garbled")
    (tmp_path / "garbled_map.txt").write_bytes(b"\xff\xfe")
    with pytest.raises(MalformedLevel, match="garbled_map.txt"):
        LevelReader.load_directory(tmp_path)


# -- ASCII notation -----------------------------------------------------------


def test_from_ascii_pads_short_lines() -> None:
    state = LevelReader.from_ascii("\n#####\n#@$.#\n###\n\n")
    assert (state.width, state.height) == (5, 3)
    assert state.static_grid.get(Position(4, 2)) is TileKind.EMPTY
    assert state.static_grid.get(Position(3, 1)) is TileKind.GOAL
    assert state.player == Position(1, 1)


def test_from_ascii_player_and_box_on_goal() -> None:
    state = LevelReader.from_ascii("#+*#")
    assert state.player == Position(1, 0)
    assert state.goals == frozenset({Position(1, 0), Position(2, 0)})
    assert state.dynamic_grid.get(Position(2, 0)) is EntityKind.BOX_ON_GOAL


def test_from_ascii_unknown_symbol() -> None:
    with pytest.raises(MalformedLevel, match="'x'"):
        LevelReader.from_ascii("#@x#")


def test_token_texts_read_back() -> None:
    original = LevelReader.from_ascii("######\n#@$ .#\n######")
    map_text, dyn_text = LevelReader.to_token_texts(original)
    assert map_text.splitlines()[:7] == ["wall"] * 6 + ["next"]

    again = LevelReader.from_texts(map_text, dyn_text)
    assert again.static_grid == original.static_grid
    assert again.dynamic_grid == original.dynamic_grid
