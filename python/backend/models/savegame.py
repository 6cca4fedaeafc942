"""Save-game encoding and the on-disk save slots."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from backend.exceptions import SnapshotCorrupt
from backend.models.grid import Grid, Position
from backend.models.level import LevelSnapshot, LevelState
from backend.models.tiles import EntityKind, TileKind

log = logging.getLogger(__name__)

_FORMAT = "sokoban.level"
_VERSION = 1


# -- encoding -----------------------------------------------------------------


def _encode_grid(grid: Grid) -> list[list[str | None]]:
    return [[cell.token for cell in row] for row in grid.rows()]


def _encode_positions(positions) -> list[list[int]]:
    return [[p.x, p.y] for p in positions]


def encode_state(state: LevelState) -> dict[str, Any]:
    """Return a JSON-ready dict capturing *state* and its initial snapshot."""
    initial = state.initial
    assert initial is not None
    return {
        "format": _FORMAT,
        "version": _VERSION,
        "level_index": state.level_index,
        "won": state.won,
        "stuck": state.stuck,
        "static": _encode_grid(state.static_grid),
        "dynamic": _encode_grid(state.dynamic_grid),
        "boxes": _encode_positions(state.boxes),
        "player": [state.player.x, state.player.y],
        "initial": {
            "dynamic": _encode_grid(initial.dynamic_grid),
            "boxes": _encode_positions(initial.boxes),
            "player": [initial.player.x, initial.player.y],
        },
    }


# -- decoding -----------------------------------------------------------------


def _decode_grid(raw: Any, kind: type[TileKind] | type[EntityKind], name: str) -> Grid:
    if not isinstance(raw, list) or not raw:
        raise SnapshotCorrupt(f"{name} must be a non-empty list of rows.")
    rows = []
    for y, raw_row in enumerate(raw):
        if not isinstance(raw_row, list):
            raise SnapshotCorrupt(f"{name}[{y}] must be a list.")
        try:
            rows.append([kind.from_token(token) for token in raw_row])
        except ValueError as e:
            raise SnapshotCorrupt(f"{name}[{y}]: {e}") from e
    try:
        return Grid(rows)
    except ValueError as e:
        raise SnapshotCorrupt(f"{name}: {e}") from e


def _decode_position(raw: Any, name: str) -> Position:
    if (
        not isinstance(raw, list)
        or len(raw) != 2
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in raw)
    ):
        raise SnapshotCorrupt(f"{name} must be an [x, y] pair of integers.")
    return Position(raw[0], raw[1])


def _decode_positions(raw: Any, name: str) -> list[Position]:
    if not isinstance(raw, list):
        raise SnapshotCorrupt(f"{name} must be a list.")
    return [_decode_position(p, f"{name}[{i}]") for i, p in enumerate(raw)]


def _check_layer(
    static: Grid[TileKind],
    dynamic: Grid[EntityKind],
    boxes: list[Position],
    player: Position,
    name: str,
) -> None:
    """Verify a dynamic layer agrees with its box list and player."""
    if (dynamic.width, dynamic.height) != (static.width, static.height):
        raise SnapshotCorrupt(f"{name}: layer size differs from the static layer.")
    if not dynamic.contains(player) or dynamic.get(player) is not EntityKind.PLAYER:
        raise SnapshotCorrupt(f"{name}: no player at {tuple(player)}.")
    if len(set(boxes)) != len(boxes):
        raise SnapshotCorrupt(f"{name}: duplicate box positions.")

    players = 0
    box_cells: set[Position] = set()
    for pos in dynamic.positions():
        entity = dynamic.get(pos)
        if entity is EntityKind.EMPTY:
            continue
        if static.get(pos) is TileKind.WALL:
            raise SnapshotCorrupt(f"{name}: {entity.value} inside a wall at {tuple(pos)}.")
        if entity is EntityKind.PLAYER:
            players += 1
        else:
            box_cells.add(pos)
    if players != 1:
        raise SnapshotCorrupt(f"{name}: expected one player, found {players}.")
    if box_cells != set(boxes):
        raise SnapshotCorrupt(f"{name}: box list does not match the grid.")


def decode_state(data: Any) -> LevelState:
    """Rebuild a :class:`LevelState` from :func:`encode_state` output.

    Raises :class:`SnapshotCorrupt` for anything structurally invalid.
    """
    try:
        if not isinstance(data, dict):
            raise SnapshotCorrupt("Save data must be an object.")
        if data.get("format") != _FORMAT:
            raise SnapshotCorrupt("Invalid save format marker.")
        if data.get("version") != _VERSION:
            raise SnapshotCorrupt(f"Unsupported save version {data.get('version')!r}.")

        level_index = data["level_index"]
        won = data["won"]
        stuck = data["stuck"]
        if not isinstance(level_index, int) or isinstance(level_index, bool):
            raise SnapshotCorrupt("level_index must be an integer.")
        if not isinstance(won, bool) or not isinstance(stuck, bool):
            raise SnapshotCorrupt("won and stuck must be booleans.")

        static = _decode_grid(data["static"], TileKind, "static")
        dynamic = _decode_grid(data["dynamic"], EntityKind, "dynamic")
        boxes = _decode_positions(data["boxes"], "boxes")
        player = _decode_position(data["player"], "player")

        raw_initial = data["initial"]
        if not isinstance(raw_initial, dict):
            raise SnapshotCorrupt("initial must be an object.")
        initial_dynamic = _decode_grid(raw_initial["dynamic"], EntityKind, "initial.dynamic")
        initial_boxes = _decode_positions(raw_initial["boxes"], "initial.boxes")
        initial_player = _decode_position(raw_initial["player"], "initial.player")
    except KeyError as e:
        raise SnapshotCorrupt(f"Missing field {e}.") from e

    _check_layer(static, dynamic, boxes, player, "dynamic")
    _check_layer(static, initial_dynamic, initial_boxes, initial_player, "initial")
    if len(boxes) != len(initial_boxes):
        raise SnapshotCorrupt(
            f"Box count changed from {len(initial_boxes)} to {len(boxes)}."
        )

    goals = frozenset(p for p in static.positions() if static.get(p) is TileKind.GOAL)
    return LevelState(
        static_grid=static,
        dynamic_grid=dynamic,
        goals=goals,
        boxes=boxes,
        player=player,
        level_index=level_index,
        won=won,
        stuck=stuck,
        initial=LevelSnapshot(
            dynamic_grid=initial_dynamic,
            boxes=tuple(initial_boxes),
            player=initial_player,
        ),
    )


# -- save slots ---------------------------------------------------------------


class SaveGameManager:
    """Reads and writes save games as ``<name>.json`` under one directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def path_for(self, name: str) -> Path:
        return self.directory / f"{name}.json"

    def save(self, state: LevelState, name: str) -> Path:
        path = self.path_for(name)
        self.write(path, encode_state(state))
        log.info("Saved level %d to %s", state.level_index + 1, path)
        return path

    def load(self, name: str) -> LevelState:
        return self.read(self.path_for(name))

    def list_saves(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob("*.json"))

    # -- raw file access ------------------------------------------------------

    @staticmethod
    def write(path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    @staticmethod
    def read(path: Path) -> LevelState:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except UnicodeDecodeError as e:
            raise SnapshotCorrupt(f"{path.name} is not UTF-8 text: {e}") from e
        except json.JSONDecodeError as e:
            raise SnapshotCorrupt(f"{path.name} is not valid JSON: {e}") from e
        state = decode_state(data)
        log.info("Loaded level %d from %s", state.level_index + 1, path)
        return state
