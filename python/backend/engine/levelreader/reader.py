"""Reads level descriptions into :class:`LevelState` objects.

A level is stored as two text files side by side::

    lvl1_map.txt          static layer: wall / redmarker / blank
    lvl1_interactive.txt  dynamic layer: player / box / boxmarked / blank

Each file holds one token per line.  ``next`` ends a row and a blank cell
is written as ``null`` (an empty line is accepted too).  Every row of both
layers must have the same number of cells.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TypeVar

from backend.exceptions import MalformedLevel
from backend.models.grid import Grid
from backend.models.level import LevelState
from backend.models.tiles import EntityKind, TileKind

log = logging.getLogger(__name__)

K = TypeVar("K", TileKind, EntityKind)

ROW_END = "next"
BLANK = "null"
MAP_SUFFIX = "_map.txt"
INTERACTIVE_SUFFIX = "_interactive.txt"

# Common Sokoban notation -> (static tile, entity)
_ASCII: dict[str, tuple[TileKind, EntityKind]] = {
    "#": (TileKind.WALL, EntityKind.EMPTY),
    ".": (TileKind.GOAL, EntityKind.EMPTY),
    "$": (TileKind.EMPTY, EntityKind.BOX),
    "*": (TileKind.GOAL, EntityKind.BOX_ON_GOAL),
    "@": (TileKind.EMPTY, EntityKind.PLAYER),
    "+": (TileKind.GOAL, EntityKind.PLAYER),
    " ": (TileKind.EMPTY, EntityKind.EMPTY),
    "-": (TileKind.EMPTY, EntityKind.EMPTY),
    "_": (TileKind.EMPTY, EntityKind.EMPTY),
}


def _natural_key(name: str) -> list:
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", name)]


class LevelReader:
    """Stateless reader — all methods are static."""

    # -- token layer ----------------------------------------------------------

    @staticmethod
    def read_tokens(text: str) -> list[list[str | None]]:
        """Split one layer file into rows of tokens (``None`` for blanks).

        Raises :class:`MalformedLevel` if the rows differ in length.
        """
        rows: list[list[str | None]] = [[]]
        for line in text.splitlines():
            token = line.strip()
            if token == ROW_END:
                rows.append([])
            elif token in (BLANK, ""):
                rows[-1].append(None)
            else:
                rows[-1].append(token)

        # A trailing ``next`` leaves one empty row behind.
        if len(rows) > 1 and not rows[-1]:
            rows.pop()
        if not rows[0]:
            raise MalformedLevel("Layer is empty.")

        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise MalformedLevel(
                    f"Row {y + 1} has {len(row)} cells, expected {width}."
                )
        return rows

    @staticmethod
    def parse_layer(rows: list[list[str | None]], kind: type[K]) -> Grid[K]:
        """Map tokens onto *kind* members; unknown tokens are rejected."""
        cells: list[list[K]] = []
        for y, row in enumerate(rows):
            parsed: list[K] = []
            for x, token in enumerate(row):
                try:
                    parsed.append(kind.from_token(token))
                except ValueError as e:
                    raise MalformedLevel(
                        f"Unknown token {token!r} at column {x + 1}, row {y + 1}."
                    ) from e
            cells.append(parsed)
        return Grid(cells)

    # -- whole levels ---------------------------------------------------------

    @staticmethod
    def from_texts(map_text: str, interactive_text: str, level_index: int = 0) -> LevelState:
        static = LevelReader.parse_layer(LevelReader.read_tokens(map_text), TileKind)
        dynamic = LevelReader.parse_layer(
            LevelReader.read_tokens(interactive_text), EntityKind
        )
        return LevelState.from_grids(static, dynamic, level_index)

    @staticmethod
    def from_files(map_path: Path, interactive_path: Path, level_index: int = 0) -> LevelState:
        try:
            return LevelReader.from_texts(
                map_path.read_text(encoding="utf-8"),
                interactive_path.read_text(encoding="utf-8"),
                level_index,
            )
        except UnicodeDecodeError as e:
            raise MalformedLevel(f"{map_path.name}: not UTF-8 text ({e})") from e
        except MalformedLevel as e:
            raise MalformedLevel(f"{map_path.name}: {e}") from e

    @staticmethod
    def discover(directory: Path) -> list[tuple[Path, Path]]:
        """Return ``(map, interactive)`` file pairs in natural name order."""
        pairs: list[tuple[Path, Path]] = []
        maps = sorted(
            directory.glob(f"*{MAP_SUFFIX}"),
            key=lambda p: _natural_key(p.name),
        )
        for map_path in maps:
            stem = map_path.name[: -len(MAP_SUFFIX)]
            interactive = directory / f"{stem}{INTERACTIVE_SUFFIX}"
            if not interactive.is_file():
                raise MalformedLevel(f"{map_path.name} has no {interactive.name}.")
            pairs.append((map_path, interactive))
        return pairs

    @staticmethod
    def load_directory(directory: Path) -> list[LevelState]:
        levels = [
            LevelReader.from_files(map_path, interactive, index)
            for index, (map_path, interactive) in enumerate(
                LevelReader.discover(directory)
            )
        ]
        log.debug("Read %d level(s) from %s", len(levels), directory)
        return levels

    # -- ASCII notation -------------------------------------------------------

    @staticmethod
    def from_ascii(text: str, level_index: int = 0) -> LevelState:
        """Build a level from the usual ``#.$*@+`` drawing.

        Leading and trailing blank lines are dropped and short lines are
        padded with blank cells.
        """
        lines = text.splitlines()
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            raise MalformedLevel("Level drawing is empty.")

        width = max(len(line) for line in lines)
        static: list[list[TileKind]] = []
        dynamic: list[list[EntityKind]] = []
        for y, line in enumerate(lines):
            tiles: list[TileKind] = []
            entities: list[EntityKind] = []
            for x, ch in enumerate(line.ljust(width)):
                if ch not in _ASCII:
                    raise MalformedLevel(
                        f"Unknown symbol {ch!r} at column {x + 1}, row {y + 1}."
                    )
                tile, entity = _ASCII[ch]
                tiles.append(tile)
                entities.append(entity)
            static.append(tiles)
            dynamic.append(entities)
        return LevelState.from_grids(Grid(static), Grid(dynamic), level_index)

    @staticmethod
    def to_token_texts(state: LevelState) -> tuple[str, str]:
        """Write *state*'s initial layout back out as ``(map, interactive)``."""
        initial = state.initial
        assert initial is not None

        def _render(grid: Grid) -> str:
            lines: list[str] = []
            for y, row in enumerate(grid.rows()):
                if y:
                    lines.append(ROW_END)
                lines.extend(cell.token or BLANK for cell in row)
            return "\n".join(lines) + "\n"

        return _render(state.static_grid), _render(initial.dynamic_grid)
