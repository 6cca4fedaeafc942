"""Fixed-size rectangular grid with bounds-checked access."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Generic, NamedTuple, TypeVar

from backend.exceptions import OutOfBounds
from backend.models.tiles import Direction

T = TypeVar("T")


class Position(NamedTuple):
    """A cell address: ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def step(self, direction: Direction) -> Position:
        dx, dy = direction.delta
        return Position(self.x + dx, self.y + dy)


class Grid(Generic[T]):
    """A ``width`` x ``height`` array of cells stored row by row.

    The dimensions never change after construction.  Reads and writes
    outside ``[0, width) x [0, height)`` raise :class:`OutOfBounds`.
    """

    def __init__(self, rows: list[list[T]]) -> None:
        if not rows or not rows[0]:
            raise ValueError("A grid needs at least one row and one column.")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {y} has {len(row)} cells, expected {width}."
                )
        self._cells: list[list[T]] = [list(row) for row in rows]
        self.width = width
        self.height = len(rows)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def filled(cls, width: int, height: int, value: T) -> Grid[T]:
        return cls([[value] * width for _ in range(height)])

    # -- access ---------------------------------------------------------------

    def contains(self, pos: tuple[int, int]) -> bool:
        x, y = pos
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, pos: tuple[int, int]) -> T:
        if not self.contains(pos):
            raise OutOfBounds(
                f"{tuple(pos)} is outside the {self.width}x{self.height} grid."
            )
        x, y = pos
        return self._cells[y][x]

    def set(self, pos: tuple[int, int], value: T) -> None:
        if not self.contains(pos):
            raise OutOfBounds(
                f"{tuple(pos)} is outside the {self.width}x{self.height} grid."
            )
        x, y = pos
        self._cells[y][x] = value

    def positions(self) -> Iterator[Position]:
        """Yield every position in row-major order."""
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)

    def rows(self) -> list[list[T]]:
        """Return a copy of the cells, one list per row."""
        return [row[:] for row in self._cells]

    def clone(self) -> Grid[T]:
        return Grid(self.rows())

    # -- dunder ---------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"
