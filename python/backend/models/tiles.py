"""Tile vocabulary for the two grid layers."""

from __future__ import annotations

from enum import StrEnum


class Direction(StrEnum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Unit step as ``(dx, dy)``; y grows downwards."""
        return _DELTAS[self]


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class TileKind(StrEnum):
    """Static layer: walls and goal markers."""

    WALL = "wall"
    GOAL = "redmarker"
    EMPTY = "blank"

    @property
    def token(self) -> str | None:
        """Level-file token, ``None`` for a blank cell."""
        return None if self is TileKind.EMPTY else self.value

    @classmethod
    def from_token(cls, token: str | None) -> TileKind:
        if token is None:
            return cls.EMPTY
        if token == cls.EMPTY.value:
            raise ValueError(f"Unknown static token {token!r}.")
        return cls(token)


class EntityKind(StrEnum):
    """Dynamic layer: the player and the boxes."""

    PLAYER = "player"
    BOX = "box"
    BOX_ON_GOAL = "boxmarked"
    EMPTY = "blank"

    @property
    def token(self) -> str | None:
        return None if self is EntityKind.EMPTY else self.value

    @property
    def is_box(self) -> bool:
        return self in (EntityKind.BOX, EntityKind.BOX_ON_GOAL)

    @classmethod
    def from_token(cls, token: str | None) -> EntityKind:
        if token is None:
            return cls.EMPTY
        if token == cls.EMPTY.value:
            raise ValueError(f"Unknown dynamic token {token!r}.")
        return cls(token)


class Occupant(StrEnum):
    """What a cell holds once both layers are combined.

    A wall on the static layer hides anything on the dynamic layer; an
    entity hides the static tile beneath it.
    """

    WALL = "wall"
    GOAL = "goal"
    EMPTY = "empty"
    BOX = "box"
    BOX_ON_GOAL = "box_on_goal"
    PLAYER = "player"

    @property
    def walkable(self) -> bool:
        return self in (Occupant.GOAL, Occupant.EMPTY)

    @property
    def is_box(self) -> bool:
        return self in (Occupant.BOX, Occupant.BOX_ON_GOAL)

    @classmethod
    def of(cls, tile: TileKind, entity: EntityKind) -> Occupant:
        if tile is TileKind.WALL:
            return cls.WALL
        if entity is EntityKind.PLAYER:
            return cls.PLAYER
        if entity is EntityKind.BOX:
            return cls.BOX
        if entity is EntityKind.BOX_ON_GOAL:
            return cls.BOX_ON_GOAL
        if tile is TileKind.GOAL:
            return cls.GOAL
        return cls.EMPTY
