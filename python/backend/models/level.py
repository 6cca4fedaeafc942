"""Mutable state of a single Sokoban level."""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.exceptions import MalformedLevel
from backend.models.grid import Grid, Position
from backend.models.tiles import EntityKind, TileKind


@dataclass(frozen=True)
class LevelSnapshot:
    """The movable part of a level frozen at one point in time.

    The grid inside is never written; anything restored from a snapshot
    gets a clone of it.
    """

    dynamic_grid: Grid[EntityKind]
    boxes: tuple[Position, ...]
    player: Position


@dataclass
class LevelState:
    """Two grid layers plus the derived positions of goals, boxes and player.

    ``initial`` is captured on construction unless one is supplied (as when
    a saved game is decoded) and is what :meth:`restore_initial` goes back to.
    """

    static_grid: Grid[TileKind]
    dynamic_grid: Grid[EntityKind]
    goals: frozenset[Position]
    boxes: list[Position]
    player: Position
    level_index: int = 0
    won: bool = False
    stuck: bool = False
    initial: LevelSnapshot | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.initial is None:
            self.initial = self.snapshot()

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_grids(
        cls,
        static_grid: Grid[TileKind],
        dynamic_grid: Grid[EntityKind],
        level_index: int = 0,
    ) -> LevelState:
        """Derive goals, boxes and the player from the two layers.

        Box cells are rewritten so that a box on a goal is always
        ``BOX_ON_GOAL`` and any other box is ``BOX``.
        """
        if (static_grid.width, static_grid.height) != (
            dynamic_grid.width,
            dynamic_grid.height,
        ):
            raise MalformedLevel(
                f"Layer sizes differ: static is "
                f"{static_grid.width}x{static_grid.height}, dynamic is "
                f"{dynamic_grid.width}x{dynamic_grid.height}."
            )

        dynamic = dynamic_grid.clone()
        goals: set[Position] = set()
        boxes: list[Position] = []
        players: list[Position] = []

        for pos in static_grid.positions():
            tile = static_grid.get(pos)
            entity = dynamic.get(pos)
            if tile is TileKind.GOAL:
                goals.add(pos)
            if entity is EntityKind.EMPTY:
                continue
            if tile is TileKind.WALL:
                raise MalformedLevel(f"{entity.value} at {tuple(pos)} sits on a wall.")
            if entity is EntityKind.PLAYER:
                players.append(pos)
            else:
                boxes.append(pos)
                on_goal = tile is TileKind.GOAL
                dynamic.set(pos, EntityKind.BOX_ON_GOAL if on_goal else EntityKind.BOX)

        if len(players) != 1:
            raise MalformedLevel(
                f"A level needs exactly one player, found {len(players)}."
            )

        return cls(
            static_grid=static_grid.clone(),
            dynamic_grid=dynamic,
            goals=frozenset(goals),
            boxes=boxes,
            player=players[0],
            level_index=level_index,
        )

    # -- snapshots ------------------------------------------------------------

    def snapshot(self) -> LevelSnapshot:
        return LevelSnapshot(
            dynamic_grid=self.dynamic_grid.clone(),
            boxes=tuple(self.boxes),
            player=self.player,
        )

    def restore_initial(self) -> None:
        """Put the player and boxes back where the level started."""
        initial = self.initial
        assert initial is not None
        self.dynamic_grid = initial.dynamic_grid.clone()
        self.boxes = list(initial.boxes)
        self.player = initial.player
        self.won = False
        self.stuck = False

    def copy(self) -> LevelState:
        return LevelState(
            static_grid=self.static_grid.clone(),
            dynamic_grid=self.dynamic_grid.clone(),
            goals=self.goals,
            boxes=list(self.boxes),
            player=self.player,
            level_index=self.level_index,
            won=self.won,
            stuck=self.stuck,
            initial=self.initial,
        )

    # -- queries --------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.static_grid.width

    @property
    def height(self) -> int:
        return self.static_grid.height

    @property
    def boxes_on_goals(self) -> int:
        return sum(1 for box in self.boxes if box in self.goals)
