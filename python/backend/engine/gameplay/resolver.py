"""Move resolution — decides whether the player steps, pushes, or is blocked."""

from __future__ import annotations

import logging
from enum import StrEnum

from backend.exceptions import OutOfBounds
from backend.models.grid import Position
from backend.models.level import LevelState
from backend.models.tiles import Direction, EntityKind, Occupant

log = logging.getLogger(__name__)


class MoveOutcome(StrEnum):
    STEP = "step"
    PUSH = "push"
    BLOCKED = "blocked"
    PUSH_BLOCKED = "push_blocked"

    @property
    def moved(self) -> bool:
        """True if the player changed position."""
        return self in (MoveOutcome.STEP, MoveOutcome.PUSH)

    @property
    def attempted_push(self) -> bool:
        return self in (MoveOutcome.PUSH, MoveOutcome.PUSH_BLOCKED)


class MoveResolver:
    """Stateless resolver — all methods are static."""

    @staticmethod
    def classify(state: LevelState, pos: Position) -> Occupant:
        """Combine both layers at *pos*.

        Anything outside the grid reads as a wall.
        """
        try:
            tile = state.static_grid.get(pos)
            entity = state.dynamic_grid.get(pos)
        except OutOfBounds:
            return Occupant.WALL
        return Occupant.of(tile, entity)

    @staticmethod
    def try_move(state: LevelState, direction: Direction) -> MoveOutcome:
        """Move the player one cell in *direction*, pushing a box if needed.

        Returns the outcome; a blocked move leaves *state* untouched.
        """
        origin = state.player
        target = origin.step(direction)
        occupant = MoveResolver.classify(state, target)

        if occupant is Occupant.WALL:
            outcome = MoveOutcome.BLOCKED
        elif occupant.walkable:
            MoveResolver._move_player(state, target)
            outcome = MoveOutcome.STEP
        elif occupant.is_box:
            outcome = MoveResolver._push(state, target, direction)
        else:
            # Only one player exists, so it can never be its own neighbour.
            log.warning("Player found at %s next to itself", tuple(target))
            outcome = MoveOutcome.BLOCKED

        log.debug("%s from %s: %s", direction.value, tuple(origin), outcome.value)
        return outcome

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _push(state: LevelState, box: Position, direction: Direction) -> MoveOutcome:
        beyond = box.step(direction)
        if not MoveResolver.classify(state, beyond).walkable:
            return MoveOutcome.PUSH_BLOCKED

        # Resolve the box entry before the first write.
        index = state.boxes.index(box)
        kind = EntityKind.BOX_ON_GOAL if beyond in state.goals else EntityKind.BOX

        state.dynamic_grid.set(beyond, kind)
        state.boxes[index] = beyond
        MoveResolver._move_player(state, box)
        return MoveOutcome.PUSH

    @staticmethod
    def _move_player(state: LevelState, target: Position) -> None:
        state.dynamic_grid.set(state.player, EntityKind.EMPTY)
        state.dynamic_grid.set(target, EntityKind.PLAYER)
        state.player = target
