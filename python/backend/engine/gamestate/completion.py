"""Win and deadlock detection, re-run after every move."""

from __future__ import annotations

from backend.engine.gameplay.resolver import MoveResolver
from backend.models.grid import Position
from backend.models.level import LevelState
from backend.models.tiles import Direction, Occupant


class CompletionChecker:
    """Stateless checker — all methods are static."""

    @staticmethod
    def check(state: LevelState) -> None:
        """Recompute ``state.won`` and ``state.stuck`` from scratch."""
        state.won = CompletionChecker.is_won(state)
        state.stuck = CompletionChecker.stuck_box(state) is not None

    @staticmethod
    def is_won(state: LevelState) -> bool:
        """Return True if every box rests on a goal."""
        on_goal = 0
        for box in state.boxes:
            if box in state.goals:
                on_goal += 1
        return on_goal == len(state.boxes)

    @staticmethod
    def stuck_box(state: LevelState) -> Position | None:
        """Return the first box pinned in a wall corner, or ``None``.

        Only a box off its goal with a wall above or below *and* a wall
        to its left or right counts.  Boxes wedged against other boxes
        are not detected.
        """
        for box in state.boxes:
            if box in state.goals:
                continue
            walls = {
                d: MoveResolver.classify(state, box.step(d)) is Occupant.WALL
                for d in Direction
            }
            vertical = walls[Direction.UP] or walls[Direction.DOWN]
            horizontal = walls[Direction.LEFT] or walls[Direction.RIGHT]
            if vertical and horizontal:
                return box
        return None
