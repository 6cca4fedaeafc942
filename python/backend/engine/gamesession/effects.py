"""Named notifications a session sends to frontends (usually as sounds)."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from backend.engine.gameplay.resolver import MoveOutcome


class Effect(StrEnum):
    MOVE = "move"
    BOX_MOVE = "move_box"
    RESET = "reset"
    WIN = "win"
    STUCK = "stuck"
    NEW_LEVEL = "new_level"

    @classmethod
    def for_outcome(cls, outcome: MoveOutcome) -> Effect:
        """Every push attempt sounds like a push, anything else like a step."""
        return cls.BOX_MOVE if outcome.attempted_push else cls.MOVE


EffectListener = Callable[[Effect], None]
