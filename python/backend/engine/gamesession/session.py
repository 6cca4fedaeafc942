"""Level session — owns the levels, the active one, and level transitions."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from backend.engine.gameplay.resolver import MoveOutcome, MoveResolver
from backend.engine.gamesession.effects import Effect, EffectListener
from backend.engine.gamestate.completion import CompletionChecker
from backend.engine.gamestate.state import PlayStats
from backend.engine.levelreader.reader import LevelReader
from backend.exceptions import InvalidLevel
from backend.models.grid import Grid
from backend.models.level import LevelState
from backend.models.savegame import decode_state, encode_state
from backend.models.tiles import Direction, EntityKind, TileKind

log = logging.getLogger(__name__)


class LevelSession:
    """Drives one player through an ordered collection of levels.

    Every frontend talks to the game only through this class: it moves
    the player, resets, switches levels, saves and loads.  Commands that
    cannot be carried out for a user-facing reason (already on the last
    level, say) leave the state alone and put a message in ``notice``.
    """

    def __init__(self, levels: Sequence[LevelState], start: int = 0) -> None:
        if not levels:
            raise InvalidLevel("A session needs at least one level.")
        self._levels: list[LevelState] = list(levels)
        for i, level in enumerate(self._levels):
            level.level_index = i
        self._check_index(start)
        self._active = start
        self._listeners: list[EffectListener] = []
        self.stats = PlayStats()
        self.notice: str | None = None
        self.state.restore_initial()

    @classmethod
    def from_directory(cls, directory: Path, start: int = 0) -> LevelSession:
        """Create a session over every level found in *directory*."""
        return cls(LevelReader.load_directory(directory), start=start)

    # -- accessors ------------------------------------------------------------

    @property
    def state(self) -> LevelState:
        return self._levels[self._active]

    @property
    def static_grid(self) -> Grid[TileKind]:
        return self.state.static_grid

    @property
    def dynamic_grid(self) -> Grid[EntityKind]:
        return self.state.dynamic_grid

    @property
    def won(self) -> bool:
        return self.state.won

    @property
    def stuck(self) -> bool:
        return self.state.stuck

    @property
    def level_index(self) -> int:
        return self.state.level_index

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> tuple[LevelState, ...]:
        """Copies of every level, safe to inspect without touching play."""
        return tuple(level.copy() for level in self._levels)

    # -- effects --------------------------------------------------------------

    def subscribe(self, listener: EffectListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: EffectListener) -> None:
        self._listeners.remove(listener)

    def _emit(self, effect: Effect) -> None:
        for listener in list(self._listeners):
            listener(effect)

    # -- play -----------------------------------------------------------------

    def try_move(self, direction: Direction) -> MoveOutcome:
        """Resolve one move, re-check the level, and notify listeners."""
        self.notice = None
        state = self.state
        outcome = MoveResolver.try_move(state, direction)
        CompletionChecker.check(state)
        self.stats.record(outcome)

        self._emit(Effect.for_outcome(outcome))
        if state.stuck:
            self._emit(Effect.STUCK)
        if state.won:
            self.stats.pause()
            self._emit(Effect.WIN)
        return outcome

    def reset(self) -> None:
        """Restart the active level from its initial layout."""
        self.notice = None
        self.state.restore_initial()
        self.stats = PlayStats()
        log.info("Level %d reset", self._active + 1)
        self._emit(Effect.RESET)

    # -- level transitions ----------------------------------------------------

    def change_level(self, index: int) -> bool:
        """Switch to level *index* (0-based), starting it from scratch.

        Returns False, with a notice, if that level is already active.
        """
        self.notice = None
        self._check_index(index)
        if index == self._active:
            self._set_notice("That level is already selected!")
            return False
        self._active = index
        self.state.restore_initial()
        self.stats = PlayStats()
        log.info("Changed to level %d", index + 1)
        return True

    def next(self) -> bool:
        index = self._active + 1
        if index >= len(self._levels):
            self._set_notice("You are already at the last level!")
            return False
        self._emit(Effect.NEW_LEVEL)
        return self.change_level(index)

    def previous(self) -> bool:
        index = self._active - 1
        if index < 0:
            self._set_notice("You are already at the first level!")
            return False
        self._emit(Effect.NEW_LEVEL)
        return self.change_level(index)

    # -- persistence ----------------------------------------------------------

    def save(self) -> dict[str, Any]:
        """Encode the active level, including its initial layout."""
        return encode_state(self.state)

    def load(self, data: dict[str, Any]) -> LevelState:
        """Replace a level with decoded save data and make it active.

        Nothing changes unless the data decodes completely.
        """
        state = decode_state(data)
        return self.load_state(state)

    def load_state(self, state: LevelState) -> LevelState:
        self._check_index(state.level_index)
        self.notice = None
        self._levels[state.level_index] = state
        self._active = state.level_index
        self.stats = PlayStats()
        log.info("Loaded saved state for level %d", state.level_index + 1)
        return state

    # -- helpers --------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._levels):
            raise InvalidLevel(
                f"Level {index + 1} does not exist "
                f"(choose 1-{len(self._levels)})."
            )

    def _set_notice(self, message: str) -> None:
        self.notice = message
        log.info(message)
