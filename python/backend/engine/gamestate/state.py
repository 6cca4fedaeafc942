"""Tracks move counters and play time for the level in progress."""

from __future__ import annotations

import time

from backend.engine.gameplay.resolver import MoveOutcome


class PlayStats:
    """Holds the move and push counters and elapsed time."""

    def __init__(self) -> None:
        self.moves: int = 0
        self.pushes: int = 0
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    # -- moves ----------------------------------------------------------------

    def record(self, outcome: MoveOutcome) -> None:
        if outcome.moved:
            self.moves += 1
        if outcome is MoveOutcome.PUSH:
            self.pushes += 1
