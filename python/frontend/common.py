"""Rendering and commands shared by every frontend."""

from __future__ import annotations

import logging

from backend.engine.gameplay import MoveResolver
from backend.engine.gamesession import LevelSession
from backend.exceptions import SokobanError
from backend.models.grid import Position
from backend.models.level import LevelState
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Direction, Occupant

log = logging.getLogger(__name__)

QUICKSAVE = "quicksave"
STUCK_MESSAGE = "Looks like you're stuck! The game will restart."

DIRECTIONS: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}

# Plain Sokoban notation, one character per cell.
SYMBOLS: dict[Occupant, str] = {
    Occupant.WALL: "#",
    Occupant.GOAL: ".",
    Occupant.EMPTY: " ",
    Occupant.BOX: "$",
    Occupant.BOX_ON_GOAL: "*",
    Occupant.PLAYER: "@",
}


def overlay(state: LevelState) -> list[list[Occupant]]:
    """Combine both layers into one row-major grid of occupants."""
    return [
        [MoveResolver.classify(state, Position(x, y)) for x in range(state.width)]
        for y in range(state.height)
    ]


def render_text(state: LevelState) -> str:
    """Return the level as plain ``#.$*@`` text.

    A player standing on a goal shows as ``@``; the goal is hidden
    beneath it like any other static tile.
    """
    return "\n".join(
        "".join(SYMBOLS[cell] for cell in row) for row in overlay(state)
    )


def quicksave(session: LevelSession, saves: SaveGameManager) -> str:
    try:
        path = saves.save(session.state, QUICKSAVE)
    except OSError as e:
        log.error("Quick save failed: %s", e)
        return f"Could not save: {e}"
    return f"Saved to {path.name}."


def quickload(session: LevelSession, saves: SaveGameManager) -> str:
    try:
        state = saves.load(QUICKSAVE)
        session.load_state(state)
    except FileNotFoundError:
        return "No quick save yet."
    except (SokobanError, OSError) as e:
        log.error("Quick load failed: %s", e)
        return f"Could not load: {e}"
    return f"Loaded level {state.level_index + 1}."


def apply_action(session: LevelSession, saves: SaveGameManager, action: str) -> str:
    """Carry out one non-movement keypress.  Returns a status message."""
    if action == "reset":
        session.reset()
        return "Level restarted."
    if action == "next":
        session.next()
    elif action == "previous":
        session.previous()
    elif action == "save":
        return quicksave(session, saves)
    elif action == "load":
        return quickload(session, saves)
    elif action.isdigit() and action != "0":
        index = int(action) - 1
        if index >= session.level_count:
            return f"There is no level {action}."
        session.change_level(index)
    return session.notice or ""
