"""Vanilla terminal frontend — no third-party dependencies.

Uses only stdlib (print, ANSI codes, tty/termios) for rendering and input.
Includes a built-in level selector, quick save/load and a win screen.
"""

from __future__ import annotations

import sys
import time

from backend.engine.gamesession import LevelSession
from backend.models.level import LevelState
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Occupant
from frontend.common import (
    DIRECTIONS,
    STUCK_MESSAGE,
    SYMBOLS,
    apply_action,
    overlay,
)
from frontend.cli.input_handler import get_key, get_key_timeout


# -- ANSI helpers -------------------------------------------------------------

_G = "\033[32;1m"    # bold green
_Y = "\033[33;1m"    # bold yellow
_C = "\033[36;1m"    # bold cyan
_M = "\033[31;1m"    # bold red
_DIM = "\033[2m"     # dim
_BOLD = "\033[1m"    # bold
_R = "\033[0m"       # reset
_BG_SEL = "\033[42;30m"  # green bg, black fg (selected level)

_COLOURS: dict[Occupant, str] = {
    Occupant.WALL: _DIM,
    Occupant.GOAL: _M,
    Occupant.EMPTY: "",
    Occupant.BOX: _Y,
    Occupant.BOX_ON_GOAL: _G,
    Occupant.PLAYER: _C,
}


def _clear() -> None:
    sys.stdout.write("\033[2J\033[H")
    sys.stdout.flush()


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m}:{s:02d}" if m else f"{s}s"


def _stats_line(session: LevelSession) -> str:
    """Return the formatted Moves + Pushes + Time string (no newline)."""
    return (
        f"  Moves: {_Y}{session.stats.moves}{_R}  |  "
        f"Pushes: {_Y}{session.stats.pushes}{_R}  |  "
        f"Time: {_Y}{_format_time(session.stats.elapsed_time)}{_R}"
    )


# -- board rendering ----------------------------------------------------------


def _render_board(state: LevelState) -> str:
    """Return an ANSI-coloured text representation of the level."""
    lines: list[str] = []
    for row in overlay(state):
        cells = [f"{_COLOURS[cell]}{SYMBOLS[cell] * 2}{_R}" for cell in row]
        lines.append("  " + "".join(cells))
    return "\n".join(lines)


# -- screens ------------------------------------------------------------------


def _title(session: LevelSession, colour: str = _C) -> str:
    state = session.state
    return (
        f"  {colour}=== Sokoban: level {session.level_index + 1}"
        f"/{session.level_count} ({state.boxes_on_goals}/{len(state.boxes)}"
        f" boxes home) ==={_R}"
    )


def _show_game(session: LevelSession, status: str = "") -> None:
    """Draw the full game screen.

    The stats line is printed last, with no trailing newline, so
    ``_update_time`` can cheaply overwrite it in-place using ``\\r\\033[K``.
    """
    _clear()
    print(_title(session))
    print()
    print(_render_board(session.state))
    print()
    print(
        f"  {_C}WASD{_R}/{_C}Arrows{_R}: move  |  "
        f"{_C}R{_R}: reset  |  "
        f"{_C}N{_R}/{_C}P{_R}: next/prev  |  "
        f"{_C}M{_R}: levels  |  "
        f"{_C}H{_R}: help  |  "
        f"{_C}Q{_R}: quit"
    )
    if status:
        print(f"  {status}")
    sys.stdout.write(f"\n{_stats_line(session)}")
    sys.stdout.flush()


def _update_time(session: LevelSession) -> None:
    """Overwrite just the stats (last) line in-place."""
    sys.stdout.write(f"\r\033[K{_stats_line(session)}")
    sys.stdout.flush()


def _show_help() -> None:
    _clear()
    print()
    print(f"  {_BOLD}=== HOW TO PLAY ==={_R}")
    print()
    print("  Push every box onto a goal marker.  Boxes can be pushed,")
    print("  never pulled, and only one at a time.")
    print()
    print(f"    {_C}WASD{_R} / {_C}Arrows{_R}   move")
    print(f"    {_C}R{_R}              reset the level")
    print(f"    {_C}N{_R} / {_C}P{_R}          next / previous level")
    print(f"    {_C}1-9{_R}            jump to a level")
    print(f"    {_C}M{_R}              level selector")
    print(f"    {_C}V{_R} / {_C}L{_R}          quick save / quick load")
    print(f"    {_C}Q{_R}              quit")
    print()
    print(
        f"  {_DIM}#{_R} wall  {_M}.{_R} goal  {_Y}${_R} box  "
        f"{_G}*{_R} box on goal  {_C}@{_R} player"
    )
    print(f"\n  {_DIM}Press any key to go back.{_R}")
    get_key()


def _show_stuck(session: LevelSession) -> None:
    _clear()
    print(_title(session, _M))
    print()
    print(_render_board(session.state))
    print()
    print(f"  {_M}{STUCK_MESSAGE}{_R}")
    sys.stdout.flush()
    time.sleep(1.5)


def _show_win(session: LevelSession) -> None:
    _clear()
    print(_title(session, _G))
    print()
    print(_render_board(session.state))
    print()
    print(f"  {_G}★ CONGRATULATIONS! You solved the level! ★{_R}")
    print()
    print(_stats_line(session))
    print()
    print(
        f"  {_C}R{_R}: play again  |  {_C}P{_R}: previous level  |  "
        f"{_C}N{_R}: next level  |  {_C}Q{_R}: quit"
    )


def _level_menu(session: LevelSession) -> str:
    """Let the player pick a level with the arrow keys."""
    selected = session.level_index
    while True:
        _clear()
        print()
        print(f"  {_BOLD}=== SELECT LEVEL ==={_R}")
        print()
        row = ""
        for i in range(session.level_count):
            label = f" {i + 1} "
            if i == selected:
                row += f"  {_BG_SEL}{label}{_R}"
            else:
                row += f"  {_DIM}{label}{_R}"
        print(f"  {row}")
        print(f"\n    {_DIM}← → to choose, Enter to play, Q to go back{_R}")

        key = get_key()
        if key == "quit":
            return ""
        if key == "left":
            selected = max(0, selected - 1)
        elif key == "right":
            selected = min(session.level_count - 1, selected + 1)
        elif key == "enter":
            session.change_level(selected)
            return session.notice or ""


# -- game loop ----------------------------------------------------------------


def _win_loop(session: LevelSession, saves: SaveGameManager) -> str | None:
    """Wait for a choice on the win screen.  Returns None to quit."""
    _show_win(session)
    while True:
        key = get_key()
        if key == "quit":
            return None
        if key in ("reset", "next", "previous"):
            status = apply_action(session, saves, key)
            if not session.won:
                return status
            _show_win(session)
            print(f"\n  {_Y}{status}{_R}")


def _play(session: LevelSession, saves: SaveGameManager) -> None:
    status = ""
    while True:
        if session.won:
            result = _win_loop(session, saves)
            if result is None:
                return
            status = result
            continue

        _show_game(session, status)
        status = ""

        # Wait for input; update the time display every 0.5 s.
        while True:
            key = get_key_timeout(0.5)
            if key is not None:
                break
            _update_time(session)

        if key in DIRECTIONS:
            session.try_move(DIRECTIONS[key])
            if session.stuck:
                _show_stuck(session)
                session.reset()
        elif key == "quit":
            return
        elif key == "help":
            _show_help()
        elif key == "levels":
            status = _level_menu(session)
        else:
            status = apply_action(session, saves, key)


# -- public entry point -------------------------------------------------------


def run(session: LevelSession, saves: SaveGameManager) -> None:
    """Launch the vanilla CLI on *session*."""
    try:
        _play(session, saves)
    finally:
        _clear()
        print("  Goodbye!\n")
