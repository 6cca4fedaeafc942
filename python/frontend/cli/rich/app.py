"""Rich terminal frontend — coloured panels and tables.

Uses the ``rich`` library for styled output while sharing the same
input handler, commands and backend as the vanilla CLI.  Includes a
level selector, a saves table, and a win screen.
"""

from __future__ import annotations

import sys
import time

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gamesession import LevelSession
from backend.models.level import LevelState
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Occupant
from frontend.common import DIRECTIONS, STUCK_MESSAGE, apply_action, overlay
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

# Glyph and style per combined cell.
_CELLS: dict[Occupant, tuple[str, str]] = {
    Occupant.WALL: ("██", "grey50"),
    Occupant.GOAL: ("()", "bold red"),
    Occupant.EMPTY: ("  ", ""),
    Occupant.BOX: ("[]", "bold yellow"),
    Occupant.BOX_ON_GOAL: ("[]", "bold green"),
    Occupant.PLAYER: ("@@", "bold cyan"),
}


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _stats(session: LevelSession) -> Text:
    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(session.stats.moves), style="bold yellow")
    stats.append("    Pushes: ", style="dim")
    stats.append(str(session.stats.pushes), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(session.stats.elapsed_time), style="bold yellow")
    return stats


def _title(session: LevelSession) -> str:
    state = session.state
    return (
        f"Sokoban  level {session.level_index + 1}/{session.level_count}  "
        f"({state.boxes_on_goals}/{len(state.boxes)} boxes home)"
    )


# -- board rendering ----------------------------------------------------------


def _render_board(state: LevelState) -> Text:
    """Return the level as styled text, two characters per cell."""
    board = Text()
    for y, row in enumerate(overlay(state)):
        if y:
            board.append("\n")
        for cell in row:
            glyph, style = _CELLS[cell]
            board.append(glyph, style=style)
    return board


# -- screens ------------------------------------------------------------------


def _draw_game(session: LevelSession, status: str = "") -> None:
    console.clear()

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  move   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  reset   ", style="dim")
    controls.append("N/P", style="bold cyan")
    controls.append("  next/prev   ", style="dim")
    controls.append("M", style="bold cyan")
    controls.append("  levels   ", style="dim")
    controls.append("V/L", style="bold cyan")
    controls.append("  save/load   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  quit", style="dim")

    panel = Panel(
        Align.center(_render_board(session.state)),
        title=f"[bold cyan]{_title(session)}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))
    # Save cursor position right before the stats line so _update_time()
    # can later restore to this exact spot and overwrite only this line.
    sys.stdout.write("\033[s")
    sys.stdout.flush()
    console.print(Align.center(_stats(session)))
    if status:
        console.print(Align.center(Text(f"  {status}", style="yellow")))
    console.print(Align.center(controls))


def _update_time(session: LevelSession) -> None:
    """Overwrite just the stats line using the saved cursor position.

    Uses raw ANSI codes (bypassing Rich) so only the single stats
    line is repainted — no flicker from a full redraw.
    """
    _DIM = "\033[2m"
    _YB = "\033[33;1m"
    _RS = "\033[0m"

    moves, pushes = session.stats.moves, session.stats.pushes
    clock = _format_time(session.stats.elapsed_time)
    stats_raw = (
        f"{_DIM}Moves: {_RS}{_YB}{moves}{_RS}"
        f"    {_DIM}Pushes: {_RS}{_YB}{pushes}{_RS}"
        f"    {_DIM}Time: {_RS}{_YB}{clock}{_RS}"
    )

    # Centre the visible text to match what Rich would produce.
    visible_len = len(f"Moves: {moves}    Pushes: {pushes}    Time: {clock}")
    pad = max(0, (console.width - visible_len) // 2)

    sys.stdout.write(f"\033[u\033[K{' ' * pad}{stats_raw}")
    sys.stdout.flush()


def _draw_stuck(session: LevelSession) -> None:
    console.clear()
    panel = Panel(
        Group(
            Align.center(_render_board(session.state)),
            Text(""),
            Align.center(Text(STUCK_MESSAGE, style="bold red")),
        ),
        title=f"[bold red]{_title(session)}[/bold red]",
        border_style="red",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    time.sleep(1.5)


def _draw_win(session: LevelSession) -> None:
    console.clear()

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("CONGRATULATIONS!", style="bold green")
    congrats.append("  You solved the level!  ", style="green")
    congrats.append("★\n", style="bold yellow")

    choices = Text()
    choices.append("R", style="bold cyan")
    choices.append("  reset   ", style="dim")
    choices.append("P", style="bold cyan")
    choices.append("  previous level   ", style="dim")
    choices.append("N", style="bold cyan")
    choices.append("  next level   ", style="dim")
    choices.append("Q", style="bold cyan")
    choices.append("  quit", style="dim")

    group = Group(
        Align.center(_render_board(session.state)),
        Align.center(congrats),
        Align.center(_stats(session)),
        Text(""),
        Align.center(choices),
    )

    panel = Panel(
        group,
        title=f"[bold green]{_title(session)}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )

    console.print()
    console.print(Align.center(panel))


def _draw_help() -> None:
    console.clear()

    keys = Table(box=rich.box.ROUNDED, border_style="dim", show_header=False)
    keys.add_column(style="bold cyan", justify="right")
    keys.add_column()
    keys.add_row("WASD / ↑↓←→", "move the player")
    keys.add_row("R", "reset the level")
    keys.add_row("N / P", "next / previous level")
    keys.add_row("1-9", "jump to a level")
    keys.add_row("M", "level selector")
    keys.add_row("V / L", "quick save / quick load")
    keys.add_row("Q", "quit")

    legend = Text()
    for cell, label in (
        (Occupant.WALL, "wall"),
        (Occupant.GOAL, "goal"),
        (Occupant.BOX, "box"),
        (Occupant.BOX_ON_GOAL, "box on goal"),
        (Occupant.PLAYER, "player"),
    ):
        glyph, style = _CELLS[cell]
        legend.append(glyph, style=style)
        legend.append(f" {label}   ", style="dim")

    panel = Panel(
        Group(
            Text("Push every box onto a goal.  Boxes can only be pushed, one at a time."),
            Text(""),
            Align.center(keys),
            Text(""),
            Align.center(legend),
        ),
        title="[bold]HOW  TO  PLAY[/bold]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(Text("\n  Press any key to go back.\n", style="dim")))
    get_key()


def _draw_levels(session: LevelSession, saves: SaveGameManager, selected: int) -> None:
    console.clear()

    levels = Text()
    for i in range(session.level_count):
        if i:
            levels.append("  ")
        if i == selected:
            levels.append(f" {i + 1} ", style="bold green on #313244")
        else:
            levels.append(f" {i + 1} ", style="dim")

    saved = Table(
        title="Saves",
        title_style="bold cyan",
        box=rich.box.ROUNDED,
        border_style="dim",
    )
    saved.add_column("Name", style="yellow")
    saved.add_column("File", style="dim")
    for name in saves.list_saves():
        saved.add_row(name, str(saves.path_for(name)))

    body = Group(
        Text(""),
        Align.center(levels),
        Align.center(Text("  ← →  choose   Enter  play   Q  back", style="dim")),
        Text(""),
        Align.center(saved),
    )
    panel = Panel(
        body,
        title="[bold]S E L E C T   L E V E L[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


# -- loops --------------------------------------------------------------------


def _level_menu(session: LevelSession, saves: SaveGameManager) -> str:
    selected = session.level_index
    while True:
        _draw_levels(session, saves, selected)
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


def _win_loop(session: LevelSession, saves: SaveGameManager) -> str | None:
    """Wait for a choice on the win screen.  Returns None to quit."""
    _draw_win(session)
    while True:
        key = get_key()
        if key == "quit":
            return None
        if key in ("reset", "next", "previous"):
            status = apply_action(session, saves, key)
            if not session.won:
                return status
            _draw_win(session)
            console.print(Align.center(Text(status, style="yellow")))


def _play(session: LevelSession, saves: SaveGameManager) -> None:
    status = ""
    while True:
        if session.won:
            result = _win_loop(session, saves)
            if result is None:
                return
            status = result
            continue

        _draw_game(session, status)
        status = ""

        # Wait for input with a short timeout so the clock keeps ticking.
        while True:
            key = get_key_timeout(0.5)
            if key is not None:
                break
            _update_time(session)

        if key in DIRECTIONS:
            session.try_move(DIRECTIONS[key])
            if session.stuck:
                _draw_stuck(session)
                session.reset()
        elif key == "quit":
            return
        elif key == "help":
            _draw_help()
        elif key == "levels":
            status = _level_menu(session, saves)
        else:
            status = apply_action(session, saves, key)


# -- public entry point -------------------------------------------------------


def run(session: LevelSession, saves: SaveGameManager) -> None:
    """Launch the Rich CLI on *session*."""
    try:
        _play(session, saves)
    finally:
        console.clear()
        console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
