#!/usr/bin/env python3
"""Sokoban.

Usage::

    python main.py                  # interactive menu
    python main.py -f rich -l 2     # Rich terminal, start on level 2
    python main.py -f pygame        # Pygame GUI (has its own menu)
    python main.py --load quicksave # resume a saved game
    python main.py --list           # show levels and saves
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent  # sokoban/
DATA_DIR = PROJECT_ROOT / "data"
LEVELS_DIR = DATA_DIR / "levels"
SAVES_DIR = DATA_DIR / "saves"
ASSETS_DIR = PROJECT_ROOT / "assets"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamesession import LevelSession  # noqa: E402
from backend.exceptions import SokobanError  # noqa: E402
from backend.models.savegame import SaveGameManager  # noqa: E402

log = logging.getLogger("sokoban")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    vanilla = "vanilla"
    rich = "rich"
    pygame = "pygame"
    pyqt = "pyqt"


_RUNNERS = {
    Frontend.vanilla: "frontend.cli.vanilla.app",
    Frontend.rich: "frontend.cli.rich.app",
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )


def _print_levels(session: LevelSession, saves: SaveGameManager) -> None:
    print("\n  === LEVELS ===")
    for i, state in enumerate(session.levels):
        print(
            f"  {i + 1:>2}. {state.width:>2}x{state.height:<2}  "
            f"{len(state.boxes)} box(es)"
        )

    print("\n  === SAVES ===")
    names = saves.list_saves()
    if not names:
        print("  No saved games yet.\n")
        return
    for name in names:
        print(f"  {name}  ({saves.path_for(name)})")
    print()


def _launch(
    frontend: Frontend, session: LevelSession, saves: SaveGameManager
) -> None:
    mod = importlib.import_module(_RUNNERS[frontend])
    if frontend is Frontend.pygame:
        mod.run(session, saves, ASSETS_DIR)
    else:
        mod.run(session, saves)


def _menu_loop(session: LevelSession, saves: SaveGameManager) -> None:
    while True:
        print()
        print("  ====================================")
        print("            S O K O B A N             ")
        print("  ====================================")
        print()
        print("  1.  Play  (Vanilla Terminal)")
        print("  2.  Play  (Rich Terminal)")
        print("  3.  Play  (Pygame GUI)")
        print("  4.  Play  (PyQt GUI)")
        print("  5.  List Levels and Saves")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        if choice in ("1", "2", "3", "4"):
            frontend = {
                "1": Frontend.vanilla,
                "2": Frontend.rich,
                "3": Frontend.pygame,
                "4": Frontend.pyqt,
            }[choice]
            _launch(frontend, session, saves)

        elif choice == "5":
            _print_levels(session, saves)

        else:
            print("  Unknown option.")


def _open_session(levels_dir: Path, level: int, load: Optional[Path]) -> LevelSession:
    session = LevelSession.from_directory(levels_dir, start=level - 1)
    if load is not None:
        path = load if load.suffix else SAVES_DIR / f"{load}.json"
        session.load_state(SaveGameManager.read(path))
    return session


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    level: int = typer.Option(
        1, "-l", "--level",
        min=1,
        help="Level to start on (1-based).",
    ),
    levels_dir: Path = typer.Option(
        LEVELS_DIR, "--levels-dir",
        envvar="SOKOBAN_LEVELS_DIR",
        file_okay=False,
        help="Directory holding the *_map.txt / *_interactive.txt pairs.",
    ),
    load: Optional[Path] = typer.Option(
        None, "--load",
        help="Save file (or save name in data/saves) to resume.",
    ),
    list_levels: bool = typer.Option(
        False, "--list",
        help="Show the levels and saved games, then exit.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log engine decisions at debug level.",
    ),
) -> None:
    """Sokoban."""
    _configure_logging(verbose)
    saves = SaveGameManager(SAVES_DIR)

    try:
        session = _open_session(levels_dir, level, load)
    except (SokobanError, OSError) as e:
        log.error("%s", e)
        raise typer.Exit(code=1) from e

    if list_levels:
        _print_levels(session, saves)
        return

    if frontend is None:
        _menu_loop(session, saves)
        return

    _launch(frontend, session, saves)


if __name__ == "__main__":
    app()
