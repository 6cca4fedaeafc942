#!/usr/bin/env python3
"""Build the shipped level files from their ASCII drawings.

Run from the project root::

    python private/scripts/build_levels.py

Every ``private/levels/<name>.txt`` holds one level in the usual
``#.$*@+`` notation.  Each is parsed, checked, and written out as the
``data/levels/<name>_map.txt`` / ``<name>_interactive.txt`` pair that the
game reads.  Existing pairs with the same name are overwritten; pairs
without a drawing are left alone.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Resolve paths: this script lives in <project_root>/private/scripts/
SCRIPT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = SCRIPT_DIR.parent.parent
PYTHON_ROOT = PROJECT_ROOT / "python"

if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from backend.engine.levelreader import LevelReader  # noqa: E402
from backend.engine.levelreader.reader import (  # noqa: E402
    INTERACTIVE_SUFFIX,
    MAP_SUFFIX,
)
from backend.exceptions import MalformedLevel  # noqa: E402

SOURCE_DIR = PROJECT_ROOT / "private" / "levels"
LEVELS_DIR = PROJECT_ROOT / "data" / "levels"


def main() -> int:
    LEVELS_DIR.mkdir(parents=True, exist_ok=True)
    sources = sorted(SOURCE_DIR.glob("*.txt"))
    if not sources:
        print(f"No drawings found in {SOURCE_DIR}")
        return 1

    failed = 0
    for source in sources:
        try:
            state = LevelReader.from_ascii(source.read_text())
        except MalformedLevel as e:
            print(f"  ✗ {source.name}: {e}")
            failed += 1
            continue

        map_text, dyn_text = LevelReader.to_token_texts(state)
        (LEVELS_DIR / f"{source.stem}{MAP_SUFFIX}").write_text(map_text)
        (LEVELS_DIR / f"{source.stem}{INTERACTIVE_SUFFIX}").write_text(dyn_text)

        # Read the pair back the way the game does.
        LevelReader.from_files(
            LEVELS_DIR / f"{source.stem}{MAP_SUFFIX}",
            LEVELS_DIR / f"{source.stem}{INTERACTIVE_SUFFIX}",
        )
        print(
            f"  → {source.stem}  ({state.width}x{state.height}, "
            f"{len(state.boxes)} boxes, {len(state.goals)} goals) ✓"
        )

    print("Done!" if not failed else f"{failed} drawing(s) failed.")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
