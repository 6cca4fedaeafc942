"""PyQt6 GUI frontend — fully self-contained.

Includes a level-select menu, gameplay, the stuck warning, a win screen
and quick save/load.  No terminal interaction required.
"""

from __future__ import annotations

import sys

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QFont, QKeyEvent
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QSpacerItem,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gamesession import LevelSession
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Direction, Occupant
from frontend.common import STUCK_MESSAGE, overlay, quickload, quicksave

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_SUBTEXT = "#a6adc8"
_BLUE = "#89b4fa"
_BLUE_H = "#a4c4fc"
_GREEN = "#a6e3a1"
_GREEN_H = "#b8ecb4"
_PEACH = "#fab387"
_PINK = "#f5c2e7"
_YELLOW = "#f9e2af"
_RED = "#f38ba8"
_RED_H = "#f5a0b8"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

# Glyph, foreground, background per combined cell.
_CELL_STYLE: dict[Occupant, tuple[str, str, str]] = {
    Occupant.WALL: ("", _SURFACE1, _SURFACE1),
    Occupant.GOAL: ("●", _RED, _MANTLE),
    Occupant.EMPTY: ("", _TEXT, _MANTLE),
    Occupant.BOX: ("■", _PEACH, _MANTLE),
    Occupant.BOX_ON_GOAL: ("■", _GREEN, _MANTLE),
    Occupant.PLAYER: ("☺", _BLUE, _MANTLE),
}

_HINT = "Arrows / WASD  move     R  reset     N / P  next / prev     M  menu"


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 14,
    bold: bool = True,
    min_w: int = 0,
    min_h: int = 44,
    radius: int = 8,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold if bold else QFont.Weight.Normal))
    btn.setMinimumHeight(min_h)
    if min_w:
        btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )
    return btn


def _fmt(secs: float) -> str:
    m, s = divmod(int(secs), 60)
    return f"{m:02d}:{s:02d}"


# ═══════════════════════════════════════════════════════════════════════════
# Pages
# ═══════════════════════════════════════════════════════════════════════════


class _MenuPage(QWidget):
    """Main menu with level selection, play, load, quit."""

    def __init__(self, level_count: int, selected: int = 0) -> None:
        super().__init__()
        self.setObjectName("page")
        self.selected_level = selected

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(12)
        root.setContentsMargins(30, 30, 30, 30)

        # title
        title = QLabel("S O K O B A N")
        title.setFont(QFont("Helvetica", 34, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        root.addSpacerItem(QSpacerItem(0, 24))

        sub = QLabel("Select a level")
        sub.setFont(QFont("Helvetica", 15))
        sub.setStyleSheet(f"color:{_SUBTEXT};")
        sub.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(sub)

        root.addSpacerItem(QSpacerItem(0, 8))

        # level buttons, six per row
        self._level_btns: list[QPushButton] = []
        for start in range(0, level_count, 6):
            hbox = QHBoxLayout()
            hbox.setAlignment(Qt.AlignmentFlag.AlignCenter)
            hbox.setSpacing(10)
            for i in range(start, min(start + 6, level_count)):
                btn = _styled_btn(str(i + 1), min_w=56, min_h=46, font_size=13)
                btn.clicked.connect(lambda _, idx=i: self._pick_level(idx))
                hbox.addWidget(btn)
                self._level_btns.append(btn)
            root.addLayout(hbox)

        root.addSpacerItem(QSpacerItem(0, 18))

        self.play_btn = _styled_btn(
            "P L A Y", bg=_BLUE, hover=_LAVENDER, fg=_BASE,
            font_size=16, min_w=240, min_h=52,
        )
        root.addWidget(self.play_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 6))

        self.load_btn = _styled_btn(
            "L O A D", bg=_YELLOW, hover="#fff0c8", fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.load_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        root.addSpacerItem(QSpacerItem(0, 4))

        self.quit_btn = _styled_btn(
            "Q U I T", bg=_RED, hover=_RED_H, fg=_BASE, min_w=240, font_size=13
        )
        root.addWidget(self.quit_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.status = QLabel("")
        self.status.setFont(QFont("Helvetica", 12))
        self.status.setStyleSheet(f"color:{_YELLOW};")
        self.status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self.status)

        self._refresh_highlight()

    def _pick_level(self, index: int) -> None:
        self.selected_level = index
        self._refresh_highlight()

    def step_selection(self, delta: int) -> None:
        last = len(self._level_btns) - 1
        self._pick_level(max(0, min(last, self.selected_level + delta)))

    def _refresh_highlight(self) -> None:
        for i, btn in enumerate(self._level_btns):
            if i == self.selected_level:
                btn.setStyleSheet(
                    f"QPushButton {{ background:{_GREEN}; color:{_BASE};"
                    f" border:none; border-radius:8px; padding:6px 18px; font-weight:bold; }}"
                    f" QPushButton:hover {{ background:{_GREEN_H}; }}"
                )
            else:
                btn.setStyleSheet(
                    f"QPushButton {{ background:{_SURFACE0}; color:{_TEXT};"
                    f" border:none; border-radius:8px; padding:6px 18px; font-weight:bold; }}"
                    f" QPushButton:hover {{ background:{_SURFACE1}; }}"
                )


class _GamePage(QWidget):
    """The level board as a grid of labels, with live stats."""

    def __init__(self, session: LevelSession) -> None:
        super().__init__()
        self.setObjectName("page")
        self._session = session
        state = session.state

        tile_px = max(24, min(56, 520 // max(state.width, state.height)))
        f_sz = max(10, tile_px // 2)

        root = QVBoxLayout(self)
        root.setSpacing(6)
        root.setContentsMargins(16, 10, 16, 10)

        t = QLabel(f"Level {session.level_index + 1} / {session.level_count}")
        t.setFont(QFont("Helvetica", 17, QFont.Weight.Bold))
        t.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(t)

        self._stats = QLabel()
        self._stats.setFont(QFont("Helvetica", 13))
        self._stats.setStyleSheet(f"color:{_PINK};")
        self._stats.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._stats)

        # board
        frame = QFrame()
        frame.setStyleSheet(f"background:{_MANTLE}; border-radius:10px;")
        grid = QGridLayout(frame)
        grid.setSpacing(0)
        grid.setContentsMargins(8, 8, 8, 8)
        root.addWidget(frame, alignment=Qt.AlignmentFlag.AlignCenter)

        self._cells: list[list[QLabel]] = []
        for y in range(state.height):
            row: list[QLabel] = []
            for x in range(state.width):
                lbl = QLabel()
                lbl.setFixedSize(tile_px, tile_px)
                lbl.setFont(QFont("Helvetica", f_sz, QFont.Weight.Bold))
                lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
                grid.addWidget(lbl, y, x)
                row.append(lbl)
            self._cells.append(row)

        # actions
        actions = QHBoxLayout()
        actions.setAlignment(Qt.AlignmentFlag.AlignCenter)
        actions.setSpacing(10)
        self.reset_btn = _styled_btn("RESET (R)", bg=_PINK, hover="#f5d2e3", fg=_BASE, font_size=12, min_h=36)
        self.save_btn = _styled_btn("SAVE (V)", bg=_YELLOW, hover="#fff0c8", fg=_BASE, font_size=12, min_h=36)
        self.load_btn = _styled_btn("LOAD (L)", bg=_GREEN, hover=_GREEN_H, fg=_BASE, font_size=12, min_h=36)
        self.menu_btn = _styled_btn("MENU (M)", font_size=12, min_h=36)
        for btn in (self.reset_btn, self.save_btn, self.load_btn, self.menu_btn):
            actions.addWidget(btn)
        root.addLayout(actions)

        self.status = QLabel("")
        self.status.setFont(QFont("Helvetica", 12))
        self.status.setStyleSheet(f"color:{_YELLOW};")
        self.status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self.status)

        hint = QLabel(_HINT)
        hint.setFont(QFont("Helvetica", 11))
        hint.setStyleSheet(f"color:{_OVERLAY0};")
        hint.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(hint)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._timer.start(200)

        self.sync()

    def sync(self) -> None:
        for y, row in enumerate(overlay(self._session.state)):
            for x, cell in enumerate(row):
                glyph, fg, bg = _CELL_STYLE[cell]
                lbl = self._cells[y][x]
                lbl.setText(glyph)
                lbl.setStyleSheet(f"background:{bg}; color:{fg}; border-radius:0;")
        self._tick()

    def _tick(self) -> None:
        session = self._session
        state = session.state
        self._stats.setText(
            f"Moves: {session.stats.moves}    Pushes: {session.stats.pushes}    "
            f"Boxes: {state.boxes_on_goals}/{len(state.boxes)}    "
            f"Time: {_fmt(session.stats.elapsed_time)}"
        )


class _WinPage(QWidget):
    """Victory screen with stats and level navigation."""

    def __init__(self, session: LevelSession) -> None:
        super().__init__()
        self.setObjectName("page")

        root = QVBoxLayout(self)
        root.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.setSpacing(10)
        root.setContentsMargins(30, 30, 30, 30)

        star = QLabel("★  S O L V E D  ★")
        star.setFont(QFont("Helvetica", 32, QFont.Weight.Bold))
        star.setStyleSheet(f"color:{_GREEN};")
        star.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(star)

        root.addSpacerItem(QSpacerItem(0, 20))

        for txt, col in [
            (f"Level:   {session.level_index + 1} / {session.level_count}", _SUBTEXT),
            (f"Moves:   {session.stats.moves}", _YELLOW),
            (f"Pushes:  {session.stats.pushes}", _YELLOW),
            (f"Time:    {_fmt(session.stats.elapsed_time)}", _YELLOW),
        ]:
            lbl = QLabel(txt)
            lbl.setFont(QFont("Helvetica", 20, QFont.Weight.Bold))
            lbl.setStyleSheet(f"color:{col};")
            lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
            root.addWidget(lbl)

        root.addSpacerItem(QSpacerItem(0, 24))

        nav = QHBoxLayout()
        nav.setAlignment(Qt.AlignmentFlag.AlignCenter)
        nav.setSpacing(12)
        self.prev_btn = _styled_btn("PREVIOUS", min_w=140, min_h=50, font_size=14)
        self.reset_btn = _styled_btn(
            "RESET", bg=_GREEN, hover=_GREEN_H, fg=_BASE, min_w=140, min_h=50, font_size=16
        )
        self.next_btn = _styled_btn(
            "NEXT", bg=_BLUE, hover=_BLUE_H, fg=_BASE, min_w=140, min_h=50, font_size=16
        )
        for btn in (self.prev_btn, self.reset_btn, self.next_btn):
            nav.addWidget(btn)
        root.addLayout(nav)

        root.addSpacerItem(QSpacerItem(0, 6))

        self.menu_btn = _styled_btn("M E N U", min_w=240, font_size=13)
        root.addWidget(self.menu_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.status = QLabel("")
        self.status.setFont(QFont("Helvetica", 12))
        self.status.setStyleSheet(f"color:{_YELLOW};")
        self.status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self.status)


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════

_IDX_MENU = 0
_IDX_GAME = 1
_IDX_WIN = 2


class _MainWindow(QMainWindow):
    def __init__(self, session: LevelSession, saves: SaveGameManager) -> None:
        super().__init__()
        self._session = session
        self._saves = saves

        self.setWindowTitle("Sokoban")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setMinimumSize(560, 620)

        self._stack = QStackedWidget()
        self.setCentralWidget(self._stack)

        # menu
        self._menu = _MenuPage(session.level_count, session.level_index)
        self._menu.play_btn.clicked.connect(self._on_play)
        self._menu.load_btn.clicked.connect(self._on_load)
        self._menu.quit_btn.clicked.connect(self.close)
        self._stack.addWidget(self._menu)  # 0

        # placeholders (replaced dynamically)
        self._game_page: _GamePage | None = None
        self._win_page: _WinPage | None = None
        self._stack.addWidget(QWidget())  # 1
        self._stack.addWidget(QWidget())  # 2

        self._stack.setCurrentIndex(_IDX_MENU)

    # -- page swapping ---

    def _swap(self, index: int, page: QWidget) -> None:
        old = self._stack.widget(index)
        self._stack.removeWidget(old)
        old.deleteLater()
        self._stack.insertWidget(index, page)
        self._stack.setCurrentIndex(index)

    def _show_menu(self) -> None:
        self._menu._pick_level(self._session.level_index)
        self._stack.setCurrentIndex(_IDX_MENU)

    def _show_game(self, status: str = "") -> None:
        page = _GamePage(self._session)
        page.reset_btn.clicked.connect(self._on_reset)
        page.save_btn.clicked.connect(self._on_save)
        page.load_btn.clicked.connect(self._on_load)
        page.menu_btn.clicked.connect(self._show_menu)
        page.status.setText(status or self._session.notice or "")
        self._game_page = page
        self._swap(_IDX_GAME, page)

    def _show_win(self) -> None:
        page = _WinPage(self._session)
        page.reset_btn.clicked.connect(self._on_reset)
        page.prev_btn.clicked.connect(lambda: self._on_step(forward=False))
        page.next_btn.clicked.connect(lambda: self._on_step(forward=True))
        page.menu_btn.clicked.connect(self._show_menu)
        self._win_page = page
        self._swap(_IDX_WIN, page)

    # -- commands ---

    def _on_play(self) -> None:
        index = self._menu.selected_level
        if index == self._session.level_index:
            self._session.reset()
        else:
            self._session.change_level(index)
        self._show_game()

    def _on_reset(self) -> None:
        self._session.reset()
        self._show_game()

    def _on_step(self, forward: bool) -> None:
        changed = self._session.next() if forward else self._session.previous()
        if changed:
            self._show_game()
            return
        notice = self._session.notice or ""
        idx = self._stack.currentIndex()
        if idx == _IDX_WIN and self._win_page is not None:
            self._win_page.status.setText(notice)
        elif idx == _IDX_GAME and self._game_page is not None:
            self._game_page.status.setText(notice)

    def _on_save(self) -> None:
        msg = quicksave(self._session, self._saves)
        if self._game_page is not None:
            self._game_page.status.setText(msg)

    def _on_load(self) -> None:
        self._show_game(quickload(self._session, self._saves))

    def _move(self, direction: Direction) -> None:
        gp = self._game_page
        assert gp is not None
        self._session.try_move(direction)
        gp.status.setText("")
        gp.sync()
        if self._session.stuck:
            QMessageBox.information(self, "Stuck", STUCK_MESSAGE)
            self._on_reset()
        elif self._session.won:
            self._show_win()

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        idx = self._stack.currentIndex()

        if idx == _IDX_MENU:
            if key == Qt.Key.Key_Return:
                self._on_play()
            elif key in (Qt.Key.Key_Left, Qt.Key.Key_A):
                self._menu.step_selection(-1)
            elif key in (Qt.Key.Key_Right, Qt.Key.Key_D):
                self._menu.step_selection(1)
            elif key == Qt.Key.Key_L:
                self._on_load()
            elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()

        elif idx == _IDX_GAME and self._game_page is not None:
            _dirs = {
                Qt.Key.Key_Up: Direction.UP,
                Qt.Key.Key_W: Direction.UP,
                Qt.Key.Key_Down: Direction.DOWN,
                Qt.Key.Key_S: Direction.DOWN,
                Qt.Key.Key_Left: Direction.LEFT,
                Qt.Key.Key_A: Direction.LEFT,
                Qt.Key.Key_Right: Direction.RIGHT,
                Qt.Key.Key_D: Direction.RIGHT,
            }
            if key in _dirs:
                self._move(_dirs[key])
            elif key == Qt.Key.Key_R:
                self._on_reset()
            elif key == Qt.Key.Key_N:
                self._on_step(forward=True)
            elif key == Qt.Key.Key_P:
                self._on_step(forward=False)
            elif key == Qt.Key.Key_V:
                self._on_save()
            elif key == Qt.Key.Key_L:
                self._on_load()
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._show_menu()

        elif idx == _IDX_WIN:
            if key == Qt.Key.Key_R:
                self._on_reset()
            elif key in (Qt.Key.Key_N, Qt.Key.Key_Return):
                self._on_step(forward=True)
            elif key == Qt.Key.Key_P:
                self._on_step(forward=False)
            elif key in (Qt.Key.Key_M, Qt.Key.Key_Escape):
                self._show_menu()

        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(session: LevelSession, saves: SaveGameManager) -> None:
    """Launch the PyQt6 GUI (opens to the level menu)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(session, saves)
    window.show()
    qapp.exec()
