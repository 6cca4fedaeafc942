"""Pygame GUI frontend — fully self-contained.

Includes a level-select menu, gameplay with sound effects, the stuck
warning, a win screen and quick save/load.  No terminal interaction
required.
"""

from __future__ import annotations

import enum
import logging
import time
from pathlib import Path

import pygame

from backend.engine.gamesession import Effect, LevelSession
from backend.models.grid import Position
from backend.models.savegame import SaveGameManager
from backend.models.tiles import Direction, EntityKind, TileKind
from frontend.common import STUCK_MESSAGE, quickload, quicksave

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_PEACH = (250, 179, 135)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 640, 640
MARGIN = 20
BOARD_TOP = 76
BOARD_MAX_W = WIN_W - 2 * MARGIN
BOARD_MAX_H = WIN_H - BOARD_TOP - 110
TILE_MAX = 64
STUCK_DELAY = 1.5  # seconds the stuck warning stays up before the reset


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    WIN = "win"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Sound effects
# ---------------------------------------------------------------------------
class _SoundBoard:
    """Plays ``<effect>.wav`` from the sounds directory for session effects.

    Missing files, or a machine without an audio device, leave the game
    silent.
    """

    def __init__(self, sounds_dir: Path) -> None:
        self._sounds: dict[Effect, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init()
        except pygame.error as e:
            log.warning("No audio device, sound disabled: %s", e)
            return
        for effect in Effect:
            path = sounds_dir / f"{effect.value}.wav"
            if not path.is_file():
                continue
            try:
                self._sounds[effect] = pygame.mixer.Sound(str(path))
            except pygame.error as e:
                log.warning("Could not load %s: %s", path.name, e)
        log.debug("Loaded %d sound(s) from %s", len(self._sounds), sounds_dir)

    def __call__(self, effect: Effect) -> None:
        sound = self._sounds.get(effect)
        if sound is not None:
            sound.play()


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(
        self, session: LevelSession, saves: SaveGameManager, assets_dir: Path
    ) -> None:
        self._session = session
        self._saves = saves
        self._images_dir = assets_dir / "images"
        self._tile_images: dict[str, pygame.Surface] = {}
        self._scaled: dict[str, pygame.Surface] = {}
        self._scaled_px = 0

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Sokoban")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        self._screen = _Screen.MENU
        self._sel_level = session.level_index
        self._status_msg: str = ""
        self._stuck_since: float | None = None

        self._sounds = _SoundBoard(assets_dir / "sounds")
        session.subscribe(self._sounds)

        self._load_tile_images()
        self._build_menu_btns()
        self._build_game_btns()
        self._build_win_btns()

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw, bh, gap, per_row = 64, 46, 8, 8
        count = self._session.level_count
        row_w = min(count, per_row) * bw + (min(count, per_row) - 1) * gap
        sx = _cx(row_w)

        self._level_btns: list[_Btn] = []
        for i in range(count):
            r, c = divmod(i, per_row)
            self._level_btns.append(
                _Btn(
                    (sx + c * (bw + gap), 200 + r * (bh + gap), bw, bh),
                    str(i + 1),
                    self._f_btn,
                )
            )

        rows = (count + per_row - 1) // per_row
        top = 200 + rows * (bh + gap) + 40
        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), top, bw_lg, 50),
            "P L A Y",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._load_btn = _Btn(
            (_cx(bw_lg), top + 64, bw_lg, 42),
            "L O A D",
            self._f_btn_sm,
            bg=COL_YELLOW,
            hover=(255, 240, 200),
            fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (_cx(bw_lg), top + 120, bw_lg, 42),
            "Q U I T",
            self._f_btn_sm,
            bg=COL_RED,
            hover=(255, 170, 185),
            fg=COL_BASE,
        )

        self._menu_all: list[_Btn] = [
            *self._level_btns,
            self._play_btn,
            self._load_btn,
            self._quit_btn,
        ]

    def _build_game_btns(self) -> None:
        """Build in-game action buttons (placed below the board)."""
        bw, gap = 110, 10
        labels = [
            ("RESET (R)", COL_PINK, (245, 210, 227)),
            ("SAVE (V)", COL_YELLOW, (255, 240, 200)),
            ("LOAD (L)", COL_GREEN, (190, 240, 190)),
            ("MENU (M)", COL_SURFACE0, COL_SURFACE1),
        ]
        total = len(labels) * bw + (len(labels) - 1) * gap
        sx = _cx(total)
        btns = [
            _Btn(
                (sx + i * (bw + gap), 0, bw, 36), text, self._f_btn_sm,
                bg=bg, hover=hover,
                fg=COL_TEXT if bg == COL_SURFACE0 else COL_BASE,
            )
            for i, (text, bg, hover) in enumerate(labels)
        ]
        self._reset_btn, self._save_btn, self._loadgame_btn, self._menu_btn = btns
        self._game_action_btns = btns

    def _build_win_btns(self) -> None:
        bw, gap = 150, 12
        total = 3 * bw + 2 * gap
        sx = _cx(total)
        self._win_prev = _Btn(
            (sx, 440, bw, 50), "PREVIOUS", self._f_btn_sm,
        )
        self._win_reset = _Btn(
            (sx + bw + gap, 440, bw, 50),
            "RESET",
            self._f_btn,
            bg=COL_GREEN,
            hover=(190, 240, 190),
            fg=COL_BASE,
        )
        self._win_next = _Btn(
            (sx + 2 * (bw + gap), 440, bw, 50),
            "NEXT",
            self._f_btn,
            bg=COL_BLUE,
            hover=COL_LAVENDER,
            fg=COL_BASE,
        )
        self._win_menu = _Btn(
            (_cx(bw), 506, bw, 42), "M E N U", self._f_btn_sm
        )
        self._win_all = [self._win_prev, self._win_reset, self._win_next, self._win_menu]

    # ── helpers ─────────────────────────────────────────────────────────────

    @staticmethod
    def _fmt(seconds: float) -> str:
        m, s = divmod(int(seconds), 60)
        return f"{m:02d}:{s:02d}"

    def _tile_layout(self) -> tuple[int, int, int, int, int]:
        """Return (tile_px, origin_x, origin_y, width_px, height_px)."""
        state = self._session.state
        tile_px = min(
            TILE_MAX,
            BOARD_MAX_W // state.width,
            BOARD_MAX_H // state.height,
        )
        w, h = state.width * tile_px, state.height * tile_px
        return tile_px, _cx(w), BOARD_TOP, w, h

    def _tile_rect(self, pos: Position, tpx: int, ox: int, oy: int) -> pygame.Rect:
        return pygame.Rect(ox + pos.x * tpx, oy + pos.y * tpx, tpx, tpx)

    # ── image tiles ─────────────────────────────────────────────────────────

    def _load_tile_images(self) -> None:
        """Load ``<token>.png`` for each tile and entity kind that has one."""
        self._tile_images = {}
        if not self._images_dir.is_dir():
            return
        for kind in (*TileKind, *EntityKind):
            if kind.token is None:
                continue
            path = self._images_dir / f"{kind.token}.png"
            if not path.is_file():
                continue
            try:
                self._tile_images[kind.token] = pygame.image.load(str(path)).convert_alpha()
            except pygame.error as e:
                log.warning("Could not load %s: %s", path.name, e)

    def _image(self, token: str, tpx: int) -> pygame.Surface | None:
        if token not in self._tile_images:
            return None
        if self._scaled_px != tpx:
            self._scaled = {
                name: pygame.transform.smoothscale(img, (tpx, tpx))
                for name, img in self._tile_images.items()
            }
            self._scaled_px = tpx
        return self._scaled[token]

    def _draw_static(self, tile: TileKind, rect: pygame.Rect) -> None:
        if tile.token is not None:
            img = self._image(tile.token, rect.width)
            if img is not None:
                self._surf.blit(img, rect.topleft)
                return
        if tile is TileKind.WALL:
            pygame.draw.rect(self._surf, COL_SURFACE1, rect)
            pygame.draw.rect(self._surf, COL_SURFACE0, rect.inflate(-4, -4))
        elif tile is TileKind.GOAL:
            pygame.draw.circle(self._surf, COL_RED, rect.center, rect.width // 5)

    def _draw_entity(self, entity: EntityKind, rect: pygame.Rect) -> None:
        if entity.token is None:
            return
        img = self._image(entity.token, rect.width)
        if img is not None:
            self._surf.blit(img, rect.topleft)
            return
        inner = rect.inflate(-rect.width // 5, -rect.height // 5)
        if entity is EntityKind.PLAYER:
            pygame.draw.circle(self._surf, COL_BLUE, rect.center, inner.width // 2)
        elif entity is EntityKind.BOX:
            pygame.draw.rect(self._surf, COL_PEACH, inner, border_radius=4)
        elif entity is EntityKind.BOX_ON_GOAL:
            pygame.draw.rect(self._surf, COL_GREEN, inner, border_radius=4)

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self) -> None:
        self._surf.fill(COL_BASE)

        _blit_center(
            self._surf,
            self._f_big.render("S O K O B A N", True, COL_TEXT),
            80,
        )
        _blit_center(
            self._surf,
            self._f_body.render("Select a level", True, COL_SUBTEXT),
            160,
        )

        for i, btn in enumerate(self._level_btns):
            btn.bg = COL_GREEN if i == self._sel_level else COL_SURFACE0
            btn.fg = COL_BASE if i == self._sel_level else COL_TEXT
            btn.draw(self._surf)

        self._play_btn.draw(self._surf)
        self._load_btn.draw(self._surf)
        self._quit_btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                WIN_H - 40,
            )

    def _draw_board(self) -> int:
        """Draw both layers and return the y just below the board."""
        session = self._session
        tpx, ox, oy, w, h = self._tile_layout()
        pygame.draw.rect(
            self._surf,
            COL_MANTLE,
            pygame.Rect(ox - 6, oy - 6, w + 12, h + 12),
            border_radius=10,
        )
        for pos in session.static_grid.positions():
            rect = self._tile_rect(pos, tpx, ox, oy)
            self._draw_static(session.static_grid.get(pos), rect)
            self._draw_entity(session.dynamic_grid.get(pos), rect)
        return oy + h

    def _draw_game(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session
        state = session.state

        _blit_center(
            self._surf,
            self._f_title.render(
                f"Level {session.level_index + 1} / {session.level_count}",
                True,
                COL_TEXT,
            ),
            14,
        )
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Moves: {session.stats.moves}    "
                f"Pushes: {session.stats.pushes}    "
                f"Boxes: {state.boxes_on_goals}/{len(state.boxes)}    "
                f"Time: {self._fmt(session.stats.elapsed_time)}",
                True,
                COL_PINK,
            ),
            44,
        )

        bottom = self._draw_board()

        # action buttons row
        btn_y = bottom + 16
        for btn in self._game_action_btns:
            btn.rect.y = btn_y
            btn.draw(self._surf)

        footer_y = btn_y + 44
        if self._stuck_since is not None:
            banner = self._f_title.render(STUCK_MESSAGE, True, COL_RED)
            box = banner.get_rect(center=(WIN_W // 2, BOARD_TOP + 40)).inflate(24, 16)
            pygame.draw.rect(self._surf, COL_MANTLE, box, border_radius=8)
            pygame.draw.rect(self._surf, COL_RED, box, width=2, border_radius=8)
            _blit_center(self._surf, banner, box.y + 8)
        elif self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                footer_y,
            )
            footer_y += 20

        _blit_center(
            self._surf,
            self._f_small.render(
                "Arrows / WASD  move     N / P  next / prev     Esc  quit",
                True,
                COL_OVERLAY0,
            ),
            footer_y,
        )

    def _draw_win(self) -> None:
        self._surf.fill(COL_BASE)
        session = self._session

        _blit_center(
            self._surf,
            self._f_big.render("★  S O L V E D  ★", True, COL_GREEN),
            100,
        )

        info = [
            (f"Level:   {session.level_index + 1} / {session.level_count}", COL_SUBTEXT),
            (f"Moves:   {session.stats.moves}", COL_YELLOW),
            (f"Pushes:  {session.stats.pushes}", COL_YELLOW),
            (f"Time:    {self._fmt(session.stats.elapsed_time)}", COL_YELLOW),
        ]
        y = 190
        for txt, col in info:
            _blit_center(self._surf, self._f_title.render(txt, True, col), y)
            y += 44

        for btn in self._win_all:
            btn.draw(self._surf)

        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                WIN_H - 40,
            )

    # ── commands ────────────────────────────────────────────────────────────

    def _start_level(self, index: int) -> None:
        if index != self._session.level_index:
            self._session.change_level(index)
        else:
            self._session.reset()
        self._enter_play()

    def _enter_play(self) -> None:
        self._status_msg = self._session.notice or ""
        self._stuck_since = None
        self._screen = _Screen.PLAYING

    def _move(self, direction: Direction) -> None:
        self._session.try_move(direction)
        self._status_msg = ""
        if self._session.stuck:
            self._stuck_since = time.monotonic()

    def _step_level(self, forward: bool) -> None:
        changed = self._session.next() if forward else self._session.previous()
        if changed:
            self._enter_play()
        else:
            self._status_msg = self._session.notice or ""

    def _reset(self) -> None:
        self._session.reset()
        self._enter_play()

    def _save(self) -> None:
        self._status_msg = quicksave(self._session, self._saves)

    def _load(self) -> None:
        msg = quickload(self._session, self._saves)
        self._enter_play()
        self._status_msg = msg

    def _check_stuck(self) -> None:
        if self._stuck_since is None:
            return
        if time.monotonic() - self._stuck_since >= STUCK_DELAY:
            self._reset()

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for i, b in enumerate(self._level_btns):
                if b.hit(ev.pos):
                    self._sel_level = i
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_level(self._sel_level)
            elif self._load_btn.hit(ev.pos):
                self._load()
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_level(self._sel_level)
            elif ev.key in (pygame.K_LEFT, pygame.K_a):
                self._sel_level = max(0, self._sel_level - 1)
            elif ev.key in (pygame.K_RIGHT, pygame.K_d):
                self._sel_level = min(self._session.level_count - 1, self._sel_level + 1)
            elif ev.key == pygame.K_l:
                self._load()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        if self._stuck_since is not None:
            # Input is ignored until the level restarts.
            return True
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_action_btns:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._reset_btn.hit(ev.pos):
                self._reset()
            elif self._save_btn.hit(ev.pos):
                self._save()
            elif self._loadgame_btn.hit(ev.pos):
                self._load()
            elif self._menu_btn.hit(ev.pos):
                self._sel_level = self._session.level_index
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            _dirs = {
                pygame.K_UP: Direction.UP,
                pygame.K_w: Direction.UP,
                pygame.K_DOWN: Direction.DOWN,
                pygame.K_s: Direction.DOWN,
                pygame.K_LEFT: Direction.LEFT,
                pygame.K_a: Direction.LEFT,
                pygame.K_RIGHT: Direction.RIGHT,
                pygame.K_d: Direction.RIGHT,
            }
            if ev.key in _dirs:
                self._move(_dirs[ev.key])
            elif ev.key == pygame.K_r:
                self._reset()
            elif ev.key == pygame.K_n:
                self._step_level(forward=True)
            elif ev.key == pygame.K_p:
                self._step_level(forward=False)
            elif ev.key == pygame.K_v:
                self._save()
            elif ev.key == pygame.K_l:
                self._load()
            elif ev.key == pygame.K_m:
                self._sel_level = self._session.level_index
                self._screen = _Screen.MENU
            elif ev.key == pygame.K_ESCAPE:
                return False
        return True

    def _ev_win(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._win_all:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._win_reset.hit(ev.pos):
                self._reset()
            elif self._win_prev.hit(ev.pos):
                self._step_level(forward=False)
            elif self._win_next.hit(ev.pos):
                self._step_level(forward=True)
            elif self._win_menu.hit(ev.pos):
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_r:
                self._reset()
            elif ev.key in (pygame.K_n, pygame.K_RETURN):
                self._step_level(forward=True)
            elif ev.key == pygame.K_p:
                self._step_level(forward=False)
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._screen = _Screen.MENU
        return True

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.PLAYING: self._ev_game,
            _Screen.WIN: self._ev_win,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.PLAYING: self._draw_game,
            _Screen.WIN: self._draw_win,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            if self._screen == _Screen.PLAYING:
                self._check_stuck()
                if self._session.won:
                    self._status_msg = ""
                    self._screen = _Screen.WIN

            drawer = _draw.get(self._screen)
            if drawer:
                drawer()
            pygame.display.flip()
            self._clock.tick(30)

        self._session.unsubscribe(self._sounds)
        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    session: LevelSession,
    saves: SaveGameManager,
    assets_dir: Path = Path("assets"),
) -> None:
    """Launch the Pygame GUI (opens to the level menu)."""
    app = PygameApp(session, saves, assets_dir)
    app.run_loop()
