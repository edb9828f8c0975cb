# src/gridpath/app/viewer.py
#!/usr/bin/env python3
"""
Pathfinding Viewer: edit a grid, pick an algorithm, watch it search.

- Keyboard:
    [1]..[6]     -> algorithm (DFS / BFS / Dijkstra / A* / Beam / IDA*)
    [H]          -> cycle heuristic
    [G]          -> toggle diagonal moves
    [SPACE]      -> run/pause
    [N]          -> single step
    [C]          -> cancel the current run
    [R]          -> reset search overlay
    [X]          -> clear grid
    [M]          -> generate maze
    [S]/[L]      -> save / load layout (JSON)
    [+]/[-]      -> steps/sec
    [Q]/[ESC]    -> quit

- Mouse:
    left click   -> move start       left drag  -> paint blocks
    right click  -> move goal        right drag -> erase blocks
    middle click -> toggle block

Config (ENV or CLI, CLI wins):
    GRIDPATH_WIDTH      / --width=45
    GRIDPATH_HEIGHT     / --height=28
    GRIDPATH_NODE_SIZE  / --node-size=20
    GRIDPATH_SAVE_FILE  / --save-file=GridSave.json
                          --load=path/to/layout.json
    GRIDPATH_LOG_LEVEL  / --log-level=INFO
"""

import logging
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional, Dict, Sequence

import pygame

from gridpath.core.algorithms import AlgorithmKind
from gridpath.core.costs import Heuristic
from gridpath.core.errors import GridError
from gridpath.core.persistence import load_grid, save_grid, DEFAULT_NODE_SIZE
from gridpath.core.runner import SearchHandle, start_search, generate_maze
from gridpath.core.types import Grid, StepResult, Cell, CellKind, DONE, NO_PATH, CANCELLED

log = logging.getLogger(__name__)

# ---------- Config ----------
PANEL_W = 360            # right band: metrics + buttons
GRID_MARGIN = 16
FONT_NAME = None  # default pygame font

ALGO_KEYS = {
    pygame.K_1: AlgorithmKind.DFS,
    pygame.K_2: AlgorithmKind.BFS,
    pygame.K_3: AlgorithmKind.DIJKSTRA,
    pygame.K_4: AlgorithmKind.ASTAR,
    pygame.K_5: AlgorithmKind.BEAM,
    pygame.K_6: AlgorithmKind.IDASTAR,
}

# Colors
WHITE       = (255,255,255)
BLACK       = (  0,  0,  0)
RED         = (220, 50, 47)
GREEN       = ( 46,139, 87)
BLOCK_GRAY  = ( 90, 94,104)
FLOOR       = (200,200,200)
GRID_LINE   = (170,170,170)
NEON_CYAN_A = (0,150,255,110)
NEON_MINT   = (0,255,200)
VISIT_RGB   = (255,0,120)

CARD_BG     = (24,28,36,220)
CARD_HI     = (255,255,255,18)
TEXT_LIGHT  = (230,235,240)
ACCENT_GOLD = (255,210,0)


@dataclass
class ViewerConfig:
    width: int = 45
    height: int = 28
    node_size: int = DEFAULT_NODE_SIZE
    save_file: Path = Path("GridSave.json")
    load_file: Optional[Path] = None
    log_level: str = "INFO"


def resolve_config(argv: Optional[Sequence[str]] = None, environ: Optional[Dict[str, str]] = None) -> ViewerConfig:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    raw: Dict[str, str] = {}
    for key in ("width", "height", "node_size", "save_file", "log_level"):
        env_key = f"GRIDPATH_{key.upper()}"
        if env_key in environ:
            raw[key] = environ[env_key]
    for arg in argv:
        if arg.startswith("--") and "=" in arg:
            k, v = arg[2:].split("=", 1)
            raw[k.replace("-", "_")] = v

    cfg = ViewerConfig()
    try:
        if "width" in raw:
            cfg.width = int(raw["width"])
        if "height" in raw:
            cfg.height = int(raw["height"])
        if "node_size" in raw:
            cfg.node_size = int(raw["node_size"])
    except ValueError as ex:
        raise SystemExit(f"bad viewer setting: {ex}")
    if "save_file" in raw:
        cfg.save_file = Path(raw["save_file"])
    if "load" in raw:
        cfg.load_file = Path(raw["load"])
    if "log_level" in raw:
        cfg.log_level = raw["log_level"].upper()
    cfg.width = max(2, cfg.width)
    cfg.height = max(2, cfg.height)
    cfg.node_size = max(5, min(50, cfg.node_size))
    return cfg


def visit_shade(count: int) -> Optional[Tuple[int, int, int, int]]:
    """Overlay colour for a cell touched `count` times; darker the more it was touched."""
    if count <= 0:
        return None
    r, g, b = VISIT_RGB
    darken = 0.7 ** max(0, count // 3 - 1)
    alpha = min(200, 60 + 25 * count)
    return (int(r * darken), int(g * darken), int(b * darken), alpha)


def cell_at_pixel(pos: Tuple[int, int], origin: Tuple[int, int], cell_size: int, grid: Grid) -> Optional[Cell]:
    px, py = pos
    ox, oy = origin
    if px < ox or py < oy or cell_size <= 0:
        return None
    c = ((px - ox) // cell_size, (py - oy) // cell_size)
    return c if grid.in_bounds(c) else None


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle
        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235,238,242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, grid: Grid, cfg: ViewerConfig):
        pygame.init()

        self.grid = grid
        self.cfg = cfg
        self.node_size = cfg.node_size
        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.screen = pygame.display.set_mode(self._window_size(), pygame.RESIZABLE)
        pygame.display.set_caption("Pathfinding Visualizer")

        self._buttons: list[UIButton] = []
        self._layout(*self.screen.get_size())

        self.path: List[Cell] = []
        self.open_set: set[Cell] = set()

        self.running = False
        self.clock = pygame.time.Clock()
        self.steps_per_sec = 30
        self.state = "Idle"
        self.algo_kind = AlgorithmKind.ASTAR
        self.heuristic = Heuristic.OCTILE
        self.diagonal = True
        self.handle: Optional[SearchHandle] = None
        self._last_metrics: Dict = {}

        # mouse editing state
        self._press_button: Optional[int] = None
        self._press_cell: Optional[Cell] = None
        self._dragged = False

        self._refresh_active_states()

    def _window_size(self) -> Tuple[int, int]:
        w = GRID_MARGIN*2 + self.grid.width * self.node_size + PANEL_W
        h = max(GRID_MARGIN*2 + self.grid.height * self.node_size, 640)
        return w, h

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and anchor the grid top-left."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        cs_by_w = avail_w // self.grid.width
        cs_by_h = avail_h // self.grid.height
        self.cell_size = int(max(4, min(cs_by_w, cs_by_h, self.node_size)))

        grid_plate_w = self.grid.width * self.cell_size + 2 * GRID_MARGIN
        self._grid_origin = (GRID_MARGIN, GRID_MARGIN)
        self._right_band = pygame.Rect(grid_plate_w, 0, max(PANEL_W, win_w - grid_plate_w), win_h)
        self._build_buttons()

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        step_interval = 1.0 / max(1, self.steps_per_sec)
        if not hasattr(self, "_last_step_t"):
            self._last_step_t = 0.0
        if t0 - self._last_step_t >= step_interval:
            self._last_step_t = t0
            self._do_step()

    def _ensure_handle(self) -> bool:
        if self.handle is not None:
            return True
        try:
            self.handle = start_search(
                self.grid, self.algo_kind, self.diagonal, self.heuristic, threaded=False
            )
        except GridError as ex:
            print(f"Cannot search this grid: {ex}")
            self.running = False
            self.state = "Invalid grid"
            return False
        self.path = []
        self.open_set.clear()
        return True

    def _do_step(self):
        if self.state in ("Done", "No path", "Cancelled"):
            return
        if not self._ensure_handle():
            return
        res = self.handle.step()
        self._apply(res)

    def _apply(self, res: StepResult):
        for c in res.opened: self.open_set.add(c)
        for c in res.closed: self.open_set.discard(c)
        if res.path is not None: self.path = res.path
        if res.status == DONE:
            self.state = "Done"; self.running = False
        elif res.status == NO_PATH:
            self.state = "No path"; self.running = False
        elif res.status == CANCELLED:
            self.state = "Cancelled"; self.running = False
        else:
            self.state = "Running" if self.running else "Paused"
        if res.metrics:
            self._last_metrics = res.metrics
        self._refresh_active_states()

    def _cancel(self):
        if self.handle is None:
            return
        self.handle.cancel()
        self._apply(self.handle.poll())

    def _reset(self):
        """Drop the current run and its overlay; the layout stays."""
        if self.handle is not None:
            self.handle.cancel()
        self.handle = None
        self.running = False
        self.state = "Idle"
        self.grid.reset_search()
        self.path = []
        self.open_set.clear()
        self._last_metrics = {}
        self._refresh_active_states()

    # ---------- actions ----------
    def _switch_algo(self, kind: AlgorithmKind):
        self.algo_kind = kind
        self._reset()

    def _cycle_heuristic(self):
        order = list(Heuristic)
        self.heuristic = order[(order.index(self.heuristic) + 1) % len(order)]
        self._reset()

    def _toggle_diagonal(self):
        self.diagonal = not self.diagonal
        self._reset()

    def _toggle_run(self):
        if self.state in ("Done", "No path", "Cancelled", "Invalid grid"):
            self._reset()
        self.running = not self.running
        self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def _bump_speed(self, dv: int):
        self.steps_per_sec = int(max(1, min(240, self.steps_per_sec + dv)))

    def _clear_grid(self):
        self._reset()
        self.grid.clear()

    def _maze(self):
        self._reset()
        try:
            generate_maze(self.grid)
        except GridError as ex:
            print(f"Failed to generate maze: {ex}")
            return
        self.diagonal = False
        self._refresh_active_states()

    def _save(self):
        try:
            path = save_grid(self.cfg.save_file, self.grid, self.node_size)
        except OSError as ex:
            print(f"Failed to save grid: {ex}")
            return
        print(f"Saved grid to {path}")

    def _load(self):
        path = self.cfg.load_file or self.cfg.save_file
        try:
            grid, node_size = load_grid(path)
        except (OSError, GridError) as ex:
            print(f"Failed to load grid {path}: {ex}")
            return
        self._reset()
        self.grid = grid
        self.node_size = node_size
        self.screen = pygame.display.set_mode(self._window_size(), pygame.RESIZABLE)
        self._layout(*self.screen.get_size())

    # ---------- events ----------
    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                self._handle_key(e.key)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((max(640, e.w), max(480, e.h)), pygame.RESIZABLE)
                self._layout(*self.screen.get_size())
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
                consumed = False
                if e.type != pygame.MOUSEBUTTONUP:
                    for b in self._buttons:
                        consumed = b.handle_mouse(e) or consumed
                if not consumed:
                    self._handle_grid_mouse(e)

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            pygame.quit(); sys.exit(0)
        elif key == pygame.K_SPACE:
            self._toggle_run()
        elif key == pygame.K_n:
            self._do_step()
        elif key == pygame.K_c:
            self._cancel()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_x:
            self._clear_grid()
        elif key == pygame.K_m:
            self._maze()
        elif key == pygame.K_s:
            self._save()
        elif key == pygame.K_l:
            self._load()
        elif key == pygame.K_h:
            self._cycle_heuristic()
        elif key == pygame.K_g:
            self._toggle_diagonal()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._bump_speed(+5)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
            self._bump_speed(-5)
        elif key in ALGO_KEYS:
            self._switch_algo(ALGO_KEYS[key])

    def _handle_grid_mouse(self, e: pygame.event.Event):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button in (1, 2, 3):
            cell = cell_at_pixel(e.pos, self._grid_origin, self.cell_size, self.grid)
            if cell is None:
                return
            self._press_button = e.button
            self._press_cell = cell
            self._dragged = False
        elif e.type == pygame.MOUSEMOTION and self._press_button in (1, 3):
            cell = cell_at_pixel(e.pos, self._grid_origin, self.cell_size, self.grid)
            if cell is None or (cell == self._press_cell and not self._dragged):
                return
            if not self._dragged:
                self._reset()
                self._dragged = True
                self.grid.set_blocked(self._press_cell, self._press_button == 1)
            self.grid.set_blocked(cell, self._press_button == 1)
        elif e.type == pygame.MOUSEBUTTONUP and self._press_button is not None:
            if not self._dragged:
                self._click(self._press_button, self._press_cell)
            self._press_button = None
            self._press_cell = None
            self._dragged = False

    def _click(self, button: int, cell: Cell):
        self._reset()
        if button == 1:
            self.grid.move_start(cell)
        elif button == 3:
            self.grid.move_goal(cell)
        elif button == 2:
            self.grid.set_blocked(cell, not self.grid.is_block(cell))

    # ---------- drawing ----------
    def _draw(self):
        self.screen.fill((24, 26, 32))
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin

        for row in range(self.grid.height):
            for col in range(self.grid.width):
                kind = self.grid.kinds[row][col]
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
                if kind == CellKind.BLOCKED:
                    pygame.draw.rect(self.screen, BLOCK_GRAY, rect)
                    continue
                pygame.draw.rect(self.screen, FLOOR, rect)

                shade = visit_shade(self.grid.visits[row][col])
                if shade is not None:
                    s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(shade)
                    self.screen.blit(s, rect.topleft)
                pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

        for (col,row) in self.open_set:
            rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
            s = pygame.Surface((cs, cs), pygame.SRCALPHA); s.fill(NEON_CYAN_A)
            self.screen.blit(s, rect.topleft)

        # path
        if len(self.path) >= 2:
            pts = [(ox + col*cs + cs//2, oy + row*cs + cs//2) for (col,row) in self.path]
            pygame.draw.lines(self.screen, NEON_MINT, False, pts, max(2, cs // 5))

        self._draw_badge(self.grid.start, GREEN, "S")
        self._draw_badge(self.grid.goal,  RED,   "G")

    def _draw_badge(self, cell: Cell, color: Tuple[int,int,int], letter: str):
        cs = self.cell_size
        ox, oy = self._grid_origin
        col,row = cell
        rect = pygame.Rect(ox + col*cs, oy + row*cs, cs, cs)
        pygame.draw.rect(self.screen, color, rect)
        if cs >= 12:
            txt = self.font_small.render(letter, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=rect.center))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 250  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 32
        gap = 8
        half = (w - 8) // 2

        def add(label, cb, rect, *, togglable=False, store_as: str | None = None):
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, pygame.Rect(x, y, half, h), togglable=True, store_as="btn_run")
        add("Step Once", self._do_step, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Cancel", self._cancel, pygame.Rect(x, y, half, h))
        add("Reset", self._reset, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Speed -", lambda: self._bump_speed(-5), pygame.Rect(x, y, half, h))
        add("Speed +", lambda: self._bump_speed(+5), pygame.Rect(x + half + 8, y, half, h)); y += h + gap

        # algorithms, two per row
        self._algo_buttons: Dict[AlgorithmKind, UIButton] = {}
        for i, kind in enumerate(AlgorithmKind):
            bx = x if i % 2 == 0 else x + half + 8
            btn = UIButton(kind.label, pygame.Rect(bx, y, half, h), lambda k=kind: self._switch_algo(k), togglable=True)
            self._buttons.append(btn)
            self._algo_buttons[kind] = btn
            if i % 2 == 1:
                y += h + gap

        add("Heuristic", self._cycle_heuristic, pygame.Rect(x, y, half, h))
        add("Diagonals", self._toggle_diagonal, pygame.Rect(x + half + 8, y, half, h), togglable=True, store_as="btn_diag"); y += h + gap
        add("Maze", self._maze, pygame.Rect(x, y, half, h))
        add("Clear", self._clear_grid, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Save", self._save, pygame.Rect(x, y, half, h))
        add("Load", self._load, pygame.Rect(x + half + 8, y, half, h))

        if hasattr(self, "algo_kind"):
            self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(self.running)
        if hasattr(self, "btn_diag"):
            self.btn_diag.set_active(self.diagonal)
        for kind, btn in getattr(self, "_algo_buttons", {}).items():
            btn.set_active(kind == self.algo_kind)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 230
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 5

        line(self.state, big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Steps: {m.get('steps', 0)}   Expanded: {m.get('expanded', 0)}")
        if "rounds" in m:
            line(f"Open: {m.get('open_size', 0)}   Rounds: {m['rounds']}")
        else:
            line(f"Open: {m.get('open_size', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Total Cost: {m['total_cost']:.3f}")
        line("-" * 26)
        line(f"Algo: {self.algo_kind.label}")
        if self.algo_kind.uses_heuristic:
            line(f"Heuristic: {self.heuristic.label}")
        line(f"Diagonals: {'on' if self.diagonal else 'off'}")
        line(f"Speed: {self.steps_per_sec} steps/s")

        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def main(argv: Optional[Sequence[str]] = None):
    cfg = resolve_config(argv)
    logging.basicConfig(level=getattr(logging, cfg.log_level, logging.INFO), format="[%(levelname)s] %(message)s")

    grid: Optional[Grid] = None
    if cfg.load_file is not None:
        try:
            grid, cfg.node_size = load_grid(cfg.load_file)
        except (OSError, GridError) as ex:
            print(f"Failed to load grid {cfg.load_file}: {ex}")
            sys.exit(1)
    if grid is None:
        grid = Grid.empty(cfg.width, cfg.height)
    Viewer(grid, cfg).run()


if __name__ == "__main__":
    main()
