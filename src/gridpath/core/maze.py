# src/gridpath/core/maze.py
#!/usr/bin/env python3
"""
Perfect maze generation with a randomized recursive backtracker.

Carving works on the odd lattice (step 2 on both axes) inside a one-cell
border, so there is always a wall cell between two carved cells:
  1. Block every cell.
  2. From (1, 1), pick random directions until one leads to an unvisited
     lattice cell; carve the wall cell in between and the target, descend.
  3. Backtrack when no lattice neighbour is left unvisited.
The passages form a spanning tree of the lattice: one path between any two
open cells under 4-connectivity. (1, 1) becomes Start, the last cell first
visited becomes Goal. Visit counters serve as the "visited" marks and are
zeroed afterwards.
"""

import logging
import random
from typing import List, Optional

from gridpath.core.errors import InvalidGrid
from gridpath.core.types import Grid, Cell, CellKind

log = logging.getLogger(__name__)

MAZE_START: Cell = (1, 1)

# (dx, dy) in lattice steps
DIRECTIONS = {
    "N": (0, -2),
    "S": (0, 2),
    "E": (2, 0),
    "W": (-2, 0),
}


def lattice_size(width: int, height: int) -> int:
    """Number of carvable odd-lattice cells inside the border."""
    return max(0, (width - 1) // 2) * max(0, (height - 1) // 2)


def _carvable(grid: Grid, x: int, y: int) -> bool:
    return 1 <= x < grid.width - 1 and 1 <= y < grid.height - 1


def _unvisited_moves(grid: Grid, c: Cell) -> List[Cell]:
    x, y = c
    out: List[Cell] = []
    for dx, dy in DIRECTIONS.values():
        nx, ny = x + dx, y + dy
        if _carvable(grid, nx, ny) and grid.visits_of((nx, ny)) == 0:
            out.append((nx, ny))
    return out


def generate_maze(grid: Grid, rng: Optional[random.Random] = None) -> Cell:
    """Rewrite `grid` into a perfect maze in place and return the new goal."""
    if lattice_size(grid.width, grid.height) < 2:
        raise InvalidGrid(f"grid {grid.width}x{grid.height} is too small for a maze (need at least 5x3)")
    rng = rng or random.Random()

    grid.reset_search()
    grid.fill(CellKind.BLOCKED)

    stack: List[Cell] = [MAZE_START]
    grid.touch(MAZE_START)
    grid.kinds[MAZE_START[1]][MAZE_START[0]] = CellKind.EMPTY
    last = MAZE_START
    carved = 1

    while stack:
        cx, cy = stack[-1]
        if not _unvisited_moves(grid, (cx, cy)):
            stack.pop()
            continue

        # random direction draws until an open one turns up
        while True:
            dx, dy = DIRECTIONS[rng.choice("NSEW")]
            nx, ny = cx + dx, cy + dy
            if _carvable(grid, nx, ny) and grid.visits_of((nx, ny)) == 0:
                break

        grid.kinds[cy + dy // 2][cx + dx // 2] = CellKind.EMPTY
        grid.kinds[ny][nx] = CellKind.EMPTY
        grid.touch((nx, ny))
        stack.append((nx, ny))
        last = (nx, ny)
        carved += 1

    grid.reset_search()
    grid.place_endpoints(MAZE_START, last)
    log.debug("carved %d lattice cells in a %dx%d maze, goal at %s", carved, grid.width, grid.height, last)
    return last
