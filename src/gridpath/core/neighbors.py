# src/gridpath/core/neighbors.py
from dataclasses import dataclass
from typing import List, Tuple

from gridpath.core.types import Grid, Cell

OFFSETS_4: Tuple[Cell, ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))
OFFSETS_8: Tuple[Cell, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


@dataclass(frozen=True)
class NeighborPolicy:
    """Which cells are reachable in one move: 4- or 8-connectivity, never through blocks."""
    diagonal: bool = True

    @property
    def offsets(self) -> Tuple[Cell, ...]:
        return OFFSETS_8 if self.diagonal else OFFSETS_4

    def neighbors(self, grid: Grid, c: Cell) -> List[Cell]:
        """Return valid neighbors of c, in a fixed offset order."""
        x, y = c
        out: List[Cell] = []
        for dx, dy in self.offsets:
            n = (x + dx, y + dy)
            if grid.in_bounds(n) and not grid.is_block(n):
                out.append(n)
        return out

    def are_neighbors(self, a: Cell, b: Cell) -> bool:
        dx = b[0] - a[0]
        dy = b[1] - a[1]
        return (dx, dy) in self.offsets
