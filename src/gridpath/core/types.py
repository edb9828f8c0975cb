# src/gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

from gridpath.core.errors import InvalidGrid

Cell = Tuple[int, int]  # (col, row)

# StepResult.status values
READY = "ready"
RUNNING = "running"
DONE = "done"
NO_PATH = "no_path"
CANCELLED = "cancelled"

TERMINAL = (DONE, NO_PATH, CANCELLED)


class CellKind(str, Enum):
    """Cell kinds; the value doubles as the single-character save code."""
    EMPTY = "o"
    BLOCKED = "x"
    START = "s"
    GOAL = "g"


@dataclass
class Grid:
    width: int
    height: int
    kinds: List[List[CellKind]]        # [row][col]
    start: Cell
    goal: Cell
    visits: List[List[int]] = field(default_factory=list)   # [row][col], display only
    parent: List[int] = field(default_factory=list)         # flat index -> predecessor index, -1 = none

    def __post_init__(self) -> None:
        if not self.visits:
            self.visits = [[0] * self.width for _ in range(self.height)]
        if not self.parent:
            self.parent = [-1] * (self.width * self.height)

    # -------------------- construction --------------------

    @classmethod
    def empty(cls, width: int, height: int) -> "Grid":
        """Default layout: Start in the top-left corner, Goal in the opposite one."""
        if width <= 0 or height <= 0:
            raise InvalidGrid(f"grid must be at least 1x1, got {width}x{height}")
        if width * height < 2:
            raise InvalidGrid("grid needs room for both a start and a goal")
        kinds = [[CellKind.EMPTY] * width for _ in range(height)]
        start = (0, 0)
        goal = (width - 1, height - 1)
        kinds[0][0] = CellKind.START
        kinds[height - 1][width - 1] = CellKind.GOAL
        return cls(width, height, kinds, start, goal)

    def copy(self) -> "Grid":
        return Grid(
            self.width,
            self.height,
            [list(r) for r in self.kinds],
            self.start,
            self.goal,
            [list(r) for r in self.visits],
            list(self.parent),
        )

    # -------------------- queries --------------------

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def kind_at(self, c: Cell) -> CellKind:
        x, y = c
        return self.kinds[y][x]

    def is_block(self, c: Cell) -> bool:
        return self.kind_at(c) == CellKind.BLOCKED

    def index_of(self, c: Cell) -> int:
        x, y = c
        return y * self.width + x

    def cell_at_index(self, i: int) -> Cell:
        return (i % self.width, i // self.width)

    def cells(self):
        """Every coordinate, row by row."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    # -------------------- search bookkeeping --------------------

    def visits_of(self, c: Cell) -> int:
        x, y = c
        return self.visits[y][x]

    def touch(self, c: Cell) -> None:
        x, y = c
        self.visits[y][x] += 1

    def parent_of(self, c: Cell) -> Optional[Cell]:
        p = self.parent[self.index_of(c)]
        return None if p < 0 else self.cell_at_index(p)

    def set_parent(self, c: Cell, p: Optional[Cell]) -> None:
        self.parent[self.index_of(c)] = -1 if p is None else self.index_of(p)

    def reset_search(self) -> None:
        """Zero every visit counter and drop every parent link."""
        for row in self.visits:
            for x in range(self.width):
                row[x] = 0
        for i in range(len(self.parent)):
            self.parent[i] = -1

    def path_to(self, end: Cell) -> List[Cell]:
        """Walk parent links from `end` back to start, returned start-first."""
        path: List[Cell] = []
        cur: Optional[Cell] = end
        # bounded walk: a well-formed parent tree never needs more than one hop per cell
        for _ in range(self.width * self.height):
            if cur is None:
                break
            path.append(cur)
            if cur == self.start:
                break
            cur = self.parent_of(cur)
        path.reverse()
        return path

    # -------------------- editing --------------------

    def set_blocked(self, c: Cell, blocked: bool = True) -> bool:
        """Block or clear a cell. Start and goal are never touched."""
        if not self.in_bounds(c) or c == self.start or c == self.goal:
            return False
        x, y = c
        self.kinds[y][x] = CellKind.BLOCKED if blocked else CellKind.EMPTY
        return True

    def move_start(self, c: Cell) -> bool:
        if not self.in_bounds(c) or c == self.start or c == self.goal:
            return False
        self._set_kind(self.start, CellKind.EMPTY)
        self._set_kind(c, CellKind.START)
        self.start = c
        return True

    def move_goal(self, c: Cell) -> bool:
        if not self.in_bounds(c) or c == self.start or c == self.goal:
            return False
        self._set_kind(self.goal, CellKind.EMPTY)
        self._set_kind(c, CellKind.GOAL)
        self.goal = c
        return True

    def fill(self, kind: CellKind) -> None:
        """Overwrite every cell with `kind`; endpoints must be re-placed afterwards."""
        for row in self.kinds:
            for x in range(self.width):
                row[x] = kind

    def place_endpoints(self, start: Cell, goal: Cell) -> None:
        self.start = start
        self.goal = goal
        self._set_kind(start, CellKind.START)
        self._set_kind(goal, CellKind.GOAL)

    def clear(self) -> None:
        """Back to the default layout, keeping the size."""
        self.fill(CellKind.EMPTY)
        self.place_endpoints((0, 0), (self.width - 1, self.height - 1))
        self.reset_search()

    def _set_kind(self, c: Cell, kind: CellKind) -> None:
        x, y = c
        self.kinds[y][x] = kind

    # -------------------- validation --------------------

    def validate(self) -> None:
        """Raise InvalidGrid unless the grid is searchable."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidGrid(f"grid must be at least 1x1, got {self.width}x{self.height}")
        if len(self.kinds) != self.height or any(len(r) != self.width for r in self.kinds):
            raise InvalidGrid("cells size mismatch")
        starts = [c for c in self.cells() if self.kind_at(c) == CellKind.START]
        goals = [c for c in self.cells() if self.kind_at(c) == CellKind.GOAL]
        if len(starts) != 1:
            raise InvalidGrid(f"expected exactly one start cell, found {len(starts)}")
        if len(goals) != 1:
            raise InvalidGrid(f"expected exactly one goal cell, found {len(goals)}")
        if not self.in_bounds(self.start) or not self.in_bounds(self.goal):
            raise InvalidGrid("start or goal out of bounds")
        if self.start == self.goal:
            raise InvalidGrid("start and goal must differ")
        if starts[0] != self.start or goals[0] != self.goal:
            raise InvalidGrid("start/goal do not match the cell kinds")


@dataclass
class StepResult:
    status: str                   # "ready" | "running" | "done" | "no_path" | "cancelled"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Cell]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL
