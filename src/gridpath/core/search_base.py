# src/gridpath/core/search_base.py
#!/usr/bin/env python3
"""
Shared shape of every search algorithm: one expansion per step() for animation.

Lifecycle expected by hosts (viewer, runner):
- init(grid) - reset() - step() -> StepResult - cancel()

State machine:
    ready -> running -> done | no_path | cancelled

Terminal states are sticky: once reached, step() keeps returning the same
terminal result. Cancellation is checked at the top of every step.

Visit counters on the grid are touched for display only; traversal order
never depends on them.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from gridpath.core.costs import Heuristic, path_cost
from gridpath.core.neighbors import NeighborPolicy
from gridpath.core.types import (
    Grid, Cell, StepResult, READY, RUNNING, DONE, NO_PATH, CANCELLED, TERMINAL,
)

log = logging.getLogger(__name__)


@dataclass
class SearchAlgo:
    name: str = "search"

    grid: Optional[Grid] = None
    policy: NeighborPolicy = field(default_factory=NeighborPolicy)
    heuristic: Heuristic = Heuristic.MANHATTAN

    status: str = READY
    steps: int = 0
    expanded: int = 0
    path: Optional[List[Cell]] = None
    cancel_requested: bool = False

    def __post_init__(self) -> None:
        if self.grid is not None:
            self.init(self.grid)

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid) -> None:
        """Validate and attach a grid; raises InvalidGrid before any search state exists."""
        grid.validate()
        self.grid = grid
        self.reset()

    def reset(self) -> None:
        """Clear visit counters and parent links on the grid and reseed from start."""
        if self.grid is None:
            return
        self.grid.reset_search()
        self.status = READY
        self.steps = 0
        self.expanded = 0
        self.path = None
        self.cancel_requested = False
        self._seed()

    def cancel(self) -> None:
        """Request cancellation; observed at the next step."""
        self.cancel_requested = True

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL

    # -------------------- stepping --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status=READY, metrics={"algo": self.name})

        if self.status in TERMINAL:
            return self._terminal_result()

        if self.cancel_requested:
            self.status = CANCELLED
            log.debug("%s cancelled after %d steps", self.name, self.steps)
            return self._terminal_result()

        self.status = RUNNING
        self.steps += 1
        return self._expand()

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step until a terminal state (or until max_steps more steps were taken)."""
        res = self.step()
        taken = 1
        while not res.finished:
            if max_steps is not None and taken >= max_steps:
                break
            res = self.step()
            taken += 1
        return res

    # -------------------- hooks for variants --------------------

    def _seed(self) -> None:
        raise NotImplementedError

    def _expand(self) -> StepResult:
        raise NotImplementedError

    def _open_size(self) -> int:
        return 0

    # -------------------- helpers --------------------

    def _neighbors(self, c: Cell) -> List[Cell]:
        return self.policy.neighbors(self.grid, c)

    def _h(self, c: Cell) -> float:
        return self.heuristic.estimate(c, self.grid.goal)

    def _succeed(self, current: Cell, path: Optional[List[Cell]] = None) -> StepResult:
        self.path = path if path is not None else self.grid.path_to(current)
        self.status = DONE
        log.debug("%s reached goal in %d steps (%d cells)", self.name, self.steps, len(self.path))
        return StepResult(
            status=DONE,
            closed=[current],
            current=current,
            path=self.path,
            metrics=self._metrics(),
        )

    def _fail(self) -> StepResult:
        self.status = NO_PATH
        log.debug("%s exhausted its frontier after %d steps", self.name, self.steps)
        return self._terminal_result()

    def _running(self, current: Optional[Cell], opened: List[Cell], closed: List[Cell]) -> StepResult:
        return StepResult(
            status=RUNNING,
            opened=opened,
            closed=closed,
            current=current,
            metrics=self._metrics(),
        )

    def _terminal_result(self) -> StepResult:
        return StepResult(status=self.status, path=self.path, metrics=self._metrics())

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "steps": self.steps,
            "expanded": self.expanded,
            "open_size": self._open_size(),
            "path_len": len(self.path) if self.path else 0,
            "total_cost": path_cost(self.path) if self.path else None,
        }
