# src/gridpath/core/idastar.py
#!/usr/bin/env python3
"""
IDA*: iterative deepening on f = g + h, one search call per step().

The depth-first search is driven from an explicit frame stack instead of
recursion so a host can pause between calls. A call whose f exceeds the
threshold reports f back to its caller; the next iteration uses the minimum
reported f. When an iteration reports nothing (infinity) the goal is
unreachable.

The `branch` list guards against revisiting cells already on the
current branch; it is also the returned path.

There is no closed set across branches. Proving that no path exists means
trying every simple path in the reachable region, which grows exponentially
with the region's size: a few rows of open cells above a wall can already
take millions of steps. Hosts should expect to cancel such runs.
"""

import logging
from dataclasses import dataclass, field
from math import inf
from typing import List, Optional, Set, Tuple

from gridpath.core.costs import movement_cost
from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell

log = logging.getLogger(__name__)


@dataclass
class _Frame:
    cell: Cell
    g: float
    pending: List[Cell]
    best: float = inf
    child: Optional[Cell] = None


@dataclass
class IDAStarAlgo(SearchAlgo):
    name: str = "IDA*"

    threshold: float = 0.0
    iterations: int = 0
    branch: List[Cell] = field(default_factory=list)
    on_branch: Set[Cell] = field(default_factory=set)
    frames: List[_Frame] = field(default_factory=list)
    next_call: Optional[Tuple[Cell, float]] = None
    round_min: float = inf

    def _seed(self) -> None:
        self.threshold = self._h(self.grid.start)
        self.iterations = 0
        self._start_iteration()

    def _start_iteration(self) -> None:
        s = self.grid.start
        self.iterations += 1
        self.branch = [s]
        self.on_branch = {s}
        self.frames = []
        self.round_min = inf
        self.next_call = (s, 0.0)

    def _open_size(self) -> int:
        return len(self.branch)

    def _ordered_neighbors(self, c: Cell) -> List[Cell]:
        return sorted(self._neighbors(c), key=lambda n: movement_cost(c, n) + self._h(n))

    # -------------------- stepping --------------------

    def _expand(self) -> StepResult:
        while True:
            if self.next_call is not None:
                cell, g = self.next_call
                self.next_call = None
                return self._call(cell, g)

            if not self.frames:
                # iteration over: raise the threshold or give up
                if self.round_min == inf:
                    return self._fail()
                log.debug("%s raising threshold %.3f -> %.3f", self.name, self.threshold, self.round_min)
                self.threshold = self.round_min
                self._start_iteration()
                continue

            frame = self.frames[-1]
            while frame.pending:
                n = frame.pending.pop(0)
                if n in self.on_branch:
                    self.grid.touch(n)
                    continue
                self.branch.append(n)
                self.on_branch.add(n)
                self.grid.set_parent(n, frame.cell)
                frame.child = n
                self.next_call = (n, frame.g + movement_cost(frame.cell, n))
                break
            if self.next_call is not None:
                continue

            self.frames.pop()
            self._report(frame.best)

    def _call(self, cell: Cell, g: float) -> StepResult:
        f = g + self._h(cell)
        if f > self.threshold:
            self._report(f)
            return self._running(cell, [], [])

        if cell == self.grid.goal:
            return self._succeed(cell, list(self.branch))

        self.expanded += 1
        self.grid.touch(cell)
        self.frames.append(_Frame(cell, g, self._ordered_neighbors(cell)))
        return self._running(cell, [], [cell])

    def _report(self, value: float) -> None:
        """Hand a finished call's result to its caller and pop it off the branch."""
        if not self.frames:
            self.round_min = min(self.round_min, value)
            return
        caller = self.frames[-1]
        caller.best = min(caller.best, value)
        child = caller.child
        caller.child = None
        if child is not None:
            self.branch.pop()
            self.on_branch.discard(child)
            self.grid.touch(child)
