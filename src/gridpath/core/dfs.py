# src/gridpath/core/dfs.py
#!/usr/bin/env python3
"""
Depth-first search: one popped cell per step().

A neighbor is discovered the first time it is seen (visits == 0): it gets its
parent and goes on the stack. Every neighbor examined is touched, discovered
or not. Not shortest-path.
"""

from dataclasses import dataclass, field
from typing import List

from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell


@dataclass
class DepthFirstAlgo(SearchAlgo):
    name: str = "Depth First Search"

    stack: List[Cell] = field(default_factory=list)

    def _seed(self) -> None:
        self.stack.clear()
        s = self.grid.start
        self.stack.append(s)
        self.grid.touch(s)

    def _open_size(self) -> int:
        return len(self.stack)

    def _expand(self) -> StepResult:
        if not self.stack:
            return self._fail()

        u = self.stack.pop()
        self.expanded += 1
        if u == self.grid.goal:
            return self._succeed(u)

        opened: List[Cell] = []
        for v in self._neighbors(u):
            if self.grid.visits_of(v) == 0:
                self.grid.set_parent(v, u)
                self.stack.append(v)
                opened.append(v)
            self.grid.touch(v)

        return self._running(u, opened, [u])
