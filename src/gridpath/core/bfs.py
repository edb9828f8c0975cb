# src/gridpath/core/bfs.py
#!/usr/bin/env python3
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell


@dataclass
class BreadthFirstAlgo(SearchAlgo):
    """Same discovery rule as DFS, FIFO order: fewest hops, ties by discovery order."""
    name: str = "Breadth First Search"

    queue: Deque[Cell] = field(default_factory=deque)

    def _seed(self) -> None:
        self.queue.clear()
        s = self.grid.start
        self.queue.append(s)
        self.grid.touch(s)

    def _open_size(self) -> int:
        return len(self.queue)

    def _expand(self) -> StepResult:
        if not self.queue:
            return self._fail()

        u = self.queue.popleft()
        self.expanded += 1
        if u == self.grid.goal:
            return self._succeed(u)

        opened: List[Cell] = []
        for v in self._neighbors(u):
            if self.grid.visits_of(v) == 0:
                self.grid.set_parent(v, u)
                self.queue.append(v)
                opened.append(v)
            self.grid.touch(v)

        return self._running(u, opened, [u])
