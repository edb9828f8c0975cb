# src/gridpath/core/astar.py
#!/usr/bin/env python3
"""
A*: one expansion per step() for animation.

Tie-breaking in the PQ:
- (f, h, -g, seq, cell): lower f, then lower h, then deeper g, then FIFO by seq.

A strictly better g for an open cell supersedes its queued entry; the old
entry is dropped when popped. A cell is closed once expanded and never
relaxed again. Optimal when the heuristic is admissible and consistent
(MANHATTAN on 4-connected grids, OCTILE on 8-connected ones).
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional
import heapq
from math import inf

from gridpath.core.costs import movement_cost
from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell


@dataclass
class AStarAlgo(SearchAlgo):
    name: str = "A*"

    open_pq: List[Tuple[float, float, float, int, Cell]] = field(default_factory=list)  # (f, h, -g, seq, cell)
    open_set: set = field(default_factory=set)         # for overlay
    closed_set: set = field(default_factory=set)
    g: Dict[Cell, float] = field(default_factory=dict)
    seq: int = 0  # monotonic counter for PQ stability

    def _bump(self) -> int:
        self.seq += 1
        return self.seq

    def _seed(self) -> None:
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.g.clear()
        self.seq = 0

        s = self.grid.start
        self.g[s] = 0.0
        h0 = self._h(s)
        heapq.heappush(self.open_pq, (h0, h0, -0.0, self._bump(), s))
        self.open_set.add(s)

    def _open_size(self) -> int:
        return len(self.open_set)

    def _pop_live(self) -> Optional[Cell]:
        while self.open_pq:
            _, _, neg_g_u, _, u = heapq.heappop(self.open_pq)
            if u in self.closed_set or -neg_g_u != self.g.get(u, inf):
                continue
            return u
        return None

    def _expand(self) -> StepResult:
        u = self._pop_live()
        if u is None:
            return self._fail()

        # Finalize u
        self.expanded += 1
        self.open_set.discard(u)
        self.closed_set.add(u)
        self.grid.touch(u)

        if u == self.grid.goal:
            return self._succeed(u)

        # Relax neighbors
        opened_now: List[Cell] = []
        for v in self._neighbors(u):
            if v in self.closed_set:
                self.grid.touch(v)
                continue

            alt = self.g[u] + movement_cost(u, v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.grid.set_parent(v, u)
                h_v = self._h(v)
                heapq.heappush(self.open_pq, (alt + h_v, h_v, -alt, self._bump(), v))
                self.grid.touch(v)
                if v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v)

        return self._running(u, opened_now, [u])
