# src/gridpath/core/dijkstra.py
#!/usr/bin/env python3

from dataclasses import dataclass, field
from typing import Dict, Tuple, List, Optional
import heapq
from math import inf

from gridpath.core.costs import movement_cost
from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell


@dataclass
class DijkstraAlgo(SearchAlgo):
    name: str = "Dijkstra"

    open_pq: List[Tuple[float, int, Cell]] = field(default_factory=list)   # (g, seq, cell)
    open_set: set = field(default_factory=set)
    closed_set: set = field(default_factory=set)
    g: Dict[Cell, float] = field(default_factory=dict)
    seq: int = 0

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
        heapq.heappush(self.open_pq, (0.0, self._bump(), s))
        self.open_set.add(s)

    def _open_size(self) -> int:
        return len(self.open_set)

    def _pop_live(self) -> Optional[Cell]:
        # stale entries (superseded by a cheaper push, or already closed) are dropped
        while self.open_pq:
            g_u, _, u = heapq.heappop(self.open_pq)
            if u in self.closed_set or g_u != self.g.get(u, inf):
                continue
            return u
        return None

    def _expand(self) -> StepResult:
        u = self._pop_live()
        if u is None:
            return self._fail()

        self.expanded += 1
        self.open_set.discard(u)
        self.closed_set.add(u)
        self.grid.touch(u)

        if u == self.grid.goal:
            return self._succeed(u)

        opened_now: List[Cell] = []
        for v in self._neighbors(u):
            if v in self.closed_set:
                self.grid.touch(v)
                continue

            alt = self.g[u] + movement_cost(u, v)
            if alt < self.g.get(v, inf):
                self.g[v] = alt
                self.grid.set_parent(v, u)
                heapq.heappush(self.open_pq, (alt, self._bump(), v))
                self.grid.touch(v)
                if v not in self.open_set:
                    self.open_set.add(v)
                    opened_now.append(v)

        return self._running(u, opened_now, [u])
