# src/gridpath/core/beam.py
#!/usr/bin/env python3
"""
Beam search: one round per step().

Each round expands the whole beam: the goal check happens when a beam cell
is expanded, otherwise its neighbors are pooled (untouched ones take the
expanded cell as parent). The pool is drained cheapest-h first and the first
`beam_width` untouched candidates become the next beam; every drained
candidate is touched, the rest of the pool is thrown away.

Incomplete: a narrow beam can lose the only way through.
"""

import heapq
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import StepResult, Cell


def default_beam_width(diagonal: bool) -> int:
    return 8 if diagonal else 4


@dataclass
class BeamSearchAlgo(SearchAlgo):
    name: str = "Beam Search"

    beam_width: Optional[int] = None     # None -> 8 with diagonals, 4 without
    beam: List[Cell] = field(default_factory=list)
    rounds: int = 0

    @property
    def width(self) -> int:
        if self.beam_width is not None:
            return self.beam_width
        return default_beam_width(self.policy.diagonal)

    def _seed(self) -> None:
        if self.width < 1:
            raise ValueError(f"beam width must be positive, got {self.width}")
        self.beam = [self.grid.start]
        self.grid.touch(self.grid.start)
        self.rounds = 0

    def _open_size(self) -> int:
        return len(self.beam)

    def _metrics(self) -> dict:
        m = super()._metrics()
        m["rounds"] = self.rounds
        return m

    def _expand(self) -> StepResult:
        if not self.beam:
            return self._fail()

        self.rounds += 1
        pool: List[Tuple[float, int, Cell]] = []
        seq = 0
        for u in self.beam:
            self.expanded += 1
            if u == self.grid.goal:
                return self._succeed(u)
            for v in self._neighbors(u):
                if self.grid.visits_of(v) == 0:
                    self.grid.set_parent(v, u)
                heapq.heappush(pool, (self._h(v), seq, v))
                seq += 1

        expanded_round = self.beam
        next_beam: List[Cell] = []
        while pool and len(next_beam) < self.width:
            _, _, v = heapq.heappop(pool)
            if self.grid.visits_of(v) == 0:
                next_beam.append(v)
            self.grid.touch(v)
        self.beam = next_beam

        current = expanded_round[-1] if expanded_round else None
        return self._running(current, list(next_beam), list(expanded_round))
