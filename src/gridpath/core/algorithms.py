# src/gridpath/core/algorithms.py
"""The closed set of search variants and the factory hosts build them with."""

from enum import Enum
from typing import Dict, Optional, Type

from gridpath.core.astar import AStarAlgo
from gridpath.core.beam import BeamSearchAlgo
from gridpath.core.bfs import BreadthFirstAlgo
from gridpath.core.costs import Heuristic
from gridpath.core.dfs import DepthFirstAlgo
from gridpath.core.dijkstra import DijkstraAlgo
from gridpath.core.idastar import IDAStarAlgo
from gridpath.core.neighbors import NeighborPolicy
from gridpath.core.search_base import SearchAlgo
from gridpath.core.types import Grid


class AlgorithmKind(Enum):
    DFS = "dfs"
    BFS = "bfs"
    DIJKSTRA = "dijkstra"
    ASTAR = "astar"
    BEAM = "beam"
    IDASTAR = "idastar"

    @property
    def uses_heuristic(self) -> bool:
        return self in (AlgorithmKind.ASTAR, AlgorithmKind.BEAM, AlgorithmKind.IDASTAR)

    @property
    def label(self) -> str:
        return _IMPLS[self].name

    @classmethod
    def parse(cls, name: "str | AlgorithmKind") -> "AlgorithmKind":
        if isinstance(name, AlgorithmKind):
            return name
        key = str(name).strip().lower().replace("*", "star").replace(" ", "").replace("_", "")
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            known = ", ".join(k.value for k in cls)
            raise ValueError(f"unknown algorithm {name!r} (expected one of: {known})") from None


_ALIASES = {
    "depthfirstsearch": "dfs",
    "breadthfirstsearch": "bfs",
    "a": "astar",
    "dijkstra's": "dijkstra",
    "beamsearch": "beam",
    "idastarsearch": "idastar",
}

_IMPLS: Dict[AlgorithmKind, Type[SearchAlgo]] = {
    AlgorithmKind.DFS: DepthFirstAlgo,
    AlgorithmKind.BFS: BreadthFirstAlgo,
    AlgorithmKind.DIJKSTRA: DijkstraAlgo,
    AlgorithmKind.ASTAR: AStarAlgo,
    AlgorithmKind.BEAM: BeamSearchAlgo,
    AlgorithmKind.IDASTAR: IDAStarAlgo,
}


def make_algorithm(
    kind: "str | AlgorithmKind",
    grid: Optional[Grid] = None,
    diagonal: bool = True,
    heuristic: "str | Heuristic" = Heuristic.MANHATTAN,
    beam_width: Optional[int] = None,
) -> SearchAlgo:
    """Build a search variant; with a grid it is validated and seeded right away."""
    kind = AlgorithmKind.parse(kind)
    policy = NeighborPolicy(diagonal=diagonal)
    h = Heuristic.parse(heuristic)
    if kind is AlgorithmKind.BEAM:
        return BeamSearchAlgo(grid=grid, policy=policy, heuristic=h, beam_width=beam_width)
    return _IMPLS[kind](grid=grid, policy=policy, heuristic=h)
