# src/gridpath/core/costs.py
"""
Movement cost and the heuristic family.

Stepping straight costs 1, stepping diagonally costs sqrt(2).

Heuristics:
- MANHATTAN: admissible for 4-connected movement.
- OCTILE:    admissible for 8-connected movement.
- CHEBYSHEV, EUCLIDEAN: kept in the algebraic form earlier releases
  of the visualizer used (S*(dx+dy) - S*min(dx,dy) and S*(dx + dx*dy^2)).
  They are not the textbook distances and EUCLIDEAN overestimates badly;
  A* with it trades optimality for speed without saying so.
"""

import math
from enum import Enum
from typing import Sequence

from gridpath.core.types import Cell

STRAIGHT_COST = 1.0
DIAGONAL_COST = math.sqrt(2)


def movement_cost(a: Cell, b: Cell) -> float:
    diagonal = a[0] != b[0] and a[1] != b[1]
    return DIAGONAL_COST if diagonal else STRAIGHT_COST


def path_cost(path: Sequence[Cell]) -> float:
    """Total movement cost along consecutive cells of a path."""
    return sum(movement_cost(a, b) for a, b in zip(path, path[1:]))


def _deltas(a: Cell, b: Cell):
    return abs(a[0] - b[0]), abs(a[1] - b[1])


class Heuristic(Enum):
    MANHATTAN = "manhattan"
    OCTILE = "octile"
    CHEBYSHEV = "chebyshev"
    EUCLIDEAN = "euclidean"

    def estimate(self, a: Cell, goal: Cell) -> float:
        dx, dy = _deltas(a, goal)
        s = STRAIGHT_COST
        if self is Heuristic.MANHATTAN:
            return s * (dx + dy)
        if self is Heuristic.OCTILE:
            return s * (dx + dy) + (DIAGONAL_COST - 2 * s) * min(dx, dy)
        if self is Heuristic.CHEBYSHEV:
            return s * (dx + dy) + (s - 2 * s) * min(dx, dy)
        return s * (dx + dx * dy * dy)

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, name: "str | Heuristic") -> "Heuristic":
        if isinstance(name, Heuristic):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            known = ", ".join(h.value for h in cls)
            raise ValueError(f"unknown heuristic {name!r} (expected one of: {known})") from None
