# src/gridpath/core/errors.py
"""Structural failures reported by the core.

"No path" and "cancelled" are ordinary search outcomes and live in
StepResult.status; only faults in the inputs are raised.
"""


class GridError(Exception):
    """Base class for grid related failures."""


class InvalidGrid(GridError, ValueError):
    """The grid cannot be searched (bad size, endpoints missing, blocked or equal)."""


class MalformedGridData(GridError, ValueError):
    """A persisted grid record is incomplete or inconsistent."""
