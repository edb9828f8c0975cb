# src/gridpath/core/persistence.py
#!/usr/bin/env python3
"""
Grid layouts on disk.

Record layout (JSON object):
    {
      "gridWidth": 45,
      "gridHeight": 28,
      "nodeSize": 20,                    # display only
      "gridValues": [["s", "o", ...],    # gridValues[x][y], one column per x
                     ...]
    }
Codes: s = start, g = goal, x = blocked, o = empty.

Loading builds a brand new Grid and only returns it once it validates, so a
failed load never disturbs the grid a host already holds.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from gridpath.core.errors import InvalidGrid, MalformedGridData
from gridpath.core.types import Grid, CellKind

log = logging.getLogger(__name__)

DEFAULT_NODE_SIZE = 20
REQUIRED_FIELDS = ("gridWidth", "gridHeight", "nodeSize", "gridValues")

_CODES = {k.value: k for k in CellKind}


def grid_to_record(grid: Grid, node_size: int = DEFAULT_NODE_SIZE) -> Dict[str, Any]:
    values: List[List[str]] = [
        [grid.kinds[y][x].value for y in range(grid.height)]
        for x in range(grid.width)
    ]
    return {
        "gridWidth": grid.width,
        "gridHeight": grid.height,
        "nodeSize": int(node_size),
        "gridValues": values,
    }


def _as_int(record: Dict[str, Any], key: str) -> int:
    v = record[key]
    if isinstance(v, bool) or not isinstance(v, int):
        raise MalformedGridData(f"{key} must be an integer, got {v!r}")
    return v


def grid_from_record(record: Any) -> Tuple[Grid, int]:
    """Rebuild a grid from a record. Raises MalformedGridData / InvalidGrid."""
    if not isinstance(record, dict):
        raise MalformedGridData("grid record must be a JSON object")
    missing = [k for k in REQUIRED_FIELDS if k not in record]
    if missing:
        raise MalformedGridData(f"grid record is missing: {', '.join(missing)}")

    width = _as_int(record, "gridWidth")
    height = _as_int(record, "gridHeight")
    node_size = _as_int(record, "nodeSize")
    if width <= 0 or height <= 0:
        raise MalformedGridData(f"grid size must be positive, got {width}x{height}")
    if node_size <= 0:
        raise MalformedGridData(f"nodeSize must be positive, got {node_size}")

    values = record["gridValues"]
    if not isinstance(values, list) or len(values) != width:
        raise MalformedGridData(f"gridValues must hold {width} columns")

    kinds = [[CellKind.EMPTY] * width for _ in range(height)]
    starts, goals = [], []
    for x, column in enumerate(values):
        if not isinstance(column, list) or len(column) != height:
            raise MalformedGridData(f"column {x} must hold {height} cells")
        for y, code in enumerate(column):
            kind = _CODES.get(code) if isinstance(code, str) else None
            if kind is None:
                raise MalformedGridData(f"unknown cell code {code!r} at ({x}, {y})")
            kinds[y][x] = kind
            if kind == CellKind.START:
                starts.append((x, y))
            elif kind == CellKind.GOAL:
                goals.append((x, y))

    if len(starts) != 1 or len(goals) != 1:
        raise InvalidGrid(f"expected one start and one goal, found {len(starts)} and {len(goals)}")

    grid = Grid(width, height, kinds, starts[0], goals[0])
    grid.validate()
    return grid, node_size


def save_grid(path: Union[str, Path], grid: Grid, node_size: int = DEFAULT_NODE_SIZE) -> Path:
    path = Path(path)
    record = grid_to_record(grid, node_size)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record, f, indent=2)
    log.info("saved %dx%d grid to %s", grid.width, grid.height, path)
    return path


def load_grid(path: Union[str, Path]) -> Tuple[Grid, int]:
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as ex:
            raise MalformedGridData(f"{path} is not valid UTF-8 JSON: {ex}") from ex
    grid, node_size = grid_from_record(data)
    log.info("loaded %dx%d grid from %s", grid.width, grid.height, path)
    return grid, node_size
