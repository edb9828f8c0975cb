import pytest

from gridpath.core.errors import InvalidGrid
from gridpath.core.types import Grid, CellKind, StepResult, DONE, RUNNING

from gridtools import grid_from_rows


def test_empty_grid_has_corner_endpoints():
    grid = Grid.empty(6, 4)
    assert grid.start == (0, 0)
    assert grid.goal == (5, 3)
    assert grid.kind_at((0, 0)) == CellKind.START
    assert grid.kind_at((5, 3)) == CellKind.GOAL
    assert grid.kind_at((2, 2)) == CellKind.EMPTY
    grid.validate()


@pytest.mark.parametrize("w,h", [(0, 5), (5, 0), (1, 1), (-2, 3)])
def test_empty_grid_rejects_degenerate_sizes(w, h):
    with pytest.raises(InvalidGrid):
        Grid.empty(w, h)


def test_index_round_trip():
    grid = Grid.empty(7, 3)
    for c in grid.cells():
        assert grid.cell_at_index(grid.index_of(c)) == c


def test_blocking_never_touches_endpoints():
    grid = Grid.empty(3, 3)
    assert not grid.set_blocked((0, 0))
    assert not grid.set_blocked((2, 2))
    assert grid.set_blocked((1, 1))
    assert grid.is_block((1, 1))
    assert grid.set_blocked((1, 1), False)
    assert not grid.is_block((1, 1))
    assert not grid.set_blocked((5, 5))


def test_moving_endpoints_keeps_kinds_consistent():
    grid = Grid.empty(4, 4)
    grid.set_blocked((2, 1))
    assert grid.move_start((2, 1))
    assert grid.kind_at((0, 0)) == CellKind.EMPTY
    assert grid.kind_at((2, 1)) == CellKind.START
    assert not grid.move_goal((2, 1))
    assert grid.move_goal((0, 3))
    assert grid.kind_at((3, 3)) == CellKind.EMPTY
    grid.validate()


def test_validate_catches_missing_goal():
    grid = Grid.empty(3, 3)
    grid.kinds[2][2] = CellKind.EMPTY
    with pytest.raises(InvalidGrid):
        grid.validate()


def test_validate_catches_blocked_goal():
    grid = Grid.empty(3, 3)
    grid.kinds[2][2] = CellKind.BLOCKED
    with pytest.raises(InvalidGrid):
        grid.validate()


def test_validate_catches_duplicate_start():
    grid = grid_from_rows("s.s", "...", "..g")
    with pytest.raises(InvalidGrid):
        grid.validate()


def test_validate_catches_same_start_and_goal():
    grid = Grid.empty(3, 3)
    grid.goal = grid.start
    with pytest.raises(InvalidGrid):
        grid.validate()


def test_reset_search_clears_visits_and_parents():
    grid = Grid.empty(3, 3)
    grid.touch((1, 1))
    grid.touch((1, 1))
    grid.set_parent((1, 1), (0, 0))
    assert grid.visits_of((1, 1)) == 2
    assert grid.parent_of((1, 1)) == (0, 0)
    grid.reset_search()
    assert grid.visits_of((1, 1)) == 0
    assert grid.parent_of((1, 1)) is None


def test_path_to_follows_parents():
    grid = Grid.empty(3, 3)
    grid.set_parent((1, 1), (0, 0))
    grid.set_parent((2, 2), (1, 1))
    assert grid.path_to((2, 2)) == [(0, 0), (1, 1), (2, 2)]


def test_clear_restores_default_layout():
    grid = grid_from_rows(".x.", "sx.", "..g")
    grid.touch((0, 0))
    grid.clear()
    assert grid.start == (0, 0) and grid.goal == (2, 2)
    assert not any(grid.is_block(c) for c in grid.cells())
    assert grid.visits_of((0, 0)) == 0
    grid.validate()


def test_copy_is_independent():
    grid = Grid.empty(3, 3)
    twin = grid.copy()
    twin.set_blocked((1, 1))
    twin.touch((0, 1))
    assert not grid.is_block((1, 1))
    assert grid.visits_of((0, 1)) == 0


def test_step_result_finished_flag():
    assert StepResult(status=DONE).finished
    assert not StepResult(status=RUNNING).finished
