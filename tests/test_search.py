import math

import pytest

from gridpath.core.algorithms import AlgorithmKind, make_algorithm
from gridpath.core.costs import Heuristic, path_cost
from gridpath.core.errors import InvalidGrid
from gridpath.core.types import Grid, CellKind, READY, RUNNING, DONE, NO_PATH, CANCELLED

from gridtools import (
    grid_from_rows, assert_valid_path, assert_parent_tree, reference_hops, reference_cost,
)

ALL_KINDS = list(AlgorithmKind)

DETOUR = (
    "s.....",
    "xxxx..",
    "......",
    "..xxxx",
    ".....g",
)

POCKETS = (
    "s..x....",
    ".x.x.xx.",
    ".x...x..",
    ".xxxxx..",
    "......xg",
)


def admissible(diagonal):
    return Heuristic.OCTILE if diagonal else Heuristic.MANHATTAN


# -------------------- shared properties --------------------

@pytest.mark.parametrize("kind", ALL_KINDS)
@pytest.mark.parametrize("diagonal", [True, False])
@pytest.mark.parametrize("rows", [DETOUR, POCKETS])
def test_returned_path_is_connected(kind, diagonal, rows):
    grid = grid_from_rows(*rows)
    algo = make_algorithm(kind, grid, diagonal=diagonal, heuristic=admissible(diagonal))
    res = algo.run()
    if kind is AlgorithmKind.BEAM and res.status == NO_PATH:
        return
    assert res.status == DONE
    assert_valid_path(grid, res.path, diagonal)
    assert_parent_tree(grid)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_fresh_algorithm_starts_ready(kind):
    algo = make_algorithm(kind, Grid.empty(4, 4))
    assert algo.status == READY
    res = algo.step()
    assert res.status in (RUNNING, DONE)
    assert algo.status in (RUNNING, DONE)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_invalid_grid_fails_before_search(kind):
    grid = Grid.empty(4, 4)
    grid.kinds[3][3] = CellKind.EMPTY
    grid.touch((1, 1))
    with pytest.raises(InvalidGrid):
        make_algorithm(kind, grid)
    # nothing was reset or searched
    assert grid.visits_of((1, 1)) == 1


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_terminal_state_is_sticky(kind):
    grid = Grid.empty(4, 4)
    algo = make_algorithm(kind, grid, diagonal=False)
    res = algo.run()
    assert res.status == DONE
    again = algo.step()
    assert again.status == DONE
    assert again.path == res.path


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_visit_counters_never_decrease(kind):
    grid = grid_from_rows(*POCKETS)
    algo = make_algorithm(kind, grid, diagonal=True, heuristic=Heuristic.OCTILE)
    before = [row[:] for row in grid.visits]
    res = algo.step()
    while not res.finished:
        now = [row[:] for row in grid.visits]
        for r0, r1 in zip(before, now):
            assert all(b <= a for b, a in zip(r0, r1))
        before = now
        res = algo.step()


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_blocked_cells_are_never_touched(kind):
    grid = grid_from_rows(*POCKETS)
    make_algorithm(kind, grid, diagonal=True, heuristic=Heuristic.OCTILE).run()
    for c in grid.cells():
        if grid.is_block(c):
            assert grid.visits_of(c) == 0
            assert grid.parent_of(c) is None


# -------------------- scenarios --------------------

def test_scenario_a_astar_diagonal_manhattan():
    grid = Grid.empty(5, 5)
    res = make_algorithm(AlgorithmKind.ASTAR, grid, diagonal=True, heuristic=Heuristic.MANHATTAN).run()
    assert res.status == DONE
    assert res.path == [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]
    assert path_cost(res.path) == pytest.approx(4 * math.sqrt(2))
    assert res.metrics["total_cost"] == pytest.approx(4 * math.sqrt(2))


@pytest.mark.parametrize("kind", [AlgorithmKind.ASTAR, AlgorithmKind.BFS])
def test_scenario_b_four_connected(kind):
    grid = Grid.empty(5, 5)
    res = make_algorithm(kind, grid, diagonal=False, heuristic=Heuristic.MANHATTAN).run()
    assert res.status == DONE
    assert len(res.path) == 9
    assert path_cost(res.path) == pytest.approx(8)
    assert_valid_path(grid, res.path, diagonal=False)


@pytest.mark.parametrize("kind", ALL_KINDS)
@pytest.mark.parametrize("diagonal", [True, False])
def test_scenario_c_wall_means_no_path(kind, diagonal):
    grid = grid_from_rows(
        "s....",
        "xxxxx",
        "....g",
    )
    res = make_algorithm(kind, grid, diagonal=diagonal).run()
    assert res.status == NO_PATH
    assert res.path is None
    assert res.metrics["path_len"] == 0


# -------------------- optimality --------------------

@pytest.mark.parametrize("rows", [DETOUR, POCKETS])
@pytest.mark.parametrize("diagonal", [True, False])
def test_bfs_is_hop_optimal(rows, diagonal):
    grid = grid_from_rows(*rows)
    res = make_algorithm(AlgorithmKind.BFS, grid, diagonal=diagonal).run()
    assert len(res.path) - 1 == reference_hops(grid, diagonal)


@pytest.mark.parametrize("rows", [DETOUR, POCKETS])
@pytest.mark.parametrize("diagonal", [True, False])
def test_dijkstra_astar_idastar_agree_on_cost(rows, diagonal):
    grid = grid_from_rows(*rows)
    expected = reference_cost(grid, diagonal)
    costs = {}
    for kind in (AlgorithmKind.DIJKSTRA, AlgorithmKind.ASTAR, AlgorithmKind.IDASTAR):
        res = make_algorithm(kind, grid, diagonal=diagonal, heuristic=admissible(diagonal)).run()
        assert res.status == DONE
        costs[kind] = path_cost(res.path)
    for kind, cost in costs.items():
        assert cost == pytest.approx(expected), kind


def test_astar_with_inadmissible_heuristic_still_finds_a_path():
    grid = grid_from_rows(*POCKETS)
    res = make_algorithm(AlgorithmKind.ASTAR, grid, diagonal=True, heuristic=Heuristic.EUCLIDEAN).run()
    assert res.status == DONE
    assert_valid_path(grid, res.path, True)
    assert path_cost(res.path) >= reference_cost(grid, True) - 1e-9


def test_dfs_path_need_not_be_shortest_but_is_valid():
    grid = Grid.empty(6, 6)
    res = make_algorithm(AlgorithmKind.DFS, grid, diagonal=True).run()
    assert res.status == DONE
    assert_valid_path(grid, res.path, True)
    assert len(res.path) - 1 >= reference_hops(grid, True)


# -------------------- variant specifics --------------------

def test_bfs_touches_every_examined_neighbor():
    grid = Grid.empty(3, 3)
    algo = make_algorithm(AlgorithmKind.BFS, grid, diagonal=False)
    assert grid.visits_of((0, 0)) == 1
    algo.step()  # expand start
    assert grid.visits_of((1, 0)) == 1
    assert grid.visits_of((0, 1)) == 1
    algo.step()  # expand one of them, re-examining start
    assert grid.visits_of((0, 0)) == 2


def test_dfs_touches_every_examined_neighbor():
    grid = Grid.empty(3, 3)
    algo = make_algorithm(AlgorithmKind.DFS, grid, diagonal=False)
    assert grid.visits_of((0, 0)) == 1
    algo.step()  # expand start, both neighbors discovered
    assert grid.visits_of((0, 1)) == 1
    assert grid.visits_of((1, 0)) == 1
    algo.step()  # last pushed comes off first
    # start was examined again but not rediscovered
    assert grid.visits_of((0, 0)) == 2
    assert grid.parent_of((0, 0)) is None
    assert grid.parent_of((1, 1)) == (1, 0)
    assert grid.parent_of((2, 0)) == (1, 0)


def test_beam_reports_rounds():
    algo = make_algorithm(AlgorithmKind.BEAM, Grid.empty(6, 6), diagonal=False)
    algo.step()
    res = algo.step()
    assert res.metrics["rounds"] == 2
    assert algo.run().metrics["rounds"] == algo.rounds


def test_beam_width_follows_diagonal_setting():
    assert make_algorithm(AlgorithmKind.BEAM, Grid.empty(3, 3), diagonal=True).width == 8
    assert make_algorithm(AlgorithmKind.BEAM, Grid.empty(3, 3), diagonal=False).width == 4
    assert make_algorithm(AlgorithmKind.BEAM, Grid.empty(3, 3), beam_width=2).width == 2


def test_narrow_beam_can_miss_an_existing_path():
    grid = grid_from_rows(
        ".........",
        "...xxxx..",
        "s.....x.g",
        "...xxxx..",
        ".........",
    )
    assert reference_hops(grid, False) is not None
    res = make_algorithm(AlgorithmKind.BEAM, grid, diagonal=False, heuristic=Heuristic.MANHATTAN, beam_width=1).run()
    assert res.status == NO_PATH


def test_beam_expands_whole_beam_per_step():
    grid = Grid.empty(6, 6)
    algo = make_algorithm(AlgorithmKind.BEAM, grid, diagonal=False)
    first = algo.step()
    assert first.closed == [(0, 0)]
    assert 0 < len(first.opened) <= 4
    second = algo.step()
    assert second.closed == first.opened


def test_idastar_raises_threshold_until_goal():
    grid = grid_from_rows(*DETOUR)
    algo = make_algorithm(AlgorithmKind.IDASTAR, grid, diagonal=False, heuristic=Heuristic.MANHATTAN)
    start_threshold = algo.threshold
    assert start_threshold == Heuristic.MANHATTAN.estimate(grid.start, grid.goal)
    res = algo.run()
    assert res.status == DONE
    assert algo.iterations > 1
    assert algo.threshold > start_threshold
    assert algo.threshold == pytest.approx(path_cost(res.path))


def test_idastar_path_matches_parent_links():
    grid = grid_from_rows(*DETOUR)
    res = make_algorithm(AlgorithmKind.IDASTAR, grid, diagonal=True, heuristic=Heuristic.OCTILE).run()
    assert grid.path_to(grid.goal) == res.path


# -------------------- cancellation --------------------

@pytest.mark.parametrize("kind", ALL_KINDS)
def test_cancel_mid_run_then_fresh_run_succeeds(kind):
    grid = grid_from_rows(*POCKETS)
    algo = make_algorithm(kind, grid, diagonal=False, heuristic=Heuristic.MANHATTAN)
    algo.step()
    algo.step()
    algo.cancel()
    res = algo.step()
    assert res.status == CANCELLED
    assert res.path is None
    assert algo.step().status == CANCELLED
    assert_parent_tree(grid)

    fresh = make_algorithm(AlgorithmKind.ASTAR, grid, diagonal=False, heuristic=Heuristic.MANHATTAN)
    assert all(v == 0 for row in grid.visits for v in row)
    assert fresh.run().status == DONE


def test_idastar_without_path_runs_long_and_can_be_cancelled():
    grid = grid_from_rows(
        "s......",
        ".......",
        ".......",
        ".......",
        "xxxxxxx",
        "......g",
    )
    algo = make_algorithm(AlgorithmKind.IDASTAR, grid, diagonal=False, heuristic=Heuristic.MANHATTAN)
    res = algo.run(max_steps=20000)
    assert res.status == RUNNING
    algo.cancel()
    res = algo.step()
    assert res.status == CANCELLED
    assert res.path is None
    assert_parent_tree(grid)


def test_reset_restarts_a_cancelled_algorithm():
    grid = Grid.empty(5, 5)
    algo = make_algorithm(AlgorithmKind.DIJKSTRA, grid)
    algo.step()
    algo.cancel()
    assert algo.step().status == CANCELLED
    algo.reset()
    assert algo.status == READY
    assert grid.visits_of((2, 2)) == 0
    assert algo.run().status == DONE


def test_run_honours_max_steps():
    algo = make_algorithm(AlgorithmKind.BFS, Grid.empty(10, 10))
    res = algo.run(max_steps=3)
    assert res.status == RUNNING
    assert algo.steps == 3


def test_parse_algorithm_names():
    assert AlgorithmKind.parse("A*") is AlgorithmKind.ASTAR
    assert AlgorithmKind.parse("IDA*") is AlgorithmKind.IDASTAR
    assert AlgorithmKind.parse("Beam Search") is AlgorithmKind.BEAM
    assert AlgorithmKind.parse("Dijkstra's") is AlgorithmKind.DIJKSTRA
    assert AlgorithmKind.parse("depth_first_search") is AlgorithmKind.DFS
    with pytest.raises(ValueError):
        AlgorithmKind.parse("greedy")
