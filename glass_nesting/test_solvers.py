# glass_nesting/test_solvers.py
# Placement strategies: legality of layouts, rotation handling, determinism and
# the small reference layouts (grid fill, oversized piece, two big squares).
#   pytest glass_nesting/test_solvers.py

from __future__ import annotations

from typing import List

import pytest

from glass_nesting.config import PlacementOptions
from glass_nesting.sample_data import RandomDesignsConfig, generate_random_designs
from glass_nesting.solver_bottomleft import FreeSpace, solve_bottomleft
from glass_nesting.solver_genetic import GeneticParams, solve_genetic
from glass_nesting.solver_greedy import greedy_order, solve_greedy
from glass_nesting.types import DesignEntry, FreeRect, PlacementResult, Sheet, expand_designs
from glass_nesting.validate import raise_on_errors, validate_result

SMALL_GA = GeneticParams(population_size=12, max_generations=6, elite_size=2, seed=7)

TIGHT = PlacementOptions(edge_margin=0, minimum_gap=0)


def _genetic(pieces, sheet, options):
    return solve_genetic(pieces, sheet, options, SMALL_GA)


STRATEGIES = [solve_bottomleft, solve_greedy, _genetic]


def _layout(result: PlacementResult) -> List[tuple]:
    return [(p.uid, p.x, p.y, p.rotation) for p in result.placed]


@pytest.mark.parametrize("solve", STRATEGIES)
def test_layout_is_legal(solve) -> None:
    sheet = Sheet(3210, 2250)
    options = PlacementOptions(minimum_gap=3, edge_margin=10)
    pieces = expand_designs(generate_random_designs(RandomDesignsConfig(seed=11, n_unique=10)))

    result = solve(pieces, sheet, options)

    raise_on_errors(validate_result(result, sheet, options, total_pieces=len(pieces)))
    assert sorted(p.uid for p in result.placed + result.unplaced) == sorted(p.uid for p in pieces)
    assert all(p.placed for p in result.placed)
    assert not any(p.placed for p in result.unplaced)


@pytest.mark.parametrize("solve", STRATEGIES)
def test_input_pieces_not_mutated(solve) -> None:
    pieces = expand_designs([DesignEntry("A", 3, 200, 100)])
    solve(pieces, Sheet(1000, 1000), TIGHT)
    assert not any(p.placed for p in pieces)


@pytest.mark.parametrize("solve", STRATEGIES)
def test_grid_fill(solve) -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("S", 20, 200, 200)])

    result = solve(pieces, sheet, TIGHT)

    assert len(result.placed) == 20
    assert result.unplaced == ()
    assert result.used_area == pytest.approx(800_000)


@pytest.mark.parametrize("solve", STRATEGIES)
def test_oversized_piece_is_unplaced(solve) -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("W", 1, 1200, 200)])

    result = solve(pieces, sheet, TIGHT)

    assert result.placed == ()
    assert [p.uid for p in result.unplaced] == ["W-1"]


@pytest.mark.parametrize("solve", STRATEGIES)
def test_two_big_squares_only_one_fits(solve) -> None:
    sheet = Sheet(500, 500)
    pieces = expand_designs([DesignEntry("A", 1, 300, 300), DesignEntry("B", 1, 300, 300)])

    result = solve(pieces, sheet, TIGHT)

    assert len(result.placed) == 1
    assert len(result.unplaced) == 1


@pytest.mark.parametrize("solve", STRATEGIES)
def test_rotation_toggle(solve) -> None:
    # 900 long, sheet only 200 wide: fits only when turned
    sheet = Sheet(200, 1000)
    pieces = expand_designs([DesignEntry("L", 1, 900, 100)])

    rotated = solve(pieces, sheet, TIGHT)
    assert len(rotated.placed) == 1
    assert rotated.placed[0].rotation == 90
    assert rotated.placed[0].footprint()[2:] == (100, 900)

    fixed = solve(pieces, sheet, TIGHT.merged({"allow_rotation": False}))
    assert fixed.placed == ()


def test_edge_margin_and_gap_respected() -> None:
    sheet = Sheet(1000, 400)
    options = PlacementOptions(edge_margin=20, minimum_gap=5, allow_rotation=False)
    pieces = expand_designs([DesignEntry("A", 3, 300, 200)])

    result = solve_bottomleft(pieces, sheet, options)

    xs = sorted(p.x for p in result.placed)
    assert xs[0] == 20
    assert xs[1] == 20 + 300 + 5
    assert all(p.y == 20 for p in result.placed)


def test_blf_prefers_lowest_left_corner() -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("A", 1, 600, 600), DesignEntry("B", 1, 300, 300)])

    result = solve_bottomleft(pieces, sheet, TIGHT)
    by_uid = {p.uid: p for p in result.placed}

    assert (by_uid["A-1"].x, by_uid["A-1"].y) == (0, 0)
    # (600, 0) and (0, 600) tie on x + y; the free rect to the right comes first
    assert (by_uid["B-1"].x, by_uid["B-1"].y) == (600, 0)


@pytest.mark.parametrize("solve", [solve_bottomleft, solve_greedy])
def test_heuristics_are_deterministic(solve) -> None:
    sheet = Sheet(2000, 1500)
    pieces = expand_designs(generate_random_designs(RandomDesignsConfig(seed=5)))
    assert _layout(solve(pieces, sheet, PlacementOptions())) == _layout(solve(pieces, sheet, PlacementOptions()))


def test_greedy_order_priority_then_area() -> None:
    pieces = expand_designs(
        [
            DesignEntry("big-low", 1, 500, 500, priority=2),
            DesignEntry("small-high", 1, 100, 100, priority=1),
            DesignEntry("mid-high", 1, 300, 300, priority=1),
        ]
    )
    assert [p.design_id for p in greedy_order(pieces)] == ["mid-high", "small-high", "big-low"]


def test_free_space_split_and_prune() -> None:
    space = FreeSpace(0, 0, 1000, 1000)
    space.occupy(0, 0, 400, 300, gap=0)

    assert set(space.snapshot()) == {FreeRect(400, 0, 600, 1000), FreeRect(0, 300, 1000, 700)}

    # gap grows the occupied area on every side
    space = FreeSpace(0, 0, 1000, 1000)
    space.occupy(0, 0, 400, 300, gap=10)
    assert set(space.snapshot()) == {FreeRect(410, 0, 590, 1000), FreeRect(0, 310, 1000, 690)}


def test_free_space_drops_slivers() -> None:
    space = FreeSpace(0, 0, 1000, 1000, min_size=10)
    space.occupy(0, 0, 995, 1000)
    assert space.snapshot() == ()


def test_genetic_seeded_is_reproducible() -> None:
    sheet = Sheet(2000, 1500)
    pieces = expand_designs(generate_random_designs(RandomDesignsConfig(seed=3, n_unique=8)))
    options = PlacementOptions()

    a = solve_genetic(pieces, sheet, options, SMALL_GA)
    b = solve_genetic(pieces, sheet, options, SMALL_GA)

    assert _layout(a) == _layout(b)
    assert a.meta["best_fitness"] == b.meta["best_fitness"]


def test_genetic_never_worse_than_blf() -> None:
    sheet = Sheet(2000, 1500)
    pieces = expand_designs(generate_random_designs(RandomDesignsConfig(seed=21, n_unique=10)))
    options = PlacementOptions()

    blf = solve_bottomleft(pieces, sheet, options)
    ga = solve_genetic(pieces, sheet, options, SMALL_GA)

    assert ga.used_area >= blf.used_area - 1e-6


def test_genetic_stops_on_quality_target() -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("S", 4, 200, 200)])
    options = TIGHT.merged({"quality_target": 0.01})

    result = solve_genetic(pieces, sheet, options, GeneticParams(seed=1))

    assert result.meta["generations"] == 1
    assert result.meta["stop_reason"] == "quality_target"
    assert result.unplaced == ()


def test_genetic_runs_all_generations_when_target_unreachable() -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("S", 2, 100, 100)])
    options = TIGHT.merged({"quality_target": 1.0})

    result = solve_genetic(pieces, sheet, options, SMALL_GA)

    assert result.meta["generations"] == SMALL_GA.max_generations
    assert result.meta["stop_reason"] == "max_generations"


def test_genetic_stops_on_time_limit() -> None:
    sheet = Sheet(1000, 1000)
    pieces = expand_designs([DesignEntry("S", 3, 200, 200), DesignEntry("R", 2, 300, 150)])
    options = TIGHT.merged({"time_limit": 1e-6, "quality_target": 1.0})

    result = solve_genetic(pieces, sheet, options, GeneticParams(seed=2))

    assert result.meta["stop_reason"] == "time_limit"
    assert result.meta["generations"] == 1
    assert len(result.placed) + len(result.unplaced) == 5
    raise_on_errors(validate_result(result, sheet, options, total_pieces=5))


def test_genetic_empty_input() -> None:
    result = solve_genetic([], Sheet(1000, 1000), TIGHT, SMALL_GA)
    assert result.placed == () and result.unplaced == ()


def test_genetic_params_validated() -> None:
    with pytest.raises(ValueError):
        GeneticParams(population_size=1)
    with pytest.raises(ValueError):
        GeneticParams(mutation_rate=1.5)
    with pytest.raises(ValueError):
        GeneticParams(population_size=10, elite_size=10)
