"""Tests for the toroidal occupancy grid."""

from __future__ import annotations

import pytest

from ecosim.simulations.wator.agents import INITIAL_ENERGY, Kind
from ecosim.simulations.wator.grid import ToroidalGrid, wrap


@pytest.mark.parametrize("size", [1, 3, 7, 120])
def test_wrap_edges(size: int) -> None:
    assert wrap(-1, size) == size - 1
    assert wrap(size, size) == 0
    assert wrap(0, size) == 0
    assert wrap(-size - 1, size) == size - 1


@pytest.mark.parametrize("width,height", [(3, 3), (3, 5), (7, 4), (10, 10)])
def test_corner_neighbors_are_eight_distinct_wrapped_cells(width: int, height: int) -> None:
    grid = ToroidalGrid(width, height)

    cells = list(grid.neighbors(0, 0))

    assert len(cells) == 8
    assert len(set(cells)) == 8
    assert (0, 0) not in cells
    assert (width - 1, height - 1) in cells
    assert all(0 <= x < width and 0 <= y < height for x, y in cells)


def test_neighbor_order_is_dx_outer_dy_inner() -> None:
    grid = ToroidalGrid(5, 5)

    assert list(grid.neighbors(2, 2, include_center=True)) == [
        (1, 1), (1, 2), (1, 3),
        (2, 1), (2, 2), (2, 3),
        (3, 1), (3, 2), (3, 3),
    ]


def test_for_each_neighbor_matches_neighbors() -> None:
    grid = ToroidalGrid(4, 6)
    seen: list[tuple[int, int]] = []

    grid.for_each_neighbor(3, 0, lambda x, y: seen.append((x, y)))

    assert seen == list(grid.neighbors(3, 0))


def test_place_only_fills_empty_cells() -> None:
    grid = ToroidalGrid(4, 4)

    first = grid.place(1, 2, Kind.PREY)
    second = grid.place(1, 2, Kind.PREDATOR)

    assert first is not None
    assert second is None
    assert grid.agent_at(1, 2) is first
    assert first.energy == INITIAL_ENERGY
    assert grid.has_prey(1, 2)
    assert not grid.is_empty(1, 2)


def test_move_transfers_agent_and_position() -> None:
    grid = ToroidalGrid(4, 4)
    agent = grid.place(0, 0, Kind.PREDATOR)
    assert agent is not None

    grid.move(0, 0, 3, 3)

    assert grid.is_empty(0, 0)
    assert grid.agent_at(3, 3) is agent
    assert (agent.x, agent.y) == (3, 3)
    assert not grid.has_prey(3, 3)


def test_remove_clears_cell() -> None:
    grid = ToroidalGrid(3, 3)
    grid.place(2, 1, Kind.PREY)

    grid.remove(2, 1)

    assert grid.is_empty(2, 1)
    assert grid.count(Kind.PREY) == 0


def test_spawn_near_uses_first_empty_neighbor() -> None:
    grid = ToroidalGrid(5, 5)
    parent = grid.place(2, 2, Kind.PREY)
    assert parent is not None
    grid.place(1, 1, Kind.PREDATOR)

    child = grid.spawn_near(parent)

    assert child is not None
    assert (child.x, child.y) == (1, 2)
    assert child.kind is Kind.PREY
    assert child.energy == INITIAL_ENERGY


def test_spawn_near_on_full_grid_is_a_no_op() -> None:
    grid = ToroidalGrid(3, 3)
    for x in range(3):
        for y in range(3):
            grid.place(x, y, Kind.PREY)

    assert grid.spawn_near(grid.agent_at(1, 1)) is None
    assert grid.count(Kind.PREY) == 9


def test_occupied_snapshot_is_in_scan_order() -> None:
    grid = ToroidalGrid(3, 3)
    grid.place(2, 0, Kind.PREY)
    grid.place(0, 2, Kind.PREDATOR)
    grid.place(0, 1, Kind.PREY)

    assert [(a.x, a.y) for a in grid.occupied()] == [(0, 1), (0, 2), (2, 0)]


@pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 4)])
def test_non_positive_dimensions_rejected(width: int, height: int) -> None:
    with pytest.raises(ValueError, match="must be positive"):
        ToroidalGrid(width, height)


def test_spawn_near_gives_offspring_requested_energy() -> None:
    grid = ToroidalGrid(4, 4)
    parent = grid.place(2, 2, Kind.PREDATOR, energy=30.0)
    assert parent is not None

    child = grid.spawn_near(parent, energy=8.0)

    assert child is not None
    assert child.energy == 8.0
    assert parent.energy == 30.0
