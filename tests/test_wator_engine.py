"""Behavior tests for the wator tick rules."""

from __future__ import annotations

from dataclasses import replace

import pytest

from ecosim.simulations.wator.agents import INITIAL_ENERGY, Kind
from ecosim.simulations.wator.engine import CellView, WatorEngine, WatorRules


def _engine(width: int = 5, height: int = 5, seed: int = 3, **overrides: object) -> WatorEngine:
    rules = replace(WatorRules(), **overrides)
    return WatorEngine(width, height, seed=seed, rules=rules)


def _state(engine: WatorEngine) -> list[tuple[int, int, str, float]]:
    return [(a.x, a.y, a.kind.value, a.energy) for a in engine.grid.occupied()]


def _fill(engine: WatorEngine, kind: Kind, energy: float = INITIAL_ENERGY) -> None:
    for x in range(engine.grid_width()):
        for y in range(engine.grid_height()):
            engine.grid.place(x, y, kind, energy=energy)


def test_predator_eats_adjacent_prey_and_takes_its_cell() -> None:
    engine = _engine()
    rules = engine.rules
    predator = engine.grid.place(2, 2, Kind.PREDATOR)
    engine.grid.place(2, 3, Kind.PREY)

    events = engine.step()

    assert engine.grid.is_empty(2, 2)
    assert engine.grid.agent_at(2, 3) is predator
    assert engine.population() == {Kind.PREY: 0, Kind.PREDATOR: 1}
    assert predator.energy == pytest.approx(
        INITIAL_ENERGY + rules.predator_feeding_gain - rules.predator_energy_decay - rules.predator_turn_cost
    )
    assert events.predations == 1


def test_predator_picks_last_prey_in_scan_order() -> None:
    engine = _engine(prey_move_probability=0.0)
    first = engine.grid.place(1, 1, Kind.PREY)
    predator = engine.grid.place(2, 2, Kind.PREDATOR)
    engine.grid.place(3, 3, Kind.PREY)

    engine.step()

    assert engine.grid.agent_at(3, 3) is predator
    assert engine.grid.agent_at(1, 1) is first
    assert engine.grid.is_empty(2, 2)


def test_prey_reproduces_into_first_empty_neighbor() -> None:
    engine = _engine(prey_move_probability=0.0)
    rules = engine.rules
    parent = engine.grid.place(2, 2, Kind.PREY)

    events = engine.step()

    child = engine.grid.agent_at(1, 1)
    assert child is not None and child is not parent
    assert child.kind is Kind.PREY
    assert child.energy == INITIAL_ENERGY
    assert parent.energy == pytest.approx(
        INITIAL_ENERGY - rules.prey_energy_decay + rules.prey_move_energy_gain - rules.prey_reproduction_cost
    )
    assert engine.population()[Kind.PREY] == 2
    assert events.births == 1


def test_prey_pays_reproduction_cost_without_free_neighbor() -> None:
    engine = _engine(3, 3, prey_move_probability=0.0)
    rules = engine.rules
    _fill(engine, Kind.PREY)

    events = engine.step()

    expected = INITIAL_ENERGY - rules.prey_energy_decay + rules.prey_move_energy_gain - rules.prey_reproduction_cost
    assert engine.population()[Kind.PREY] == 9
    assert events.births == 0
    assert all(agent.energy == pytest.approx(expected) for agent in engine.grid.occupied())


def test_predator_reproduction_deducts_cost_only_on_birth() -> None:
    engine = _engine(predator_move_probability=0.0)
    rules = engine.rules
    parent = engine.grid.place(2, 2, Kind.PREDATOR, energy=30.0)

    engine.step()

    child = engine.grid.agent_at(1, 1)
    assert child is not None and child.kind is Kind.PREDATOR
    assert parent.energy == pytest.approx(
        30.0 - rules.predator_energy_decay - rules.predator_turn_cost - rules.predator_reproduction_cost
    )

    crowded = _engine(3, 3, predator_move_probability=0.0)
    _fill(crowded, Kind.PREDATOR, energy=30.0)

    crowded.step()

    assert crowded.population()[Kind.PREDATOR] == 9
    assert all(
        agent.energy == pytest.approx(30.0 - rules.predator_energy_decay - rules.predator_turn_cost)
        for agent in crowded.grid.occupied()
    )


def test_predator_reproduction_gate_can_block_birth() -> None:
    engine = _engine(predator_move_probability=0.0, predator_reproduction_probability=0.0)
    parent = engine.grid.place(2, 2, Kind.PREDATOR, energy=30.0)

    engine.step()

    assert engine.population()[Kind.PREDATOR] == 1
    assert parent.energy == pytest.approx(29.7)


def test_agents_out_of_energy_are_removed_within_the_tick() -> None:
    engine = _engine(prey_move_probability=0.0, predator_move_probability=0.0)
    engine.grid.place(0, 0, Kind.PREY, energy=0.04)
    engine.grid.place(3, 3, Kind.PREDATOR, energy=0.25)

    events = engine.step()

    assert engine.grid.is_empty(0, 0)
    assert engine.grid.is_empty(3, 3)
    assert events.deaths == 2
    assert engine.population() == {Kind.PREY: 0, Kind.PREDATOR: 0}


def test_isolated_prey_without_foraging_starves() -> None:
    engine = _engine(prey_move_energy_gain=0.0)
    engine.grid.place(2, 2, Kind.PREY)

    for _ in range(1000):
        engine.step()
        population = engine.population()
        assert population[Kind.PREDATOR] == 0
        assert population[Kind.PREY] <= 1
        for agent in engine.grid.occupied():
            assert 0.0 < agent.energy <= INITIAL_ENERGY

    assert engine.population()[Kind.PREY] == 0


def test_populate_hits_density_targets() -> None:
    engine = WatorEngine(40, 40, seed=17)

    placed = engine.populate()

    assert placed == {Kind.PREY: 40, Kind.PREDATOR: 16}
    assert engine.population() == placed
    assert all(agent.energy == INITIAL_ENERGY for agent in engine.grid.occupied())


def test_populate_on_saturated_grid_stops_without_error() -> None:
    engine = _engine(3, 3, prey_density_divisor=1, predator_density_divisor=1)

    placed = engine.populate()

    assert placed[Kind.PREY] + placed[Kind.PREDATOR] == 9
    assert placed[Kind.PREDATOR] < 9
    second = engine.populate()
    assert second == {Kind.PREY: 0, Kind.PREDATOR: 0}


def test_same_seed_runs_are_identical_tick_by_tick() -> None:
    engine_a = WatorEngine(30, 30, seed=11)
    engine_b = WatorEngine(30, 30, seed=11)
    engine_c = WatorEngine(30, 30, seed=12)
    for engine in (engine_a, engine_b, engine_c):
        engine.populate()

    assert _state(engine_a) == _state(engine_b)
    assert _state(engine_a) != _state(engine_c)
    for _ in range(60):
        assert engine_a.step() == engine_b.step()
        assert _state(engine_a) == _state(engine_b)


def test_occupancy_and_energy_invariants_hold_over_many_ticks() -> None:
    engine = WatorEngine(25, 25, seed=5, rules=WatorRules(prey_density_divisor=6, predator_density_divisor=30))
    engine.populate()
    cells = engine.grid_width() * engine.grid_height()

    for _ in range(200):
        engine.step()
        for x in range(engine.grid_width()):
            for y in range(engine.grid_height()):
                agent = engine.grid.agent_at(x, y)
                if agent is not None:
                    assert (agent.x, agent.y) == (x, y)
                    assert agent.energy > 0
        population = engine.population()
        assert 0 <= population[Kind.PREY] <= cells
        assert 0 <= population[Kind.PREDATOR] <= cells
        assert population[Kind.PREY] + population[Kind.PREDATOR] == len(engine.grid.occupied())


def test_cell_contents_exposes_kind_and_energy() -> None:
    engine = _engine(6, 4)
    engine.grid.place(5, 3, Kind.PREDATOR, energy=7.5)

    assert engine.grid_width() == 6
    assert engine.grid_height() == 4
    assert engine.cell_contents(5, 3) == CellView(kind=Kind.PREDATOR, energy=7.5)
    assert engine.cell_contents(0, 0) is None


def test_offspring_start_with_configured_initial_energy() -> None:
    engine = _engine(initial_energy=8.0, prey_move_probability=0.0, predator_move_probability=0.0)
    engine.grid.place(1, 1, Kind.PREY, energy=10.0)
    engine.grid.place(3, 3, Kind.PREDATOR, energy=30.0)

    events = engine.step()

    prey_child = engine.grid.agent_at(0, 0)
    predator_child = engine.grid.agent_at(2, 2)
    assert events.births == 2
    assert prey_child is not None and prey_child.kind is Kind.PREY
    assert predator_child is not None and predator_child.kind is Kind.PREDATOR
    assert prey_child.energy == 8.0
    assert predator_child.energy == 8.0


def test_predator_scan_with_center_cell_changes_nothing() -> None:
    plain = WatorEngine(20, 20, seed=21, rules=WatorRules(prey_density_divisor=4, predator_density_divisor=20))
    centered = WatorEngine(
        20,
        20,
        seed=21,
        rules=WatorRules(prey_density_divisor=4, predator_density_divisor=20, predator_scan_includes_center=True),
    )
    plain.populate()
    centered.populate()

    for _ in range(50):
        assert plain.step() == centered.step()
        assert _state(plain) == _state(centered)
