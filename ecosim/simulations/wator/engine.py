"""Tick rules for the wator predator/prey automaton."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from ecosim.core.deterministic_rng import DeterministicRNG, chance
from ecosim.simulations.wator.agents import INITIAL_ENERGY, Agent, Kind
from ecosim.simulations.wator.grid import ToroidalGrid, wrap

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatorRules:
    """Canonical rule constants.

    Densities are divisors of the cell count: 120x100 cells with
    ``prey_density_divisor=40`` start with 300 prey.
    """

    initial_energy: float = INITIAL_ENERGY
    prey_density_divisor: int = 40
    predator_density_divisor: int = 100
    populate_attempts_per_agent: int = 20

    prey_energy_decay: float = 0.05
    prey_move_probability: float = 0.7
    prey_move_energy_gain: float = 0.3
    prey_reproduction_threshold: float = 5.0
    prey_reproduction_cost: float = 4.0

    predator_energy_decay: float = 0.2
    predator_feeding_gain: float = 1.5
    predator_move_probability: float = 0.2
    predator_turn_cost: float = 0.1
    predator_reproduction_threshold: float = 25.0
    predator_reproduction_cost: float = 25.0
    predator_reproduction_probability: float = 1.0
    predator_scan_includes_center: bool = False


@dataclass(frozen=True)
class CellView:
    """Read-only view of one occupied cell for renderers."""

    kind: Kind
    energy: float


@dataclass(frozen=True)
class TickEvents:
    """Counts of what happened during one ``step``."""

    moves: int = 0
    predations: int = 0
    births: int = 0
    deaths: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "moves": self.moves,
            "predations": self.predations,
            "births": self.births,
            "deaths": self.deaths,
        }


class _Counter:
    def __init__(self) -> None:
        self.moves = 0
        self.predations = 0
        self.births = 0
        self.deaths = 0

    def freeze(self) -> TickEvents:
        return TickEvents(
            moves=self.moves,
            predations=self.predations,
            births=self.births,
            deaths=self.deaths,
        )


class WatorEngine:
    """Owns the grid and advances it one tick at a time.

    The engine keeps no state between ticks besides the grid and the RNG, so
    two engines built with the same size, rules and seed stay identical for
    any number of ``step`` calls.
    """

    def __init__(
        self,
        width: int,
        height: int,
        seed: int = 0,
        rules: WatorRules | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.grid = ToroidalGrid(width, height)
        self.rules = rules or WatorRules()
        self.rng = rng if rng is not None else DeterministicRNG(int(seed)).python_rng

    def grid_width(self) -> int:
        return self.grid.width

    def grid_height(self) -> int:
        return self.grid.height

    def cell_contents(self, x: int, y: int) -> CellView | None:
        agent = self.grid.agent_at(x, y)
        if agent is None:
            return None
        return CellView(kind=agent.kind, energy=float(agent.energy))

    def population(self) -> dict[Kind, int]:
        return {kind: self.grid.count(kind) for kind in Kind}

    def populate(self) -> dict[Kind, int]:
        """Scatter the initial prey, then the initial predators.

        Collisions are discarded and retried until the per-kind target is met
        or the retry budget runs out, so a crowded grid yields fewer agents.
        Calling this twice seeds the grid twice.
        """
        cells = self.grid.size
        targets = {
            Kind.PREY: cells // max(1, self.rules.prey_density_divisor),
            Kind.PREDATOR: cells // max(1, self.rules.predator_density_divisor),
        }
        placed: dict[Kind, int] = {}
        for kind, target in targets.items():
            placed[kind] = self._scatter(kind, target)
            if placed[kind] < target:
                LOGGER.info("Placed %d of %d %s before the retry budget ran out", placed[kind], target, kind.value)
        LOGGER.info(
            "Populated %dx%d grid with %d prey and %d predators",
            self.grid.width,
            self.grid.height,
            placed[Kind.PREY],
            placed[Kind.PREDATOR],
        )
        return placed

    def step(self) -> TickEvents:
        """Advance one tick: per-agent update, then shuffled reproduction."""
        counter = _Counter()
        snapshot = self.grid.occupied()

        for agent in snapshot:
            if not self._alive(agent):
                continue
            if agent.kind is Kind.PREY:
                self._update_prey(agent, counter)
            else:
                self._update_predator(agent, counter)

        survivors = [agent for agent in snapshot if self._alive(agent)]
        self.rng.shuffle(survivors)
        for agent in survivors:
            # An earlier birth never removes anyone, so survivors stay alive here.
            self._reproduce(agent, counter)

        events = counter.freeze()
        LOGGER.debug("Tick finished: %s", events)
        return events

    def _scatter(self, kind: Kind, target: int) -> int:
        placed = 0
        attempts = 0
        budget = target * max(1, self.rules.populate_attempts_per_agent)
        while placed < target and attempts < budget:
            attempts += 1
            x = self.rng.randrange(self.grid.width)
            y = self.rng.randrange(self.grid.height)
            if self.grid.place(x, y, kind, energy=self.rules.initial_energy) is not None:
                placed += 1
        return placed

    def _alive(self, agent: Agent) -> bool:
        return self.grid.agent_at(agent.x, agent.y) is agent

    def _spend(self, agent: Agent, amount: float, counter: _Counter) -> bool:
        """Subtract ``amount`` and remove the agent once it is out of energy."""
        agent.energy -= amount
        if agent.energy <= 0:
            self.grid.remove(agent.x, agent.y)
            counter.deaths += 1
            return False
        return True

    def _random_move(self, agent: Agent, counter: _Counter) -> None:
        new_x = wrap(agent.x + self.rng.randint(-1, 1), self.grid.width)
        new_y = wrap(agent.y + self.rng.randint(-1, 1), self.grid.height)
        if self.grid.is_empty(new_x, new_y):
            self.grid.move(agent.x, agent.y, new_x, new_y)
            counter.moves += 1

    def _update_prey(self, prey: Agent, counter: _Counter) -> None:
        if not self._spend(prey, self.rules.prey_energy_decay, counter):
            return
        if chance(self.rng, self.rules.prey_move_probability):
            self._random_move(prey, counter)
        # Foraging: granted whether or not the prey moved.
        prey.energy += self.rules.prey_move_energy_gain

    def _update_predator(self, predator: Agent, counter: _Counter) -> None:
        if not self._spend(predator, self.rules.predator_energy_decay, counter):
            return

        target: tuple[int, int] | None = None
        for nx, ny in self.grid.neighbors(
            predator.x, predator.y, include_center=self.rules.predator_scan_includes_center
        ):
            if self.grid.has_prey(nx, ny):
                # Last match in scan order wins.
                target = (nx, ny)

        if target is not None:
            tx, ty = target
            predator.energy += self.rules.predator_feeding_gain
            self.grid.remove(tx, ty)
            self.grid.move(predator.x, predator.y, tx, ty)
            counter.predations += 1
            counter.deaths += 1
            counter.moves += 1
        elif chance(self.rng, self.rules.predator_move_probability):
            self._random_move(predator, counter)

        self._spend(predator, self.rules.predator_turn_cost, counter)

    def _reproduce(self, agent: Agent, counter: _Counter) -> None:
        if agent.kind is Kind.PREY:
            if agent.energy < self.rules.prey_reproduction_threshold:
                return
            if self.grid.spawn_near(agent, energy=self.rules.initial_energy) is not None:
                counter.births += 1
            # Paid even when every neighbor is full. Possibly unintended, but
            # it shapes prey population dynamics, so it is kept.
            self._spend(agent, self.rules.prey_reproduction_cost, counter)
            return

        if agent.energy < self.rules.predator_reproduction_threshold:
            return
        if not chance(self.rng, self.rules.predator_reproduction_probability):
            return
        if self.grid.spawn_near(agent, energy=self.rules.initial_energy) is not None:
            counter.births += 1
            self._spend(agent, self.rules.predator_reproduction_cost, counter)
