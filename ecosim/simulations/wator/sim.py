"""Simulation plugin for the wator predator/prey automaton."""

from __future__ import annotations

import random
from dataclasses import fields
from typing import Any

from ecosim.simulations.base_simulation import Simulation
from ecosim.simulations.wator.agents import Kind
from ecosim.simulations.wator.engine import TickEvents, WatorEngine, WatorRules


def rules_from_params(params: dict[str, Any]) -> WatorRules:
    """Build ``WatorRules`` from validated params, keeping defaults for absent keys."""
    defaults = WatorRules()
    values = {}
    for field in fields(WatorRules):
        default = getattr(defaults, field.name)
        values[field.name] = type(default)(params.get(field.name, default))
    return WatorRules(**values)


class WatorSimulation(Simulation):
    """Fish and sharks on a toroidal grid."""

    def __init__(self, params: dict[str, Any], rng: random.Random) -> None:
        super().__init__(params=params, rng=rng)
        self.width = int(params.get("width", 120))
        self.height = int(params.get("height", 100))
        self.rules = rules_from_params(params)
        self.engine = WatorEngine(self.width, self.height, rules=self.rules, rng=rng)
        self.step_count = 0
        self._last_events = TickEvents()

    def reset(self) -> None:
        self.engine.grid.clear()
        self.step_count = 0
        self._last_events = TickEvents()
        self.engine.populate()

    def step(self) -> None:
        self._last_events = self.engine.step()
        self.step_count += 1

    def get_metrics(self) -> dict[str, float]:
        agents = self.engine.grid.occupied()
        prey = [agent.energy for agent in agents if agent.kind is Kind.PREY]
        predators = [agent.energy for agent in agents if agent.kind is Kind.PREDATOR]
        payload = {
            "prey": float(len(prey)),
            "predators": float(len(predators)),
            "mean_prey_energy": float(sum(prey) / len(prey)) if prey else 0.0,
            "mean_predator_energy": float(sum(predators) / len(predators)) if predators else 0.0,
            "occupancy": float(len(agents)) / float(self.engine.grid.size),
            "step_count": float(self.step_count),
        }
        for key, value in self._last_events.to_dict().items():
            payload[f"event_{key}"] = float(value)
        return payload

    def get_render_state(self) -> dict[str, Any]:
        return {
            "simulation": SIMULATION_NAME,
            "step": int(self.step_count),
            "width": int(self.width),
            "height": int(self.height),
            "agents": [agent.to_dict() for agent in self.engine.grid.occupied()],
        }

    def close(self) -> None:
        self.engine.grid.clear()


SIMULATION_NAME = "wator"
SimulationClass = WatorSimulation
