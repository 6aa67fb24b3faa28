"""Core simulator that drives plugins without simulation-specific logic."""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Callable

from ecosim.core.config_loader import load_config
from ecosim.core.deterministic_rng import DeterministicRNG
from ecosim.core.frame_bus import FrameBus
from ecosim.core.plugin_registry import get_simulation_class
from ecosim.core.render_state import RenderState
from ecosim.data.logger import SimulationLogger

LOGGER = logging.getLogger(__name__)

RENDER_EVENT = "render_state"
RUN_END_EVENT = "run_end"

# Metrics that count a species; a drop to zero is reported once as extinction.
_SPECIES_METRICS = ("prey", "predators")


class SimulatorRuntimeError(RuntimeError):
    """Raised when a simulation plugin fails during execution."""


class Simulator:
    """Plugin-driven simulator runtime.

    One ``run`` resets the plugin, then steps it once per tick. After each
    tick the metrics are logged every ``logging.log_interval`` ticks and a
    ``RenderState`` frame is published on the frame bus.
    """

    def __init__(
        self,
        config_path: str | Path,
        frame_bus: FrameBus | None = None,
        logger: SimulationLogger | None = None,
        strict: bool = True,
    ) -> None:
        config = load_config(str(config_path), strict=strict)
        self.config = config

        self.simulation_name = str(config["simulation"])
        self.simulation_config = dict(config["simulation_config"])
        self.run_config = dict(config["run_config"])
        self.logging_config = dict(config["logging_config"])

        self.seed = int(config["seed"])
        self.rng = DeterministicRNG(self.seed)
        self.frame_bus = frame_bus
        self.logger = logger
        self.run_id: str | None = None

        self.step_index = 0
        self._log_interval = int(self.logging_config.get("log_interval", 1))

        simulation_class = get_simulation_class(self.simulation_name)
        try:
            self.sim = simulation_class(params=self.simulation_config, rng=self.rng.python_rng)
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Failed to initialize simulation plugin '{self.simulation_name}': {exc}"
            ) from exc

        adapter_module_name = simulation_class.__module__.rsplit(".", 1)[0] + ".renderer_adapter"
        self._render_adapter: Callable[[Simulator], RenderState] | None = None
        self._text_adapter: Callable[[Simulator], str] | None = None
        try:
            adapter_module = importlib.import_module(adapter_module_name)
            self._render_adapter = getattr(adapter_module, "build_render_state", None)
            self._text_adapter = getattr(adapter_module, "build_text_frame", None)
        except ImportError:
            LOGGER.debug("Simulation '%s' has no renderer adapter", self.simulation_name)

        if self.logger is not None:
            self.run_id = self.logger.start_run(
                config=self._loggable_config(),
                seed=self.seed,
                metadata={"experiment_name": self.logging_config.get("experiment_name")},
            )

    def _loggable_config(self) -> dict[str, Any]:
        return {
            "simulation": self.simulation_name,
            "params": self.simulation_config,
            "run": self.run_config,
            "logging": self.logging_config,
        }

    def build_render_state(self) -> RenderState | None:
        if self._render_adapter is None:
            return None
        return self._render_adapter(self)

    def render_text(self) -> str | None:
        """Plain-text frame of the current world, if the plugin provides one."""
        if self._text_adapter is None:
            return None
        return self._text_adapter(self)

    def _emit_render_state(self) -> None:
        if self.frame_bus is None or not self.frame_bus.has_subscribers(RENDER_EVENT):
            return
        state = self.build_render_state()
        if state is not None:
            self.frame_bus.publish(RENDER_EVENT, state)

    def _log_metrics(self, metrics: dict[str, float]) -> None:
        if self.logger is None or self.run_id is None:
            return
        if self.step_index % self._log_interval != 0:
            return
        self.logger.log_metrics(self.run_id, self.step_index, metrics)

    def _report_extinctions(self, previous: dict[str, float], current: dict[str, float]) -> None:
        for key in _SPECIES_METRICS:
            if key in current and current[key] == 0.0 and previous.get(key, 1.0) > 0.0:
                LOGGER.info("%s went extinct at tick %d", key, self.step_index)

    def run(self, steps: int | None = None) -> list[dict[str, float]]:
        """Run the plugin for ``steps`` ticks (config ``run.steps`` by default)."""
        total = int(self.run_config["steps"] if steps is None else steps)
        metrics: list[dict[str, float]] = []
        LOGGER.info("Starting %s run %s: %d ticks, seed %d", self.simulation_name, self.run_id, total, self.seed)
        try:
            self.sim.reset()
            self.step_index = 0
            previous = self.sim.get_metrics()
            for step in range(total):
                self.step_index = step + 1
                self.sim.step()
                metric = self.sim.get_metrics()
                metrics.append(metric)
                self._report_extinctions(previous, metric)
                self._log_metrics(metric)
                self._emit_render_state()
                previous = metric
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' crashed during run: {exc}"
            ) from exc

        if self.frame_bus is not None:
            self.frame_bus.publish(RUN_END_EVENT, {"run_id": self.run_id, "step_index": self.step_index})
        LOGGER.info("Finished %s run %s after %d ticks", self.simulation_name, self.run_id, self.step_index)
        return metrics

    def close(self) -> None:
        try:
            self.sim.close()
        except Exception as exc:
            raise SimulatorRuntimeError(
                f"Simulation plugin '{self.simulation_name}' failed during close: {exc}"
            ) from exc
