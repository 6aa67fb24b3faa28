"""Render adapter for the wator plugin."""

from __future__ import annotations

import time

import numpy as np

from ecosim.core.render_state import AgentState, EnvironmentState, RenderState
from ecosim.simulations.wator.agents import KIND_COLORS, Kind
from ecosim.simulations.wator.grid import ToroidalGrid

EMPTY = 0
KIND_CODES = {Kind.PREY: 1, Kind.PREDATOR: 2}
KIND_GLYPHS = {Kind.PREY: "f", Kind.PREDATOR: "S"}


def occupancy_array(grid: ToroidalGrid) -> np.ndarray:
    """Return an int8 ``(height, width)`` array: 0 empty, 1 prey, 2 predator."""
    codes = np.full((grid.height, grid.width), EMPTY, dtype=np.int8)
    for agent in grid.occupied():
        codes[agent.y, agent.x] = KIND_CODES[agent.kind]
    return codes


def render_text(grid: ToroidalGrid) -> str:
    """One text line per grid row, ``.`` for empty cells."""
    glyphs = {EMPTY: "."}
    glyphs.update({code: KIND_GLYPHS[kind] for kind, code in KIND_CODES.items()})
    rows = occupancy_array(grid)
    return "\n".join("".join(glyphs[int(code)] for code in row) for row in rows)


def build_render_state(simulator: object) -> RenderState:
    """Map the plugin's grid into a core ``RenderState`` frame."""
    sim = getattr(simulator, "sim")
    grid: ToroidalGrid = sim.engine.grid
    metrics = sim.get_metrics()

    agents = [
        AgentState(
            id=f"{agent.kind.value}@{agent.x},{agent.y}",
            kind=agent.kind.value,
            position=(int(agent.x), int(agent.y)),
            energy=float(agent.energy),
            color=KIND_COLORS[agent.kind],
        )
        for agent in grid.occupied()
    ]

    env_state = EnvironmentState(
        bounds=(grid.width, grid.height),
        metadata={
            "simulation": "wator",
            "occupancy": occupancy_array(grid).tolist(),
        },
    )

    return RenderState(
        step_index=int(getattr(simulator, "step_index", sim.step_count)),
        agents=agents,
        environment=env_state,
        metrics={k: float(v) for k, v in metrics.items()},
        timestamp=float(time.time()),
    )


def build_text_frame(simulator: object) -> str:
    """Text rendering of the plugin's current grid."""
    return render_text(getattr(simulator, "sim").engine.grid)
