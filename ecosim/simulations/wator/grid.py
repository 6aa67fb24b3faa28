"""Toroidal occupancy grid owning every organism of the wator plugin."""

from __future__ import annotations

from typing import Callable, Iterator

from ecosim.simulations.wator.agents import INITIAL_ENERGY, Agent, Kind


# (dx, dy) in scan order: dx outer, dy inner, (-1, -1) through (1, 1).
NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)
)


def wrap(value: int, size: int) -> int:
    """Reduce ``value`` onto ``[0, size)`` so the grid has no edges."""
    return ((value % size) + size) % size


class ToroidalGrid:
    """Fixed-size 2-D grid where each cell owns at most one ``Agent``.

    Cells are stored column-first (``cells[x][y]``) and every whole-grid scan
    walks x in the outer loop and y in the inner loop. Query and mutation
    methods expect in-range coordinates; only neighbor enumeration wraps.
    """

    def __init__(self, width: int, height: int) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}.")
        self.width = int(width)
        self.height = int(height)
        self._cells: list[list[Agent | None]] = [[None] * self.height for _ in range(self.width)]

    @property
    def size(self) -> int:
        return self.width * self.height

    def is_empty(self, x: int, y: int) -> bool:
        return self._cells[x][y] is None

    def has_prey(self, x: int, y: int) -> bool:
        agent = self._cells[x][y]
        return agent is not None and agent.is_prey

    def agent_at(self, x: int, y: int) -> Agent | None:
        return self._cells[x][y]

    def place(self, x: int, y: int, kind: Kind, energy: float = INITIAL_ENERGY) -> Agent | None:
        """Create an agent at ``(x, y)`` if the cell is free; otherwise do nothing."""
        if self._cells[x][y] is not None:
            return None
        agent = Agent(kind=kind, x=x, y=y, energy=float(energy))
        self._cells[x][y] = agent
        return agent

    def move(self, from_x: int, from_y: int, to_x: int, to_y: int) -> None:
        """Transfer the agent at ``from`` to ``to``.

        The destination must be empty. This is not re-checked here: whatever
        occupied it is overwritten.
        """
        agent = self._cells[from_x][from_y]
        self._cells[from_x][from_y] = None
        self._cells[to_x][to_y] = agent
        if agent is not None:
            agent.x = to_x
            agent.y = to_y

    def remove(self, x: int, y: int) -> None:
        self._cells[x][y] = None

    def neighbors(self, x: int, y: int, include_center: bool = False) -> Iterator[tuple[int, int]]:
        """Yield wrapped neighbor coordinates in scan order."""
        for dx, dy in NEIGHBOR_OFFSETS:
            if dx == 0 and dy == 0 and not include_center:
                continue
            yield wrap(x + dx, self.width), wrap(y + dy, self.height)

    def for_each_neighbor(
        self,
        x: int,
        y: int,
        fn: Callable[[int, int], None],
        include_center: bool = False,
    ) -> None:
        for nx, ny in self.neighbors(x, y, include_center=include_center):
            fn(nx, ny)

    def spawn_near(self, parent: Agent, energy: float = INITIAL_ENERGY) -> Agent | None:
        """Place an offspring of ``parent`` with ``energy`` in the first empty neighbor, if any."""
        for nx, ny in self.neighbors(parent.x, parent.y):
            if self._cells[nx][ny] is None:
                return self.place(nx, ny, parent.kind, energy=energy)
        return None

    def occupied(self) -> list[Agent]:
        """Snapshot of every agent in scan order."""
        return [agent for column in self._cells for agent in column if agent is not None]

    def count(self, kind: Kind) -> int:
        return sum(1 for column in self._cells for agent in column if agent is not None and agent.kind is kind)

    def clear(self) -> None:
        self._cells = [[None] * self.height for _ in range(self.width)]
