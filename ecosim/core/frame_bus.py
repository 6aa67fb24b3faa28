"""Synchronous pub/sub bus used to hand frames to renderers between ticks."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class FrameBus:
    """Minimal in-thread event bus.

    ``publish`` runs every subscriber before returning, so a renderer reading
    the grid inside its callback never overlaps with a tick. A failing
    subscriber is logged and does not stop the others or the simulation.
    """

    def __init__(self) -> None:
        self._subs: dict[str, list[Callback]] = defaultdict(list)

    def subscribe(self, event_type: str, callback: Callback) -> None:
        self._subs[event_type].append(callback)

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self._subs.get(event_type))

    def publish(self, event_type: str, payload: Any) -> None:
        for callback in list(self._subs.get(event_type, [])):
            try:
                callback(payload)
            except Exception:
                LOGGER.exception("Subscriber %r failed on %s event", callback, event_type)
