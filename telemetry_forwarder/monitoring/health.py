"""Process liveness shared between the publish loop and the HTTP listener."""

from __future__ import annotations

import threading


class HealthState:
    """Healthy until shutdown begins.

    The shutdown sequence is the only writer; the HTTP listener thread reads.
    """

    def __init__(self, healthy: bool = True):
        self._healthy = threading.Event()
        if healthy:
            self._healthy.set()

    @property
    def healthy(self) -> bool:
        return self._healthy.is_set()

    def mark_unhealthy(self) -> None:
        self._healthy.clear()

    def to_dict(self) -> dict:
        return {"healthy": self.healthy}
