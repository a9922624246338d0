from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator

@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 5
    initial_delay: float = 1.0            # seconds
    multiplier: float = 2.0

    def delays(self) -> Iterator[float]:
        """Sleep before each reconnect attempt: 1, 2, 4, 8, 16 with the defaults."""
        delay = self.initial_delay
        for _ in range(self.max_attempts):
            yield delay
            delay *= self.multiplier

    def total_delay(self, attempts: int | None = None) -> float:
        n = self.max_attempts if attempts is None else min(attempts, self.max_attempts)
        return sum(d for _, d in zip(range(n), self.delays()))
