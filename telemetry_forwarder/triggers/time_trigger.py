import time
from typing import Callable, Optional

class IntervalTrigger:
    """Fixed-period trigger; the first fire is one full interval after start()"""

    def __init__(self, interval_seconds: float = 10.0,
                 clock: Callable[[], float] = time.monotonic):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.interval_seconds = interval_seconds
        self._clock = clock
        self.last_trigger_time: Optional[float] = None
        self.execution_count: int = 0

    def start(self) -> None:
        self.last_trigger_time = self._clock()

    def should_trigger(self) -> bool:
        current_time = self._clock()

        if self.last_trigger_time is None:
            self.last_trigger_time = current_time
            return False

        if (current_time - self.last_trigger_time) >= self.interval_seconds:
            # stay on the start() grid, like a ticker
            missed = int((current_time - self.last_trigger_time) // self.interval_seconds)
            self.last_trigger_time += missed * self.interval_seconds
            self.execution_count += 1
            return True

        return False

    def get_next_check_interval(self) -> float:
        if self.last_trigger_time is None:
            return self.interval_seconds

        elapsed = self._clock() - self.last_trigger_time
        return max(0.0, self.interval_seconds - elapsed)
