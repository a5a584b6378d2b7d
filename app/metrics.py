import logging
import time
from contextlib import contextmanager

logger = logging.getLogger("cryptogram")


class StageTimer:
    """Collects per-stage timing for a single request."""

    def __init__(self):
        self.timings: dict[str, float] = {}
        self._start = time.perf_counter()

    @contextmanager
    def stage(self, name: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - t0
            self.timings[name] = round(elapsed * 1000, 1)  # ms
            logger.info("stage=%s elapsed=%.1fms", name, self.timings[name])

    @property
    def total_ms(self) -> float:
        return round((time.perf_counter() - self._start) * 1000, 1)

    def summary(self) -> dict:
        return {**self.timings, "total": self.total_ms}


class Deadline:
    """Interrupt check for the solver: true once `seconds` have passed.

    A non-positive budget never expires.
    """

    def __init__(self, seconds: float):
        self.seconds = seconds
        self.expired = False
        self._end = time.perf_counter() + seconds if seconds > 0 else None

    def __call__(self) -> bool:
        if self._end is not None and time.perf_counter() >= self._end:
            if not self.expired:
                logger.warning("Search interrupted after %.1fs", self.seconds)
            self.expired = True
        return self.expired
