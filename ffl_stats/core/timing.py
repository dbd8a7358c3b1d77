"""
Timing per richiesta: un label (es. "player-graphs:42") e un log per step.

    timer = StepTimer("player-graphs:42")
    with timer.step("lookup"):
        ...
    timer.total()

Output: "player-graphs:42:lookup 3.1ms".
"""

import logging
import time
from contextlib import contextmanager

from ffl_stats.core.config import timing_logs_enabled

logger = logging.getLogger(__name__)


class StepTimer:
    def __init__(self, label: str, clock=time.perf_counter):
        self.label = label
        self._clock = clock
        self._started = clock()
        self.steps: dict[str, float] = {}

    def _log(self, step: str, elapsed_ms: float) -> None:
        self.steps[step] = elapsed_ms
        if timing_logs_enabled():
            logger.info("%s:%s %.1fms", self.label, step, elapsed_ms)

    @contextmanager
    def step(self, name: str):
        start = self._clock()
        try:
            yield
        finally:
            self._log(name, (self._clock() - start) * 1000)

    def total(self) -> float:
        elapsed = (self._clock() - self._started) * 1000
        self._log("total", elapsed)
        return elapsed
