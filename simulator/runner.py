# simulator/runner.py
from __future__ import annotations
import logging
import time
from typing import Callable, Optional

from config import TICK_INTERVAL_MS
from simulator.environment import Environment

logger = logging.getLogger(__name__)


class RealtimeDriver:
    """Calls ``Environment.tick`` on a fixed wall-clock cadence while the clock runs."""

    def __init__(self, env: Environment, interval_ms: float = TICK_INTERVAL_MS,
                 sleep: Callable[[float], None] = time.sleep):
        self.env = env
        self.interval_ms = interval_ms
        self.sleep = sleep

    def run(self, max_ticks: Optional[int] = None) -> int:
        if not self.env.clock.is_running:
            self.env.start()

        n = 0
        while self.env.clock.is_running and (max_ticks is None or n < max_ticks):
            self.sleep(self.interval_ms / 1000.0)
            # a tick is fully applied before the next sleep, ticks never overlap
            self.env.tick()
            n += 1
        logger.info(f"Realtime driver stopped after {n} ticks")
        return n
