# simulator/clock.py
from __future__ import annotations
import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from config import BIN_CHECK_INTERVAL_MS, SENSOR_UPDATE_INTERVAL_MS, VALID_SPEEDS
from data.scenarios import SCENARIOS
from simulator.errors import InvalidArgument

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class TickPlan:
    simulated_elapsed_ms: float
    check_bins: bool
    drift_sensors: bool


class SimulationClock:
    """
    Discrete-time clock. ``advance`` turns a real-time delta into simulated
    time and tells the caller which slower cadences are due on this tick.
    """

    def __init__(self, speed: int = 1, scenario: str = "normal",
                 simulated_time: Optional[datetime] = None):
        self.is_running = False
        self.speed = 1
        self.scenario = "normal"
        self.set_speed(speed)
        self.set_scenario(scenario)
        self.simulated_time = simulated_time or datetime.now()
        self.last_real_tick: Optional[float] = None

        self._since_bin_check_ms = 0.0   # real
        self._since_sensor_ms = 0.0      # simulated

    def start(self, now_ms: Optional[float] = None) -> None:
        if self.is_running:
            return
        self.is_running = True
        # deltas are measured from the resume point, pause time is not counted
        self.last_real_tick = now_ms if now_ms is not None else monotonic_ms()
        logger.info(f"Clock started at {self.simulated_time:%Y-%m-%d %H:%M:%S} ({self.speed}x, {self.scenario})")

    def pause(self) -> None:
        if not self.is_running:
            return
        self.is_running = False
        self.last_real_tick = None
        logger.info(f"Clock paused at {self.simulated_time:%Y-%m-%d %H:%M:%S}")

    def reset(self) -> None:
        self.is_running = False
        self.simulated_time = datetime.now()
        self.last_real_tick = None
        self._since_bin_check_ms = 0.0
        self._since_sensor_ms = 0.0

    def set_speed(self, speed: int) -> None:
        if speed not in VALID_SPEEDS:
            raise InvalidArgument(f"Unsupported speed {speed!r}, expected one of {VALID_SPEEDS}")
        self.speed = speed

    def set_scenario(self, scenario: str) -> None:
        if scenario not in SCENARIOS:
            raise InvalidArgument(f"Unsupported scenario {scenario!r}")
        self.scenario = scenario

    def real_elapsed(self, now_ms: Optional[float] = None) -> float:
        """Real milliseconds since the previous tick (or since start/resume)."""
        now_ms = now_ms if now_ms is not None else monotonic_ms()
        if self.last_real_tick is None:
            self.last_real_tick = now_ms
        elapsed = max(0.0, now_ms - self.last_real_tick)
        self.last_real_tick = now_ms
        return elapsed

    def advance(self, real_elapsed_ms: float) -> Optional[TickPlan]:
        if not self.is_running:
            return None
        if real_elapsed_ms < 0 or not math.isfinite(real_elapsed_ms):
            raise InvalidArgument(f"Real elapsed time must be a non-negative number, got {real_elapsed_ms}")

        simulated = real_elapsed_ms * self.speed
        self.simulated_time += timedelta(milliseconds=simulated)

        self._since_bin_check_ms += real_elapsed_ms
        check_bins = self._since_bin_check_ms >= BIN_CHECK_INTERVAL_MS
        if check_bins:
            self._since_bin_check_ms = 0.0

        self._since_sensor_ms += simulated
        drift = self._since_sensor_ms > SENSOR_UPDATE_INTERVAL_MS
        if drift:
            self._since_sensor_ms = 0.0

        return TickPlan(simulated_elapsed_ms=simulated, check_bins=check_bins, drift_sensors=drift)
