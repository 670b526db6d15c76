# simulator/fill.py
"""
Bin-state simulation: stochastic fill growth and sensor degradation.

All randomness comes from the injected ``numpy.random.Generator`` so a
seeded generator replays the same run.
"""
from __future__ import annotations
import logging
from datetime import datetime
from typing import Iterable

import numpy as np

from config import BATTERY_DRAIN_RANGE, INTERMITTENT_PROBABILITY, OFFLINE_PROBABILITY
from data.scenarios import SCENARIOS
from model.bin import WasteBin
from simulator.errors import InvalidArgument
from simulator.registry import clamp_fill

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000.0


def scenario_multiplier(scenario: str, neighborhood: str) -> float:
    try:
        profile = SCENARIOS[scenario]
    except KeyError:
        raise InvalidArgument(f"Unknown scenario: {scenario}") from None
    return profile["neighborhoods"].get(neighborhood, profile["flat"])


def fill_increment(b: WasteBin, elapsed_hours: float, multiplier: float, u: float) -> float:
    """Growth for one step given a uniform draw ``u`` in [0, 1)."""
    random_factor = 1.0 + (2.0 * u - 1.0) * b.variability_factor
    return b.base_fill_rate * elapsed_hours * multiplier * random_factor


class FillSimulator:
    def __init__(self, rng: np.random.Generator):
        self.rng = rng

    def advance(self, bins: Iterable[WasteBin], elapsed_ms: float, scenario: str) -> int:
        """Grow every bin's fill level in place. Returns how many bins were updated."""
        if elapsed_ms < 0:
            raise InvalidArgument(f"Elapsed time must be non-negative, got {elapsed_ms}")
        # validates the scenario once, before touching any bin
        scenario_multiplier(scenario, "")

        elapsed_hours = elapsed_ms / MS_PER_HOUR
        updated = 0
        for b in bins:
            try:
                m = scenario_multiplier(scenario, b.neighborhood)
                inc = fill_increment(b, elapsed_hours, m, self.rng.random())
                b.fill_level = clamp_fill(b.fill_level + inc)
                updated += 1
            except Exception:
                logger.exception(f"Fill update failed for bin {getattr(b, 'id', '?')}, skipping")
        return updated

    def drift_sensors(self, bins: Iterable[WasteBin], now: datetime) -> int:
        low, high = BATTERY_DRAIN_RANGE
        updated = 0
        for b in bins:
            try:
                drain = self.rng.uniform(low, high)
                b.sensor.battery_level = max(0.0, b.sensor.battery_level - drain)

                roll = self.rng.random()
                if roll < OFFLINE_PROBABILITY:
                    b.sensor.connectivity = "offline"
                elif roll < OFFLINE_PROBABILITY + INTERMITTENT_PROBABILITY:
                    b.sensor.connectivity = "intermittent"
                else:
                    b.sensor.connectivity = "online"
                b.sensor.last_transmission = now
                updated += 1
            except Exception:
                logger.exception(f"Sensor drift failed for bin {getattr(b, 'id', '?')}, skipping")
        return updated
