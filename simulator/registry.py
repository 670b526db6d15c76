# simulator/registry.py
from __future__ import annotations
import copy
import logging
import math
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from model.bin import CATEGORIES, CONNECTIVITY_STATES, WasteBin
from simulator.errors import Conflict, InvalidArgument, NotFound
from simulator.geo import check_point

logger = logging.getLogger(__name__)


def clamp_fill(value: float) -> float:
    return max(0.0, min(100.0, value))


def _number(bin_id: str, field_name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{bin_id}: {field_name} must be a number, got {value!r}") from None


def validate_bin(b: WasteBin) -> None:
    """Check every field first; the bin is only normalized once all checks pass."""
    if not b.id:
        raise InvalidArgument("Bin id must be a non-empty string")
    location = check_point(b.location)

    fill = _number(b.id, "fill level", b.fill_level)
    capacity = _number(b.id, "capacity", b.capacity_liters)
    rate = _number(b.id, "base fill rate", b.base_fill_rate)
    variability = _number(b.id, "variability factor", b.variability_factor)
    battery = _number(b.id, "battery level", b.sensor.battery_level)

    if not (0.0 <= fill <= 100.0):
        raise InvalidArgument(f"{b.id}: fill level {fill} outside [0, 100]")
    if not capacity > 0:
        raise InvalidArgument(f"{b.id}: capacity must be positive")
    if not rate > 0:
        raise InvalidArgument(f"{b.id}: base fill rate must be positive")
    if not (0.0 <= variability <= 1.0):
        raise InvalidArgument(f"{b.id}: variability factor outside [0, 1]")
    if b.category not in CATEGORIES:
        raise InvalidArgument(f"{b.id}: unknown category {b.category!r}")
    if b.sensor.connectivity not in CONNECTIVITY_STATES:
        raise InvalidArgument(f"{b.id}: unknown connectivity {b.sensor.connectivity!r}")
    if not (0.0 <= battery <= 100.0):
        raise InvalidArgument(f"{b.id}: battery level outside [0, 100]")

    b.location = location
    b.fill_level = fill
    b.capacity_liters = capacity
    b.base_fill_rate = rate
    b.variability_factor = variability
    b.sensor.battery_level = battery


class BinRegistry:
    def __init__(self, bins: Optional[Iterable[WasteBin]] = None):
        self._bins: Dict[str, WasteBin] = {}
        for b in bins or []:
            self.add(b)

    def __len__(self) -> int:
        return len(self._bins)

    def __contains__(self, bin_id: str) -> bool:
        return bin_id in self._bins

    def add(self, b: WasteBin) -> None:
        if b.id in self._bins:
            raise Conflict(f"Bin {b.id} already exists")
        validate_bin(b)
        self._bins[b.id] = b

    def remove(self, bin_id: str) -> bool:
        """Returns False when the id is unknown (nothing removed)."""
        if self._bins.pop(bin_id, None) is None:
            logger.debug(f"Remove ignored, bin {bin_id} not registered")
            return False
        return True

    def get(self, bin_id: str) -> WasteBin:
        try:
            return self._bins[bin_id]
        except KeyError:
            raise NotFound(f"Bin {bin_id} not found") from None

    def set_manual_fill_level(self, bin_id: str, value: float) -> float:
        b = self.get(bin_id)
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Fill level must be a number, got {value!r}") from None
        if math.isnan(value):
            raise InvalidArgument("Fill level must not be NaN")
        b.fill_level = clamp_fill(value)
        return b.fill_level

    def empty(self, bin_id: str, when: Optional[datetime] = None) -> None:
        b = self.get(bin_id)
        b.fill_level = 0.0
        b.last_collection_time = when or datetime.now()

    def values(self) -> List[WasteBin]:
        # live objects, only the simulation context writes through these
        return list(self._bins.values())

    def snapshot(self) -> List[WasteBin]:
        return [copy.deepcopy(b) for b in self._bins.values()]

    def reset(self, bins: Iterable[WasteBin]) -> None:
        fresh = BinRegistry(bins)
        self._bins = fresh._bins
