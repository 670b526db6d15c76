# model/bin.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

Point = Tuple[float, float]   # (lat, lon)

CONNECTIVITY_STATES = ("online", "intermittent", "offline")
CATEGORIES = ("general", "recycling", "organic")


@dataclass
class SensorData:
    battery_level: float = 100.0     # 0..100
    connectivity: str = "online"     # online, intermittent, offline
    last_transmission: datetime = field(default_factory=datetime.now)


@dataclass
class WasteBin:
    id: str
    location: Point
    name: str
    capacity_liters: float
    base_fill_rate: float            # % per hour
    variability_factor: float = 0.0  # 0..1
    fill_level: float = 0.0          # 0..100
    neighborhood: str = ""
    category: str = "general"        # general, recycling, organic

    sensor: SensorData = field(default_factory=SensorData)
    last_collection_time: datetime = field(default_factory=datetime.now)

    @property
    def waste_liters(self) -> float:
        return self.capacity_liters * self.fill_level / 100.0
