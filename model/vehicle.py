# model/vehicle.py
from __future__ import annotations
from dataclasses import dataclass

from model.bin import Point


@dataclass
class Vehicle:
    id: str
    current_position: Point
    capacity_liters: float
    speed_kmh: float

    # dynamic state
    status: str = "idle"       # idle, en-route, collecting, returning
    current_waypoint_index: int = 0
    current_load: float = 0.0
