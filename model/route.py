# model/route.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from model.bin import Point
from model.vehicle import Vehicle


@dataclass
class RoutePoint:
    id: str
    location: Point
    bin_id: Optional[str] = None
    is_depot: bool = False


@dataclass
class RouteMetrics:
    total_distance_km: float = 0.0
    estimated_duration_min: float = 0.0
    fuel_consumption_l: float = 0.0
    co2_emissions_kg: float = 0.0
    bins_collected: int = 0
    total_waste_collected_l: float = 0.0


@dataclass
class Route:
    id: str
    name: str
    type: str                  # baseline, optimized
    points: List[RoutePoint]
    vehicle: Vehicle
    metrics: RouteMetrics = field(default_factory=RouteMetrics)

    progress: float = 0.0      # 0..1
    in_progress: bool = False
    completed: bool = False

    @property
    def pickups(self) -> List[RoutePoint]:
        return [p for p in self.points if p.bin_id is not None]
