# simulator/planner.py
"""
Route generation: a baseline (fixed schedule, bins by id) and an optimized
route built with the greedy nearest-neighbor heuristic.

The heuristic is not an optimal TSP tour, there is no 2-opt pass, and the
vehicle capacity is reported but never enforced while planning.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Sequence

from config import COLLECTION_THRESHOLD_PCT, VEHICLE_CAPACITY_L, CostModel
from model.bin import Point, WasteBin
from model.route import Route, RouteMetrics, RoutePoint
from model.vehicle import Vehicle
from simulator.geo import check_point, distance_km

logger = logging.getLogger(__name__)

ROUTE_NAMES = {
    "baseline": "Baseline Collection Route",
    "optimized": "Optimized Collection Route",
}


def needs_collection(bins: Sequence[WasteBin], threshold: float = COLLECTION_THRESHOLD_PCT) -> List[WasteBin]:
    return [b for b in bins if b.fill_level >= threshold]


def baseline_order(bins: Sequence[WasteBin]) -> List[WasteBin]:
    return sorted(bins, key=lambda b: b.id)


def nearest_neighbor_order(bins: Sequence[WasteBin], depot: Point) -> List[WasteBin]:
    unvisited = list(bins)
    ordered: List[WasteBin] = []
    current = depot

    while unvisited:
        best_idx = 0
        best_dist = float("inf")
        for idx, b in enumerate(unvisited):
            d = distance_km(current, b.location)
            # strict < keeps the first candidate on ties
            if d < best_dist:
                best_dist = d
                best_idx = idx
        nxt = unvisited.pop(best_idx)
        ordered.append(nxt)
        current = nxt.location

    return ordered


def build_points(route_id: str, ordered: Sequence[WasteBin], depot: Point) -> List[RoutePoint]:
    points = [RoutePoint(id=f"{route_id}-depot-start", location=depot, is_depot=True)]
    for b in ordered:
        points.append(RoutePoint(id=f"{route_id}-{b.id}", location=b.location, bin_id=b.id))
    points.append(RoutePoint(id=f"{route_id}-depot-end", location=depot, is_depot=True))
    return points


def compute_metrics(points: Sequence[RoutePoint], bins_by_id: Dict[str, WasteBin],
                    cost: CostModel) -> RouteMetrics:
    distance = 0.0
    for prev, cur in zip(points, points[1:]):
        distance += distance_km(prev.location, cur.location)

    pickups = [p for p in points if p.bin_id is not None]
    waste = sum(bins_by_id[p.bin_id].waste_liters for p in pickups)

    duration = distance / cost.speed_kmh * 60.0 + len(pickups) * cost.service_min_per_bin
    fuel = distance * cost.fuel_l_per_km

    return RouteMetrics(
        total_distance_km=distance,
        estimated_duration_min=duration,
        fuel_consumption_l=fuel,
        co2_emissions_kg=fuel * cost.co2_kg_per_l,
        bins_collected=len(pickups),
        total_waste_collected_l=waste,
    )


class RoutePlanner:
    def __init__(self, cost: Optional[CostModel] = None,
                 threshold: float = COLLECTION_THRESHOLD_PCT,
                 vehicle_capacity_l: float = VEHICLE_CAPACITY_L):
        self.cost = cost or CostModel()
        self.threshold = threshold
        self.vehicle_capacity_l = vehicle_capacity_l

    def build_route(self, route_type: str, ordered: Sequence[WasteBin], depot: Point) -> Route:
        points = build_points(route_type, ordered, depot)
        metrics = compute_metrics(points, {b.id: b for b in ordered}, self.cost)
        vehicle = Vehicle(
            id=f"truck-{route_type}",
            current_position=depot,
            capacity_liters=self.vehicle_capacity_l,
            speed_kmh=self.cost.speed_kmh,
        )
        return Route(
            id=route_type,
            name=ROUTE_NAMES[route_type],
            type=route_type,
            points=points,
            vehicle=vehicle,
            metrics=metrics,
        )

    def generate_routes(self, bins: Sequence[WasteBin], depot: Point) -> Dict[str, Route]:
        """Returns {"baseline": Route, "optimized": Route}, or {} when no bin needs collection."""
        depot = check_point(depot)
        candidates = needs_collection(bins, self.threshold)
        if not candidates:
            logger.info(f"No bin at or above {self.threshold:.0f}%, no routes generated")
            return {}

        routes = {
            "baseline": self.build_route("baseline", baseline_order(candidates), depot),
            "optimized": self.build_route("optimized", nearest_neighbor_order(candidates, depot), depot),
        }
        logger.info(
            f"Generated routes for {len(candidates)} bins: "
            f"baseline {routes['baseline'].metrics.total_distance_km:.2f} km, "
            f"optimized {routes['optimized'].metrics.total_distance_km:.2f} km"
        )
        return routes
