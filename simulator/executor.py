# simulator/executor.py
from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Dict, List, Optional

from config import COLLECT_FRACTION
from model.event import BIN_COLLECTED, ROUTE_COMPLETED, SimEvent
from model.route import Route, RoutePoint
from simulator.geo import interpolate

logger = logging.getLogger(__name__)


def collected_event(route: Route, point: RoutePoint, when: datetime) -> SimEvent:
    lat, lon = point.location
    return SimEvent(
        kind=BIN_COLLECTED,
        priority="low",
        title="Bin Collected",
        message=f"A bin has been emptied at {lat:.4f}, {lon:.4f}",
        timestamp=when,
        bin_id=point.bin_id,
        route_id=route.id,
        location=point.location,
    )


def completed_event(route: Route, when: datetime) -> SimEvent:
    return SimEvent(
        kind=ROUTE_COMPLETED,
        priority="medium",
        title="Route Completed",
        message=f"{route.name} has been completed successfully.",
        timestamp=when,
        route_id=route.id,
    )


class RouteExecutor:
    """
    Moves a route's vehicle along its waypoints as a function of progress.

    Keeps, per route, the highest waypoint index whose bin was already
    collected so repeated calls never fire the same pickup twice.
    """

    def __init__(self):
        self._last_fired: Dict[str, int] = {}

    def start(self, route: Route) -> None:
        route.progress = 0.0
        route.in_progress = True
        route.completed = False

        v = route.vehicle
        v.current_position = route.points[0].location
        v.current_waypoint_index = 0
        v.current_load = 0.0
        v.status = "en-route"
        self._last_fired[route.id] = 0

    def advance(self, route: Route, progress: float, when: Optional[datetime] = None) -> List[SimEvent]:
        when = when or datetime.now()
        if route.completed:
            return []
        if not route.in_progress:
            self.start(route)

        # clamp, and never move backwards
        progress = max(route.progress, min(1.0, max(0.0, progress)))
        route.progress = progress

        points = route.points
        last = len(points) - 1
        exact = progress * last
        idx = int(math.floor(exact))
        fraction = exact - idx

        v = route.vehicle
        events: List[SimEvent] = []

        if idx >= last:
            events += self._collect_through(route, last, when)
            v.current_position = points[last].location
            v.current_waypoint_index = last
            v.status = "idle"
            route.progress = 1.0
            route.in_progress = False
            route.completed = True
            self._last_fired.pop(route.id, None)
            events.append(completed_event(route, when))
            logger.info(f"Route {route.id} completed, load {v.current_load:.0f} L")
            return events

        # pickups skipped over by a large step are collected now
        events += self._collect_through(route, idx, when)

        nxt = points[idx + 1]
        v.current_position = interpolate(points[idx].location, nxt.location, fraction)
        v.current_waypoint_index = idx

        if fraction > COLLECT_FRACTION and nxt.bin_id is not None:
            v.status = "collecting"
            events += self._collect_through(route, idx + 1, when)
        elif idx + 1 == last:
            v.status = "returning"
        else:
            v.status = "en-route"

        return events

    def _collect_through(self, route: Route, upto: int, when: datetime) -> List[SimEvent]:
        events = []
        start = self._last_fired.get(route.id, 0) + 1
        for i in range(start, upto + 1):
            p = route.points[i]
            if p.bin_id is None:
                continue
            events.append(collected_event(route, p, when))
        if upto >= start:
            self._last_fired[route.id] = upto
        return events

    def record_load(self, route: Route, liters: float) -> None:
        v = route.vehicle
        v.current_load = min(v.capacity_liters, v.current_load + max(0.0, liters))
