# simulator/environment.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from config import DEFAULT_DEPOT, RANDOM_SEED, ROUTE_PROGRESS_PER_TICK, TICK_INTERVAL_MS, CostModel
from model.bin import Point, WasteBin
from model.event import BIN_COLLECTED, SimEvent
from model.route import Route
from simulator.analytics import fleet_summary
from simulator.clock import SimulationClock
from simulator.errors import Conflict, NotFound
from simulator.executor import RouteExecutor
from simulator.fill import FillSimulator
from simulator.notifications import Listener, NotificationLog, check_fill_levels, check_sensors
from simulator.planner import RoutePlanner, needs_collection
from simulator.registry import BinRegistry

logger = logging.getLogger(__name__)


class Environment:
    """
    Simulation context. Owns every bin, route and vehicle; the tick is the
    only writer during a run and commands are applied between ticks.
    """

    def __init__(self, bins: Optional[Iterable[WasteBin]] = None,
                 rng: Optional[np.random.Generator] = None,
                 cost: Optional[CostModel] = None,
                 clock: Optional[SimulationClock] = None,
                 now: Callable[[], datetime] = datetime.now,
                 record_trace: bool = True):
        self.registry = BinRegistry(bins)
        self.fill = FillSimulator(rng if rng is not None else np.random.default_rng(RANDOM_SEED))
        self.planner = RoutePlanner(cost)
        self.executor = RouteExecutor()
        self.clock = clock or SimulationClock()
        self.notifications = NotificationLog()

        self.routes: Dict[str, Route] = {}
        self.active_route_id: Optional[str] = None

        self._now = now
        self._in_tick = False
        self.record_trace = record_trace
        self.trace = []  # list of snapshots per tick
        self.ticks = 0

    # ----------------- commands -----------------
    def add_bin(self, b: WasteBin) -> None:
        self.registry.add(b)
        logger.info(f"Bin {b.id} added ({b.neighborhood or 'no neighborhood'})")

    def remove_bin(self, bin_id: str) -> bool:
        removed = self.registry.remove(bin_id)
        if removed:
            logger.info(f"Bin {bin_id} removed")
        return removed

    def set_manual_fill_level(self, bin_id: str, value: float) -> float:
        return self.registry.set_manual_fill_level(bin_id, value)

    def empty_bin(self, bin_id: str) -> None:
        self.registry.empty(bin_id, self._now())

    def reset_bins(self, bins: Iterable[WasteBin]) -> None:
        self.registry.reset(bins)

    def generate_routes(self, depot: Point = DEFAULT_DEPOT) -> Dict[str, Route]:
        if self.active_route_id is not None:
            raise Conflict(f"Route {self.active_route_id} is in progress, cannot rebuild routes")
        self.routes = self.planner.generate_routes(self.registry.snapshot(), depot)
        return dict(self.routes)

    def start_route(self, route_id: str) -> None:
        route = self.get_route(route_id)
        if self.active_route_id is not None:
            raise Conflict(f"Route {self.active_route_id} is already in progress")
        self.executor.start(route)
        self.active_route_id = route_id
        logger.info(f"Route {route_id} started with {route.metrics.bins_collected} pickups")

    def reset_routes(self) -> None:
        self.routes = {}
        self.active_route_id = None

    def set_scenario(self, scenario: str) -> None:
        self.clock.set_scenario(scenario)

    def set_speed(self, speed: int) -> None:
        self.clock.set_speed(speed)

    def start(self, now_ms: Optional[float] = None) -> None:
        self.clock.start(now_ms)

    def pause(self) -> None:
        self.clock.pause()

    def reset(self) -> None:
        self.clock.reset()

    def subscribe(self, listener: Listener) -> None:
        self.notifications.subscribe(listener)

    # ----------------- read side -----------------
    def bins(self) -> List[WasteBin]:
        return self.registry.snapshot()

    def get_route(self, route_id: str) -> Route:
        try:
            return self.routes[route_id]
        except KeyError:
            raise NotFound(f"Route {route_id} not found") from None

    @property
    def active_route(self) -> Optional[Route]:
        if self.active_route_id is None:
            return None
        return self.routes.get(self.active_route_id)

    # ----------------- tick -----------------
    def tick(self, real_elapsed_ms: Optional[float] = None) -> List[SimEvent]:
        if self._in_tick:
            logger.warning("Tick requested while another tick is running, skipped")
            return []
        if not self.clock.is_running:
            return []

        if real_elapsed_ms is None:
            real_elapsed_ms = self.clock.real_elapsed()
        plan = self.clock.advance(real_elapsed_ms)
        now = self.clock.simulated_time

        events: List[SimEvent] = []
        self._in_tick = True
        try:
            bins = self.registry.values()
            self.fill.advance(bins, plan.simulated_elapsed_ms, self.clock.scenario)

            if plan.check_bins:
                events += check_fill_levels(bins, now)

            if plan.drift_sensors:
                self.fill.drift_sensors(bins, now)
                events += check_sensors(bins, now)

            route = self.active_route
            if route is not None:
                events += self._advance_route(route, now)
        finally:
            self._in_tick = False

        self.ticks += 1
        self.notifications.extend(events)
        if self.record_trace:
            self._record(now)
        logger.debug(f"Tick {self.ticks}: +{plan.simulated_elapsed_ms:.0f} ms simulated, {len(events)} events")
        return events

    def step(self) -> List[SimEvent]:
        return self.tick(TICK_INTERVAL_MS)

    def run(self, duration_ms: float) -> List[SimEvent]:
        """Replay ``duration_ms`` of real time in fixed tick intervals."""
        events: List[SimEvent] = []
        elapsed = 0.0
        while elapsed < duration_ms and self.clock.is_running:
            events += self.step()
            elapsed += TICK_INTERVAL_MS
        return events

    def run_route(self, route_id: str, max_ticks: int = 10_000) -> List[SimEvent]:
        """Start ``route_id`` and tick until it completes."""
        self.start_route(route_id)
        route = self.get_route(route_id)
        events: List[SimEvent] = []
        for _ in range(max_ticks):
            if route.completed or not self.clock.is_running:
                break
            events += self.step()
        return events

    # ----------------- mechanics -----------------
    def _advance_route(self, route: Route, now: datetime) -> List[SimEvent]:
        progress = min(1.0, route.progress + ROUTE_PROGRESS_PER_TICK * self.clock.speed)
        try:
            raw = self.executor.advance(route, progress, now)
        except Exception:
            logger.exception(f"Advancing route {route.id} failed, route left as is for this tick")
            return []

        events = []
        for e in raw:
            if e.kind == BIN_COLLECTED:
                try:
                    b = self.registry.get(e.bin_id)
                except NotFound:
                    logger.warning(f"Route {route.id} reached bin {e.bin_id}, which was removed")
                    continue
                self.executor.record_load(route, b.waste_liters)
                self.registry.empty(e.bin_id, now)
            events.append(e)

        if route.completed:
            self.active_route_id = None
        return events

    def _record(self, now: datetime) -> None:
        route = self.active_route
        self.trace.append({
            "t": now,
            "bins": [
                (b.id, b.fill_level, b.sensor.battery_level, b.sensor.connectivity)
                for b in self.registry.values()
            ],
            "vehicle": None if route is None else (
                route.id, route.vehicle.current_position, route.vehicle.status, route.progress
            ),
        })

    # ----------------- evaluation -----------------
    def metrics(self) -> dict:
        bins = self.registry.values()
        m = fleet_summary(bins)
        m.update({
            "simulated_time": self.clock.simulated_time,
            "ticks": self.ticks,
            "bins_needing_collection": len(needs_collection(bins)),
            "notifications": len(self.notifications),
            "unread_notifications": self.notifications.unread_count,
            "active_route": self.active_route_id,
            "routes_completed": sum(1 for r in self.routes.values() if r.completed),
        })
        return m
