# simulator/notifications.py
from __future__ import annotations
import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from config import CRITICAL_FILL_PCT, HIGH_FILL_BAND_PCT, LOW_BATTERY_PCT
from model.bin import WasteBin
from model.event import (
    CONNECTIVITY_ISSUE, CRITICAL_FILL, HIGH_FILL, LOW_BATTERY, SimEvent,
)
from simulator.errors import NotFound

logger = logging.getLogger(__name__)

Listener = Callable[[SimEvent], None]


def _fill_event(b: WasteBin, when: datetime) -> Optional[SimEvent]:
    # The high-fill band is 75..80 while critical starts at 90; bins between
    # 80 and 90 raise nothing. Kept as-is, see DESIGN.md.
    low, high = HIGH_FILL_BAND_PCT
    if b.fill_level >= CRITICAL_FILL_PCT:
        return SimEvent(
            kind=CRITICAL_FILL,
            priority="high",
            title="Critical Fill Level",
            message=f"{b.name} is at {round(b.fill_level)}% capacity and requires immediate attention.",
            timestamp=when,
            bin_id=b.id,
            level=b.fill_level,
        )
    if low <= b.fill_level < high:
        return SimEvent(
            kind=HIGH_FILL,
            priority="medium",
            title="High Fill Level",
            message=f"{b.name} is at {round(b.fill_level)}% capacity.",
            timestamp=when,
            bin_id=b.id,
            level=b.fill_level,
        )
    return None


def _sensor_events(b: WasteBin, when: datetime) -> List[SimEvent]:
    events = []
    if b.sensor.battery_level < LOW_BATTERY_PCT:
        events.append(SimEvent(
            kind=LOW_BATTERY,
            priority="low",
            title="Low Battery",
            message=f"{b.name} sensor battery is at {round(b.sensor.battery_level)}%. Maintenance required.",
            timestamp=when,
            bin_id=b.id,
            level=b.sensor.battery_level,
        ))
    if b.sensor.connectivity != "online":
        events.append(SimEvent(
            kind=CONNECTIVITY_ISSUE,
            priority="medium",
            title="Connectivity Issue",
            message=f"{b.name} has {b.sensor.connectivity} connectivity. Check sensor status.",
            timestamp=when,
            bin_id=b.id,
            state=b.sensor.connectivity,
        ))
    return events


def check_fill_levels(bins: Sequence[WasteBin], when: Optional[datetime] = None) -> List[SimEvent]:
    when = when or datetime.now()
    events = []
    for b in bins:
        try:
            e = _fill_event(b, when)
        except Exception:
            logger.exception(f"Fill level check failed for bin {getattr(b, 'id', '?')}, skipping")
            continue
        if e is not None:
            events.append(e)
    return events


def check_sensors(bins: Sequence[WasteBin], when: Optional[datetime] = None) -> List[SimEvent]:
    when = when or datetime.now()
    events = []
    for b in bins:
        try:
            events += _sensor_events(b, when)
        except Exception:
            logger.exception(f"Sensor check failed for bin {getattr(b, 'id', '?')}, skipping")
    return events


class NotificationLog:
    """Newest-first feed of events with read tracking, plus push listeners."""

    def __init__(self):
        self._items: List[SimEvent] = []
        self._listeners: List[Listener] = []
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def items(self) -> List[SimEvent]:
        return list(self._items)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def add(self, event: SimEvent) -> SimEvent:
        self._last_id += 1
        event.id = f"notification-{self._last_id}"
        event.read = False
        self._items.insert(0, event)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Notification listener failed on {event.id}")
        return event

    def extend(self, events: Sequence[SimEvent]) -> None:
        for e in events:
            self.add(e)

    def mark_read(self, notification_id: str) -> None:
        for n in self._items:
            if n.id == notification_id:
                n.read = True
                return
        raise NotFound(f"Notification {notification_id} not found")

    def mark_all_read(self) -> None:
        for n in self._items:
            n.read = True

    def clear(self) -> None:
        self._items.clear()
