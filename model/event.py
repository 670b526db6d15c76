# model/event.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from model.bin import Point

PRIORITIES = ("low", "medium", "high")

BIN_COLLECTED = "BinCollected"
ROUTE_COMPLETED = "RouteCompleted"
CRITICAL_FILL = "CriticalFill"
HIGH_FILL = "HighFill"
LOW_BATTERY = "LowBattery"
CONNECTIVITY_ISSUE = "ConnectivityIssue"


@dataclass
class SimEvent:
    kind: str
    priority: str              # low, medium, high
    title: str
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    bin_id: Optional[str] = None
    route_id: Optional[str] = None
    level: Optional[float] = None
    state: Optional[str] = None
    location: Optional[Point] = None

    # assigned by the notification log
    id: Optional[str] = None
    read: bool = False
