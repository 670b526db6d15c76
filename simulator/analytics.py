# simulator/analytics.py
from __future__ import annotations
from typing import Dict, Sequence

from model.bin import WasteBin
from model.route import RouteMetrics


def fill_level_bands(bins: Sequence[WasteBin]) -> Dict[str, int]:
    bands = {"low": 0, "medium": 0, "high": 0, "critical": 0}
    for b in bins:
        if b.fill_level < 50:
            bands["low"] += 1
        elif b.fill_level < 75:
            bands["medium"] += 1
        elif b.fill_level < 90:
            bands["high"] += 1
        else:
            bands["critical"] += 1
    return bands


def fleet_summary(bins: Sequence[WasteBin]) -> dict:
    n = len(bins)
    return {
        "bins_total": n,
        "avg_fill_level": sum(b.fill_level for b in bins) / n if n else 0.0,
        "bands": fill_level_bands(bins),
        "avg_battery_level": sum(b.sensor.battery_level for b in bins) / n if n else 0.0,
        "sensors_not_online": sum(1 for b in bins if b.sensor.connectivity != "online"),
    }


def route_savings(baseline: RouteMetrics, optimized: RouteMetrics) -> dict:
    """What the optimized route saves over the baseline. Negative means it is worse."""
    distance = baseline.total_distance_km - optimized.total_distance_km
    duration = baseline.estimated_duration_min - optimized.estimated_duration_min
    return {
        "distance_km": distance,
        "duration_min": duration,
        "fuel_l": baseline.fuel_consumption_l - optimized.fuel_consumption_l,
        "co2_kg": baseline.co2_emissions_kg - optimized.co2_emissions_kg,
        "distance_pct": distance / (baseline.total_distance_km or 1.0) * 100.0,
        "duration_pct": duration / (baseline.estimated_duration_min or 1.0) * 100.0,
    }
