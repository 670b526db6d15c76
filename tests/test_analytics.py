import pytest

from model.route import RouteMetrics
from simulator.analytics import fill_level_bands, fleet_summary, route_savings


def test_fill_level_bands(make_bin):
    bins = [make_bin(f"bin-{i}", fill=f) for i, f in enumerate([10, 49.9, 50, 74.9, 75, 89.9, 90, 100])]
    assert fill_level_bands(bins) == {"low": 2, "medium": 2, "high": 2, "critical": 2}


def test_fleet_summary(make_bin):
    bins = [make_bin("bin-1", fill=20, battery=50), make_bin("bin-2", fill=80, battery=70, connectivity="offline")]
    s = fleet_summary(bins)
    assert s["avg_fill_level"] == 50
    assert s["avg_battery_level"] == 60
    assert s["sensors_not_online"] == 1
    assert fleet_summary([])["avg_fill_level"] == 0.0


def test_route_savings():
    base = RouteMetrics(total_distance_km=10, estimated_duration_min=20, fuel_consumption_l=3, co2_emissions_kg=8.04)
    opt = RouteMetrics(total_distance_km=8, estimated_duration_min=16, fuel_consumption_l=2.4, co2_emissions_kg=6.432)
    s = route_savings(base, opt)
    assert s["distance_km"] == pytest.approx(2)
    assert s["distance_pct"] == pytest.approx(20)
    assert s["duration_pct"] == pytest.approx(20)
    assert s["fuel_l"] == pytest.approx(0.6)
    assert s["co2_kg"] == pytest.approx(1.608)
