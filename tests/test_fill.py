from datetime import datetime

import numpy as np
import pytest

from simulator.errors import InvalidArgument
from simulator.fill import FillSimulator, scenario_multiplier

HOUR_MS = 3_600_000.0


class FixedRng:
    """Stands in for numpy's Generator with scripted draws."""

    def __init__(self, randoms, uniform_value=None):
        self.randoms = list(randoms)
        self.uniform_value = uniform_value

    def random(self):
        return self.randoms.pop(0)

    def uniform(self, low, high):
        return low if self.uniform_value is None else self.uniform_value


@pytest.mark.parametrize("scenario, neighborhood, expected", [
    ("normal", "Cantonments", 1.0),
    ("weekend", "Cantonments", 0.7),
    ("weekend", "Osu", 1.2),
    ("weekend", "Labone", 1.2),
    ("weekend", "Adabraka", 1.0),
    ("special-event", "Cantonments", 2.0),
    ("special-event", "Osu", 2.0),
])
def test_scenario_multiplier(scenario, neighborhood, expected):
    assert scenario_multiplier(scenario, neighborhood) == expected


def test_unknown_scenario_rejected(make_bin, rng):
    with pytest.raises(InvalidArgument):
        FillSimulator(rng).advance([make_bin()], HOUR_MS, "holiday")


def test_increment_without_variability_is_exact(make_bin, rng):
    b = make_bin(fill=10.0, rate=3.0, variability=0.0)
    FillSimulator(rng).advance([b], 2 * HOUR_MS, "special-event")
    assert b.fill_level == pytest.approx(10.0 + 3.0 * 2 * 2.0)


def test_random_factor_uses_uniform_draw(make_bin):
    b = make_bin(fill=0.0, rate=10.0, variability=0.5)
    # u = 0 gives factor 0.5, u = 0.75 gives factor 1.25
    sim = FillSimulator(FixedRng([0.0, 0.75]))
    sim.advance([b], HOUR_MS, "normal")
    assert b.fill_level == pytest.approx(5.0)
    sim.advance([b], HOUR_MS, "normal")
    assert b.fill_level == pytest.approx(5.0 + 12.5)


def test_increment_stays_within_statistical_bounds(make_bin, rng):
    sim = FillSimulator(rng)
    increments = []
    for _ in range(2000):
        b = make_bin(fill=10.0, rate=2.0, variability=0.3)
        sim.advance([b], HOUR_MS, "normal")
        increments.append(b.fill_level - 10.0)
    increments = np.array(increments)
    assert increments.min() >= 2.0 * 0.7 - 1e-9
    assert increments.max() <= 2.0 * 1.3 + 1e-9
    assert increments.mean() == pytest.approx(2.0, abs=0.05)


def test_fill_level_never_leaves_bounds(make_bin, rng):
    sim = FillSimulator(rng)
    bins = [make_bin(f"bin-{i}", fill=float(rng.uniform(0, 100)), rate=float(rng.uniform(0.5, 5)),
                     variability=float(rng.uniform(0, 1))) for i in range(30)]
    for scenario in ["normal", "weekend", "special-event"] * 20:
        sim.advance(bins, float(rng.uniform(0, 10 * HOUR_MS)), scenario)
        assert all(0.0 <= b.fill_level <= 100.0 for b in bins)


def test_malformed_bin_is_isolated(make_bin, rng):
    good = make_bin("bin-1", fill=10.0, rate=1.0)
    bad = make_bin("bin-2", fill=10.0)
    bad.base_fill_rate = None
    updated = FillSimulator(rng).advance([bad, good], HOUR_MS, "normal")
    assert updated == 1
    assert good.fill_level == pytest.approx(11.0)
    assert bad.fill_level == 10.0


def test_negative_elapsed_rejected(make_bin, rng):
    with pytest.raises(InvalidArgument):
        FillSimulator(rng).advance([make_bin()], -1.0, "normal")


class TestSensorDrift:
    def test_battery_drains_within_range_and_never_below_zero(self, make_bin, rng):
        sim = FillSimulator(rng)
        b = make_bin(battery=0.03)
        before = make_bin(battery=50.0)
        now = datetime(2025, 1, 1, 12)
        sim.drift_sensors([b, before], now)
        assert b.sensor.battery_level >= 0.0
        assert 50.0 - 0.05 <= before.sensor.battery_level <= 50.0 - 0.01
        assert before.sensor.last_transmission == now

    def test_battery_is_monotonic(self, make_bin, rng):
        sim = FillSimulator(rng)
        b = make_bin(battery=1.0)
        levels = []
        for _ in range(100):
            sim.drift_sensors([b], datetime.now())
            levels.append(b.sensor.battery_level)
        assert all(x >= y for x, y in zip(levels, levels[1:]))
        assert levels[-1] == 0.0

    @pytest.mark.parametrize("roll, expected", [
        (0.001, "offline"),
        (0.007, "intermittent"),
        (0.5, "online"),
    ])
    def test_connectivity_roll(self, make_bin, roll, expected):
        b = make_bin(connectivity="offline")
        FillSimulator(FixedRng([roll])).drift_sensors([b], datetime.now())
        assert b.sensor.connectivity == expected

    def test_connectivity_is_mostly_online(self, make_bin, rng):
        bins = [make_bin(f"bin-{i}") for i in range(20000)]
        FillSimulator(rng).drift_sensors(bins, datetime.now())
        offline = sum(1 for b in bins if b.sensor.connectivity == "offline")
        intermittent = sum(1 for b in bins if b.sensor.connectivity == "intermittent")
        assert 40 <= offline <= 170
        assert 40 <= intermittent <= 170
