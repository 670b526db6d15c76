from datetime import datetime

import numpy as np
import pytest

from model.bin import SensorData, WasteBin
from simulator.environment import Environment


@pytest.fixture
def make_bin():
    def _make(bin_id="bin-1", lat=0.0, lon=0.01, fill=50.0, capacity=100.0, rate=2.0,
              variability=0.0, neighborhood="Adabraka", battery=90.0, connectivity="online"):
        return WasteBin(
            id=bin_id,
            location=(lat, lon),
            name=bin_id.replace("bin-", "Bin "),
            capacity_liters=capacity,
            base_fill_rate=rate,
            variability_factor=variability,
            fill_level=fill,
            neighborhood=neighborhood,
            sensor=SensorData(battery_level=battery, connectivity=connectivity,
                              last_transmission=datetime(2024, 1, 1)),
            last_collection_time=datetime(2024, 1, 1),
        )
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def three_bins(make_bin):
    # collinear east of the depot at (0, 0)
    return [
        make_bin("bin-1", 0.0, 0.01, fill=40.0),
        make_bin("bin-2", 0.0, 0.02, fill=60.0),
        make_bin("bin-3", 0.0, 0.03, fill=95.0),
    ]


@pytest.fixture
def env(three_bins, rng):
    return Environment(bins=three_bins, rng=rng)
