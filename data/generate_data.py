# data/generate_data.py
from __future__ import annotations
from datetime import datetime, timedelta
from typing import List, Optional

import numpy as np

from config import CITY_CENTER, CITY_SPREAD_DEG, INITIAL_BIN_COUNT, RANDOM_SEED
from data.scenarios import NEIGHBORHOODS
from model.bin import CATEGORIES, SensorData, WasteBin


def make_rng(seed: int = RANDOM_SEED) -> np.random.Generator:
    return np.random.default_rng(seed)


def generate_bins(n: int = INITIAL_BIN_COUNT, rng: Optional[np.random.Generator] = None,
                  now: Optional[datetime] = None) -> List[WasteBin]:
    rng = rng if rng is not None else make_rng()
    now = now or datetime.now()
    center_lat, center_lon = CITY_CENTER

    bins: List[WasteBin] = []
    for i in range(n):
        lat = center_lat + (rng.random() - 0.5) * CITY_SPREAD_DEG
        lon = center_lon + (rng.random() - 0.5) * CITY_SPREAD_DEG

        bins.append(
            WasteBin(
                id=f"bin-{i + 1}",
                location=(float(lat), float(lon)),
                name=f"Bin {i + 1}",
                fill_level=float(20 + rng.random() * 40),         # 20-60%
                capacity_liters=float(100 + rng.integers(0, 100)),  # 100-199 L
                base_fill_rate=float(2 + rng.random() * 3),       # 2-5% per hour, fast for demos
                variability_factor=float(rng.random() * 0.3),
                sensor=SensorData(
                    battery_level=float(70 + rng.integers(0, 30)),
                    connectivity="online",
                    last_transmission=now,
                ),
                last_collection_time=now - timedelta(days=float(rng.random() * 7)),
                neighborhood=str(rng.choice(NEIGHBORHOODS)),
                category=str(rng.choice(CATEGORIES)),
            )
        )
    return bins


def new_bin(bin_id: str, name: str, lat: float, lon: float, capacity_liters: float = 150.0,
            base_fill_rate: float = 1.0, neighborhood: str = "", category: str = "general",
            rng: Optional[np.random.Generator] = None) -> WasteBin:
    """A freshly installed bin: empty, full battery, online."""
    rng = rng if rng is not None else make_rng()
    now = datetime.now()
    return WasteBin(
        id=bin_id,
        location=(lat, lon),
        name=name,
        fill_level=0.0,
        capacity_liters=capacity_liters,
        base_fill_rate=base_fill_rate,
        variability_factor=float(rng.random() * 0.3),
        sensor=SensorData(battery_level=100.0, connectivity="online", last_transmission=now),
        last_collection_time=now,
        neighborhood=neighborhood,
        category=category,
    )
