# config.py
from dataclasses import dataclass

# Reproducibility
RANDOM_SEED = 42

# City (Accra, Ghana)
CITY_CENTER = (5.6037, -0.1870)
CITY_SPREAD_DEG = 0.05   # bins are scattered +/- half of this around the center
INITIAL_BIN_COUNT = 40
DEFAULT_DEPOT = (5.5913, -0.1743)

# Clock cadences
TICK_INTERVAL_MS = 1000
BIN_CHECK_INTERVAL_MS = 5000              # real time
SENSOR_UPDATE_INTERVAL_MS = 15 * 60 * 1000  # simulated time
VALID_SPEEDS = (1, 2, 4, 8)
ROUTE_PROGRESS_PER_TICK = 0.02

# Bins
COLLECTION_THRESHOLD_PCT = 50.0
CRITICAL_FILL_PCT = 90.0
HIGH_FILL_BAND_PCT = (75.0, 80.0)
LOW_BATTERY_PCT = 20.0

# Sensor drift
BATTERY_DRAIN_RANGE = (0.01, 0.05)
OFFLINE_PROBABILITY = 0.005
INTERMITTENT_PROBABILITY = 0.005

# Vehicle
VEHICLE_CAPACITY_L = 8000.0
COLLECT_FRACTION = 0.9   # share of a leg after which the next bin is collected


@dataclass
class CostModel:
    speed_kmh: float = 30.0
    fuel_l_per_km: float = 0.3
    co2_kg_per_l: float = 2.68
    service_min_per_bin: float = 0.0
