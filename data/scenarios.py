# data/scenarios.py
# Fill-rate multipliers per scenario. "flat" applies to every bin, the
# neighborhood table overrides it for the listed neighborhoods.

SCENARIOS = {
    "normal": {
        "flat": 1.0,
        "neighborhoods": {},
    },
    "weekend": {
        "flat": 1.0,
        "neighborhoods": {
            "Cantonments": 0.7,   # business district, quieter
            "Osu": 1.2,           # residential
            "Labone": 1.2,
        },
    },
    "special-event": {
        "flat": 2.0,
        "neighborhoods": {},
    },
}

NEIGHBORHOODS = ["Airport Residential", "Cantonments", "Osu", "Labone", "Adabraka"]
