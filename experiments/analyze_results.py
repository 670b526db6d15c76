# experiments/analyze_results.py
from __future__ import annotations
import os
import csv
from collections import defaultdict

from model.route import RouteMetrics
from simulator.analytics import route_savings


INT_FIELDS = ("bins_collected", "collection_events", "completed", "alerts", "runs")
FLOAT_FIELDS = (
    "total_distance_km", "estimated_duration_min", "fuel_consumption_l",
    "co2_emissions_kg", "total_waste_collected_l", "vehicle_load_l",
)


def load_metrics(csv_path: str):
    rows = []
    with open(csv_path, "r", encoding="utf-8") as f:
        r = csv.DictReader(f)
        for row in r:
            # known metric columns only, anything else stays text
            for k in INT_FIELDS:
                if row.get(k):
                    row[k] = int(row[k])
            for k in FLOAT_FIELDS:
                if row.get(k):
                    row[k] = float(row[k])
            rows.append(row)
    return rows


def summarize(rows):
    # group by (scenario, route)
    groups = defaultdict(list)
    for row in rows:
        groups[(row["scenario"], row["route"])].append(row)

    summary = []
    for (scenario, route), items in groups.items():
        def avg(key):
            vals = [x[key] for x in items if x.get(key) not in (None, "")]
            return sum(vals) / len(vals) if vals else None

        summary.append({
            "scenario": scenario,
            "route": route,
            "runs": len(items),
            "bins_collected_avg": avg("bins_collected"),
            "total_distance_km_avg": avg("total_distance_km"),
            "estimated_duration_min_avg": avg("estimated_duration_min"),
            "fuel_consumption_l_avg": avg("fuel_consumption_l"),
            "co2_emissions_kg_avg": avg("co2_emissions_kg"),
            "total_waste_collected_l_avg": avg("total_waste_collected_l"),
        })
    return summary


def savings_by_scenario(summary):
    """Optimized vs baseline per scenario, from the averaged summary rows."""
    by_key = {(s["scenario"], s["route"]): s for s in summary}
    out = []
    for scenario in sorted(set(s["scenario"] for s in summary)):
        base = by_key.get((scenario, "baseline"))
        opt = by_key.get((scenario, "optimized"))
        if base is None or opt is None:
            continue

        def to_metrics(s):
            return RouteMetrics(
                total_distance_km=s["total_distance_km_avg"],
                estimated_duration_min=s["estimated_duration_min_avg"],
                fuel_consumption_l=s["fuel_consumption_l_avg"],
                co2_emissions_kg=s["co2_emissions_kg_avg"],
            )

        row = {"scenario": scenario}
        row.update(route_savings(to_metrics(base), to_metrics(opt)))
        out.append(row)
    return out


def save_summary(summary, out_csv):
    if not summary:
        return
    os.makedirs(os.path.dirname(out_csv), exist_ok=True)
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(summary[0].keys()))
        w.writeheader()
        w.writerows(summary)
