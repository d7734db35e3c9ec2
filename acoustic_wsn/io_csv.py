# acoustic_wsn/io_csv.py
import csv
import logging
import os
from typing import Dict, List, Sequence

from .coordinate import Coordinate
from .errors import RecordNotFoundError

logger = logging.getLogger(__name__)

Population = List[List[List[int]]]


def save_guess_to_csv(population: Population, output_path: str = "init_guess.csv"):
    """One row per (population, vehicle): ``pop, pdv, node, node, ...``."""
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for pop_idx, candidate in enumerate(population):
            for pdv_idx, route in enumerate(candidate):
                writer.writerow([pop_idx, pdv_idx, *route])
    logger.debug("Initial guess saved to %s (%d candidates)", output_path, len(population))


def _read_rows(path: str) -> List[List[int]]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Saved record file not found: {path}")
    rows = []
    with open(path, newline="", encoding="utf-8") as f:
        for row in csv.reader(f):
            if not row:
                continue
            rows.append([int(v) for v in row if v.strip() != ""])
    return rows


def read_guess_csv(path: str) -> Population:
    """Rebuild the nested population written by ``save_guess_to_csv``."""
    records: Dict[int, Dict[int, List[int]]] = {}
    for row in _read_rows(path):
        pop_idx, pdv_idx, route = row[0], row[1], row[2:]
        records.setdefault(pop_idx, {})[pdv_idx] = route
    population = []
    for pop_idx in sorted(records):
        vehicles = records[pop_idx]
        population.append([vehicles[v] for v in sorted(vehicles)])
    return population


def read_guess_data(path: str, pop_idx: int, pdv_idx: int) -> List[int]:
    for row in _read_rows(path):
        if row[0] == pop_idx and row[1] == pdv_idx:
            return row[2:]
    raise RecordNotFoundError(f"No record for population {pop_idx}, vehicle {pdv_idx} in {path}")


def save_sub_path_to_csv(routes: Sequence[Sequence[int]], output_path: str = "best_path.csv"):
    """Best candidate only: ``pdv, node, node, ...`` per row."""
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for pdv_idx, route in enumerate(routes):
            writer.writerow([pdv_idx, *route])
    logger.info("Best path saved to %s", output_path)


def read_sub_path_csv(path: str) -> List[List[int]]:
    routes = {}
    for row in _read_rows(path):
        routes[row[0]] = row[1:]
    return [routes[v] for v in sorted(routes)]


def save_waypoints_csv(paths: Sequence[Sequence[Coordinate]], output_path: str = "waypoints.csv"):
    lines = []
    for pdv_idx, path in enumerate(paths):
        for step, pos in enumerate(path):
            lines.append([pdv_idx, step, f"{pos.x:.6f}", f"{pos.y:.6f}"])
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["vehicle", "step", "x", "y"])
        writer.writerows(lines)
    logger.info("Waypoints saved to %s", output_path)
