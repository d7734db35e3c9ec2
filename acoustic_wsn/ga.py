# acoustic_wsn/ga.py
"""
Genetic path planner for the recharging vehicles (PDVs).

Each candidate solution is a list of routes, one per PDV, and every route is
an ordered list of node indices into the registry. A trail candidate is
derived from every target by an inter-route segment swap plus swap
mutation; the trail replaces its target only when strictly fitter.
"""
import logging
import math
import random
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .cluster import ChargeCluster
from .config import WsnConfig
from .constants import FIT_CACHE_DIGEST_BYTES, TOLERANCE
from .coordinate import Coordinate, distance
from .errors import GuessMismatchError
from .evaluator import COL_DIST, COL_DIST_CLOSED, COL_FAR, COL_NEAR, evaluate_routes_batch
from .io_csv import read_guess_csv, save_guess_to_csv
from .network import NodeRegistry
from .sensor_node import acoustic_yield
from .utils import FitnessCache, hash_route

logger = logging.getLogger(__name__)

Solution = List[List[int]]


@dataclass
class PlanResult:
    has_task: bool
    reason: str = ""
    requested: List[int] = field(default_factory=list)
    pdv_num: int = 0
    is_match: bool = False
    routes: Solution = field(default_factory=list)
    paths: List[List[Coordinate]] = field(default_factory=list)
    best_fitness: float = 0.0
    history: List[float] = field(default_factory=list)
    generations: int = 0
    elapsed: float = 0.0


def inv_tanh(x: float) -> float:
    return 1.0 - math.tanh(max(x, 0.0))


def is_partition(solution: Sequence[Sequence[int]], requested: Sequence[int]) -> bool:
    flat = [i for route in solution for i in route]
    return len(flat) == len(requested) and sorted(flat) == sorted(requested)


def repair_partition(solution: Solution, requested: Sequence[int],
                     boundary: Tuple[int, int] = (0, 0)) -> Solution:
    """
    Drop repeated or foreign indices (first occurrence wins), then insert the
    missing requested indices, in ``requested`` order, at ``boundary``
    (vehicle, position).
    """
    allowed = set(requested)
    seen = set()
    repaired = []
    for route in solution:
        kept = []
        for idx in route:
            if idx in allowed and idx not in seen:
                kept.append(idx)
                seen.add(idx)
        repaired.append(kept)
    missing = [idx for idx in requested if idx not in seen]
    if missing:
        if not repaired:
            repaired.append([])
        v = min(max(boundary[0], 0), len(repaired) - 1)
        pos = min(max(boundary[1], 0), len(repaired[v]))
        repaired[v][pos:pos] = missing
    return repaired


class PathPlanner:
    def __init__(self, nodes: NodeRegistry, config: Optional[WsnConfig] = None,
                 origin: Optional[Coordinate] = None):
        self.nodes = nodes
        self.config = config or nodes.config
        self.origin = Coordinate(*(origin if origin is not None else self.config.depot))
        self.pop_size = int(self.config.pop_size)
        self.n_gen = int(self.config.generation_budget)
        self.n_workers = int(self.config.n_workers)
        self.log_interval = max(1, int(self.config.log_interval))

        self.rng = random.Random(self.config.seed)
        self.fitness_cache = FitnessCache(self.config.fit_cache_size)

        self.dist_matrix = np.zeros((1, 1), dtype=np.float64)
        self.requested_nodes: List[int] = []
        self.clusters: List[Tuple[int, ChargeCluster]] = []
        self.pdv_num = 0
        self.is_match = False
        self.target_population: List[Solution] = []
        self.trail_population: List[Solution] = []
        self.target_fitness = np.zeros(0, dtype=np.float64)
        self.trail_fitness = np.zeros(0, dtype=np.float64)
        self.history: List[float] = []

    # eligibility and vehicle count
    def select_requested(self) -> List[int]:
        threshold = self.config.recharge_weight
        return [i for i, node in enumerate(self.nodes) if node.needs_recharge(threshold)]

    def check_task(self) -> bool:
        return len(self.requested_nodes) >= self.config.min_requests

    def prepare(self) -> bool:
        """Refresh distances and the requested set; False means no task."""
        self.fitness_cache.clear()
        self.dist_matrix = np.ascontiguousarray(self.nodes.distance_matrix(self.origin))
        self.requested_nodes = self.select_requested()
        if not self.check_task():
            return False
        self.pdv_num, self.is_match = self.calc_opt_pdv_num()
        return self.pdv_num > 0

    def calc_opt_pdv_num(self) -> Tuple[int, bool]:
        pool = list(self.requested_nodes)
        clusters = []
        while pool:
            # min() keeps the first node on equal distances
            center = min(pool, key=lambda i: distance(self.origin, self.nodes[i].position))
            cluster = ChargeCluster.build_from(
                self.nodes[center].position, self.nodes,
                candidates=[i for i in pool if i != center],
                max_dist=self.config.max_acous_dist,
                min_dist=self.config.min_acous_dist,
            )
            clusters.append((center, cluster))
            assigned = {center, *cluster.members}
            pool = [i for i in pool if i not in assigned]
        self.clusters = clusters

        n = len(self.requested_nodes)
        pdv_num = self.config.pdv_count if self.config.pdv_count is not None else len(clusters)
        pdv_num = min(pdv_num, n)
        is_match = pdv_num > 0 and n % pdv_num == 0
        logger.debug("%d clusters over %d requested nodes -> %d PDVs (match=%s)",
                     len(clusters), n, pdv_num, is_match)
        return pdv_num, is_match

    # initial guess
    def _cluster_order(self) -> List[int]:
        order = []
        for center, cluster in self.clusters:
            order.append(center)
            order.extend(cluster.members)
        return order

    def calc_init_guess(self) -> bool:
        order = self._cluster_order()
        base, rem = divmod(len(order), self.pdv_num)
        chunks = []
        start = 0
        for v in range(self.pdv_num):
            size = base + (1 if v < rem else 0)
            chunks.append(order[start:start + size])
            start += size

        pop = []
        for _ in range(self.pop_size):
            candidate = []
            for chunk in chunks:
                route = chunk[:]
                self.rng.shuffle(route)
                candidate.append(route)
            pop.append(candidate)
        self.target_population = pop
        return self.is_match

    def load_init_guess(self, path: str):
        population = read_guess_csv(path)
        for pop_idx, candidate in enumerate(population):
            if not is_partition(candidate, self.requested_nodes):
                raise GuessMismatchError(
                    f"candidate {pop_idx} in {path} does not cover the requested nodes")
        if not population:
            raise GuessMismatchError(f"{path} holds no candidates")
        self.target_population = population
        self.pdv_num = len(population[0])
        self.is_match = len(self.requested_nodes) % self.pdv_num == 0

    def save_init_guess(self, path: str):
        save_guess_to_csv(self.target_population, path)

    # fitness
    def _combine(self, route: Sequence[int], metrics: np.ndarray) -> float:
        """M = alpha*tanh(E_wsn) + beta*inv_tanh(d_pdv) + gamma*inv_tanh(E_pdv)"""
        if not route:
            return 0.0
        alpha, beta, gamma = self.config.fitness_weights
        cfg = self.config

        # share of the received acoustic energy that the capacitors can store
        offered = acoustic_yield(cfg.standoff_dist, cfg) * len(route)
        delivered = sum(self.nodes[idx].preview_acoustic_transfer(cfg.standoff_dist) for idx in route)
        e_wsn = delivered / offered if offered > TOLERANCE else 0.0

        d, d_near, d_far = metrics[COL_DIST], metrics[COL_NEAR], metrics[COL_FAR]
        span = d_far - d_near
        d_term = (d - d_near) / span if span > TOLERANCE else 0.0

        # round trip plus one transfer per stop, as a share of the PDV budget
        e_pdv = metrics[COL_DIST_CLOSED] * cfg.pdv_move_cost + cfg.acous_energy_send * len(route)
        e_term = e_pdv / cfg.pdv_energy_budget

        return alpha * math.tanh(e_wsn) + beta * inv_tanh(d_term) + gamma * inv_tanh(e_term)

    def evaluate_routes(self, routes: Sequence[Sequence[int]]) -> np.ndarray:
        fits = np.zeros(len(routes), dtype=np.float64)
        # node energies are part of the key
        keys = [hash_route(r, [self.nodes[i].energy for i in r], digest_size=FIT_CACHE_DIGEST_BYTES)
                for r in routes]
        uncached_idx = []
        for i, key in enumerate(keys):
            cached = self.fitness_cache.get(key)
            if cached is not None:
                fits[i] = cached
            else:
                uncached_idx.append(i)

        if uncached_idx:
            L = max(1, max(len(routes[i]) for i in uncached_idx))
            routes_batch = np.full((len(uncached_idx), L), -1, dtype=np.int64)
            lengths = np.zeros(len(uncached_idx), dtype=np.int64)
            for b, i in enumerate(uncached_idx):
                route = routes[i]
                lengths[b] = len(route)
                for k, idx in enumerate(route):
                    routes_batch[b, k] = idx + 1
            metrics = evaluate_routes_batch(routes_batch, lengths, self.dist_matrix)
            for b, i in enumerate(uncached_idx):
                fit = self._combine(routes[i], metrics[b])
                self.fitness_cache.set(keys[i], fit)
                fits[i] = fit
        return fits

    def fitness_func(self, route: Sequence[int]) -> float:
        return float(self.evaluate_routes([route])[0])

    def solution_fitness(self, solution: Solution) -> float:
        if not solution:
            return 0.0
        return float(np.mean(self.evaluate_routes(solution)))

    def evaluate_population(self, population: Sequence[Solution]) -> np.ndarray:
        if self.n_workers <= 1 or len(population) < 2:
            return np.array([self.solution_fitness(s) for s in population], dtype=np.float64)
        # map() yields in submission order, so results match the serial path
        with ThreadPoolExecutor(max_workers=self.n_workers) as ex:
            return np.array(list(ex.map(self.solution_fitness, population)), dtype=np.float64)

    # operators
    def inversion_mutation(self, route: List[int]) -> List[int]:
        if len(route) < 2:
            return route
        i, j = sorted(self.rng.sample(range(len(route)), 2))
        return route[:i] + route[i:j + 1][::-1] + route[j + 1:]

    def swap_mutation(self, route: List[int]):
        if len(route) >= 2 and self.rng.random() < self.config.mutation_rate:
            i, j = self.rng.sample(range(len(route)), 2)
            route[i], route[j] = route[j], route[i]

    def crossover_solution(self, solution: Solution) -> Solution:
        trail = [route[:] for route in solution]
        boundary = (0, 0)
        if self.rng.random() < self.config.cross_ratio:
            if len(trail) >= 2:
                v1, v2 = self.rng.sample(range(len(trail)), 2)
                r1, r2 = trail[v1], trail[v2]
                span = min(len(r1), len(r2))
                if span > 0:
                    size = self.rng.randint(1, span)
                    a = self.rng.randint(0, len(r1) - size)
                    b = self.rng.randint(0, len(r2) - size)
                    r1[a:a + size], r2[b:b + size] = r2[b:b + size], r1[a:a + size]
                    boundary = (v1, a)
            elif trail:
                trail[0] = self.inversion_mutation(trail[0])
            for route in trail:
                self.swap_mutation(route)
        return repair_partition(trail, self.requested_nodes, boundary)

    def crossover(self, population: Optional[Sequence[Solution]] = None) -> List[Solution]:
        population = self.target_population if population is None else population
        self.trail_population = [self.crossover_solution(s) for s in population]
        return self.trail_population

    def select(self) -> int:
        replaced = 0
        for idx in range(len(self.target_population)):
            if self.trail_fitness[idx] > self.target_fitness[idx]:
                self.target_population[idx] = self.trail_population[idx]
                self.target_fitness[idx] = self.trail_fitness[idx]
                replaced += 1
        return replaced

    def get_best_sol(self) -> int:
        if len(self.target_fitness) == 0:
            return -1
        # argmax keeps the first index on ties
        return int(np.argmax(self.target_fitness))

    def calc_final_path(self, best_idx: Optional[int] = None) -> List[List[Coordinate]]:
        best_idx = self.get_best_sol() if best_idx is None else best_idx
        if best_idx < 0:
            return []
        paths = []
        for route in self.target_population[best_idx]:
            paths.append([self.origin] + [self.nodes[i].position for i in route] + [self.origin])
        return paths

    # main loop
    def run_generations(self, verbose: bool = False) -> int:
        start_time = time.time()
        self.target_fitness = self.evaluate_population(self.target_population)
        best = float(np.max(self.target_fitness)) if len(self.target_fitness) else 0.0
        self.history = [best]
        stagnant = 0
        gen = 0

        if verbose:
            logger.info("=== GA started: %d candidates, %d PDVs, %d nodes ===",
                        len(self.target_population), self.pdv_num, len(self.requested_nodes))

        for gen in range(1, self.n_gen + 1):
            self.crossover()
            self.trail_fitness = self.evaluate_population(self.trail_population)
            replaced = self.select()

            current = float(np.max(self.target_fitness))
            if current > best:
                best = current
                stagnant = 0
            else:
                stagnant += 1
            self.history.append(current)

            if verbose and (gen % self.log_interval == 0 or gen == self.n_gen):
                elapsed = time.time() - start_time
                logger.info("G%4d | Fit: %.5f | Replaced: %d | Stag: %d | Elap: %.1fs",
                            gen, current, replaced, stagnant, elapsed)

            if self.config.max_stagnation is not None and stagnant >= self.config.max_stagnation:
                if verbose:
                    logger.info("Stagnation for %d generations (G%d), stopping.", stagnant, gen)
                break

        if verbose:
            logger.info("=== GA finished ===")
        return gen

    def plan(self, initial_guess: Optional[str] = None, verbose: bool = False) -> PlanResult:
        start_time = time.time()
        if not self.prepare():
            reason = (f"{len(self.requested_nodes)} requested nodes, "
                      f"minimum is {self.config.min_requests}")
            logger.info("No task: %s", reason)
            return PlanResult(False, reason=reason, requested=list(self.requested_nodes),
                              elapsed=time.time() - start_time)

        if initial_guess is not None:
            self.load_init_guess(initial_guess)
        else:
            self.calc_init_guess()

        generations = self.run_generations(verbose=verbose)
        best_idx = self.get_best_sol()
        routes = [route[:] for route in self.target_population[best_idx]]
        return PlanResult(
            True,
            requested=list(self.requested_nodes),
            pdv_num=self.pdv_num,
            is_match=self.is_match,
            routes=routes,
            paths=self.calc_final_path(best_idx),
            best_fitness=float(self.target_fitness[best_idx]),
            history=list(self.history),
            generations=generations,
            elapsed=time.time() - start_time,
        )
