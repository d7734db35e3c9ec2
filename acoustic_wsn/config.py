# acoustic_wsn/config.py
"""
Run configuration.

Every tunable of the node model and of the planner lives in one dataclass;
the defaults come from ``constants.py``. Nodes and the planner receive the
same instance so the physics used for scheduling and for dispatch never
diverge.

Units: energies in J, distances in m, voltages in V, currents in A,
durations in s.
"""
import json
import math
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, Optional, Tuple

from .constants import *
from .errors import ConfigError


@dataclass
class WsnConfig:
    # acoustic channel
    alpha_mat: float = ALPHA_MAT
    eff_acous: float = EFF_ACOUS
    acous_freq: float = ACOUS_FREQ
    eff_piezo: float = EFF_PIEZO
    eff_acous2dc: float = EFF_ACOUS2DC
    acous_energy_send: float = ACOUS_ENERGY_SEND
    max_acous_dist: float = MAX_ACOUS_DIST
    min_acous_dist: float = MIN_ACOUS_DIST
    max_fails: int = MAX_FAILS

    # node physics
    capacitance: float = SC_C
    v_max: float = SC_VMAX
    v_min: float = SC_VMIN
    v_critical: float = SC_VCRITICAL
    v_sense: float = V_SENSE
    i_sense: float = I_SENSE
    i_idle: float = I_IDLE
    sense_cycle: float = SENSE_CYCLE
    idle_cycle: float = IDLE_CYCLE

    # planner
    pop_size: int = DEFAULT_POP_SIZE
    pdv_count: Optional[int] = None
    cross_ratio: float = DEFAULT_CROSS_RATIO
    mutation_rate: float = DEFAULT_MUTATION_RATE
    fitness_weights: Tuple[float, float, float] = DEFAULT_FITNESS_WEIGHTS
    generation_budget: int = DEFAULT_GENERATIONS
    max_stagnation: Optional[int] = None
    min_requests: int = MIN_REQUESTS
    recharge_weight: int = WEIGHT_FULL
    standoff_dist: float = STANDOFF_DIST
    pdv_move_cost: float = PDV_MOVE_COST
    pdv_energy_budget: float = PDV_ENERGY_BUDGET
    depot: Tuple[float, float] = field(default=DEPOT)

    # runtime
    seed: Optional[int] = SEED
    n_workers: int = WORKERS
    log_interval: int = LOG_INTERVAL
    fit_cache_size: int = FIT_CACHE_MAX_ENTRIES

    def __post_init__(self):
        self.fitness_weights = tuple(float(w) for w in self.fitness_weights)
        self.depot = tuple(float(c) for c in self.depot)
        self.validate()

    def validate(self):
        if len(self.fitness_weights) != 3:
            raise ConfigError("fitness_weights must hold exactly (alpha, beta, gamma)")
        if any(w < 0 for w in self.fitness_weights):
            raise ConfigError("fitness weights must be non-negative")
        if not math.isclose(sum(self.fitness_weights), 1.0, abs_tol=1e-6):
            raise ConfigError(f"fitness weights must sum to 1, got {sum(self.fitness_weights):.6f}")
        for name in ("cross_ratio", "mutation_rate", "eff_piezo", "eff_acous2dc"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must lie in [0, 1], got {value}")
        if self.pop_size < 1:
            raise ConfigError("pop_size must be positive")
        if self.generation_budget < 0:
            raise ConfigError("generation_budget must be non-negative")
        if self.pdv_count is not None and self.pdv_count < 1:
            raise ConfigError("pdv_count override must be positive")
        if self.max_stagnation is not None and self.max_stagnation < 1:
            raise ConfigError("max_stagnation must be positive when set")
        if not 0.0 <= self.min_acous_dist < self.max_acous_dist:
            raise ConfigError("acoustic band must satisfy 0 <= min < max")
        if not 0.0 < self.v_critical <= self.v_min <= self.v_max:
            raise ConfigError("voltages must satisfy 0 < critical <= min <= max")
        if self.capacitance <= 0:
            raise ConfigError("capacitance must be positive")
        if self.standoff_dist < 0 or self.pdv_move_cost < 0 or self.acous_energy_send < 0:
            raise ConfigError("standoff_dist, pdv_move_cost and acous_energy_send must be non-negative")
        if self.pdv_energy_budget <= 0:
            raise ConfigError("pdv_energy_budget must be positive")
        if self.n_workers < 1:
            raise ConfigError("n_workers must be positive")
        if len(self.depot) != 2:
            raise ConfigError("depot must be an (x, y) pair")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["fitness_weights"] = list(self.fitness_weights)
        data["depot"] = list(self.depot)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WsnConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    def to_json(self, path: str):
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_json(cls, path: str) -> "WsnConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
