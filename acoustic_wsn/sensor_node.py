# acoustic_wsn/sensor_node.py
import math
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from .config import WsnConfig
from .constants import SC_V_DEFAULT, TWO_PI, WEIGHT_DEGRADED, WEIGHT_FULL, WEIGHT_LOW
from .coordinate import Coordinate
from .errors import InvalidPhysicalInput


class SensorKind(Enum):
    PRESSURE = "pressure"
    TEMPERATURE = "temperature"


class WeightTier(IntEnum):
    LOW = WEIGHT_LOW
    DEGRADED = WEIGHT_DEGRADED
    FULL = WEIGHT_FULL


def acoustic_yield(distance: float, config: WsnConfig) -> float:
    """
    Energy reaching a node from one acoustic transfer at ``distance``.

    omega = 2*pi*f
    g     = exp(-omega**n * d * alpha)
    E_t   = eta_piezo * g * E_send
    E_r   = eta_piezo * eta_acous2dc * E_t
    """
    if distance < 0:
        raise InvalidPhysicalInput(f"transfer distance must be non-negative, got {distance}")
    omega = TWO_PI * config.acous_freq
    g = math.exp(-(omega ** config.eff_acous) * distance * config.alpha_mat)
    e_sent = config.eff_piezo * g * config.acous_energy_send
    return config.eff_piezo * config.eff_acous2dc * e_sent


class EnergyNode:
    """
    Electrical state of one sensor node powered by a super capacitor.

    ``voltage`` and ``energy`` are kept in sync (E = 0.5*C*V^2) by every
    mutating method; ``weight`` follows the voltage through ``update_weight``.
    """

    def __init__(self, position: Coordinate = Coordinate(0.0, 0.0), voltage: float = SC_V_DEFAULT,
                 weight: Optional[int] = None, sensor_kind: SensorKind = SensorKind.PRESSURE,
                 config: Optional[WsnConfig] = None):
        self.config = config or WsnConfig()
        if not 0.0 <= voltage <= self.config.v_max:
            raise InvalidPhysicalInput(f"voltage must lie in [0, {self.config.v_max}], got {voltage}")
        self.position = Coordinate(*position)
        self.voltage = float(voltage)
        self.energy = 0.0
        self.energy_from_voltage()
        self.weight = self.update_weight() if weight is None else int(weight)
        self.sensing_failures = 0
        self.sensor_kind = sensor_kind

    # conversions
    def voltage_from_energy(self) -> float:
        self.voltage = math.sqrt(2.0 * self.energy / self.config.capacitance)
        return self.voltage

    def energy_from_voltage(self) -> float:
        self.energy = 0.5 * self.config.capacitance * self.voltage ** 2
        return self.energy

    def calc_max_energy(self) -> float:
        return 0.5 * self.config.capacitance * self.config.v_max ** 2

    def calc_package(self) -> float:
        """Energy still missing for a full capacitor."""
        return max(0.0, self.calc_max_energy() - self.energy)

    # consumption
    def consume_over_time(self, duration: float, sensing: bool = False) -> float:
        """Drain ``V*I*t`` joules; returns the energy actually removed."""
        if duration < 0:
            raise InvalidPhysicalInput(f"duration must be non-negative, got {duration}")
        current = self.config.i_sense if sensing else self.config.i_idle
        spent = min(self.energy, self.voltage * current * duration)
        self.energy -= spent
        self.voltage_from_energy()
        return spent

    def run_sense_cycle(self) -> bool:
        """One sense phase followed by one idle phase; records the outcome."""
        self.consume_over_time(self.config.sense_cycle, sensing=True)
        success = self.voltage >= self.config.v_sense
        self.consume_over_time(self.config.idle_cycle, sensing=False)
        self.update_weight()
        self.record_sensing_outcome(success)
        return success

    def update_weight(self) -> int:
        if self.voltage > self.config.v_min:
            self.weight = int(WeightTier.FULL)
        elif self.voltage > self.config.v_critical:
            self.weight = int(WeightTier.DEGRADED)
        else:
            self.weight = int(WeightTier.LOW)
        return self.weight

    # acoustic transfer
    def preview_acoustic_transfer(self, distance: float) -> float:
        """Energy a transfer at ``distance`` would store, without applying it."""
        return min(acoustic_yield(distance, self.config), self.calc_package())

    def receive_acoustic_transfer(self, distance: float) -> float:
        received = acoustic_yield(distance, self.config)
        before = self.energy
        self.energy = min(self.energy + received, self.calc_max_energy())
        self.voltage_from_energy()
        self.update_weight()
        # dead is terminal; a live node above critical starts counting afresh
        if not self.is_dead and self.voltage > self.config.v_critical:
            self.sensing_failures = 0
        return self.energy - before

    # sensing failures
    def record_sensing_outcome(self, success: bool) -> bool:
        """Returns True once the node has reached ``max_fails``."""
        if self.is_dead:
            return True
        if success:
            self.sensing_failures = 0
        else:
            self.sensing_failures += 1
        return self.is_dead

    @property
    def is_dead(self) -> bool:
        return self.sensing_failures >= self.config.max_fails

    def needs_recharge(self, threshold: Optional[int] = None) -> bool:
        if self.is_dead:
            return False
        threshold = self.config.recharge_weight if threshold is None else threshold
        return self.weight < threshold or self.sensing_failures > 0

    def info(self) -> Dict[str, Any]:
        return {
            "x": self.position.x,
            "y": self.position.y,
            "voltage": round(self.voltage, 4),
            "energy": round(self.energy, 4),
            "weight": self.weight,
            "fails": self.sensing_failures,
            "sensor_type": self.sensor_kind.value,
            "dead": self.is_dead,
        }

    def __repr__(self):
        return (f"EnergyNode(pos=({self.position.x:.3f}, {self.position.y:.3f}), "
                f"V={self.voltage:.3f}, w={self.weight}, fails={self.sensing_failures})")
