# tests/test_sensor_node.py
import math
import pytest

from acoustic_wsn.config import WsnConfig
from acoustic_wsn.coordinate import Coordinate
from acoustic_wsn.errors import InvalidPhysicalInput
from acoustic_wsn.sensor_node import EnergyNode, SensorKind, WeightTier, acoustic_yield


def test_defaults():
    node = EnergyNode()
    assert node.position == Coordinate(0.0, 0.0)
    assert abs(node.voltage - 3.4) < 1e-12
    assert abs(node.energy - 17.34) < 1e-9
    assert node.weight == WeightTier.DEGRADED
    assert node.sensing_failures == 0
    assert node.sensor_kind is SensorKind.PRESSURE


@pytest.mark.parametrize("voltage", [0.0, 0.5, 3.3, 3.5, 4.2, 5.0])
def test_voltage_energy_round_trip(voltage):
    node = EnergyNode(voltage=voltage)
    node.energy_from_voltage()
    node.voltage_from_energy()
    assert math.isclose(node.voltage, voltage, rel_tol=1e-12, abs_tol=1e-12)
    assert math.isclose(node.energy, 0.5 * node.config.capacitance * voltage ** 2, rel_tol=1e-12)


def test_voltage_out_of_range_rejected():
    with pytest.raises(InvalidPhysicalInput):
        EnergyNode(voltage=5.5)
    with pytest.raises(InvalidPhysicalInput):
        EnergyNode(voltage=-0.1)


def test_consume_over_time_uses_phase_current():
    idle = EnergyNode(voltage=4.0)
    sense = EnergyNode(voltage=4.0)
    spent_idle = idle.consume_over_time(1.0)
    spent_sense = sense.consume_over_time(1.0, sensing=True)
    assert math.isclose(spent_idle, 4.0 * idle.config.i_idle)
    assert math.isclose(spent_sense, 4.0 * sense.config.i_sense)
    assert sense.voltage < idle.voltage < 4.0
    assert math.isclose(sense.energy, 0.5 * sense.config.capacitance * sense.voltage ** 2)


def test_consume_over_time_clamps_at_zero():
    node = EnergyNode(voltage=0.01)
    node.consume_over_time(1e9, sensing=True)
    assert node.energy == 0.0
    assert node.voltage == 0.0


def test_negative_inputs_fail_loudly():
    node = EnergyNode()
    with pytest.raises(InvalidPhysicalInput):
        node.consume_over_time(-1.0)
    with pytest.raises(InvalidPhysicalInput):
        node.receive_acoustic_transfer(-0.5)
    with pytest.raises(InvalidPhysicalInput):
        node.preview_acoustic_transfer(-0.5)
    # nothing changed
    assert abs(node.voltage - 3.4) < 1e-12


@pytest.mark.parametrize("voltage,tier", [
    (5.0, WeightTier.FULL),
    (3.51, WeightTier.FULL),
    (3.5, WeightTier.DEGRADED),
    (3.31, WeightTier.DEGRADED),
    (3.3, WeightTier.LOW),
    (1.0, WeightTier.LOW),
])
def test_update_weight_tiers(voltage, tier):
    node = EnergyNode(voltage=voltage)
    assert node.update_weight() == tier


def test_user_weight_is_kept_until_update():
    node = EnergyNode(voltage=3.0, weight=WeightTier.FULL)
    assert node.weight == WeightTier.FULL
    assert node.update_weight() == WeightTier.LOW


def test_transfer_from_critical_raises_voltage_and_tier():
    node = EnergyNode(voltage=3.3)
    assert node.weight == WeightTier.LOW
    delivered = node.receive_acoustic_transfer(0.5)
    assert delivered > 0.0
    assert node.voltage > 3.3
    assert node.weight > WeightTier.LOW
    assert math.isclose(node.energy, 0.5 * node.config.capacitance * node.voltage ** 2)


def test_transfer_never_exceeds_max_energy():
    node = EnergyNode(voltage=4.99)
    delivered = node.receive_acoustic_transfer(0.0)
    assert node.energy <= node.calc_max_energy() + 1e-12
    assert node.voltage <= node.config.v_max + 1e-12
    assert delivered <= node.config.acous_energy_send
    # full node receives nothing
    assert node.receive_acoustic_transfer(0.0) == 0.0


@pytest.mark.parametrize("d", [0.0, 0.1, 0.5, 0.7, 2.0])
def test_delivered_bounded_by_send_energy(d):
    cfg = WsnConfig()
    assert 0.0 < acoustic_yield(d, cfg) <= cfg.acous_energy_send


def test_yield_decreases_with_distance():
    cfg = WsnConfig()
    assert acoustic_yield(0.2, cfg) > acoustic_yield(0.5, cfg) > acoustic_yield(0.7, cfg)


def test_preview_does_not_mutate():
    node = EnergyNode(voltage=3.3)
    preview = node.preview_acoustic_transfer(0.5)
    assert abs(node.voltage - 3.3) < 1e-12
    assert math.isclose(preview, node.receive_acoustic_transfer(0.5))


def test_calc_package():
    node = EnergyNode(voltage=3.0)
    assert math.isclose(node.calc_package(), 0.5 * 3 * (5.0 ** 2 - 3.0 ** 2))
    assert EnergyNode(voltage=5.0).calc_package() == 0.0


def test_sensing_failures_and_death():
    node = EnergyNode(voltage=3.0)
    for _ in range(node.config.max_fails - 1):
        assert node.record_sensing_outcome(False) is False
    assert node.sensing_failures == node.config.max_fails - 1
    assert node.record_sensing_outcome(True) is False
    assert node.sensing_failures == 0
    for _ in range(node.config.max_fails):
        dead = node.record_sensing_outcome(False)
    assert dead and node.is_dead
    # dead is terminal
    assert node.record_sensing_outcome(True) is True
    node.receive_acoustic_transfer(0.1)
    assert node.is_dead
    assert not node.needs_recharge()


def test_successful_recharge_resets_failures():
    node = EnergyNode(voltage=3.3)
    node.record_sensing_outcome(False)
    node.record_sensing_outcome(False)
    node.receive_acoustic_transfer(0.5)
    assert node.sensing_failures == 0


def test_needs_recharge():
    assert not EnergyNode(voltage=4.5).needs_recharge()
    assert EnergyNode(voltage=3.4).needs_recharge()
    full = EnergyNode(voltage=4.5)
    full.record_sensing_outcome(False)
    assert full.needs_recharge()


def test_run_sense_cycle():
    healthy = EnergyNode(voltage=3.4)
    assert healthy.run_sense_cycle() is True
    assert healthy.sensing_failures == 0
    assert healthy.voltage < 3.4

    weak = EnergyNode(voltage=3.2)
    assert weak.run_sense_cycle() is False
    assert weak.sensing_failures == 1
    assert weak.weight == WeightTier.LOW


def test_info_reports_state():
    info = EnergyNode(Coordinate(1.0, 2.0), voltage=3.4, sensor_kind=SensorKind.TEMPERATURE).info()
    assert info["x"] == 1.0 and info["y"] == 2.0
    assert info["sensor_type"] == "temperature"
    assert info["dead"] is False
