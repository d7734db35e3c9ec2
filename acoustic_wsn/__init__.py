# acoustic_wsn/__init__.py
"""
Acoustic recharge WSN simulator with a genetic PDV path planner.
"""
from .constants import *
from .errors import WsnError, InvalidPhysicalInput, ConfigError, RecordNotFoundError, GuessMismatchError
from .config import WsnConfig
from .logger import setup_logging
from .coordinate import Coordinate, distance
from .sensor_node import EnergyNode, SensorKind, WeightTier
from .cluster import ChargeCluster
from .network import NodeRegistry
from .ga import PathPlanner, PlanResult, repair_partition
from .io_csv import save_guess_to_csv, read_guess_csv, read_guess_data, save_sub_path_to_csv, read_sub_path_csv
from .simulation import RechargeSimulation

__all__ = [
    "WsnConfig", "Coordinate", "distance", "EnergyNode", "SensorKind", "WeightTier",
    "ChargeCluster", "NodeRegistry", "PathPlanner", "PlanResult", "repair_partition",
    "RechargeSimulation", "setup_logging",
    "save_guess_to_csv", "read_guess_csv", "read_guess_data",
    "save_sub_path_to_csv", "read_sub_path_csv",
    "WsnError", "InvalidPhysicalInput", "ConfigError", "RecordNotFoundError", "GuessMismatchError",
]
