# tests/conftest.py
import sys
import os
import tempfile
import shutil
import pytest

# --- make the package importable without installing ---
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from acoustic_wsn.config import WsnConfig
from acoustic_wsn.network import NodeRegistry


@pytest.fixture(scope="session")
def tmp_dir():
    d = tempfile.mkdtemp(prefix="tests_")
    yield d
    shutil.rmtree(d)


@pytest.fixture(scope="session")
def nodes_csv(tmp_dir):
    path = os.path.join(tmp_dir, "nodes.csv")
    with open(path, "w", encoding="utf-8") as f:
        f.write("x,y,voltage,sensor_type\n")
        f.write("1.0, 0.0, 3.3, pressure\n")       # critical
        f.write("1.4, 0.0, 3.45, temperature\n")   # degraded
        f.write("3.0, 2.0, 4.8, pressure\n")       # full
        f.write("5.0, 5.0, 3.2, temperature\n")    # critical
    return path


@pytest.fixture
def config():
    # small enough to run quickly
    return WsnConfig(pop_size=8, generation_budget=10, pdv_count=3, seed=7, min_requests=4)


@pytest.fixture
def line_registry():
    """Factory: ``n`` nodes on the x axis, 1 m apart, starting at x = 1."""
    def _make(n, config, voltage=3.3, spacing=1.0):
        registry = NodeRegistry(config)
        for i in range(n):
            registry.add_node(1.0 + i * spacing, 0.0, voltage)
        return registry
    return _make


@pytest.fixture
def planner_instance(config, line_registry):
    from acoustic_wsn.ga import PathPlanner
    planner = PathPlanner(line_registry(12, config), config)
    assert planner.prepare()
    return planner
