# acoustic_wsn/network.py
import logging
from typing import Iterator, List, Optional
import numpy as np
import pandas as pd

from .config import WsnConfig
from .constants import SC_V_DEFAULT
from .coordinate import Coordinate, build_distance_matrix
from .sensor_node import EnergyNode, SensorKind

logger = logging.getLogger(__name__)


class NodeRegistry:
    """
    Append-only arena of sensor nodes.

    A node's index never changes once added, so clusters and routes refer to
    nodes by index.
    """

    def __init__(self, config: Optional[WsnConfig] = None):
        self.config = config or WsnConfig()
        self._nodes: List[EnergyNode] = []

    def add(self, node: EnergyNode) -> int:
        self._nodes.append(node)
        return len(self._nodes) - 1

    def add_node(self, x: float, y: float, voltage: float = SC_V_DEFAULT,
                 weight: Optional[int] = None, sensor_kind: SensorKind = SensorKind.PRESSURE) -> int:
        return self.add(EnergyNode(Coordinate(x, y), voltage, weight, sensor_kind, config=self.config))

    @classmethod
    def from_csv(cls, path: str, config: Optional[WsnConfig] = None) -> "NodeRegistry":
        """
        Columns: ``x, y`` (required), ``voltage, weight, sensor_type``
        (optional). Rows keep their file order as registry indices.
        """
        df = pd.read_csv(path, skipinitialspace=True).reset_index(drop=True)
        missing = {"x", "y"} - set(df.columns)
        if missing:
            raise ValueError(f"node file {path} lacks columns {sorted(missing)}")
        for col, default in (("voltage", SC_V_DEFAULT), ("weight", None), ("sensor_type", SensorKind.PRESSURE.value)):
            if col not in df.columns:
                df[col] = default

        registry = cls(config)
        for _, row in df.iterrows():
            voltage = float(row["voltage"]) if pd.notna(row["voltage"]) else SC_V_DEFAULT
            weight = int(row["weight"]) if pd.notna(row["weight"]) else None
            kind = str(row["sensor_type"]).strip().lower() if pd.notna(row["sensor_type"]) else "pressure"
            registry.add_node(float(row["x"]), float(row["y"]), voltage, weight, SensorKind(kind))
        logger.info("Loaded %d nodes from %s", len(registry), path)
        return registry

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([node.info() for node in self._nodes])

    def positions(self) -> List[Coordinate]:
        return [node.position for node in self._nodes]

    def distance_matrix(self, origin: Coordinate) -> np.ndarray:
        return build_distance_matrix(self.positions(), origin)

    def run_sense_cycle(self) -> List[int]:
        """Drain every live node by one sense cycle; returns indices that died."""
        died = []
        for idx, node in enumerate(self._nodes):
            if node.is_dead:
                continue
            node.run_sense_cycle()
            if node.is_dead:
                died.append(idx)
        if died:
            logger.warning("Nodes reached max sensing failures: %s", died)
        return died

    def alive(self) -> List[int]:
        return [i for i, node in enumerate(self._nodes) if not node.is_dead]

    def __getitem__(self, idx: int) -> EnergyNode:
        return self._nodes[idx]

    def __len__(self):
        return len(self._nodes)

    def __iter__(self) -> Iterator[EnergyNode]:
        return iter(self._nodes)
