# acoustic_wsn/cluster.py
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .constants import MAX_ACOUS_DIST, MIN_ACOUS_DIST
from .coordinate import Coordinate, distance
from .sensor_node import EnergyNode


@dataclass
class ChargeCluster:
    """Nodes inside the acoustic band of one PDV landing position.

    ``members`` holds indices into the node registry, never the nodes
    themselves.
    """
    center: Coordinate
    members: List[int] = field(default_factory=list)

    @classmethod
    def build_from(cls, center: Coordinate, nodes: Sequence[EnergyNode],
                   candidates: Optional[Iterable[int]] = None,
                   max_dist: float = MAX_ACOUS_DIST,
                   min_dist: float = MIN_ACOUS_DIST) -> "ChargeCluster":
        indices = range(len(nodes)) if candidates is None else candidates
        members = []
        for idx in indices:
            d = distance(center, nodes[idx].position)
            # nodes on either bound are out
            if min_dist < d < max_dist:
                members.append(idx)
        return cls(center=center, members=members)

    def __len__(self):
        return len(self.members)
