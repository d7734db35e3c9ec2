# acoustic_wsn/simulation.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import WsnConfig
from .coordinate import distance
from .ga import PathPlanner, PlanResult
from .network import NodeRegistry

logger = logging.getLogger(__name__)


@dataclass
class CycleReport:
    cycle: int
    plan: PlanResult
    died: List[int] = field(default_factory=list)
    delivered: Dict[int, float] = field(default_factory=dict)

    @property
    def total_delivered(self) -> float:
        return sum(self.delivered.values())


class RechargeSimulation:
    """
    Repeats drain -> plan -> dispatch over a fixed network.

    At every stop the PDV transfers to the visited node from
    ``standoff_dist`` and tops up the requested neighbours that sit inside
    the acoustic band of that node.
    """

    def __init__(self, nodes: NodeRegistry, config: Optional[WsnConfig] = None):
        self.nodes = nodes
        self.config = config or nodes.config
        self.planner = PathPlanner(nodes, self.config)
        self.reports: List[CycleReport] = []

    def dispatch(self, plan: PlanResult) -> Dict[int, float]:
        delivered: Dict[int, float] = {}
        cfg = self.config
        for route in plan.routes:
            for idx in route:
                node = self.nodes[idx]
                delivered[idx] = delivered.get(idx, 0.0) + node.receive_acoustic_transfer(cfg.standoff_dist)
                for other in plan.requested:
                    if other == idx:
                        continue
                    d = distance(node.position, self.nodes[other].position)
                    if cfg.min_acous_dist < d < cfg.max_acous_dist:
                        got = self.nodes[other].receive_acoustic_transfer(d)
                        delivered[other] = delivered.get(other, 0.0) + got
        return delivered

    def step(self, verbose: bool = False) -> CycleReport:
        cycle = len(self.reports) + 1
        died = self.nodes.run_sense_cycle()
        plan = self.planner.plan(verbose=verbose)
        delivered = self.dispatch(plan) if plan.has_task else {}
        report = CycleReport(cycle=cycle, plan=plan, died=died, delivered=delivered)
        self.reports.append(report)
        logger.info("Cycle %d | task=%s | PDVs=%d | fit=%.5f | delivered=%.3fJ | dead=%d",
                    cycle, plan.has_task, plan.pdv_num, plan.best_fitness,
                    report.total_delivered, len(self.nodes) - len(self.nodes.alive()))
        return report

    def run(self, cycles: int, verbose: bool = False) -> List[CycleReport]:
        if cycles < 0:
            raise ValueError(f"cycles must be non-negative, got {cycles}")
        return [self.step(verbose=verbose) for _ in range(cycles)]
