# run.py
import os
from acoustic_wsn import NodeRegistry, PathPlanner, WsnConfig, setup_logging
from acoustic_wsn.io_csv import save_sub_path_to_csv, save_waypoints_csv


def main():
    nodes_path = "nodes.csv"
    config_path = "config.json"

    logger = setup_logging("INFO")

    if not os.path.exists(nodes_path):
        raise FileNotFoundError(f"Node file not found: {nodes_path}")
    config = WsnConfig.from_json(config_path) if os.path.exists(config_path) else WsnConfig()

    nodes = NodeRegistry.from_csv(nodes_path, config)
    planner = PathPlanner(nodes, config)
    result = planner.plan(verbose=True)

    if not result.has_task:
        logger.info("Nothing to recharge this cycle (%s)", result.reason)
        return

    planner.save_init_guess("init_guess.csv")

    logger.info("=" * 70)
    logger.info("BEST SOLUTION")
    logger.info("=" * 70)
    logger.info("Fitness: %.5f", result.best_fitness)
    logger.info("PDVs: %d (balanced: %s)", result.pdv_num, result.is_match)
    for pdv, route in enumerate(result.routes):
        logger.info("PDV %d: %s", pdv, route)
    logger.info("Generations: %d in %.2fs", result.generations, result.elapsed)
    logger.info("=" * 70)

    save_sub_path_to_csv(result.routes, "best_path.csv")
    save_waypoints_csv(result.paths, "waypoints.csv")


if __name__ == "__main__":
    main()
