"""Basic canal simulation example."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from canalsim.core.simulator import CanalSimulator
from canalsim.reports.report_writer import ReportWriter
from canalsim.utils.logger import setup_logger
from configs import load_scenario


def main():
    """Run one month of mixed traffic with a tighter canal."""
    logger = setup_logger("BasicSimulation")

    logger.info("=== Basic Canal Simulation ===")

    config = load_scenario("experiment1")

    # Customize for this example
    config['canal']['capacity'] = 12
    config['simulation']['days'] = 30

    logger.info(f"Running simulation for {config['simulation']['days']} days")
    logger.info(f"Canal capacity: {config['canal']['capacity']} ships")

    simulator = CanalSimulator(config)
    results = simulator.run()

    logger.info("\n=== Results ===")
    logger.info(f"Generated ships: {results['generated_ships']}")
    logger.info(f"Completed ships: {results['completed_ships']}")
    logger.info(f"Rejected ships: {results['rejected_ships']}")
    logger.info(f"Ships per day: {results['ships_per_day']:.2f}")

    if 'mean_transit_time' in results:
        logger.info(f"\nTransit time:")
        logger.info(f"  Median: {results['median_transit_time'] / 60:.2f} h")
        logger.info(f"  P95: {results['p95_transit_time'] / 60:.2f} h")

    logger.info(f"\nRestricted for {results['canal']['restricted_time'] / 60:.1f} h "
                f"over {results['canal']['transitions']} state changes")

    print(ReportWriter().generate_report(results, title="BASIC EXAMPLE"))


if __name__ == "__main__":
    main()
