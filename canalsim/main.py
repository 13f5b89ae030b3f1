"""Main entry point for the CanalSim simulator."""

import argparse
import sys
from pathlib import Path
import yaml

from canalsim.core.simulator import CanalSimulator
from canalsim.reports.report_writer import ReportWriter
from canalsim.utils.logger import set_global_level, setup_logger
from configs import load_config, load_scenario, merge_configs

EXPERIMENTS = {
    1: "experiment1",
    2: "experiment2",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="canalsim",
        description="CanalSim: vessel traffic through a capacity-constrained canal",
    )
    parser.add_argument(
        "-v", "--validate",
        action="store_true",
        help="Run the model validation scenario",
    )
    parser.add_argument(
        "-e", "--experiment",
        type=int,
        metavar="ID",
        help="Run experiment 1 or 2",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with parameter overrides",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results",
        help="Directory to save the report",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed override",
    )
    parser.add_argument(
        "--days",
        type=float,
        default=None,
        help="Simulation horizon override (days)",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Generate visualization plots",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def resolve_scenario(args, logger):
    """Map the command line to a bundled scenario name, or None."""
    if args.validate:
        return "validation"
    if args.experiment is None:
        return None
    if args.experiment not in EXPERIMENTS:
        logger.warning(f"Unknown experiment {args.experiment}, nothing to run")
        return None
    return EXPERIMENTS[args.experiment]


def run_scenario(name: str, args, logger) -> Path:
    """Run one scenario and write its report.

    Returns:
        Path to the written report
    """
    config = load_scenario(name)
    if args.config:
        config = merge_configs(config, load_config(args.config))
    if args.seed is not None:
        config['simulation']['random_seed'] = args.seed
    if args.days is not None:
        config['simulation']['days'] = args.days

    logger.info(f"Scenario: {name}")
    simulator = CanalSimulator(config)
    results = simulator.run()

    output_dir = Path(args.output_dir)
    writer = ReportWriter()
    report_path = writer.write(results, output_dir / f"{name}.out",
                               title=f"CANAL SIMULATION - {name.upper()}")
    writer.write_csv(results, output_dir / f"{name}_resources.csv")

    summary = {k: v for k, v in results.items()
               if isinstance(v, (int, float, str)) and not isinstance(v, bool)}
    with open(output_dir / f"{name}_summary.yaml", 'w') as f:
        yaml.safe_dump(summary, f, default_flow_style=False)

    logger.info(f"Completed ships: {results['completed_ships']}")
    logger.info(f"Rejected ships: {results['rejected_ships']}")
    logger.info(f"Interrupted ships: {results['interrupted_ships']}")
    logger.info(f"Report saved to {report_path}")

    if args.plot:
        from canalsim.utils.visualization import plot_results
        plot_results(results, output_dir / name)
        logger.info(f"Plots saved to {output_dir / name}")

    return report_path


def main(argv=None) -> int:
    """Main function."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.verbose else "INFO"
    set_global_level(log_level)
    logger = setup_logger("CanalSim")

    if not args.validate and args.experiment is None:
        parser.print_usage()
        return 0

    scenario = resolve_scenario(args, logger)
    if scenario is None:
        return 0

    try:
        run_scenario(scenario, args, logger)
        logger.info("Simulation completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Simulation failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
