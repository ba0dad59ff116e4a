"""
hmclient CLI entry point.

This module contains:
- Argparse setup for all subcommands
- main() entry point (referenced by pyproject.toml: hmclient.cli.main:main)

Command implementations are in the commands/ subpackage.
"""

import argparse
import logging

from hmclient.cli.commands import cmd_evaluate, cmd_run, cmd_scenario

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help="Path to hmclient.yaml (optional; defaults to the nearest hmclient.yaml above the cwd, "
        "then the built-in Chakong-Haimes problem)",
    )


def main():
    parser = argparse.ArgumentParser(description="HyperMapper evaluation client")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log raw protocol lines")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # run
    parser_run = subparsers.add_parser("run", help="Run a full optimization against HyperMapper")
    _add_config_argument(parser_run)
    parser_run.add_argument("--run-dir", dest="run_dir", help="Directory the run is rooted in (default: cwd)")
    parser_run.add_argument(
        "--no-pareto",
        dest="no_pareto",
        action="store_true",
        help="Skip the Pareto front post-processing step",
    )
    parser_run.set_defaults(func=cmd_run)

    # scenario
    parser_scenario = subparsers.add_parser("scenario", help="Write the scenario file only")
    _add_config_argument(parser_scenario)
    parser_scenario.add_argument("--run-dir", dest="run_dir", help="Directory the run is rooted in (default: cwd)")
    parser_scenario.set_defaults(func=cmd_scenario)

    # evaluate
    parser_evaluate = subparsers.add_parser("evaluate", help="Evaluate a single point, e.g. x0=2 x1=1")
    _add_config_argument(parser_evaluate)
    parser_evaluate.add_argument("assignments", nargs="+", help="Parameter values as key=value")
    parser_evaluate.set_defaults(func=cmd_evaluate)

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
