"""
Inspection CLI commands.

Contains:
- cmd_scenario: Write the scenario artifact without launching the optimizer
- cmd_evaluate: Evaluate a single point with the configured evaluator
"""

import logging
import sys
from pathlib import Path

from hmclient.config.client_config import resolve_client_config
from hmclient.config.scenario_builder import build_scenario
from hmclient.core.errors import HMClientError
from hmclient.orchestration.run_lifecycle import prepare_run
from hmclient.runtime.protocol import format_number

logger = logging.getLogger("cli.inspection")


def cmd_scenario(args):
    """
    Write the scenario artifact and print its path.
    """
    try:
        config = resolve_client_config(args.config)
        run_directory = Path(args.run_dir) if args.run_dir else None
        _, _, descriptor = prepare_run(config, run_directory)
        path = build_scenario(descriptor)
    except HMClientError as e:
        logger.error(f"Failed to write scenario: {e}")
        sys.exit(1)
    print(f"Scenario written: {path}")


def cmd_evaluate(args):
    """
    Evaluate one point given as key=value pairs, e.g. ``x0=2 x1=1``.
    """
    try:
        config = resolve_client_config(args.config)
        parameters, evaluator, descriptor = prepare_run(config)

        given = {}
        for pair in args.assignments:
            key, sep, token = pair.partition("=")
            if not sep:
                raise HMClientError(f"Expected key=value, got {pair!r}")
            given[key.strip()] = token

        missing = [key for key in parameters.keys() if key not in given]
        if missing:
            raise HMClientError(f"Missing values for parameters: {missing}")
        for key, token in given.items():
            parameters.find_by_key(key).assign(token)

        result = evaluator.evaluate(parameters)
    except (HMClientError, ValueError, LookupError) as e:
        logger.error(f"Evaluation failed: {e}")
        sys.exit(1)

    for name in descriptor.objectives:
        print(f"{name}: {format_number(result.values[name])}")
    print(f"feasible: {str(result.feasible).lower()}")
