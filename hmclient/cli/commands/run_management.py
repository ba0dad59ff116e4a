"""
Run CLI command.

Contains:
- cmd_run: Drive a full optimization run against the external optimizer
"""

import logging
import sys
from pathlib import Path

from rich.console import Console

from hmclient.config.client_config import resolve_client_config
from hmclient.core.errors import HMClientError
from hmclient.orchestration.run_lifecycle import run_optimization

logger = logging.getLogger("cli.run_management")


def cmd_run(args):
    """
    Write the scenario, launch the optimizer, answer its requests and run
    the Pareto post-processing step.
    """
    console = Console()
    try:
        config = resolve_client_config(args.config)
        run_directory = Path(args.run_dir) if args.run_dir else None
        result = run_optimization(
            config,
            console=console,
            run_directory=run_directory,
            postprocess=not args.no_pareto,
        )
    except HMClientError as e:
        logger.error(f"Optimization run failed: {e}")
        sys.exit(1)

    print(f"Scenario: {result.scenario_path}")
    print(f"Requests: {result.summary.batches}")
    print(f"Evaluations: {result.summary.evaluations}")
    print(f"Optimizer exit code: {result.optimizer_exit_code}")
    if result.postprocess_exit_code is not None:
        print(f"Post-processing exit code: {result.postprocess_exit_code}")
