"""
End-to-end optimization run.

Sequence:
1. check the required environment (HYPERMAPPER_HOME, PYTHONPATH)
2. build parameters and evaluator from the client config
3. write the scenario artifact
4. launch the optimizer and answer its requests until the sentinel
5. reap the optimizer
6. run the Pareto post-processing step, streaming its output to the console
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from rich.console import Console

from hmclient.config.client_config import ClientConfig
from hmclient.config.environment import resolve_environment
from hmclient.config.scenario_builder import build_scenario
from hmclient.core.objective import ObjectiveEvaluator
from hmclient.core.parameter import ParameterSet
from hmclient.core.scenario import ScenarioDescriptor
from hmclient.orchestration.evaluation_loop import EvaluationLoop, LoopSummary
from hmclient.runtime.channel import SubprocessChannel
from hmclient.runtime.postprocess import run_postprocessing

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    scenario_path: Path
    summary: LoopSummary
    optimizer_exit_code: int
    postprocess_exit_code: Optional[int] = None


def prepare_run(
    config: ClientConfig,
    run_directory: Optional[Path] = None,
) -> Tuple[ParameterSet, ObjectiveEvaluator, ScenarioDescriptor]:
    """
    Instantiate parameters, evaluator and scenario descriptor for ``config``.

    Raises:
        ConfigError: On invalid domains, duplicate keys, or an unusable evaluator.
    """
    parameters = config.build_parameters()
    evaluator = config.create_evaluator()
    objectives = config.resolve_objectives(evaluator)
    descriptor = config.to_descriptor(parameters, objectives, run_directory)
    for param in parameters:
        logger.info(f"Param: {param!r}")
    return parameters, evaluator, descriptor


def run_optimization(
    config: ClientConfig,
    console: Optional[Console] = None,
    run_directory: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    postprocess: bool = True,
) -> RunResult:
    """
    Drive one complete optimization run.

    Raises:
        ConfigError: Missing environment or invalid configuration (before launch).
        SpawnError: The optimizer or post-processing process could not start.
        ProtocolError: The optimizer deviated from the line protocol.
    """
    environment = resolve_environment(config.interpreter, environ)
    parameters, evaluator, descriptor = prepare_run(config, run_directory)
    scenario_path = build_scenario(descriptor)

    channel = SubprocessChannel.launch(
        environment.optimizer_command(scenario_path),
        env=environ,
        cwd=descriptor.run_directory,
    )
    with channel:
        loop = EvaluationLoop(
            channel,
            parameters,
            evaluator,
            feasible_predictor=descriptor.feasible_predictor,
            objectives=descriptor.objectives,
        )
        summary = loop.run()

    optimizer_exit_code = channel.wait()
    logger.info(
        f"Optimizer exited with code {optimizer_exit_code} after {summary.batches} requests "
        f"and {summary.evaluations} evaluations"
    )
    result = RunResult(scenario_path=scenario_path, summary=summary, optimizer_exit_code=optimizer_exit_code)

    if postprocess:
        result.postprocess_exit_code = run_postprocessing(
            environment.pareto_command(scenario_path),
            console=console,
            cwd=descriptor.run_directory,
        )
    return result
