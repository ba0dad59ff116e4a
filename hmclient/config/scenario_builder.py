"""
Scenario artifact writer/reader.

The scenario JSON is the only thing the optimizer reads before it starts
emitting protocol lines. Field names, nesting and string literals below are
the optimizer's startup schema and must not be renamed.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Union

from pydantic import ValidationError

from hmclient.core.errors import ConfigError
from hmclient.core.parameter import InputParameter, ParameterSet
from hmclient.core.scenario import ScenarioDescriptor

logger = logging.getLogger(__name__)

FEASIBLE_FALSE_VALUE = "0"
FEASIBLE_TRUE_VALUE = "1"
CLIENT_SERVER_MODE = "client-server"


def to_scenario_dict(descriptor: ScenarioDescriptor) -> Dict[str, Any]:
    """Render a ScenarioDescriptor as the optimizer's scenario mapping."""
    scenario: Dict[str, Any] = {
        "application_name": descriptor.application_name,
        "optimization_objectives": list(descriptor.objectives),
        "hypermapper_mode": {"mode": CLIENT_SERVER_MODE},
        "run_directory": str(descriptor.run_directory),
        "log_file": descriptor.log_file,
        "optimization_iterations": descriptor.optimization_iterations,
        "models": {"model": descriptor.model},
    }

    if descriptor.feasible_predictor:
        scenario["feasible_output"] = {
            "enable_feasible_predictor": True,
            "false_value": FEASIBLE_FALSE_VALUE,
            "true_value": FEASIBLE_TRUE_VALUE,
        }

    scenario["output_data_file"] = descriptor.output_data_file
    scenario["output_pareto_file"] = descriptor.output_pareto_file
    scenario["output_image"] = {"output_image_pdf_file": descriptor.output_image_pdf_file}
    scenario["design_of_experiment"] = {
        "doe_type": descriptor.doe_type,
        "number_of_samples": descriptor.number_of_samples,
    }
    scenario["input_parameters"] = {param.key: param.scenario_entry() for param in descriptor.parameters}
    return scenario


def build_scenario(descriptor: ScenarioDescriptor) -> Path:
    """
    Write the scenario artifact for ``descriptor``.

    The file lands at ``<run_directory>/<output_folder>/<application_name>_scenario.json``.
    The output directory is created if needed; an existing directory is reused.

    Returns:
        Absolute path of the written scenario file.

    Raises:
        ConfigError: If the directory cannot be created or the file cannot be written.
    """
    output_dir = descriptor.output_dir
    if output_dir.is_dir():
        logger.info(f"Output directory {output_dir} exists, continuing")
    else:
        logger.info(f"Output directory {output_dir} does not exist, creating")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Unable to create output directory {output_dir}: {exc}") from exc

    scenario_path = descriptor.scenario_path.resolve()
    try:
        scenario_path.write_text(json.dumps(to_scenario_dict(descriptor), indent=4) + "\n")
    except OSError as exc:
        raise ConfigError(f"Unable to write scenario file {scenario_path}: {exc}") from exc

    logger.info(f"Wrote scenario file to {scenario_path}")
    return scenario_path


def from_scenario_dict(data: Dict[str, Any]) -> ScenarioDescriptor:
    """
    Rebuild a ScenarioDescriptor from a scenario mapping.

    Raises:
        ConfigError: If required fields are missing or invalid.
    """
    try:
        params = ParameterSet(
            InputParameter(key, entry["parameter_type"], entry["values"])
            for key, entry in data["input_parameters"].items()
        )
        feasible = data.get("feasible_output") or {}
        doe = data["design_of_experiment"]
        return ScenarioDescriptor(
            application_name=data["application_name"],
            objectives=list(data["optimization_objectives"]),
            parameters=params,
            optimization_iterations=data["optimization_iterations"],
            number_of_samples=doe["number_of_samples"],
            doe_type=doe.get("doe_type", "standard latin hypercube"),
            output_folder=str(PurePosixPath(data["output_data_file"]).parent),
            run_directory=Path(data["run_directory"]),
            feasible_predictor=bool(feasible.get("enable_feasible_predictor", False)),
            model=(data.get("models") or {}).get("model", "random_forest"),
        )
    except KeyError as exc:
        raise ConfigError(f"Scenario is missing required field {exc!s}") from exc
    except (TypeError, AttributeError, ValidationError) as exc:
        raise ConfigError(f"Scenario is malformed: {exc}") from exc


def load_scenario(path: Union[str, Path]) -> ScenarioDescriptor:
    """
    Load a scenario artifact previously written by :func:`build_scenario`.

    Raises:
        ConfigError: If the file is missing, not JSON, or incomplete.
    """
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"{p}: scenario file not found")
    try:
        data = json.loads(p.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{p}: failed to parse scenario JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{p}: scenario must contain a JSON object at top-level")
    return from_scenario_dict(data)
