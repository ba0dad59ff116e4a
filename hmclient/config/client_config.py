"""
Client configuration (hmclient.yaml).

Example:

  application_name: cpp_chakong_haimes
  output_folder: outdata
  optimization_iterations: 20
  number_of_samples: 10
  feasible_predictor: true
  objectives: [f1_value, f2_value]
  evaluator: hmclient.core.objective:ChakongHaimesEvaluator
  parameters:
    - {key: x0, type: integer, values: [-20, 20]}
    - {key: x1, type: integer, values: [-20, 20]}
"""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hmclient.core.errors import ConfigError
from hmclient.core.objective import ObjectiveEvaluator
from hmclient.core.parameter import InputParameter, ParameterSet
from hmclient.core.scenario import ScenarioDescriptor

CONFIG_FILENAMES = ("hmclient.yaml", "hmclient.yml")
DEFAULT_EVALUATOR = "hmclient.core.objective:ChakongHaimesEvaluator"


class ClientConfigError(ConfigError):
    """
    Raised when hmclient.yaml cannot be parsed or validated.

    Prefer raising this over raw ValidationError/KeyError so callers can surface
    a clean, user-friendly message.
    """


class ParameterConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    type: Literal["real", "integer", "ordinal", "categorical"]
    values: List[Any]

    def create(self) -> InputParameter:
        return InputParameter(self.key, self.type, self.values)


class ClientConfig(BaseModel):
    """Validated client configuration for one optimization run."""

    model_config = ConfigDict(extra="forbid")

    application_name: str
    parameters: List[ParameterConfig]
    # None: use the evaluator's own objective names.
    objectives: Optional[List[str]] = None
    output_folder: str = "outdata"
    optimization_iterations: int = Field(default=20, ge=0)
    number_of_samples: int = Field(default=10, ge=1)
    feasible_predictor: bool = True
    evaluator: str = DEFAULT_EVALUATOR
    evaluator_options: Dict[str, Any] = Field(default_factory=dict)
    seed: int = 0
    interpreter: str = "python3"
    doe_type: str = "standard latin hypercube"
    model: str = "random_forest"

    # Directory used to resolve relative evaluator file paths; not part of the YAML.
    base_dir: Optional[Path] = Field(default=None, exclude=True)

    @field_validator("parameters")
    @classmethod
    def _require_parameters(cls, value: List[ParameterConfig]) -> List[ParameterConfig]:
        if not value:
            raise ValueError("at least one parameter is required")
        return value

    @field_validator("evaluator")
    @classmethod
    def _validate_evaluator_ref(cls, value: str) -> str:
        module_part, sep, attr = value.partition(":")
        if not module_part or (sep and not attr):
            raise ValueError(f"evaluator must look like 'module:attribute' or 'path.py:attribute', got {value!r}")
        return value

    def build_parameters(self) -> ParameterSet:
        """Instantiate a fresh ParameterSet; raises ConfigError on bad domains or duplicate keys."""
        return ParameterSet(p.create() for p in self.parameters)

    def create_evaluator(self) -> ObjectiveEvaluator:
        """
        Import and instantiate the configured evaluator.

        ``evaluator`` names either an ObjectiveEvaluator subclass or a factory
        returning one. Both are called with ``seed`` plus ``evaluator_options``.
        A ``.py`` path is resolved relative to ``base_dir``.
        """
        target = _import_attribute(self.evaluator, self.base_dir)
        try:
            evaluator = target(seed=self.seed, **self.evaluator_options)
        except TypeError as exc:
            raise ClientConfigError(f"Cannot instantiate evaluator {self.evaluator!r}: {exc}") from exc
        if not isinstance(evaluator, ObjectiveEvaluator):
            raise ClientConfigError(
                f"Evaluator {self.evaluator!r} produced {type(evaluator).__name__}, expected an ObjectiveEvaluator"
            )
        return evaluator

    def resolve_objectives(self, evaluator: ObjectiveEvaluator) -> List[str]:
        """
        Return the objective list, checking it against what the evaluator reports.
        """
        reported = list(evaluator.objectives)
        if self.objectives is None:
            return reported
        if list(self.objectives) != reported:
            raise ClientConfigError(
                f"Configured objectives {self.objectives} do not match evaluator objectives {reported}"
            )
        return list(self.objectives)

    def to_descriptor(
        self,
        parameters: ParameterSet,
        objectives: List[str],
        run_directory: Optional[Path] = None,
    ) -> ScenarioDescriptor:
        try:
            return ScenarioDescriptor(
                application_name=self.application_name,
                objectives=objectives,
                parameters=parameters,
                optimization_iterations=self.optimization_iterations,
                number_of_samples=self.number_of_samples,
                output_folder=self.output_folder,
                run_directory=(run_directory or Path.cwd()).resolve(),
                feasible_predictor=self.feasible_predictor,
                doe_type=self.doe_type,
                model=self.model,
            )
        except ValidationError as exc:
            raise ClientConfigError(f"Invalid scenario for {self.application_name!r}: {exc}") from exc


def _import_attribute(reference: str, base_dir: Optional[Path]) -> Any:
    module_part, _, attr = reference.partition(":")
    attr = attr or "get_evaluator"

    if module_part.endswith(".py"):
        path = Path(module_part)
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        if not path.is_file():
            raise ClientConfigError(f"Evaluator file not found: {path}")
        module_name = f"hmclient_evaluator.{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ClientConfigError(f"Could not load spec for {path}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    else:
        try:
            module = importlib.import_module(module_part)
        except ImportError as exc:
            raise ClientConfigError(f"Cannot import evaluator module {module_part!r}: {exc}") from exc

    try:
        return getattr(module, attr)
    except AttributeError as exc:
        raise ClientConfigError(f"Evaluator module {module_part!r} does not export {attr!r}") from exc


def parse_client_config_dict(data: Any, *, path: Union[str, Path, None] = None) -> ClientConfig:
    """
    Validate a loaded YAML object into a ClientConfig.

    Raises:
        ClientConfigError on any validation/shape error.
    """
    where = str(path) if path is not None else "<config>"
    if not isinstance(data, dict):
        raise ClientConfigError(f"{where}: top-level must be a YAML mapping/object")
    try:
        config = ClientConfig.model_validate(data)
    except ValidationError as exc:
        raise ClientConfigError(f"{where}: invalid client config: {exc}") from exc
    if path is not None:
        config.base_dir = Path(path).resolve().parent
    return config


def load_client_config(path: Union[str, Path]) -> ClientConfig:
    """
    Load and validate hmclient.yaml.

    Raises:
        ClientConfigError
    """
    p = Path(path).expanduser()
    if not p.is_file():
        raise ClientConfigError(f"{p}: file not found")
    try:
        data = yaml.safe_load(p.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ClientConfigError(f"{p}: failed to parse YAML: {exc}") from exc
    return parse_client_config_dict(data, path=p)


def find_client_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """
    Search upwards from ``start`` (default: cwd) for hmclient.yaml/yml.

    The first match encountered while walking towards the filesystem root is used.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        for filename in CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                return candidate
        if current.parent == current:
            return None
        current = current.parent


def default_client_config() -> ClientConfig:
    """Built-in Chakong-Haimes problem on two integer parameters in [-20, 20]."""
    return ClientConfig(
        application_name="cpp_chakong_haimes",
        parameters=[
            ParameterConfig(key="x0", type="integer", values=[-20, 20]),
            ParameterConfig(key="x1", type="integer", values=[-20, 20]),
        ],
        objectives=["f1_value", "f2_value"],
    )


def resolve_client_config(config_path: Optional[str] = None) -> ClientConfig:
    """
    Resolve the client config for a CLI invocation.

    Preference order: explicit ``config_path``, then the nearest
    hmclient.yaml above the cwd, then the built-in default problem.
    """
    if config_path is not None:
        return load_client_config(config_path)
    found = find_client_config_file()
    if found is not None:
        return load_client_config(found)
    return default_client_config()
