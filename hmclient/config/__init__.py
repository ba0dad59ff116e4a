from __future__ import annotations

from .client_config import (
    ClientConfig,
    ClientConfigError,
    ParameterConfig,
    default_client_config,
    load_client_config,
    parse_client_config_dict,
    resolve_client_config,
)
from .environment import OptimizerEnvironment, resolve_environment
from .scenario_builder import build_scenario, load_scenario, to_scenario_dict

__all__ = [
    "ClientConfig",
    "ClientConfigError",
    "ParameterConfig",
    "default_client_config",
    "load_client_config",
    "parse_client_config_dict",
    "resolve_client_config",
    "OptimizerEnvironment",
    "resolve_environment",
    "build_scenario",
    "load_scenario",
    "to_scenario_dict",
]
