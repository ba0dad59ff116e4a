from hmclient.core.errors import (
    ChannelClosed,
    ConfigError,
    DomainViolation,
    EndOfStream,
    EvaluationError,
    HMClientError,
    InvalidDomain,
    MissingEnvironment,
    ParameterNotFound,
    ProtocolError,
    SpawnError,
)
from hmclient.core.objective import (
    ChakongHaimesEvaluator,
    FunctionEvaluator,
    ObjectiveEvaluator,
    ObjectiveResult,
)
from hmclient.core.parameter import InputParameter, ParameterSet, ParamType
from hmclient.core.scenario import ScenarioDescriptor

__all__ = [
    "HMClientError",
    "ConfigError",
    "InvalidDomain",
    "MissingEnvironment",
    "SpawnError",
    "ProtocolError",
    "EndOfStream",
    "ChannelClosed",
    "DomainViolation",
    "EvaluationError",
    "ParameterNotFound",
    "ParamType",
    "InputParameter",
    "ParameterSet",
    "ObjectiveResult",
    "ObjectiveEvaluator",
    "ChakongHaimesEvaluator",
    "FunctionEvaluator",
    "ScenarioDescriptor",
]
