__version__ = "0.1.0"

from hmclient.config.client_config import ClientConfig, load_client_config
from hmclient.core.objective import ObjectiveEvaluator, ObjectiveResult
from hmclient.core.parameter import InputParameter, ParameterSet, ParamType
from hmclient.orchestration.evaluation_loop import EvaluationLoop
from hmclient.orchestration.run_lifecycle import run_optimization
from hmclient.runtime.channel import SubprocessChannel

__all__ = [
    "ClientConfig",
    "load_client_config",
    "ObjectiveEvaluator",
    "ObjectiveResult",
    "InputParameter",
    "ParameterSet",
    "ParamType",
    "EvaluationLoop",
    "SubprocessChannel",
    "run_optimization",
]
