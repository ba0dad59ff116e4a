from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from hmclient.core.errors import MissingEnvironment

# Both must be set and non-empty before the optimizer is launched.
HYPERMAPPER_HOME = "HYPERMAPPER_HOME"
PYTHONPATH = "PYTHONPATH"
REQUIRED_ENV_VARS: Sequence[str] = (HYPERMAPPER_HOME, PYTHONPATH)

OPTIMIZER_SCRIPT = Path("scripts") / "hypermapper.py"
PARETO_SCRIPT = Path("scripts") / "compute_pareto.py"


@dataclass(frozen=True)
class OptimizerEnvironment:
    """Resolved locations needed to launch the optimizer and its post-processing step."""

    hypermapper_home: Path
    interpreter: str = "python3"

    def optimizer_command(self, scenario_path: Path) -> List[str]:
        return [self.interpreter, str(self.hypermapper_home / OPTIMIZER_SCRIPT), str(scenario_path)]

    def pareto_command(self, scenario_path: Path) -> List[str]:
        return [self.interpreter, str(self.hypermapper_home / PARETO_SCRIPT), str(scenario_path)]


def resolve_environment(
    interpreter: str = "python3",
    environ: Optional[Mapping[str, str]] = None,
) -> OptimizerEnvironment:
    """
    Check the required environment variables and resolve the optimizer location.

    Raises:
        MissingEnvironment: If any required variable is unset or empty.
    """
    env = os.environ if environ is None else environ
    missing = [name for name in REQUIRED_ENV_VARS if not env.get(name, "").strip()]
    if missing:
        raise MissingEnvironment(
            f"Environment variables are not set: {', '.join(missing)}. "
            f"Please set {' and '.join(REQUIRED_ENV_VARS)} before running."
        )
    return OptimizerEnvironment(
        hypermapper_home=Path(env[HYPERMAPPER_HOME]).expanduser(),
        interpreter=interpreter,
    )
