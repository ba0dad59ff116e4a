from __future__ import annotations

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .parameter import ParameterSet


@dataclass
class ObjectiveResult:
    """
    Outcome of evaluating one candidate point.

    ``values`` is ordered the same way as the evaluator's ``objectives``.
    """
    values: Dict[str, float] = field(default_factory=dict)
    feasible: bool = True


class ObjectiveEvaluator(ABC):
    """
    Abstract Base Class for a problem-specific objective function.

    Implementations must not perform I/O; they read the current parameter
    values and return an ObjectiveResult. Any randomness comes from
    ``self.rng``, which is seeded from the constructor argument.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = random.Random(seed)

    @property
    @abstractmethod
    def objectives(self) -> Sequence[str]:
        """Ordered objective names reported for every candidate."""
        pass

    @abstractmethod
    def evaluate(self, parameters: ParameterSet) -> ObjectiveResult:
        """
        Compute objectives for the current assignment of ``parameters``.
        """
        pass


class ChakongHaimesEvaluator(ObjectiveEvaluator):
    """
    Chakong-Haimes bi-objective problem on two integer inputs.

    The inputs are the first two parameters in declaration order.
    """

    OBJECTIVES = ("f1_value", "f2_value")

    @property
    def objectives(self) -> Sequence[str]:
        return self.OBJECTIVES

    def evaluate(self, parameters: ParameterSet) -> ObjectiveResult:
        if len(parameters) < 2:
            raise ValueError("Chakong-Haimes needs two input parameters")
        x1 = parameters[0].value
        x2 = parameters[1].value

        f1 = 2 + (x1 - 2) ** 2 + (x2 - 1) ** 2
        f2 = 9 * x1 - (x2 - 1) ** 2

        c1 = (x1 * x1 + x2 * x2) <= 255
        c2 = (x1 - 3 * x2 + 10) <= 0
        return ObjectiveResult(values={"f1_value": f1, "f2_value": f2}, feasible=c1 and c2)


class FunctionEvaluator(ObjectiveEvaluator):
    """
    Adapts a plain function ``fn(values: dict) -> mapping`` to the evaluator interface.

    The returned mapping must contain every objective name; an optional
    ``feasible`` entry sets the feasibility flag (default True).
    """

    def __init__(
        self,
        fn: Callable[[Dict[str, Any]], Mapping[str, Any]],
        objectives: Sequence[str],
        seed: Optional[int] = None,
    ):
        super().__init__(seed=seed)
        if not objectives:
            raise ValueError("FunctionEvaluator needs at least one objective name")
        self._fn = fn
        self._objectives = tuple(objectives)

    @property
    def objectives(self) -> Sequence[str]:
        return self._objectives

    def evaluate(self, parameters: ParameterSet) -> ObjectiveResult:
        raw = dict(self._fn(parameters.assignment()))
        feasible = bool(raw.pop("feasible", True))
        missing = [name for name in self._objectives if name not in raw]
        if missing:
            raise KeyError(f"Objective function did not return {missing}")
        return ObjectiveResult(values={name: raw[name] for name in self._objectives}, feasible=feasible)
