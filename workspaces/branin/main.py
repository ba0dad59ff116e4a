import math
from typing import Optional

from hmclient.core.objective import ObjectiveEvaluator, ObjectiveResult
from hmclient.core.parameter import ParameterSet


class BraninEvaluator(ObjectiveEvaluator):
    """Branin-Hoo function; optional Gaussian noise drawn from the seeded rng."""

    def __init__(self, seed: Optional[int] = None, noise: float = 0.0):
        super().__init__(seed=seed)
        self.noise = noise

    @property
    def objectives(self):
        return ("value",)

    def evaluate(self, parameters: ParameterSet) -> ObjectiveResult:
        x1 = parameters.find_by_key("x1").value
        x2 = parameters.find_by_key("x2").value

        a, b, c = 1.0, 5.1 / (4 * math.pi ** 2), 5 / math.pi
        r, s, t = 6.0, 10.0, 1 / (8 * math.pi)
        value = a * (x2 - b * x1 ** 2 + c * x1 - r) ** 2 + s * (1 - t) * math.cos(x1) + s

        if self.noise:
            value += self.rng.gauss(0.0, self.noise)
        return ObjectiveResult(values={"value": value})


def get_evaluator(seed: Optional[int] = None, noise: float = 0.0) -> ObjectiveEvaluator:
    return BraninEvaluator(seed=seed, noise=noise)
