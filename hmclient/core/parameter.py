from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import ConfigError, DomainViolation, InvalidDomain, ParameterNotFound

Number = Union[int, float]

_INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")
_DECIMAL_TOKEN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class ParamType(str, Enum):
    """Parameter kinds understood by the optimizer; values are scenario literals."""

    REAL = "real"
    INTEGER = "integer"
    ORDINAL = "ordinal"
    CATEGORICAL = "categorical"

    @property
    def is_interval(self) -> bool:
        return self in (ParamType.REAL, ParamType.INTEGER)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class InputParameter:
    """
    One tunable dimension of the search space.

    Interval kinds (REAL, INTEGER) take a closed ``(lo, hi)`` domain; discrete
    kinds (ORDINAL, CATEGORICAL) take an ordered list of admissible values.
    ``value`` is overwritten for every candidate row and is ``None`` until the
    first assignment.
    """

    def __init__(self, key: str, kind: Union[ParamType, str], domain: Sequence[Any]):
        if not isinstance(key, str) or not key.strip():
            raise InvalidDomain(f"Parameter key must be a non-empty string, got {key!r}")
        try:
            self.kind = ParamType(kind)
        except ValueError as exc:
            raise InvalidDomain(f"Parameter {key!r} has unknown type {kind!r}") from exc
        self.key = key
        self.domain = self._validate_domain(key, self.kind, domain)
        self.value: Optional[Any] = None
        # Position in the owning ParameterSet; assigned by ParameterSet.add().
        self.index: Optional[int] = None

    @staticmethod
    def _validate_domain(key: str, kind: ParamType, domain: Sequence[Any]) -> Tuple[Any, ...]:
        values = tuple(domain or ())
        if not values:
            raise InvalidDomain(f"Parameter {key!r} has an empty domain")

        if kind.is_interval:
            if len(values) != 2 or not all(_is_number(v) for v in values):
                raise InvalidDomain(
                    f"Parameter {key!r} ({kind.value}) needs a [lo, hi] numeric interval, got {list(values)!r}"
                )
            lo, hi = values
            if lo > hi:
                raise InvalidDomain(f"Parameter {key!r} has lo > hi ({lo} > {hi})")
            if kind is ParamType.INTEGER and not (float(lo).is_integer() and float(hi).is_integer()):
                raise InvalidDomain(f"Parameter {key!r} (integer) has non-integral bounds {list(values)!r}")
            return values

        if len(set(map(str, values))) != len(values):
            raise InvalidDomain(f"Parameter {key!r} lists duplicate values: {list(values)!r}")
        return values

    @property
    def lower(self) -> Number:
        if not self.kind.is_interval:
            raise TypeError(f"Parameter {self.key!r} ({self.kind.value}) has no interval bounds")
        return self.domain[0]

    @property
    def upper(self) -> Number:
        if not self.kind.is_interval:
            raise TypeError(f"Parameter {self.key!r} ({self.kind.value}) has no interval bounds")
        return self.domain[1]

    def contains(self, value: Any) -> bool:
        """Return True if ``value`` is admissible for this parameter."""
        if self.kind.is_interval:
            if not _is_number(value) or math.isnan(value):
                return False
            if self.kind is ParamType.INTEGER and not float(value).is_integer():
                return False
            return self.domain[0] <= value <= self.domain[1]
        return self._match(value) is not None

    def _match(self, value: Any) -> Optional[Any]:
        for candidate in self.domain:
            if candidate == value:
                return candidate
        return None

    def set_value(self, value: Any) -> Any:
        """
        Assign the current value.

        Raises:
            DomainViolation: If ``value`` is outside the domain.
        """
        if not self.contains(value):
            raise DomainViolation(
                f"Value {value!r} is outside the domain of parameter {self.key!r} "
                f"({self.kind.value}: {list(self.domain)!r})"
            )
        if self.kind is ParamType.INTEGER:
            value = int(value)
        elif self.kind is ParamType.REAL:
            value = float(value)
        else:
            value = self._match(value)
        self.value = value
        return value

    def coerce(self, token: str) -> Any:
        """
        Parse one protocol text token into a typed value (without assigning it).

        Raises:
            DomainViolation: If the token cannot be read as a value of this kind.
        """
        text = token.strip()
        if self.kind is ParamType.INTEGER:
            if _INTEGER_TOKEN.fullmatch(text):
                return int(text)
            as_float = float(text) if _DECIMAL_TOKEN.fullmatch(text) else math.nan
            if as_float.is_integer():
                return int(as_float)
            raise DomainViolation(f"Parameter {self.key!r} expects an integer, got {token!r}")

        if self.kind is ParamType.REAL:
            if not _DECIMAL_TOKEN.fullmatch(text):
                raise DomainViolation(f"Parameter {self.key!r} expects a number, got {token!r}")
            return float(text)

        for candidate in self.domain:
            if str(candidate) == text:
                return candidate
        if _DECIMAL_TOKEN.fullmatch(text):
            numeric = float(text)
            for candidate in self.domain:
                if _is_number(candidate) and candidate == numeric:
                    return candidate
        raise DomainViolation(
            f"Token {token!r} is not one of the values of parameter {self.key!r}: {list(self.domain)!r}"
        )

    def assign(self, token: str) -> Any:
        """Coerce ``token`` and store it as the current value."""
        return self.set_value(self.coerce(token))

    def scenario_entry(self) -> Dict[str, Any]:
        """Return the ``input_parameters.<key>`` mapping of the scenario artifact."""
        return {"parameter_type": self.kind.value, "values": list(self.domain)}

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InputParameter):
            return self.key == other.key and self.kind == other.kind and self.domain == other.domain
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"InputParameter(key={self.key!r}, kind={self.kind.value}, domain={list(self.domain)!r}, value={self.value!r})"


class ParameterSet:
    """
    Ordered, key-unique collection of InputParameters.

    Iteration yields declaration order. Lookup by key is dict-backed.
    """

    def __init__(self, parameters: Iterable[InputParameter] = ()):
        self._params: List[InputParameter] = []
        self._by_key: Dict[str, InputParameter] = {}
        for param in parameters:
            self.add(param)

    def add(self, param: InputParameter) -> InputParameter:
        if param.key in self._by_key:
            raise ConfigError(f"Duplicate parameter key {param.key!r}")
        param.index = len(self._params)
        self._params.append(param)
        self._by_key[param.key] = param
        return param

    def find_by_key(self, key: str) -> InputParameter:
        """
        Return the parameter registered under ``key``.

        Raises:
            ParameterNotFound: If no parameter uses that key.
        """
        try:
            return self._by_key[key]
        except KeyError as exc:
            raise ParameterNotFound(f"Unknown parameter {key!r}; known: {self.keys()}") from exc

    def keys(self) -> List[str]:
        return [p.key for p in self._params]

    def assignment(self) -> Dict[str, Any]:
        """Current values keyed by parameter key, in declaration order."""
        return {p.key: p.value for p in self._params}

    def __iter__(self) -> Iterator[InputParameter]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __getitem__(self, index: int) -> InputParameter:
        return self._params[index]

    def __repr__(self) -> str:
        return f"ParameterSet({self.keys()!r})"
