"""
Line protocol between the optimizer (server side of the pipe) and this client.

Optimizer -> client, per round:

    Request <N>                  request header (or the end-of-run sentinel)
    x0,x1,...                    parameter-name header
    <N candidate rows>           comma-separated values in header order

Client -> optimizer, per round:

    x0,x1,...,f1,f2,...[,Valid]  response header
    <N rows>                     echoed values, objective values[, 1|0]

Lines are parsed into tagged values here before the evaluation loop touches
them; formatting of the response lives here too.
"""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Sequence, Tuple, Union

from hmclient.core.errors import ProtocolError

END_OF_RUN_SENTINEL = "End of HyperMapper"
_COUNT_PATTERN = re.compile(r"[+-]?[0-9]+")
VALID_COLUMN = "Valid"
FIELD_SEPARATOR = ","
TRUE_FLAG = "1"
FALSE_FLAG = "0"

# Floats above this magnitude may no longer be exact integers.
_MAX_EXACT_INT_FLOAT = 2.0 ** 53


@dataclass(frozen=True)
class EndOfRun:
    """The optimizer finished; no response is expected."""
    line: str = END_OF_RUN_SENTINEL


@dataclass(frozen=True)
class RequestHeader:
    """Announces a batch of ``count`` candidate rows."""
    label: str
    count: int


@dataclass(frozen=True)
class ParameterHeader:
    """Parameter keys in the column order used by this batch."""
    keys: Tuple[str, ...]


@dataclass(frozen=True)
class CandidateRow:
    """Raw value tokens of one candidate, in parameter-header order."""
    tokens: Tuple[str, ...]


Request = Union[RequestHeader, EndOfRun]


def split_fields(line: str, strip: bool = True) -> List[str]:
    """Split a comma-separated line; a single trailing separator is tolerated."""
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) > 1 and fields[-1].strip() == "":
        fields.pop()
    return [f.strip() for f in fields] if strip else fields


def parse_request_line(line: str) -> Request:
    """
    Parse a request header line.

    Raises:
        ProtocolError: If the line is neither the sentinel nor ``<token> <N>``.
    """
    if line == END_OF_RUN_SENTINEL:
        return EndOfRun(line)

    parts = line.split()
    if len(parts) != 2:
        raise ProtocolError(f"Malformed request header {line!r}: expected '<token> <count>'")
    label, count_text = parts
    if not _COUNT_PATTERN.fullmatch(count_text):
        raise ProtocolError(f"Malformed request header {line!r}: {count_text!r} is not an integer")
    count = int(count_text)
    if count < 0:
        raise ProtocolError(f"Malformed request header {line!r}: negative count {count}")
    return RequestHeader(label=label, count=count)


def parse_parameter_header(line: str, expected: int) -> ParameterHeader:
    """
    Parse the parameter-name header.

    Raises:
        ProtocolError: On field-count mismatch, empty or repeated keys.
    """
    keys = split_fields(line)
    if len(keys) != expected:
        raise ProtocolError(
            f"Parameter header {line!r} has {len(keys)} fields, expected {expected}"
        )
    if any(not key for key in keys):
        raise ProtocolError(f"Parameter header {line!r} contains an empty key")
    if len(set(keys)) != len(keys):
        raise ProtocolError(f"Parameter header {line!r} repeats a key")
    return ParameterHeader(keys=tuple(keys))


def parse_candidate_row(line: str, expected: int) -> CandidateRow:
    """
    Parse one candidate row. Tokens keep their surrounding whitespace so they
    can be echoed back exactly as received.

    Raises:
        ProtocolError: On field-count mismatch or empty fields.
    """
    tokens = split_fields(line, strip=False)
    if len(tokens) != expected:
        raise ProtocolError(f"Candidate row {line!r} has {len(tokens)} fields, expected {expected}")
    if any(not token.strip() for token in tokens):
        raise ProtocolError(f"Candidate row {line!r} contains an empty field")
    return CandidateRow(tokens=tuple(tokens))


def format_number(value: Any) -> str:
    """
    Render an objective value without scientific notation.

    Integral values print as integers; other floats print as the shortest
    decimal expansion that parses back to the same float.
    """
    if isinstance(value, bool):
        return TRUE_FLAG if value else FALSE_FLAG
    if isinstance(value, numbers.Integral):
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, numbers.Real):
        as_float = float(value)
        if not math.isfinite(as_float):
            return repr(as_float)
        if as_float.is_integer() and abs(as_float) < _MAX_EXACT_INT_FLOAT:
            return str(int(as_float))
        return format(Decimal(repr(as_float)), "f")
    raise TypeError(f"Objective value {value!r} is not a number")


def format_response_header(keys: Sequence[str], objectives: Sequence[str], feasible_predictor: bool) -> str:
    columns = list(keys) + list(objectives)
    if feasible_predictor:
        columns.append(VALID_COLUMN)
    return FIELD_SEPARATOR.join(columns)


def format_response_row(
    tokens: Sequence[str],
    values: Mapping[str, Any],
    objectives: Sequence[str],
    feasible: bool,
    feasible_predictor: bool,
) -> str:
    fields = list(tokens) + [format_number(values[name]) for name in objectives]
    if feasible_predictor:
        fields.append(TRUE_FLAG if feasible else FALSE_FLAG)
    return FIELD_SEPARATOR.join(fields)
