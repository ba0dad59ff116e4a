from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Sequence

from hmclient.core.errors import DomainViolation, EvaluationError, ParameterNotFound, ProtocolError
from hmclient.core.objective import ObjectiveEvaluator, ObjectiveResult
from hmclient.core.parameter import InputParameter, ParameterSet
from hmclient.runtime.protocol import (
    CandidateRow,
    EndOfRun,
    RequestHeader,
    format_response_header,
    format_response_row,
    parse_candidate_row,
    parse_parameter_header,
    parse_request_line,
)

logger = logging.getLogger(__name__)


class LineChannel(Protocol):
    """What the loop needs from a channel; SubprocessChannel satisfies it."""

    def read_line(self) -> str:
        ...

    def write_block(self, lines: Iterable[str]) -> None:
        ...

    def close(self) -> None:
        ...


class LoopState(str, Enum):
    AWAITING_REQUEST_HEADER = "AWAITING_REQUEST_HEADER"
    AWAITING_PARAM_HEADER = "AWAITING_PARAM_HEADER"
    AWAITING_CANDIDATE_ROW = "AWAITING_CANDIDATE_ROW"
    RESPONDING = "RESPONDING"
    DONE = "DONE"


@dataclass
class LoopSummary:
    batches: int = 0
    evaluations: int = 0


class EvaluationLoop:
    """
    Answers the optimizer's evaluation requests until it sends the end-of-run sentinel.

    Each round reads a request header, a parameter-name header and N candidate
    rows, evaluates every row and writes one response block. Column order is
    taken from each batch's parameter header, not from declaration order.

    The loop owns the channel: it is closed when ``run()`` returns or raises.
    Any protocol deviation is fatal; there is no resynchronization.
    """

    def __init__(
        self,
        channel: LineChannel,
        parameters: ParameterSet,
        evaluator: ObjectiveEvaluator,
        feasible_predictor: bool = False,
        objectives: Optional[Sequence[str]] = None,
    ):
        self.channel = channel
        self.parameters = parameters
        self.evaluator = evaluator
        self.feasible_predictor = feasible_predictor
        self.objectives: List[str] = list(objectives if objectives is not None else evaluator.objectives)
        self.state = LoopState.AWAITING_REQUEST_HEADER
        self.summary = LoopSummary()

    def run(self) -> LoopSummary:
        try:
            while self.state is not LoopState.DONE:
                self._round()
        finally:
            self.channel.close()
        return self.summary

    def _round(self) -> None:
        self.state = LoopState.AWAITING_REQUEST_HEADER
        request_no = self.summary.batches + 1
        line = self.channel.read_line()
        request = self._parse(request_no, lambda: parse_request_line(line))

        if isinstance(request, EndOfRun):
            logger.info(f"Optimizer completed after {self.summary.batches} requests")
            self.state = LoopState.DONE
            return

        logger.info(f"Request {request_no}: {request.count} candidates")
        response = self._serve(request_no, request)

        self.state = LoopState.RESPONDING
        self.channel.write_block(response)
        self.summary.batches += 1

    def _serve(self, request_no: int, request: RequestHeader) -> List[str]:
        self.state = LoopState.AWAITING_PARAM_HEADER
        expected = len(self.parameters)
        line = self.channel.read_line()
        header = self._parse(request_no, lambda: parse_parameter_header(line, expected))
        columns = [self._resolve(request_no, key, line) for key in header.keys]

        response = [format_response_header(header.keys, self.objectives, self.feasible_predictor)]

        self.state = LoopState.AWAITING_CANDIDATE_ROW
        for row_no in range(1, request.count + 1):
            line = self.channel.read_line()
            row = self._parse(request_no, lambda: parse_candidate_row(line, expected), row_no)
            self._assign(request_no, row_no, columns, row)
            result = self._evaluate(request_no, row_no)
            try:
                formatted = format_response_row(
                    row.tokens, result.values, self.objectives, result.feasible, self.feasible_predictor
                )
            except TypeError as exc:
                raise EvaluationError(f"Request {request_no}, row {row_no}: {exc}") from exc
            response.append(formatted)
        return response

    @staticmethod
    def _parse(request_no: int, parse, row_no: Optional[int] = None):
        try:
            return parse()
        except ProtocolError as exc:
            where = f"request {request_no}" if row_no is None else f"request {request_no}, row {row_no}"
            raise ProtocolError(f"Protocol error in {where}: {exc}") from exc

    def _resolve(self, request_no: int, key: str, line: str) -> InputParameter:
        try:
            return self.parameters.find_by_key(key)
        except ParameterNotFound as exc:
            raise ProtocolError(
                f"Protocol error in request {request_no}: unknown parameter {key!r} in header {line!r}; "
                f"client parameters are {self.parameters.keys()}"
            ) from exc

    def _assign(self, request_no: int, row_no: int, columns: Sequence[InputParameter], row: CandidateRow) -> None:
        for param, token in zip(columns, row.tokens):
            try:
                param.assign(token)
            except DomainViolation as exc:
                raise ProtocolError(f"Protocol error in request {request_no}, row {row_no}: {exc}") from exc

    def _evaluate(self, request_no: int, row_no: int) -> ObjectiveResult:
        try:
            result = self.evaluator.evaluate(self.parameters)
        except Exception as exc:
            raise EvaluationError(
                f"Evaluator failed in request {request_no}, row {row_no} with {self.parameters.assignment()}: "
                f"{type(exc).__name__}: {exc}"
            ) from exc
        self.summary.evaluations += 1
        if set(result.values) != set(self.objectives):
            raise ProtocolError(
                f"Request {request_no}, row {row_no}: evaluator returned objectives {list(result.values)}, "
                f"expected {self.objectives}"
            )
        return result
