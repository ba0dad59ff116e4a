from __future__ import annotations

from .channel import SubprocessChannel
from .postprocess import run_postprocessing
from .protocol import (
    END_OF_RUN_SENTINEL,
    CandidateRow,
    EndOfRun,
    ParameterHeader,
    RequestHeader,
    format_number,
    format_response_header,
    format_response_row,
    parse_candidate_row,
    parse_parameter_header,
    parse_request_line,
)

__all__ = [
    "SubprocessChannel",
    "run_postprocessing",
    "END_OF_RUN_SENTINEL",
    "CandidateRow",
    "EndOfRun",
    "ParameterHeader",
    "RequestHeader",
    "format_number",
    "format_response_header",
    "format_response_row",
    "parse_candidate_row",
    "parse_parameter_header",
    "parse_request_line",
]
