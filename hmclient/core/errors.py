"""
Error taxonomy for the HyperMapper evaluation client.

Every failure is terminal for a run: configuration and spawn errors abort
before the optimizer starts, protocol errors abort mid-run. The line protocol
has no resynchronization marker, so nothing here is meant to be retried.
"""

from __future__ import annotations


class HMClientError(Exception):
    """Base class for all hmclient errors."""


class ConfigError(HMClientError, ValueError):
    """Raised for invalid startup configuration (domains, paths, env)."""


class InvalidDomain(ConfigError):
    """Raised when a parameter is declared with an empty or inverted domain."""


class MissingEnvironment(ConfigError):
    """Raised when a required environment variable is unset or empty."""


class SpawnError(HMClientError, OSError):
    """Raised when a child process cannot be started."""


class ProtocolError(HMClientError):
    """
    Raised when the optimizer and client disagree about the line protocol.

    Messages should name the offending line and the expected field count so
    that a version mismatch between client and optimizer can be diagnosed.
    """


class EndOfStream(ProtocolError):
    """Raised when the child closes its output before a full line arrives."""


class ChannelClosed(ProtocolError):
    """Raised when reading from or writing to a channel that was closed."""


class DomainViolation(HMClientError, ValueError):
    """Raised when a value falls outside a parameter's domain."""


class ParameterNotFound(HMClientError, LookupError):
    """Raised when a parameter key is not part of the parameter set."""


class EvaluationError(HMClientError):
    """Raised when the objective evaluator fails on a candidate."""
