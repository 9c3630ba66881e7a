"""Exception hierarchy for container launch, readiness and engine failures.

Launch-time errors propagate to the caller. Shutdown never raises; its
failures are recorded in a ShutdownReport instead.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from throwaway.models import CommandResult


class ErrorType(str, Enum):
    engine = "engine"
    engine_closed = "engine_closed"
    engine_unavailable = "engine_unavailable"
    launch = "launch"
    port_allocation = "port_allocation"
    readiness_timeout = "readiness_timeout"
    log_line_not_found = "log_line_not_found"


class ThrowawayError(Exception):
    """Base exception for the package."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.engine):
        self.message = message
        self.error_type = error_type
        super().__init__(message)


class EngineError(ThrowawayError):
    """A container engine command failed."""

    def __init__(self, message: str, result: Optional[CommandResult] = None, **kwargs):
        kwargs.setdefault("error_type", ErrorType.engine)
        super().__init__(message, **kwargs)
        self.result = result


class EngineClosedError(EngineError):
    def __init__(self, message: str = "engine client is closed"):
        super().__init__(message, error_type=ErrorType.engine_closed)


class EngineUnavailableError(EngineError):
    """The engine cannot be reached. Callers should skip, not fail."""

    def __init__(self, message: str = "container engine is unavailable", result: Optional[CommandResult] = None):
        super().__init__(message, result=result, error_type=ErrorType.engine_unavailable)


class LaunchError(ThrowawayError):
    """Image resolution, pull, create or start failed."""

    def __init__(self, message: str, error_type: ErrorType = ErrorType.launch):
        super().__init__(message, error_type=error_type)


class PortAllocationError(LaunchError):
    def __init__(self, message: str = "could not allocate a free host port"):
        super().__init__(message, error_type=ErrorType.port_allocation)


class ReadinessTimeoutError(ThrowawayError):
    """The readiness predicate never succeeded before the deadline.

    ``last_error`` holds the exception raised by the final predicate
    evaluation, which is also chained as ``__cause__``.
    """

    def __init__(self, timeout: float, last_error: Optional[BaseException] = None):
        message = f"predicate never succeeded within {timeout:.3f}s"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message, error_type=ErrorType.readiness_timeout)
        self.timeout = timeout
        self.last_error = last_error


class LogLineNotFoundError(ThrowawayError):
    def __init__(self, text: str):
        super().__init__(f"no log line contains {text!r}", error_type=ErrorType.log_line_not_found)
        self.text = text
