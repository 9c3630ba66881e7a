"""Bounded-retry readiness polling and the predicates built on it."""

from __future__ import annotations

import socket
import time
from datetime import timedelta
from typing import Callable, Optional, Union

from throwaway.engine import Engine, LogOptions
from throwaway.errors import LogLineNotFoundError, ReadinessTimeoutError
from throwaway.logger import EventLogger

DEFAULT_INTERVAL = 0.05
DEFAULT_DIAL_TIMEOUT = 0.05

Seconds = Union[float, int, timedelta]
Predicate = Callable[[], None]


def _seconds(value: Seconds) -> float:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


def wait_for(
    predicate: Predicate,
    timeout: Seconds,
    interval: Seconds = DEFAULT_INTERVAL,
    logger: Optional[EventLogger] = None,
) -> None:
    """Evaluate ``predicate`` every ``interval`` until it returns without raising.

    The deadline is only checked after a failed evaluation, so a timeout is
    reported no later than ``timeout`` plus one interval (plus the duration of
    the last evaluation). Evaluations never overlap; ticks missed while a slow
    evaluation runs are dropped.

    Raises:
        ReadinessTimeoutError: the predicate never succeeded. The last predicate
            exception is chained and kept on ``last_error``.
    """
    timeout_sec = _seconds(timeout)
    interval_sec = _seconds(interval)
    if interval_sec <= 0:
        raise ValueError("interval must be positive")

    start = time.monotonic()
    deadline = start + timeout_sec
    next_tick = start + interval_sec
    attempts = 0
    while True:
        delay = next_tick - time.monotonic()
        if delay > 0:
            time.sleep(delay)
        attempts += 1
        try:
            predicate()
        except Exception as exc:
            now = time.monotonic()
            if now >= deadline:
                if logger:
                    logger.warning(
                        "readiness timeout",
                        stage="wait",
                        data={"timeout_sec": timeout_sec, "attempts": attempts, "last_error": str(exc)},
                    )
                raise ReadinessTimeoutError(timeout_sec, last_error=exc) from exc
            while next_tick <= now:
                next_tick += interval_sec
            continue
        if logger:
            logger.debug(
                "predicate succeeded",
                stage="wait",
                data={"attempts": attempts, "elapsed_sec": round(time.monotonic() - start, 3)},
            )
        return


def port_is_open(port: int, host: str = "localhost", dial_timeout: float = DEFAULT_DIAL_TIMEOUT) -> Predicate:
    def predicate() -> None:
        conn = socket.create_connection((host, int(port)), timeout=dial_timeout)
        conn.close()

    return predicate


def log_contains(engine: Engine, container_id: str, text: str) -> Predicate:
    # Re-reads the whole log on every evaluation; cost grows with log volume.
    def predicate() -> None:
        logs = engine.container_logs(container_id, LogOptions(stdout=True, stderr=True))
        for line in logs.split("\n"):
            if text in line:
                return
        raise LogLineNotFoundError(text)

    return predicate
