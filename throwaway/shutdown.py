from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from throwaway.engine import Engine, RemoveOptions
from throwaway.logger import EventLogger
from throwaway.models import ShutdownReport, ShutdownStep, StepStatus

DEFAULT_STOP_TIMEOUT = 1.0


def shutdown(
    engine: Engine,
    container_id: str,
    timeout: float = DEFAULT_STOP_TIMEOUT,
    logger: Optional[EventLogger] = None,
) -> ShutdownReport:
    """Stop, kill if needed, remove, then close the engine connection.

    Each step runs independently and no engine failure escapes: failures are
    logged at debug level and recorded in the returned report.
    """
    report = ShutdownReport(container_id=container_id)

    def run_step(name: str, action: Callable[[], None]) -> bool:
        try:
            action()
        except Exception as exc:
            if logger:
                logger.debug(
                    f"unable to {name} container",
                    stage="shutdown",
                    context={"container_id": container_id},
                    data={"step": name, "error": str(exc)},
                )
            report.steps.append(ShutdownStep(name=name, status=StepStatus.failed, error=str(exc)))
            return False
        report.steps.append(ShutdownStep(name=name, status=StepStatus.success))
        return True

    stopped = run_step("stop", lambda: engine.container_stop(container_id, timeout))
    if stopped:
        report.steps.append(ShutdownStep(name="kill", status=StepStatus.skipped))
    else:
        run_step("kill", lambda: engine.container_kill(container_id, "KILL"))

    run_step(
        "remove",
        lambda: engine.container_remove(
            container_id, RemoveOptions(remove_links=True, remove_volumes=True, force=True)
        ),
    )
    run_step("close", engine.close)

    report.completed_at = datetime.utcnow()
    if logger:
        logger.info(
            "container shut down",
            stage="shutdown",
            context={"container_id": container_id},
            data={"clean": report.clean, "steps": {s.name: s.status.value for s in report.steps}},
        )
    return report
