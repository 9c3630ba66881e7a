from .config import ContainerLaunchRequest, HarnessConfig, load_config
from .results import CommandResult, RunReport, ShutdownReport, ShutdownStep, StepStatus

__all__ = [
    "ContainerLaunchRequest",
    "HarnessConfig",
    "load_config",
    "CommandResult",
    "RunReport",
    "ShutdownReport",
    "ShutdownStep",
    "StepStatus",
]
