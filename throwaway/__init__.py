from .availability import docker_exists
from .container import CONTAINER_TO_LOCALHOST_DNS, ContainerHandle, Image
from .errors import (
    EngineClosedError,
    EngineError,
    EngineUnavailableError,
    LaunchError,
    LogLineNotFoundError,
    PortAllocationError,
    ReadinessTimeoutError,
    ThrowawayError,
)
from .launcher import open_image, start_container
from .models import ContainerLaunchRequest, HarnessConfig, ShutdownReport
from .ports import allocate_free_port
from .shutdown import shutdown
from .wait import wait_for

__all__ = [
    "docker_exists",
    "CONTAINER_TO_LOCALHOST_DNS",
    "ContainerHandle",
    "Image",
    "EngineClosedError",
    "EngineError",
    "EngineUnavailableError",
    "LaunchError",
    "LogLineNotFoundError",
    "PortAllocationError",
    "ReadinessTimeoutError",
    "ThrowawayError",
    "open_image",
    "start_container",
    "ContainerLaunchRequest",
    "HarnessConfig",
    "ShutdownReport",
    "allocate_free_port",
    "shutdown",
    "wait_for",
]
