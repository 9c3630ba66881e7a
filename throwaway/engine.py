"""Container engine capability set.

The launcher, readiness predicates and shutdown sequencer only talk to the
engine through this protocol, so they can run against a fake engine in unit
tests and against ``DockerClient`` for real.
"""

from __future__ import annotations

from typing import Dict, List, Protocol

from pydantic import BaseModel, Field


class BindMount(BaseModel):
    source: str = Field(description="Absolute host path.")
    target: str = Field(description="Path inside the container.")


class ContainerSpec(BaseModel):
    image: str = Field(description="Image to create the container from.")
    args: List[str] = Field(default_factory=list, description="Process arguments.")
    env: List[str] = Field(default_factory=list, description="KEY=VALUE entries.")
    exposed_ports: List[str] = Field(default_factory=list, description="Exposed ports, e.g. 6379/tcp.")
    port_bindings: Dict[str, str] = Field(
        default_factory=dict, description="Exposed port (e.g. 6379/tcp) -> host port."
    )
    mounts: List[BindMount] = Field(default_factory=list, description="Host bind mounts.")


class RemoveOptions(BaseModel):
    remove_links: bool = False
    remove_volumes: bool = False
    force: bool = False


class LogOptions(BaseModel):
    stdout: bool = True
    stderr: bool = True


class ImageRemoveOptions(BaseModel):
    force: bool = False
    prune_children: bool = True


class Engine(Protocol):
    def ping(self) -> None:
        """Raise EngineUnavailableError unless the daemon answers."""
        ...

    def image_inspect(self, name: str) -> bool:
        """Return True if the image is present locally."""
        ...

    def image_pull(self, name: str) -> str:
        """Pull the image and return the fully drained pull output."""
        ...

    def container_create(self, spec: ContainerSpec, name: str) -> str:
        """Create a container and return its engine-assigned id."""
        ...

    def container_start(self, container_id: str) -> None:
        ...

    def container_stop(self, container_id: str, timeout: float) -> None:
        ...

    def container_kill(self, container_id: str, signal: str = "KILL") -> None:
        ...

    def container_remove(self, container_id: str, options: RemoveOptions) -> None:
        ...

    def container_logs(self, container_id: str, options: LogOptions) -> str:
        """Return the container's whole log from the start."""
        ...

    def image_remove(self, name: str, options: ImageRemoveOptions) -> None:
        ...

    def close(self) -> None:
        ...


__all__ = [
    "BindMount",
    "ContainerSpec",
    "Engine",
    "ImageRemoveOptions",
    "LogOptions",
    "RemoveOptions",
]
