from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt


class ContainerLaunchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    image: str = Field(description="Image reference, ideally with a pinned tag (e.g. redis:4.0.11).")
    ports: Tuple[PositiveInt, ...] = Field(
        default_factory=tuple,
        description="Container-internal TCP ports to publish on random free host ports.",
    )
    args: Tuple[str, ...] = Field(default_factory=tuple, description="Process arguments passed to the image.")
    pull_always: bool = Field(
        default=False, description="Pull the image even when it is already present locally."
    )
    volume_mounts: Dict[str, str] = Field(
        default_factory=dict, description="Host source path -> container target path bind mounts."
    )
    env_vars: Dict[str, str] = Field(default_factory=dict, description="Environment variables for the container.")


class HarnessConfig(BaseModel):
    docker_binary: str = Field(default="docker", description="Container engine CLI to invoke.")
    engine_timeout_sec: int = Field(
        default=120, ge=1, description="Per-command timeout enforced by the engine client."
    )
    poll_interval_sec: float = Field(default=0.05, gt=0, description="Readiness poll interval.")
    dial_timeout_sec: float = Field(default=0.05, gt=0, description="Per-attempt TCP connect timeout.")
    stop_timeout_sec: float = Field(default=1.0, ge=0, description="Default graceful stop period.")
    name_separator: str = Field(default="-", description="Separator between name prefix and random suffix.")
    host: str = Field(default="localhost", description="Host interface used for ports and dialing.")


def load_config(path: Optional[Union[str, Path]] = None) -> HarnessConfig:
    if path is None:
        return HarnessConfig()
    cfg_path = Path(path)
    if not cfg_path.is_file():
        return HarnessConfig()
    data = yaml.safe_load(cfg_path.read_text()) or {}
    return HarnessConfig(**data)
