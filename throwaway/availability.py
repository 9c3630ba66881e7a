from __future__ import annotations

from typing import Optional

from throwaway.docker_client import DockerClient
from throwaway.errors import EngineError
from throwaway.models import HarnessConfig


def docker_exists(config: Optional[HarnessConfig] = None) -> bool:
    """True if the docker CLI is installed and its daemon answers a ping."""
    config = config or HarnessConfig()
    client = DockerClient(timeout_sec=config.engine_timeout_sec, binary=config.docker_binary)
    try:
        client.ping()
    except EngineError:
        return False
    finally:
        client.close()
    return True
