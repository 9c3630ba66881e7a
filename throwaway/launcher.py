from __future__ import annotations

import os
import uuid
from typing import Callable, Dict, List, Optional

from throwaway.container import ContainerHandle, Image
from throwaway.docker_client import DockerClient
from throwaway.engine import BindMount, ContainerSpec, Engine
from throwaway.errors import EngineError, EngineUnavailableError, LaunchError
from throwaway.logger import EventLogger
from throwaway.models import ContainerLaunchRequest, HarnessConfig
from throwaway.ports import allocate_free_port

EngineFactory = Callable[[], Engine]


def _default_engine_factory(config: HarnessConfig, logger: Optional[EventLogger]) -> EngineFactory:
    def factory() -> Engine:
        return DockerClient(timeout_sec=config.engine_timeout_sec, logger=logger, binary=config.docker_binary)

    return factory


def resolve_mounts(volume_mounts: Dict[str, str]) -> List[BindMount]:
    return [BindMount(source=os.path.abspath(src), target=dest) for src, dest in volume_mounts.items()]


def format_env(env_vars: Dict[str, str]) -> List[str]:
    return [f"{k}={v}" for k, v in env_vars.items()]


def build_spec(req: ContainerLaunchRequest, host: str = "localhost") -> tuple[ContainerSpec, Dict[int, int]]:
    """Translate a request into an engine spec, allocating one host port per requested port."""
    port_maps: Dict[int, int] = {}
    exposed: List[str] = []
    bindings: Dict[str, str] = {}
    for port in req.ports:
        free_port = allocate_free_port(host)
        docker_port = f"{port}/tcp"
        bindings[docker_port] = str(free_port)
        port_maps[port] = free_port
        exposed.append(docker_port)

    spec = ContainerSpec(
        image=req.image,
        args=list(req.args),
        env=format_env(req.env_vars),
        exposed_ports=exposed,
        port_bindings=bindings,
        mounts=resolve_mounts(req.volume_mounts),
    )
    return spec, port_maps


def pull_image(engine: Engine, image: str, logger: Optional[EventLogger] = None) -> None:
    if logger:
        logger.info("pulling image", stage="pull", data={"image": image})
    output = engine.image_pull(image)
    if logger:
        logger.info("image pulled", stage="pull", data={"image": image, "output": output})


def start_container(
    req: ContainerLaunchRequest,
    prefix: str,
    config: Optional[HarnessConfig] = None,
    logger: Optional[EventLogger] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> ContainerHandle:
    """Start a container for ``req`` named ``<prefix>-<uuid4>``.

    Host ports are allocated before any engine call. On failure no handle is
    returned and the engine connection is closed; a container that was created
    but failed to start is left for the caller to clean up.

    Raises:
        PortAllocationError: no free host port could be obtained.
        EngineUnavailableError: the engine CLI is missing.
        LaunchError: pulling, creating or starting failed.
    """
    config = config or HarnessConfig()
    spec, port_maps = build_spec(req, host=config.host)
    engine = (engine_factory or _default_engine_factory(config, logger))()
    name = f"{prefix}{config.name_separator}{uuid.uuid4()}"

    try:
        # inspect failures are treated as "not present" and answered with a pull
        if req.pull_always or not engine.image_inspect(req.image):
            pull_image(engine, req.image, logger=logger)
        container_id = engine.container_create(spec, name)
        if logger:
            logger.debug("container created", stage="launch", context={"container_id": container_id, "name": name})
        engine.container_start(container_id)
    except Exception as exc:
        _close_quietly(engine, logger)
        if logger:
            logger.error("launch failed", stage="launch", data={"image": req.image, "name": name, "error": str(exc)})
        if isinstance(exc, EngineError) and not isinstance(exc, EngineUnavailableError):
            raise LaunchError(f"failed to launch {req.image}: {exc}") from exc
        raise

    if logger:
        logger.info(
            "started container",
            stage="launch",
            context={"container_id": container_id, "name": name},
            data={"image": req.image, "ports": port_maps},
        )
    return ContainerHandle(
        container_id=container_id,
        name=name,
        image=req.image,
        port_mappings=port_maps,
        engine=engine,
        config=config,
        logger=logger,
    )


def open_image(
    name: str,
    config: Optional[HarnessConfig] = None,
    logger: Optional[EventLogger] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> Image:
    config = config or HarnessConfig()
    engine = (engine_factory or _default_engine_factory(config, logger))()
    return Image(engine, name, logger=logger)


def _close_quietly(engine: Engine, logger: Optional[EventLogger]) -> None:
    try:
        engine.close()
    except Exception as exc:
        if logger:
            logger.debug("unable to close engine client", stage="launch", data={"error": str(exc)})
