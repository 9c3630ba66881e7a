"""pytest integration: skip without docker and launch containers per test.

Enable with ``pytest_plugins = ["throwaway.pytest_plugin"]`` in a conftest.
"""

from __future__ import annotations

import re
from typing import List

import pytest

from throwaway.availability import docker_exists
from throwaway.container import ContainerHandle
from throwaway.launcher import start_container
from throwaway.models import ContainerLaunchRequest

SKIP_REASON = "Docker tests ignored because either docker isn't installed or the docker daemon isn't running"


def require_docker() -> None:
    if not docker_exists():
        pytest.skip(SKIP_REASON)


def container_prefix(node_name: str) -> str:
    # docker names allow [a-zA-Z0-9][a-zA-Z0-9_.-]
    prefix = re.sub(r"[^a-zA-Z0-9_.-]+", "-", node_name).strip("-_.")
    return prefix or "throwaway"


@pytest.fixture(scope="session")
def docker_available() -> bool:
    return docker_exists()


@pytest.fixture
def container_factory(request, docker_available):
    """Launch containers named after the test; all are shut down at teardown."""
    if not docker_available:
        pytest.skip(SKIP_REASON)
    started: List[ContainerHandle] = []

    def launch(req: ContainerLaunchRequest, **kwargs) -> ContainerHandle:
        handle = start_container(req, container_prefix(request.node.name), **kwargs)
        started.append(handle)
        return handle

    yield launch
    for handle in reversed(started):
        handle.close()
