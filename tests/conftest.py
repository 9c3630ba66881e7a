"""Shared fixtures: an in-memory engine standing in for the docker CLI."""

from typing import Dict, List, Optional, Tuple

import pytest

from throwaway.engine import ContainerSpec, ImageRemoveOptions, LogOptions, RemoveOptions
from throwaway.errors import EngineClosedError, EngineError
from throwaway.logger import EventLogger


class FakeEngine:
    """Implements the Engine protocol and records every call."""

    def __init__(self, images: Optional[List[str]] = None, logs: str = ""):
        self.images = set(images or [])
        self.logs = logs
        self.calls: List[Tuple] = []
        self.failures: Dict[str, Exception] = {}
        self.created: Dict[str, ContainerSpec] = {}
        self.names: Dict[str, str] = {}
        self._next_id = 0
        self.closed = False

    def _call(self, op: str, *args):
        self.calls.append((op,) + args)
        if self.closed and op != "close":
            raise EngineClosedError()
        if op in self.failures:
            raise self.failures[op]

    def ops(self) -> List[str]:
        return [c[0] for c in self.calls]

    def ping(self) -> None:
        self._call("ping")

    def image_inspect(self, name: str) -> bool:
        self._call("image_inspect", name)
        return name in self.images

    def image_pull(self, name: str) -> str:
        self._call("image_pull", name)
        self.images.add(name)
        return f"Status: Downloaded newer image for {name}\n"

    def container_create(self, spec: ContainerSpec, name: str) -> str:
        self._call("container_create", spec, name)
        self._next_id += 1
        container_id = f"cid{self._next_id:061d}"
        self.created[container_id] = spec
        self.names[container_id] = name
        return container_id

    def container_start(self, container_id: str) -> None:
        self._call("container_start", container_id)

    def container_stop(self, container_id: str, timeout: float) -> None:
        self._call("container_stop", container_id, timeout)

    def container_kill(self, container_id: str, signal: str = "KILL") -> None:
        self._call("container_kill", container_id, signal)

    def container_remove(self, container_id: str, options: RemoveOptions) -> None:
        self._call("container_remove", container_id, options)
        if container_id not in self.created:
            raise EngineError(f"No such container: {container_id}")
        del self.created[container_id]

    def container_logs(self, container_id: str, options: LogOptions) -> str:
        self._call("container_logs", container_id, options)
        return self.logs

    def image_remove(self, name: str, options: ImageRemoveOptions) -> None:
        self._call("image_remove", name, options)
        self.images.discard(name)

    def close(self) -> None:
        self._call("close")
        if self.closed:
            raise EngineClosedError("engine client already closed")
        self.closed = True


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def engine_factory(fake_engine):
    return lambda: fake_engine


@pytest.fixture
def event_logger(tmp_path):
    return EventLogger(tmp_path / "events.log", name="test", echo=False, level="debug")


@pytest.fixture
def fake_engine_cls():
    return FakeEngine
