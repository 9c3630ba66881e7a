from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Optional

from throwaway.engine import Engine, ImageRemoveOptions
from throwaway.logger import EventLogger
from throwaway.models import HarnessConfig, ShutdownReport
from throwaway.shutdown import shutdown
from throwaway.wait import Seconds, log_contains, port_is_open, wait_for

# Host alias reachable from inside a container on Docker Desktop for Mac.
CONTAINER_TO_LOCALHOST_DNS = "docker.for.mac.localhost"


class ContainerHandle:
    """A running container started by ``start_container``.

    Owned by a single test or thread. Closing twice is harmless: the second
    sequence only records failures.
    """

    def __init__(
        self,
        container_id: str,
        name: str,
        image: str,
        port_mappings: Dict[int, int],
        engine: Engine,
        config: Optional[HarnessConfig] = None,
        logger: Optional[EventLogger] = None,
    ):
        self.id = container_id
        self.name = name
        self.image = image
        self._port_mappings = MappingProxyType(dict(port_mappings))
        self.engine = engine
        self.config = config or HarnessConfig()
        self.logger = logger
        self.shutdown_report: Optional[ShutdownReport] = None

    def __repr__(self) -> str:
        return f"ContainerHandle(id={self.id[:12]!r}, name={self.name!r}, image={self.image!r})"

    def __enter__(self) -> "ContainerHandle":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def port_mappings(self) -> Mapping[int, int]:
        return self._port_mappings

    def port_mapping(self, port: int) -> int:
        """Host port that ``port`` inside the container is published on (0 if unmapped)."""
        return self._port_mappings.get(port, 0)

    def wait_for_port_to_open(self, port: int, timeout: Seconds) -> None:
        """Wait until a TCP handshake on host ``port`` succeeds."""
        wait_for(
            port_is_open(port, host=self.config.host, dial_timeout=self.config.dial_timeout_sec),
            timeout,
            interval=self.config.poll_interval_sec,
            logger=self.logger,
        )

    def wait_for_log_line(self, text: str, timeout: Seconds) -> None:
        """Wait until some line of the combined stdout/stderr log contains ``text``.

        Starting is not the same as being ready; most images print a line once
        their service accepts connections. Logs are split on ``\\n`` and matched
        literally and case-sensitively.
        """
        wait_for(
            log_contains(self.engine, self.id, text),
            timeout,
            interval=self.config.poll_interval_sec,
            logger=self.logger,
        )

    def close(self) -> ShutdownReport:
        return self.close_with_timeout(self.config.stop_timeout_sec)

    def close_with_timeout(self, timeout: float) -> ShutdownReport:
        self.shutdown_report = shutdown(self.engine, self.id, timeout=timeout, logger=self.logger)
        return self.shutdown_report


class Image:
    def __init__(self, engine: Engine, name: str, logger: Optional[EventLogger] = None):
        self.engine = engine
        self.name = name
        self.logger = logger

    def delete(self) -> bool:
        """Force-remove the image and its untagged parents, then close the engine.

        Returns False if the engine refused; the failure is only logged.
        """
        removed = True
        try:
            self.engine.image_remove(self.name, ImageRemoveOptions(force=True, prune_children=True))
        except Exception as exc:
            removed = False
            if self.logger:
                self.logger.debug("unable to remove image", stage="image", data={"image": self.name, "error": str(exc)})
        try:
            self.engine.close()
        except Exception as exc:
            if self.logger:
                self.logger.debug("unable to close engine client", stage="image", data={"error": str(exc)})
        return removed
