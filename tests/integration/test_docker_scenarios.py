"""End-to-end scenarios against a real docker daemon; skipped when none answers.

Host ports come from allocate_free_port, which cannot reserve them. A port
taken by another process between allocation and ``docker start`` makes a
launch fail with "port is already allocated"; that is a known, rare flake.
"""

import time

import pytest

from throwaway.errors import ReadinessTimeoutError
from throwaway.launcher import open_image, start_container
from throwaway.models import ContainerLaunchRequest
from throwaway.pytest_plugin import require_docker

pytestmark = pytest.mark.docker

REDIS = "redis:4.0.11"
ALPINE = "alpine:3.19"


def test_can_start_container(container_factory):
    container = container_factory(ContainerLaunchRequest(image=REDIS, ports=[6379]))
    host_port = container.port_mapping(6379)
    assert host_port > 0
    container.wait_for_port_to_open(host_port, 10)


def test_wait_for_log_line(container_factory):
    container = container_factory(ContainerLaunchRequest(image=REDIS, ports=[6379], env_vars={"FOO": "BAR"}))
    container.wait_for_log_line("Ready to accept connections", 10)


def test_near_miss_log_line_times_out(container_factory):
    container = container_factory(ContainerLaunchRequest(image=REDIS))
    container.wait_for_log_line("Ready to accept connections", 10)
    with pytest.raises(ReadinessTimeoutError):
        container.wait_for_log_line("READY TO ACCEPT CONNECTIONS", 0.5)


def test_exited_process_times_out_instead_of_hanging(container_factory):
    container = container_factory(ContainerLaunchRequest(image=ALPINE, ports=[6379], args=["true"]))
    start = time.monotonic()
    with pytest.raises(ReadinessTimeoutError):
        container.wait_for_port_to_open(container.port_mapping(6379), 10)
    # 10s timeout + one 50ms interval, plus scheduler slack
    assert time.monotonic() - start < 10.05 + 1.0


def test_bind_mount_is_visible(tmp_path, container_factory, monkeypatch):
    (tmp_path / "hello.txt").write_text("hi from host\n")
    monkeypatch.chdir(tmp_path.parent)
    container = container_factory(
        ContainerLaunchRequest(
            image=ALPINE,
            args=["sh", "-c", "cat /mnt/host/hello.txt && sleep 30"],
            volume_mounts={tmp_path.name: "/mnt/host"},
        )
    )
    container.wait_for_log_line("hi from host", 10)


def test_shutdown_after_removal_does_not_raise():
    require_docker()
    container = start_container(ContainerLaunchRequest(image=ALPINE, args=["sleep", "30"]), "double-close")
    first = container.close()
    second = container.close()
    assert first.step("remove").status.value == "success"
    assert not second.clean


def test_image_delete_of_unknown_image_does_not_raise():
    require_docker()
    assert open_image("throwaway-does-not-exist:never").delete() is False
