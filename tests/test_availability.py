from unittest.mock import patch

import pytest

from throwaway.availability import docker_exists
from throwaway.errors import EngineUnavailableError
from throwaway.models import HarnessConfig
from throwaway.pytest_plugin import container_prefix, require_docker


class TestDockerExists:
    def test_true_when_ping_succeeds(self):
        with patch("throwaway.availability.DockerClient.ping", return_value=None):
            assert docker_exists() is True

    def test_false_when_ping_fails(self):
        with patch("throwaway.availability.DockerClient.ping", side_effect=EngineUnavailableError()):
            assert docker_exists() is False

    def test_false_when_binary_missing(self):
        assert docker_exists(HarnessConfig(docker_binary="definitely-not-a-docker-binary")) is False


class TestRequireDocker:
    def test_skips_without_docker(self):
        with patch("throwaway.pytest_plugin.docker_exists", return_value=False):
            with pytest.raises(pytest.skip.Exception):
                require_docker()

    def test_passes_with_docker(self):
        with patch("throwaway.pytest_plugin.docker_exists", return_value=True):
            require_docker()


class TestContainerPrefix:
    @pytest.mark.parametrize(
        "node_name, expected",
        [
            ("test_redis", "test_redis"),
            ("test_port[6379-tcp]", "test_port-6379-tcp"),
            ("[]", "throwaway"),
        ],
    )
    def test_sanitizes_node_names(self, node_name, expected):
        assert container_prefix(node_name) == expected
