import pydantic
import pytest

from throwaway.models import ContainerLaunchRequest, HarnessConfig, load_config


class TestContainerLaunchRequest:
    def test_defaults(self):
        req = ContainerLaunchRequest(image="redis")
        assert req.ports == ()
        assert req.args == ()
        assert req.pull_always is False
        assert req.volume_mounts == {}
        assert req.env_vars == {}

    @pytest.mark.parametrize("port", [0, -1])
    def test_ports_must_be_positive(self, port):
        with pytest.raises(pydantic.ValidationError):
            ContainerLaunchRequest(image="redis", ports=[port])

    def test_duplicate_ports_are_kept(self):
        assert ContainerLaunchRequest(image="redis", ports=[80, 80]).ports == (80, 80)

    def test_sequences_are_immutable_copies(self):
        ports = [6379]
        args = ["redis-server"]
        req = ContainerLaunchRequest(image="redis", ports=ports, args=args)
        ports.append(6380)
        args.append("--port")
        assert req.ports == (6379,)
        assert req.args == ("redis-server",)
        with pytest.raises(AttributeError):
            req.ports.append(1)
        with pytest.raises(AttributeError):
            req.args.append("x")

    def test_frozen(self):
        req = ContainerLaunchRequest(image="redis")
        with pytest.raises(pydantic.ValidationError):
            req.image = "postgres"


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == HarnessConfig()

    def test_none_gives_defaults(self):
        cfg = load_config()
        assert cfg.poll_interval_sec == 0.05
        assert cfg.dial_timeout_sec == 0.05
        assert cfg.stop_timeout_sec == 1.0

    def test_empty_document_gives_defaults(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("")
        assert load_config(path) == HarnessConfig()

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("docker_binary: podman\nstop_timeout_sec: 5\n")
        cfg = load_config(path)
        assert cfg.docker_binary == "podman"
        assert cfg.stop_timeout_sec == 5

    def test_rejects_non_positive_interval(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("poll_interval_sec: 0\n")
        with pytest.raises(pydantic.ValidationError):
            load_config(path)
