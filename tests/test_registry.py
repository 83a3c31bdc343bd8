"""Unit tests for the local registry controller."""

from unittest.mock import MagicMock

import docker
import pytest
import yaml

from kind_manager import registry
from kind_manager.errors import ToolInvocationError


@pytest.fixture
def client(monkeypatch):
    """A mocked Docker client returned by docker.from_env()."""
    fake = MagicMock()
    fake.networks.list.return_value = []
    monkeypatch.setattr(registry.docker, "from_env", lambda: fake)
    return fake


class TestStartRegistry:
    """Test idempotent registry start."""

    def test_creates_missing_registry(self, client, cfg):
        client.containers.get.side_effect = docker.errors.NotFound("no such container")

        registry.start_registry(cfg)

        client.networks.create.assert_called_once_with(cfg.network_name, driver="bridge")
        client.containers.run.assert_called_once()
        args, kwargs = client.containers.run.call_args
        assert args == (cfg.registry_image,)
        assert kwargs["name"] == cfg.registry_name
        assert kwargs["network"] == cfg.network_name
        assert kwargs["ports"] == {"5000/tcp": cfg.registry_port}
        client.close.assert_called_once()

    def test_running_registry_untouched(self, client, cfg):
        client.networks.list.return_value = [MagicMock()]
        container = MagicMock(status="running")
        client.containers.get.return_value = container

        registry.start_registry(cfg)

        client.networks.create.assert_not_called()
        container.start.assert_not_called()
        client.containers.run.assert_not_called()

    def test_stopped_registry_started(self, client, cfg):
        container = MagicMock(status="exited")
        client.containers.get.return_value = container

        registry.start_registry(cfg)

        container.start.assert_called_once()
        client.containers.run.assert_not_called()

    def test_api_error(self, client, cfg):
        client.containers.get.side_effect = docker.errors.NotFound("no such container")
        client.containers.run.side_effect = docker.errors.APIError("port is already allocated")

        with pytest.raises(ToolInvocationError, match="port is already allocated"):
            registry.start_registry(cfg)
        client.close.assert_called_once()

    def test_docker_unavailable(self, monkeypatch, cfg):
        def unavailable():
            raise docker.errors.DockerException("Error while fetching server API version")

        monkeypatch.setattr(registry.docker, "from_env", unavailable)
        with pytest.raises(ToolInvocationError, match="connect to Docker"):
            registry.start_registry(cfg)


class TestRestartRegistry:
    """Test registry restart."""

    def test_replaces_existing_registry(self, client, cfg):
        container = MagicMock(status="running")
        client.containers.get.return_value = container

        registry.restart_registry(cfg)

        container.remove.assert_called_once_with(force=True)
        client.containers.run.assert_called_once()

    def test_starts_when_absent(self, client, cfg):
        client.containers.get.side_effect = docker.errors.NotFound("no such container")

        registry.restart_registry(cfg)

        client.containers.run.assert_called_once()


class TestRegistryDiscoveryManifest:
    """Test the local-registry-hosting ConfigMap."""

    def test_manifest(self, cfg):
        manifest = registry.registry_discovery_manifest(cfg)
        assert manifest["kind"] == "ConfigMap"
        assert manifest["metadata"] == {"name": "local-registry-hosting", "namespace": "kube-public"}
        hosting = yaml.safe_load(manifest["data"]["localRegistryHosting.v1"])
        assert hosting["host"] == f"localhost:{cfg.registry_port}"

    def test_yaml_round_trips(self, cfg):
        assert yaml.safe_load(registry.registry_discovery_yaml(cfg)) == registry.registry_discovery_manifest(cfg)
