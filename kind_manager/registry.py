# /*
# Copyright 2026 The Grove Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# */

"""Local container registry lifecycle and its discovery manifest."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import docker
import yaml
from rich.panel import Panel

from kind_manager import console, logger
from kind_manager.config import KindConfig
from kind_manager.constants import (
    NS_KUBE_PUBLIC,
    REGISTRY_CONFIGMAP_KEY,
    REGISTRY_CONFIGMAP_NAME,
    REGISTRY_CONTAINER_PORT,
    REGISTRY_HELP_URL,
)
from kind_manager.errors import ToolInvocationError


@contextmanager
def docker_client() -> Iterator[docker.DockerClient]:
    """Yield a Docker client from the environment, closing it afterwards.

    Raises:
        ToolInvocationError: If the Docker daemon cannot be reached.
    """
    try:
        client = docker.from_env()
    except docker.errors.DockerException as err:
        raise ToolInvocationError(f"could not connect to Docker: {err}") from err
    try:
        yield client
    finally:
        client.close()


def ensure_network(client: docker.DockerClient, cfg: KindConfig) -> None:
    """Create the Docker network shared by the registry and cluster nodes if missing.

    Args:
        client: Docker client instance.
        cfg: Configuration with the network name.
    """
    if client.networks.list(names=[cfg.network_name]):
        return
    console.print(f"[yellow]   Creating docker network '{cfg.network_name}'[/yellow]")
    client.networks.create(cfg.network_name, driver="bridge")


def _run_registry(client: docker.DockerClient, cfg: KindConfig) -> None:
    """Start a new registry container attached to the shared network."""
    client.containers.run(
        cfg.registry_image,
        name=cfg.registry_name,
        detach=True,
        network=cfg.network_name,
        ports={f"{REGISTRY_CONTAINER_PORT}/tcp": cfg.registry_port},
        restart_policy={"Name": "always"},
    )


def start_registry(cfg: KindConfig) -> None:
    """Start the local registry if it is not already running.

    A running registry is left untouched, a stopped one is started, and a
    missing one is created.

    Args:
        cfg: Configuration with the registry name, image, port and network.

    Raises:
        ToolInvocationError: If a Docker API call fails.
    """
    console.print(Panel.fit("Starting local registry", style="bold blue"))
    with docker_client() as client:
        try:
            ensure_network(client, cfg)
            try:
                container = client.containers.get(cfg.registry_name)
            except docker.errors.NotFound:
                _run_registry(client, cfg)
                console.print(f"[green]\u2705 Registry running on localhost:{cfg.registry_port}[/green]")
                return

            if container.status == "running":
                console.print("[yellow]   Registry already running[/yellow]")
                return
            logger.info("Starting stopped registry container %s", cfg.registry_name)
            container.start()
            console.print(f"[green]\u2705 Registry running on localhost:{cfg.registry_port}[/green]")
        except docker.errors.DockerException as err:
            raise ToolInvocationError(f"could not start registry '{cfg.registry_name}': {err}") from err


def restart_registry(cfg: KindConfig) -> None:
    """Remove any existing local registry and start a fresh one.

    Args:
        cfg: Configuration with the registry name, image, port and network.

    Raises:
        ToolInvocationError: If a Docker API call fails.
    """
    console.print(Panel.fit("Restarting local registry", style="bold blue"))
    with docker_client() as client:
        try:
            try:
                client.containers.get(cfg.registry_name).remove(force=True)
                console.print("[yellow]   Removed existing registry[/yellow]")
            except docker.errors.NotFound:
                console.print("[yellow]   No existing registry found[/yellow]")
            ensure_network(client, cfg)
            _run_registry(client, cfg)
        except docker.errors.DockerException as err:
            raise ToolInvocationError(f"could not restart registry '{cfg.registry_name}': {err}") from err
    console.print(f"[green]\u2705 Registry running on localhost:{cfg.registry_port}[/green]")


def registry_discovery_manifest(cfg: KindConfig) -> dict:
    """Build the ConfigMap that documents the local registry to cluster workloads.

    See https://github.com/kubernetes/enhancements/tree/master/keps/sig-cluster-lifecycle/generic/1755-communicating-a-local-registry

    Args:
        cfg: Configuration with the registry port.

    Returns:
        Kubernetes ConfigMap resource as a dictionary ready for YAML serialization.
    """
    hosting = {
        "host": f"localhost:{cfg.registry_port}",
        "help": REGISTRY_HELP_URL,
    }
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {
            "name": REGISTRY_CONFIGMAP_NAME,
            "namespace": NS_KUBE_PUBLIC,
        },
        "data": {
            REGISTRY_CONFIGMAP_KEY: yaml.safe_dump(hosting, sort_keys=False),
        },
    }


def registry_discovery_yaml(cfg: KindConfig) -> str:
    """Serialize :func:`registry_discovery_manifest` for ``kubectl apply -f -``."""
    return yaml.safe_dump(registry_discovery_manifest(cfg), sort_keys=False)
