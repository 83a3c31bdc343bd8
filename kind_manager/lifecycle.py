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

"""kind test cluster lifecycle: probe, reuse, create, and delete."""

from __future__ import annotations

import enum
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from rich.panel import Panel

from kind_manager import console, logger
from kind_manager.config import KindConfig, resolve_cluster_name, resolve_config_template_source
from kind_manager.constants import (
    ENV_KIND_DOCKER_NETWORK,
    ENV_KUBECONFIG,
    KUBECONFIG_FILE_MODE,
    RENDERED_CONFIG_FILE,
    TOOL_KIND,
    TOOL_KUBECTL,
)
from kind_manager.errors import FileWriteError, KindManagerError
from kind_manager.installer import ensure_kind, ensure_kubectl
from kind_manager.registry import registry_discovery_yaml, restart_registry, start_registry
from kind_manager.render import detect_host_ip, render_cluster_config
from kind_manager.utils import run_tool


# ============================================================================
# State
# ============================================================================

class ClusterState(enum.Enum):
    """Whether the named kind cluster currently exists."""

    ABSENT = "absent"
    PRESENT = "present"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of asking kind for a cluster's kubeconfig.

    Attributes:
        kubeconfig: kubeconfig contents, empty when the cluster is unavailable.
        ok: Whether the cluster answered.
    """

    kubeconfig: str = ""
    ok: bool = False

    @property
    def state(self) -> ClusterState:
        return ClusterState.PRESENT if self.ok else ClusterState.ABSENT


# ============================================================================
# Helpers
# ============================================================================

def _write_file(path: Path, contents: str) -> None:
    try:
        path.write_text(contents, encoding="utf-8")
        path.chmod(KUBECONFIG_FILE_MODE)
    except OSError as err:
        raise FileWriteError(f"error writing {path}: {err}") from err


@contextmanager
def transient_config(path: Path, contents: str) -> Iterator[Path]:
    """Write *contents* to *path* for the duration of the block, then remove it.

    The file is removed whether or not the block raises.

    Raises:
        FileWriteError: If the file cannot be written.
    """
    try:
        _write_file(path, contents)
        yield path
    finally:
        path.unlink(missing_ok=True)


def kubectl(cfg: KindConfig, *args: str, stdin: str | None = None) -> str:
    """Run kubectl against the test cluster's kubeconfig.

    Args:
        cfg: Configuration locating the persisted kubeconfig.
        *args: kubectl arguments (e.g. ``"apply", "-f", "-"``).
        stdin: Text piped to kubectl, if any.

    Returns:
        kubectl stdout.

    Raises:
        ToolInvocationError: If kubectl fails.
    """
    return run_tool(TOOL_KUBECTL, *args, env={ENV_KUBECONFIG: str(cfg.kubeconfig_path)}, stdin=stdin)


def set_cluster_namespace(cfg: KindConfig, namespace: str) -> None:
    """Switch the current kubeconfig context of the test cluster to *namespace*."""
    kubectl(cfg, "config", "set-context", "--current", "--namespace", namespace)
    console.print(f"[green]\u2705 Default namespace set to '{namespace}'[/green]")


# ============================================================================
# Cluster operations
# ============================================================================

def probe_cluster(cfg: KindConfig) -> ProbeResult:
    """Fetch the kubeconfig of the named cluster, if it exists.

    Never raises: a missing kind binary, a missing cluster, or any other
    failure is reported as ``ok=False``.

    Args:
        cfg: Configuration with the cluster name.

    Returns:
        The probe outcome.
    """
    name = resolve_cluster_name(cfg)
    try:
        contents = run_tool(TOOL_KIND, "get", "kubeconfig", "--name", name)
    except (KindManagerError, OSError) as err:
        logger.debug("kind cluster '%s' not available: %s", name, err)
        return ProbeResult()
    if not contents.strip():
        return ProbeResult()
    return ProbeResult(kubeconfig=contents, ok=True)


def adopt_cluster(cfg: KindConfig, kubeconfig: str) -> None:
    """Point this process at an existing cluster.

    Persists *kubeconfig* at the fixed path and exports ``KUBECONFIG``. When
    the caller's own ``KUBECONFIG`` points elsewhere, prints a reminder to
    update it.

    Args:
        cfg: Configuration locating the persisted kubeconfig.
        kubeconfig: Contents returned by :func:`probe_cluster`.

    Raises:
        FileWriteError: If the kubeconfig cannot be written.
    """
    console.print("[yellow]\u2139\ufe0f  Reusing existing kind cluster[/yellow]")
    current = cfg.kubeconfig_path
    _write_file(current, kubeconfig)

    user_kubeconfig = Path(cfg.user_kubeconfig or "").resolve()
    if user_kubeconfig != current:
        logger.warning("KUBECONFIG (%s) does not match the test cluster kubeconfig %s", user_kubeconfig, current)
        console.print(
            "[yellow]\u26a0\ufe0f  ATTENTION! You should set your KUBECONFIG to match the cluster used by this project"
            f"\n\n\texport KUBECONFIG={current}\n[/yellow]"
        )
    os.environ[ENV_KUBECONFIG] = str(current)


def create_cluster(cfg: KindConfig) -> None:
    """Create the kind cluster and document the local registry inside it.

    Args:
        cfg: Configuration with the cluster name, template and registry settings.

    Raises:
        KindManagerError: If any step fails; the transient config is removed regardless.
    """
    ensure_kind(cfg)
    restart_registry(cfg)

    name = resolve_cluster_name(cfg)
    console.print(Panel.fit(f"Creating kind cluster '{name}'", style="bold blue"))

    host_ip = detect_host_ip()
    rendered = render_cluster_config(resolve_config_template_source(cfg), host_ip)

    os.environ[ENV_KUBECONFIG] = str(cfg.kubeconfig_path)
    with transient_config(cfg.workdir / RENDERED_CONFIG_FILE, rendered) as config_path:
        run_tool(
            TOOL_KIND, "create", "cluster", "--name", name, "--config", str(config_path),
            env={
                ENV_KIND_DOCKER_NETWORK: cfg.network_name,
                ENV_KUBECONFIG: str(cfg.kubeconfig_path),
            },
        )
    console.print("[green]\u2705 Cluster created successfully[/green]")

    kubectl(cfg, "apply", "-f", "-", stdin=registry_discovery_yaml(cfg))
    console.print("[green]\u2705 Local registry documented in cluster[/green]")


def delete_cluster(cfg: KindConfig) -> None:
    """Delete the kind cluster.

    Args:
        cfg: Configuration with the cluster name.

    Raises:
        ToolInvocationError: If kind fails to delete the cluster.
    """
    ensure_kind(cfg)
    name = resolve_cluster_name(cfg)
    console.print(f"[yellow]\u2139\ufe0f  Deleting kind cluster '{name}'...[/yellow]")
    run_tool(TOOL_KIND, "delete", "cluster", "--name", name)
    console.print(f"[green]\u2705 Cluster '{name}' deleted[/green]")


# ============================================================================
# State machine
# ============================================================================

def _on_present(cfg: KindConfig, probe: ProbeResult) -> None:
    adopt_cluster(cfg, probe.kubeconfig)


def _on_absent(cfg: KindConfig, probe: ProbeResult) -> None:
    create_cluster(cfg)


_TRANSITIONS: dict[ClusterState, Callable[[KindConfig, ProbeResult], None]] = {
    ClusterState.PRESENT: _on_present,
    ClusterState.ABSENT: _on_absent,
}


def transition(state: ClusterState) -> Callable[[KindConfig, ProbeResult], None]:
    """Return the handler that makes a cluster in *state* usable."""
    return _TRANSITIONS[state]


def ensure_cluster(cfg: KindConfig) -> ClusterState:
    """Make sure the test cluster is up, reusing it when it already exists.

    Args:
        cfg: Resolved kind configuration.

    Returns:
        The state the cluster was found in before any action was taken.

    Raises:
        KindManagerError: If creating the cluster or starting the registry fails.
    """
    ensure_kubectl(cfg)

    probe = probe_cluster(cfg)
    transition(probe.state)(cfg, probe)

    start_registry(cfg)
    return probe.state
