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

"""Configuration settings and environment resolution."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.panel import Panel

from kind_manager import console
from kind_manager.constants import (
    ASSET_KIND_CONFIG_TEMPLATE,
    DEFAULT_BIN_DIR,
    DEFAULT_CLUSTER_NAME,
    DEFAULT_KIND_VERSION,
    DEFAULT_NETWORK_NAME,
    DEFAULT_REGISTRY_IMAGE,
    DEFAULT_REGISTRY_NAME,
    DEFAULT_REGISTRY_PORT,
    ENV_KUBECONFIG,
    KUBECONFIG_FILE,
    load_asset,
)
from kind_manager.errors import ConfigReadError


# ============================================================================
# Configuration classes
# ============================================================================

class KindConfig(BaseSettings):
    """kind cluster configuration, auto-loaded from KIND_* env vars.

    Built once at process start and passed to every operation.

    Attributes:
        name: Name of the kind cluster (``KIND_NAME``).
        cfg_template: Override path for the cluster config template (``KIND_CFG_TEMPLATE``).
        workdir: Directory holding the persisted kubeconfig and transient config.
        bin_dir: Directory that downloaded tool binaries are installed into.
        version: kind release to install when kind is missing.
        registry_name: Container name of the local registry.
        registry_port: Host port the local registry is published on.
        registry_image: Image the local registry container runs.
        network_name: Docker network shared by the registry and the cluster nodes.
        user_kubeconfig: The caller's ``KUBECONFIG`` at startup, if any.
    """

    model_config = SettingsConfigDict(env_prefix="KIND_", extra="ignore", populate_by_name=True)

    name: str = DEFAULT_CLUSTER_NAME
    cfg_template: Path | None = None
    workdir: Path = Field(default_factory=Path.cwd)
    bin_dir: Path = DEFAULT_BIN_DIR
    version: str = Field(default=DEFAULT_KIND_VERSION, pattern=r"^v\d+\.\d+\.\d+$")
    registry_name: str = DEFAULT_REGISTRY_NAME
    registry_port: int = Field(default=DEFAULT_REGISTRY_PORT, ge=1, le=65535)
    registry_image: str = DEFAULT_REGISTRY_IMAGE
    network_name: str = DEFAULT_NETWORK_NAME
    user_kubeconfig: str | None = Field(default=None, validation_alias=ENV_KUBECONFIG)

    @field_validator("name", mode="before")
    @classmethod
    def _default_empty_name(cls, value: str | None) -> str:
        return value or DEFAULT_CLUSTER_NAME

    @field_validator("cfg_template", "user_kubeconfig", mode="before")
    @classmethod
    def _empty_as_unset(cls, value):
        return value or None

    @property
    def kubeconfig_path(self) -> Path:
        """Absolute location of the persisted kubeconfig for the test cluster."""
        return self.workdir.resolve() / KUBECONFIG_FILE


# ============================================================================
# Environment resolution
# ============================================================================

def resolve_cluster_name(cfg: KindConfig) -> str:
    """Return the cluster name override, or the default when none is set.

    Args:
        cfg: Resolved kind configuration.

    Returns:
        Name of the kind cluster to create, reuse, or delete.
    """
    return cfg.name or DEFAULT_CLUSTER_NAME


def resolve_config_template_source(cfg: KindConfig) -> str:
    """Return the cluster config template text.

    Args:
        cfg: Resolved kind configuration.

    Returns:
        Contents of the override template file when one is configured,
        otherwise the bundled default template.

    Raises:
        ConfigReadError: If the override template cannot be opened or read.
    """
    if cfg.cfg_template is None:
        return load_asset(ASSET_KIND_CONFIG_TEMPLATE)

    try:
        return cfg.cfg_template.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigReadError(
            f"error reading kind config template from {cfg.cfg_template}: {err}"
        ) from err


def display_config(cfg: KindConfig) -> None:
    """Print the resolved configuration.

    Args:
        cfg: Resolved kind configuration.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print("[yellow]kind cluster:[/yellow]")
    console.print(f"  name            : {resolve_cluster_name(cfg)}")
    console.print(f"  config template : {cfg.cfg_template or '(bundled default)'}")
    console.print(f"  kubeconfig      : {cfg.kubeconfig_path}")
    console.print("[yellow]Local registry:[/yellow]")
    console.print(f"  container       : {cfg.registry_name}")
    console.print(f"  port            : {cfg.registry_port}")
    console.print(f"  network         : {cfg.network_name}")
    console.print("[yellow]Tools:[/yellow]")
    console.print(f"  bin_dir         : {cfg.bin_dir}")
    console.print(f"  kind version    : {cfg.version}")


def load_config(**overrides) -> KindConfig:
    """Build the configuration from the environment, applying CLI overrides.

    Args:
        **overrides: Field values to replace; ``None`` values are ignored.

    Returns:
        The resolved configuration.
    """
    cfg = KindConfig()
    update = {key: value for key, value in overrides.items() if value is not None}
    if update:
        cfg = cfg.model_copy(update=update)
    return cfg
