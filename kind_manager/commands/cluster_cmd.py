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

"""Cluster subcommands (ensure, create, delete, status, use-namespace)."""

from __future__ import annotations

from pathlib import Path

import typer

from kind_manager.config import display_config, load_config
from kind_manager.lifecycle import (
    create_cluster,
    delete_cluster,
    ensure_cluster,
    probe_cluster,
    set_cluster_namespace,
)

app = typer.Typer(help="Manage the kind test cluster.")

NameOption = typer.Option(None, "--name", help="kind cluster name (overrides KIND_NAME)")
TemplateOption = typer.Option(
    None, "--template", help="Cluster config template (overrides KIND_CFG_TEMPLATE)")


@app.command()
def ensure(
    name: str | None = NameOption,
    template: Path | None = TemplateOption,
) -> None:
    """Reuse the test cluster if it exists, otherwise create it."""
    cfg = load_config(name=name, cfg_template=template)
    display_config(cfg)
    ensure_cluster(cfg)


@app.command()
def create(
    name: str | None = NameOption,
    template: Path | None = TemplateOption,
) -> None:
    """Create the test cluster."""
    cfg = load_config(name=name, cfg_template=template)
    display_config(cfg)
    create_cluster(cfg)


@app.command()
def delete(
    name: str | None = NameOption,
) -> None:
    """Delete the test cluster."""
    delete_cluster(load_config(name=name))


@app.command()
def status(
    name: str | None = NameOption,
) -> None:
    """Print whether the test cluster exists (exit code 1 when absent)."""
    probe = probe_cluster(load_config(name=name))
    typer.echo(probe.state.value)
    if not probe.ok:
        raise typer.Exit(code=1)


@app.command("use-namespace")
def use_namespace(
    namespace: str = typer.Argument(..., help="Namespace to make the default"),
) -> None:
    """Set the default namespace of the test cluster's current context."""
    set_cluster_namespace(load_config(), namespace)
