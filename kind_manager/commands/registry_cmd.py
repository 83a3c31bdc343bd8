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

"""Registry subcommands (start, restart)."""

from __future__ import annotations

import typer

from kind_manager.config import load_config
from kind_manager.registry import restart_registry, start_registry

app = typer.Typer(help="Manage the local container registry.")


@app.command()
def start(
    port: int | None = typer.Option(None, "--port", help="Host port (overrides KIND_REGISTRY_PORT)"),
) -> None:
    """Start the local registry if it is not already running."""
    start_registry(load_config(registry_port=port))


@app.command()
def restart(
    port: int | None = typer.Option(None, "--port", help="Host port (overrides KIND_REGISTRY_PORT)"),
) -> None:
    """Replace the local registry with a fresh container."""
    restart_registry(load_config(registry_port=port))
