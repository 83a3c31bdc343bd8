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

"""
cli.py - CLI for the local kind test cluster used by integration tests.

Subcommands:
    cluster    Manage the test cluster (ensure, create, delete, status, use-namespace)
    install    Install CLI tools (kubectl, kind)
    registry   Manage the local container registry (start, restart)

Environment Variables:
    KIND_NAME          Cluster name (default: porter)
    KIND_CFG_TEMPLATE  Path to a cluster config template (default: bundled)
    KUBECONFIG         Overwritten to point at ./kind.config once a cluster is in use
    And more KIND_* settings (see KindConfig for the full list)

Examples:
    # Reuse the test cluster or create it, then make sure the registry is up
    kind-manager cluster ensure

    # Create a throwaway cluster from a custom template
    KIND_NAME=scratch kind-manager cluster create --template ./kind.test.yaml.tmpl

    # Delete it again
    kind-manager cluster delete --name scratch

For detailed usage information, run: kind-manager --help
"""

from __future__ import annotations

import logging
import sys

import typer

from kind_manager import console
from kind_manager.commands import cluster_cmd, install_cmd, registry_cmd

app = typer.Typer(
    help="Provision the local kind test cluster and container registry.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(cluster_cmd.app, name="cluster")
app.add_typer(install_cmd.app, name="install")
app.add_typer(registry_cmd.app, name="registry")


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except Exception as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
