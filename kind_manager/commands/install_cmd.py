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

"""Install subcommands (kubectl, kind)."""

from __future__ import annotations

from pathlib import Path

import typer

from kind_manager.config import load_config
from kind_manager.installer import ensure_kind, ensure_kubectl

app = typer.Typer(help="Install CLI tools used by the cluster lifecycle.")

BinDirOption = typer.Option(None, "--bin-dir", help="Install directory (overrides KIND_BIN_DIR)")


@app.command()
def kubectl(
    bin_dir: Path | None = BinDirOption,
) -> None:
    """Install the latest stable kubectl if it is not on PATH."""
    ensure_kubectl(load_config(bin_dir=bin_dir))


@app.command()
def kind(
    version: str | None = typer.Option(None, "--version", help="kind release (overrides KIND_VERSION)"),
    bin_dir: Path | None = BinDirOption,
) -> None:
    """Install kind if it is not on PATH."""
    ensure_kind(load_config(version=version, bin_dir=bin_dir))
