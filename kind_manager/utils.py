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

"""Utility functions for running external CLI tools."""

from __future__ import annotations

import os

import sh

from kind_manager import logger
from kind_manager.errors import ToolInvocationError


def _decode(output) -> str:
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output or ""


def run_tool(
    tool: str,
    *args: str,
    env: dict[str, str] | None = None,
    stdin: str | None = None,
) -> str:
    """Run an external CLI tool and return its stdout.

    Args:
        tool: Name of the executable, resolved on ``PATH`` at call time.
        *args: Arguments passed to the tool.
        env: Extra environment variables layered over ``os.environ``.
        stdin: Text fed to the tool's standard input, if any.

    Returns:
        Captured standard output.

    Raises:
        ToolInvocationError: If the tool is not found or exits non-zero.
    """
    # Captured output is written to files (kubeconfig), so keep it off a pty.
    kwargs: dict = {"_tty_out": False}
    if env:
        kwargs["_env"] = {**os.environ, **env}
    if stdin is not None:
        kwargs["_in"] = stdin

    logger.debug("Running: %s %s", tool, " ".join(args))
    try:
        cmd = sh.Command(tool)
        return _decode(cmd(*args, **kwargs))
    except sh.CommandNotFound as err:
        raise ToolInvocationError(f"Required command '{tool}' not found. Please install it first.") from err
    except sh.ErrorReturnCode as err:
        stderr = _decode(err.stderr).strip()
        raise ToolInvocationError(
            f"'{tool} {' '.join(args)}' failed with exit code {err.exit_code}: {stderr[:500]}"
        ) from err
