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

"""Download and install the CLI tools the cluster lifecycle shells out to."""

from __future__ import annotations

import os
import platform
import shutil
import sys
from pathlib import Path

import requests
from rich.panel import Panel

from kind_manager import console, logger
from kind_manager.config import KindConfig
from kind_manager.constants import (
    ARCH_ALIASES,
    DOWNLOAD_CHUNK_SIZE,
    ENV_PATH,
    HTTP_TIMEOUT_SECONDS,
    KIND_DOWNLOAD_URL,
    KUBECTL_DOWNLOAD_URL,
    KUBECTL_VERSION_URL,
    OS_ALIASES,
    TOOL_KIND,
    TOOL_KUBECTL,
)
from kind_manager.errors import DownloadError, VersionLookupError


def platform_target() -> tuple[str, str, str]:
    """Map the running interpreter's platform to release artifact identifiers.

    Returns:
        Tuple of (os, arch, executable_extension), e.g. ``("linux", "amd64", "")``.

    Raises:
        DownloadError: If the OS or CPU architecture has no published binary.
    """
    os_name = next((alias for prefix, alias in OS_ALIASES.items() if sys.platform.startswith(prefix)), None)
    arch = ARCH_ALIASES.get(platform.machine().lower())
    if os_name is None or arch is None:
        raise DownloadError(f"unsupported platform {sys.platform}/{platform.machine()}")
    ext = ".exe" if os_name == "windows" else ""
    return os_name, arch, ext


def prepend_bin_dir(bin_dir: Path) -> None:
    """Put *bin_dir* at the front of ``PATH`` so installed tools resolve first."""
    entries = os.environ.get(ENV_PATH, "").split(os.pathsep)
    if str(bin_dir) not in entries:
        os.environ[ENV_PATH] = os.pathsep.join([str(bin_dir), *filter(None, entries)])


def is_tool_available(name: str, cfg: KindConfig) -> bool:
    """Check whether *name* resolves on ``PATH`` (including the install dir)."""
    prepend_bin_dir(cfg.bin_dir)
    return shutil.which(name) is not None


def lookup_latest_kubectl_version() -> str:
    """Query the Kubernetes release channel for the latest stable kubectl.

    Returns:
        Version tag such as ``v1.31.2``.

    Raises:
        VersionLookupError: On a network error or a non-2xx response.
    """
    try:
        resp = requests.get(KUBECTL_VERSION_URL, timeout=HTTP_TIMEOUT_SECONDS)
    except requests.RequestException as err:
        raise VersionLookupError(f"unable to determine the latest version of kubectl: {err}") from err

    if not 200 <= resp.status_code < 300:
        raise VersionLookupError(f"GET {KUBECTL_VERSION_URL} ({resp.status_code}): {resp.reason}")

    version = resp.text.strip()
    if not version:
        raise VersionLookupError(f"empty response from {KUBECTL_VERSION_URL}")
    return version


def download_binary(url: str, dest: Path) -> None:
    """Stream a binary from *url* into *dest* and mark it executable.

    Args:
        url: Fully resolved download URL.
        dest: Target file path; parent directories are created.

    Raises:
        DownloadError: If the request fails or the file cannot be written.
    """
    logger.debug("Downloading %s -> %s", url, dest)
    tmp = dest.with_name(f".{dest.name}.partial")
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with requests.get(url, stream=True, timeout=HTTP_TIMEOUT_SECONDS) as resp:
            resp.raise_for_status()
            with open(tmp, "wb") as f:
                for chunk in resp.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    f.write(chunk)
        tmp.chmod(0o755)
        tmp.replace(dest)
    except (requests.RequestException, OSError) as err:
        tmp.unlink(missing_ok=True)
        raise DownloadError(f"could not download {url}: {err}") from err


def _resolve_download(name: str, cfg: KindConfig) -> tuple[str, str]:
    """Return (version, url) for the tool *name* on this platform."""
    os_name, arch, ext = platform_target()
    if name == TOOL_KUBECTL:
        version = lookup_latest_kubectl_version()
        template = KUBECTL_DOWNLOAD_URL
    elif name == TOOL_KIND:
        version = cfg.version
        template = KIND_DOWNLOAD_URL
    else:
        raise DownloadError(f"don't know how to install '{name}'")
    return version, template.format(version=version, os=os_name, arch=arch, ext=ext)


def ensure_tool_installed(name: str, cfg: KindConfig) -> None:
    """Make sure the CLI tool *name* is runnable, downloading it if missing.

    Presence is re-checked on every call; nothing is cached.

    Args:
        name: Tool to ensure, ``kubectl`` or ``kind``.
        cfg: Configuration carrying the install directory and kind version.

    Raises:
        VersionLookupError: If the latest kubectl version cannot be resolved.
        DownloadError: If the binary cannot be downloaded or installed.
    """
    if is_tool_available(name, cfg):
        logger.debug("%s already available at %s", name, shutil.which(name))
        return

    console.print(Panel.fit(f"Installing {name}", style="bold blue"))
    version, url = _resolve_download(name, cfg)
    _, _, ext = platform_target()
    dest = cfg.bin_dir / f"{name}{ext}"
    console.print(f"[yellow]\u2139\ufe0f  Downloading {name} {version} to {dest}...[/yellow]")
    download_binary(url, dest)
    console.print(f"[green]\u2705 {name} {version} installed[/green]")


def ensure_kubectl(cfg: KindConfig) -> None:
    """Ensure kubectl is installed."""
    ensure_tool_installed(TOOL_KUBECTL, cfg)


def ensure_kind(cfg: KindConfig) -> None:
    """Ensure kind is installed."""
    ensure_tool_installed(TOOL_KIND, cfg)
