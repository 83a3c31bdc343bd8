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

"""Constants, bundled assets, and asset loading helpers."""

from __future__ import annotations

from pathlib import Path

# -- Resolved paths --
PACKAGE_DIR = Path(__file__).resolve().parent
ASSETS_DIR = PACKAGE_DIR / "assets"


def load_asset(name: str) -> str:
    """Read a file bundled in the package ``assets`` directory.

    Args:
        name: File name relative to the assets directory.

    Returns:
        File contents as text.
    """
    return (ASSETS_DIR / name).read_text(encoding="utf-8")


# -- Cluster defaults --
DEFAULT_CLUSTER_NAME = "porter"
KUBECONFIG_FILE = "kind.config"
RENDERED_CONFIG_FILE = "kind.config.yaml"
CONFIG_TEMPLATE_NAME = "kind.config.yaml"
KUBECONFIG_FILE_MODE = 0o660

# -- Bundled assets --
ASSET_KIND_CONFIG_TEMPLATE = "kind.config.yaml.tmpl"

# -- Environment variables --
ENV_KUBECONFIG = "KUBECONFIG"
ENV_KIND_NAME = "KIND_NAME"
ENV_KIND_CFG_TEMPLATE = "KIND_CFG_TEMPLATE"
ENV_KIND_DOCKER_NETWORK = "KIND_EXPERIMENTAL_DOCKER_NETWORK"
ENV_PATH = "PATH"

# -- Local registry --
DEFAULT_NETWORK_NAME = "porter"
DEFAULT_REGISTRY_NAME = "registry"
DEFAULT_REGISTRY_PORT = 5000
DEFAULT_REGISTRY_IMAGE = "registry:2"
REGISTRY_CONTAINER_PORT = 5000
REGISTRY_CONFIGMAP_NAME = "local-registry-hosting"
REGISTRY_CONFIGMAP_KEY = "localRegistryHosting.v1"
REGISTRY_HELP_URL = "https://kind.sigs.k8s.io/docs/user/local-registry/"
NS_KUBE_PUBLIC = "kube-public"

# -- Tools --
TOOL_KIND = "kind"
TOOL_KUBECTL = "kubectl"
DEFAULT_KIND_VERSION = "v0.24.0"
DEFAULT_BIN_DIR = Path.home() / ".local" / "bin"
KUBECTL_VERSION_URL = "https://dl.k8s.io/release/stable.txt"
KUBECTL_DOWNLOAD_URL = "https://dl.k8s.io/release/{version}/bin/{os}/{arch}/kubectl{ext}"
KIND_DOWNLOAD_URL = "https://kind.sigs.k8s.io/dl/{version}/kind-{os}-{arch}{ext}"
HTTP_TIMEOUT_SECONDS = 30
DOWNLOAD_CHUNK_SIZE = 1 << 16

# Python platform identifiers -> release artifact identifiers
OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
}
ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}
