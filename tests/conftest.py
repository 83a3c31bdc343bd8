"""Shared fixtures for tests."""

import os

import pytest

from kind_manager.config import KindConfig

ENV_VARS = (
    "KIND_NAME",
    "KIND_CFG_TEMPLATE",
    "KIND_WORKDIR",
    "KIND_BIN_DIR",
    "KIND_VERSION",
    "KIND_REGISTRY_NAME",
    "KIND_REGISTRY_PORT",
    "KIND_REGISTRY_IMAGE",
    "KIND_NETWORK_NAME",
    "KUBECONFIG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate every test from the caller's KIND_* settings and KUBECONFIG."""
    for name in ENV_VARS:
        # setenv first so monkeypatch restores the original state, even when
        # the code under test exports the variable.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # Restored after the test; installer code prepends to PATH.
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))


@pytest.fixture
def cfg(tmp_path) -> KindConfig:
    """Configuration rooted in a temporary working directory."""
    return KindConfig(workdir=tmp_path, bin_dir=tmp_path / "bin", name="test")


@pytest.fixture
def template_file(tmp_path):
    """A minimal single-node cluster template on disk."""
    path = tmp_path / "kind.test.yaml.tmpl"
    path.write_text(
        "kind: Cluster\n"
        "apiVersion: kind.x-k8s.io/v1alpha4\n"
        "networking:\n"
        '  apiServerAddress: "{{ Address }}"\n'
        "nodes:\n"
        "- role: control-plane\n"
    )
    return path
