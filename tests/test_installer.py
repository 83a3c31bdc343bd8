"""Unit tests for the tool installer."""

import os

import pytest
import requests

from kind_manager import installer
from kind_manager.constants import KUBECTL_VERSION_URL
from kind_manager.errors import DownloadError, VersionLookupError


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, text="", content=b"", reason="OK"):
        self.status_code = status_code
        self.text = text
        self.content = content
        self.reason = reason

    @property
    def ok(self):
        return self.status_code < 400

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")

    def iter_content(self, chunk_size=1):
        for i in range(0, len(self.content), chunk_size):
            yield self.content[i:i + chunk_size]

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def linux_amd64(monkeypatch):
    monkeypatch.setattr(installer, "platform_target", lambda: ("linux", "amd64", ""))


@pytest.fixture
def tool_missing(monkeypatch):
    monkeypatch.setattr(installer.shutil, "which", lambda name: None)


class TestEnsureToolInstalled:
    """Test tool presence checks and downloads."""

    def test_noop_when_available(self, monkeypatch, cfg):
        monkeypatch.setattr(installer.shutil, "which", lambda name: f"/usr/bin/{name}")

        def no_http(*args, **kwargs):
            raise AssertionError("should not touch the network")

        monkeypatch.setattr(installer.requests, "get", no_http)
        installer.ensure_tool_installed("kubectl", cfg)

    def test_bin_dir_prepended_to_path(self, monkeypatch, cfg):
        monkeypatch.setattr(installer.shutil, "which", lambda name: f"/usr/bin/{name}")
        installer.ensure_kubectl(cfg)
        assert os.environ["PATH"].split(os.pathsep)[0] == str(cfg.bin_dir)

    def test_downloads_latest_kubectl(self, monkeypatch, cfg, linux_amd64, tool_missing):
        calls = []

        def fake_get(url, **kwargs):
            calls.append(url)
            if url == KUBECTL_VERSION_URL:
                return FakeResponse(text="v1.31.2\n")
            return FakeResponse(content=b"#!/bin/sh\necho kubectl\n")

        monkeypatch.setattr(installer.requests, "get", fake_get)
        installer.ensure_kubectl(cfg)

        assert calls == [
            KUBECTL_VERSION_URL,
            "https://dl.k8s.io/release/v1.31.2/bin/linux/amd64/kubectl",
        ]
        dest = cfg.bin_dir / "kubectl"
        assert dest.read_bytes() == b"#!/bin/sh\necho kubectl\n"
        assert os.access(dest, os.X_OK)

    def test_kind_uses_pinned_version(self, monkeypatch, cfg, linux_amd64, tool_missing):
        calls = []

        def fake_get(url, **kwargs):
            calls.append(url)
            return FakeResponse(content=b"kind")

        monkeypatch.setattr(installer.requests, "get", fake_get)
        installer.ensure_kind(cfg)

        assert calls == [f"https://kind.sigs.k8s.io/dl/{cfg.version}/kind-linux-amd64"]
        assert (cfg.bin_dir / "kind").exists()

    @pytest.mark.parametrize("status", [300, 304, 404, 503])
    def test_version_lookup_non_2xx(self, monkeypatch, cfg, linux_amd64, tool_missing, status):
        monkeypatch.setattr(
            installer.requests, "get",
            lambda url, **kwargs: FakeResponse(status_code=status, text="<html>moved</html>", reason="Nope"),
        )
        with pytest.raises(VersionLookupError, match=str(status)):
            installer.ensure_kubectl(cfg)

    def test_version_lookup_network_error(self, monkeypatch, cfg, linux_amd64, tool_missing):
        def fail(url, **kwargs):
            raise requests.ConnectionError("unreachable")

        monkeypatch.setattr(installer.requests, "get", fail)
        with pytest.raises(VersionLookupError):
            installer.ensure_kubectl(cfg)

    def test_download_failure_leaves_nothing_behind(self, monkeypatch, cfg, linux_amd64, tool_missing):
        monkeypatch.setattr(
            installer.requests, "get",
            lambda url, **kwargs: FakeResponse(status_code=404, reason="Not Found"),
        )
        with pytest.raises(DownloadError):
            installer.ensure_kind(cfg)
        assert not (cfg.bin_dir / "kind").exists()
        assert not (cfg.bin_dir / ".kind.partial").exists()

    def test_unknown_tool(self, cfg, linux_amd64, tool_missing):
        with pytest.raises(DownloadError, match="helm"):
            installer.ensure_tool_installed("helm", cfg)


class TestPlatformTarget:
    """Test platform detection."""

    def test_linux_x86_64(self, monkeypatch):
        monkeypatch.setattr(installer.sys, "platform", "linux")
        monkeypatch.setattr(installer.platform, "machine", lambda: "x86_64")
        assert installer.platform_target() == ("linux", "amd64", "")

    def test_windows_extension(self, monkeypatch):
        monkeypatch.setattr(installer.sys, "platform", "win32")
        monkeypatch.setattr(installer.platform, "machine", lambda: "AMD64")
        assert installer.platform_target() == ("windows", "amd64", ".exe")

    def test_unsupported_arch(self, monkeypatch):
        monkeypatch.setattr(installer.sys, "platform", "linux")
        monkeypatch.setattr(installer.platform, "machine", lambda: "sparc64")
        with pytest.raises(DownloadError):
            installer.platform_target()
