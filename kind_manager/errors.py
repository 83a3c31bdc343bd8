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

"""Exception types raised by cluster provisioning operations.

Every error is fatal for the operation that raised it. The CLI reports the
message and exits non-zero; library callers are expected to let it propagate.
"""

from __future__ import annotations


class KindManagerError(RuntimeError):
    """Base class for all provisioning failures."""


class ConfigReadError(KindManagerError):
    """The cluster config template override could not be read."""


class TemplateParseError(KindManagerError):
    """The cluster config template has malformed syntax."""


class TemplateExecError(KindManagerError):
    """The cluster config template references fields that are not provided."""


class HostAddressError(KindManagerError):
    """Local network interfaces could not be listed."""


class ToolInvocationError(KindManagerError):
    """An external tool (kind, kubectl, docker) failed or could not be run."""


class VersionLookupError(KindManagerError):
    """The latest version of a tool could not be determined."""


class DownloadError(KindManagerError):
    """A tool binary could not be downloaded or installed."""


class FileWriteError(KindManagerError):
    """A config or kubeconfig file could not be written."""
