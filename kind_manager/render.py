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

"""Host address detection and kind cluster config rendering."""

from __future__ import annotations

import ipaddress
import socket

import psutil
from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from kind_manager import console, logger
from kind_manager.constants import CONFIG_TEMPLATE_NAME
from kind_manager.errors import HostAddressError, TemplateExecError, TemplateParseError


def detect_host_ip() -> str:
    """Return the first non-loopback IPv4 address of this host.

    The address populates the kind API server address so the cluster is
    reachable from other containers, see
    https://kind.sigs.k8s.io/docs/user/configuration/#api-server

    Returns:
        The address as a string, or an empty string when the host has no
        routable IPv4 interface.

    Raises:
        HostAddressError: If the network interfaces cannot be listed.
    """
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as err:
        raise HostAddressError(f"could not get a list of network interfaces: {err}") from err

    for addrs in interfaces.values():
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            try:
                ip = ipaddress.IPv4Address(addr.address)
            except ValueError:
                continue
            if ip.is_loopback:
                continue
            console.print(f"Current IP address : {ip}")
            return str(ip)

    # TODO: decide whether a host without a routable IPv4 interface should fail create instead.
    logger.warning("No non-loopback IPv4 address found; rendering config with an empty address")
    return ""


def render_cluster_config(template: str, host_ip: str) -> str:
    """Render the kind cluster config template.

    Args:
        template: Jinja2 template text with an ``Address`` slot.
        host_ip: Detected host address to substitute.

    Returns:
        The rendered cluster configuration.

    Raises:
        TemplateParseError: If the template has malformed syntax.
        TemplateExecError: If the template references undefined fields.
    """
    env = Environment(
        loader=DictLoader({CONFIG_TEMPLATE_NAME: template}),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        tmpl = env.get_template(CONFIG_TEMPLATE_NAME)
    except TemplateSyntaxError as err:
        raise TemplateParseError(f"error parsing kind config template: {err}") from err

    try:
        return tmpl.render(Address=host_ip)
    except TemplateError as err:
        raise TemplateExecError(f"could not render the {CONFIG_TEMPLATE_NAME} template: {err}") from err
