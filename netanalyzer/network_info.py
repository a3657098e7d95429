"""Discovery of the local interface, gateway and public address."""

from __future__ import annotations

import socket
import struct
import subprocess
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass

import psutil

from . import logger
from .utils import ip_to_uint, is_valid_ipv4, uint_to_ip

PUBLIC_IP_SERVICE = "https://api.ipify.org"
PUBLIC_IP_TIMEOUT = 5.0
ROUTE_TABLE_PATH = "/proc/net/route"
_LOOPBACK_NAMES = {"lo", "lo0"}


@dataclass
class NetworkInfo:
    """Addresses of the machine as seen on its primary interface."""

    local_ip: str = ""
    gateway_ip: str = ""
    public_ip: str = ""
    interface_name: str = ""
    subnet_mask: str = ""


def get_public_ip() -> str:
    """Ask an external service for the public address; on failure return an 'Error: ...' text."""
    try:
        with urllib.request.urlopen(PUBLIC_IP_SERVICE, timeout=PUBLIC_IP_TIMEOUT) as response:
            body = response.read().decode("utf-8", errors="replace")
    except (urllib.error.URLError, OSError, ValueError) as exc:
        logger.debug(f"Failed to get public IP: {exc}")
        return f"Error: {exc}"
    logger.debug(f"Public IP: {body}")
    return body


def parse_route_table(text: str, interface_name: str) -> str | None:
    """Find the default gateway of an interface in /proc/net/route text.

    Gateway fields are hexadecimal numbers in host byte order, as the kernel writes them.
    """
    for line in text.splitlines()[1:]:
        columns = line.split()
        if len(columns) < 3:
            continue
        iface, dest, gateway = columns[:3]
        if dest != "00000000" or iface != interface_name:
            continue
        try:
            value = int(gateway, 16) & 0xFFFFFFFF
        except ValueError:
            return None
        address = socket.inet_ntoa(struct.pack("=I", value))
        return uint_to_ip(ip_to_uint(address))
    return None


def _parse_route_get(text: str) -> str | None:
    for line in text.splitlines():
        _, found, rest = line.partition("gateway:")
        if found:
            candidate = rest.strip()
            return candidate if is_valid_ipv4(candidate) else None
    return None


def _detect_interface(info: NetworkInfo) -> None:
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, RuntimeError):
        return
    for name, addresses in interfaces.items():
        if name in _LOOPBACK_NAMES:
            continue
        for address in addresses:
            if address.family != socket.AF_INET:
                continue
            ip = address.address
            if ip.startswith("127.") or ip.startswith("169.254."):
                continue
            info.local_ip = ip
            info.interface_name = name
            if address.netmask:
                info.subnet_mask = address.netmask
            logger.debug(
                f"Detected interface: {info.interface_name} IP: {info.local_ip} "
                f"mask: {info.subnet_mask}"
            )
            return


def _detect_gateway(interface_name: str) -> str | None:
    if sys.platform.startswith("linux"):
        try:
            with open(ROUTE_TABLE_PATH, encoding="ascii", errors="replace") as route_file:
                gateway = parse_route_table(route_file.read(), interface_name)
        except OSError:
            return None
        if gateway:
            logger.debug(f"Gateway detected (Linux): {gateway}")
        return gateway
    if sys.platform == "darwin":
        try:
            completed = subprocess.run(
                ["route", "-n", "get", "default"],
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            return None
        gateway = _parse_route_get(completed.stdout.decode("utf-8", errors="replace"))
        if gateway:
            logger.debug(f"Gateway detected (macOS): {gateway}")
        return gateway
    return None


def get_network_info() -> NetworkInfo:
    """Collect local address, mask, interface, gateway and public address."""
    info = NetworkInfo()
    _detect_interface(info)
    info.gateway_ip = _detect_gateway(info.interface_name) or ""
    if not info.gateway_ip:
        logger.debug("Gateway not detected")
    info.public_ip = get_public_ip()
    return info


def ip_to_cidr(ip: str, mask: str) -> str:
    """Return the network of ip under mask in CIDR notation."""
    mask_int = ip_to_uint(mask)
    network = ip_to_uint(ip) & mask_int
    prefix = 0
    while mask_int & 0x80000000:
        prefix += 1
        mask_int = (mask_int << 1) & 0xFFFFFFFF
    return f"{uint_to_ip(network)}/{prefix}"


def get_subnet24(ip: str) -> str:
    """Return the /24 network that holds ip."""
    last_dot = ip.rfind(".")
    if last_dot != -1:
        return f"{ip[:last_dot]}.0/24"
    return f"{ip}/24"