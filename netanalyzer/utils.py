"""IPv4 address and CIDR helpers."""

from __future__ import annotations

import ipaddress
import re
import socket

_PREFIX_RE = re.compile(r"\s*([+-]?\d+)")


def ip_to_uint(ip_str: str) -> int:
    """Return the address as a 32-bit integer, or 0 if it is not a valid IPv4 address."""
    try:
        packed = socket.inet_pton(socket.AF_INET, ip_str)
    except (OSError, ValueError):
        return 0
    return int.from_bytes(packed, "big")


def uint_to_ip(ip: int) -> str:
    """Return the dotted-quad form of a 32-bit integer."""
    return str(ipaddress.IPv4Address(ip & 0xFFFFFFFF))


def parse_cidr(cidr: str) -> tuple[int, int]:
    """Return the first and last address of a CIDR block as integers.

    Raises ValueError if the block has no usable prefix length.
    """
    ip_part, slash, prefix_part = cidr.partition("/")
    if not slash:
        raise ValueError(f"missing prefix length in {cidr!r}")
    match = _PREFIX_RE.match(prefix_part)
    if match is None:
        raise ValueError(f"invalid prefix length in {cidr!r}")
    prefix = int(match.group(1))
    if not 0 <= prefix <= 32:
        raise ValueError(f"prefix length out of range in {cidr!r}")

    ip = ip_to_uint(ip_part)
    mask = 0 if prefix == 0 else (0xFFFFFFFF << (32 - prefix)) & 0xFFFFFFFF
    start = ip & mask
    end = start | (~mask & 0xFFFFFFFF)
    return start, end


def is_valid_ipv4(ip: str) -> bool:
    """Tell whether the string is a dotted-quad IPv4 address."""
    try:
        socket.inet_pton(socket.AF_INET, ip)
    except (OSError, ValueError):
        return False
    return True