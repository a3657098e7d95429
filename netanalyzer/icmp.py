"""Host liveness check by ICMP echo, with an fping fallback."""

from __future__ import annotations

import os
import select
import socket
import struct
import subprocess
import sys
import threading
from dataclasses import dataclass, field

from . import logger
from .utils import is_valid_ipv4

ICMP_ECHO = 8
ICMP_ECHO_REPLY = 0
PACKET_SIZE = 64
_BAR_WIDTH = 30

_output_lock = threading.Lock()


@dataclass
class ProgressCounter:
    """Thread-safe count of finished probes out of a known total."""

    total: int
    done: int = 0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def increment(self) -> int:
        """Count one finished probe and return the new count."""
        with self._lock:
            self.done += 1
            return self.done


def checksum(data: bytes) -> int:
    """Return the one's-complement checksum of data read as host-order 16-bit words."""
    even = len(data) - len(data) % 2
    total = sum(struct.unpack(f"={even // 2}H", data[:even]))
    if len(data) % 2:
        total += data[-1]
    total = (total >> 16) + (total & 0xFFFF)
    total += total >> 16
    return ~total & 0xFFFF


def build_echo_request(identifier: int, sequence: int) -> bytes:
    """Build a zero-padded 64-byte ICMP echo request with its checksum filled in."""
    header = struct.pack("=BBHHH", ICMP_ECHO, 0, 0, identifier & 0xFFFF, sequence & 0xFFFF)
    packet = bytearray(header.ljust(PACKET_SIZE, b"\0"))
    struct.pack_into("=H", packet, 2, checksum(bytes(packet)))
    return bytes(packet)


def _echo_id() -> int:
    return os.getpid() & 0xFFFF


def ping_raw_socket(ip: str, quiet: bool = False, timeout_ms: int = 1000) -> bool:
    """Ping through a raw ICMP socket; usually needs root."""
    if not is_valid_ipv4(ip):
        logger.debug(f"pingRawSocket: invalid IP {ip}")
        return False
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except OSError:
        logger.debug("pingRawSocket: cannot create raw socket (need root?)")
        return False

    with sock:
        try:
            sock.sendto(build_echo_request(_echo_id(), 1), (ip, 0))
        except OSError:
            logger.debug(f"pingRawSocket: sendto failed for {ip}")
            return False

        readable, _, _ = select.select([sock], [], [], timeout_ms / 1000)
        if not readable:
            return False
        try:
            reply, _ = sock.recvfrom(1500)
        except OSError:
            return False
        if not reply:
            return False
        header_len = (reply[0] & 0x0F) << 2
        if len(reply) < header_len + 6:
            return False
        (reply_id,) = struct.unpack_from("=H", reply, header_len + 4)
        if reply[header_len] == ICMP_ECHO_REPLY and reply_id == _echo_id():
            logger.debug(f"pingRawSocket: {ip} is alive")
            return True
        return False


def ping_datagram_socket(ip: str, quiet: bool = False, timeout_ms: int = 1000) -> bool:
    """Ping through an unprivileged datagram ICMP socket."""
    if not is_valid_ipv4(ip):
        return False
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_ICMP)
    except OSError:
        logger.debug("pingDatagramSocket: cannot create dgram ICMP socket")
        return False

    with sock:
        try:
            sock.sendto(build_echo_request(_echo_id(), 1), (ip, 0))
        except OSError:
            return False
        readable, _, _ = select.select([sock], [], [], timeout_ms / 1000)
        if not readable:
            return False
        try:
            reply = sock.recv(1500)
        except OSError:
            return False
        if reply:
            logger.debug(f"pingDatagramSocket: {ip} is alive")
            return True
        return False


def ping_fallback(ip: str, quiet: bool = False, timeout_ms: int = 1000) -> bool:
    """Try a datagram socket, then a raw socket, then the fping program."""
    if not is_valid_ipv4(ip):
        logger.warn(f"pingFallback: rejecting invalid IP: {ip}")
        return False

    if ping_datagram_socket(ip, quiet, timeout_ms):
        return True
    if ping_raw_socket(ip, quiet, timeout_ms):
        return True

    logger.debug(f"pingFallback: trying fping for {ip}")
    try:
        completed = subprocess.run(
            ["fping", "-c1", f"-t{timeout_ms}", ip],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    if completed.returncode == 0:
        logger.debug(f"pingFallback: fping reports {ip} alive")
        return True
    return False


def ping(
    ip: str,
    quiet: bool = False,
    timeout_ms: int = 1000,
    counter: ProgressCounter | None = None,
) -> bool:
    """Ping a host, count it in the progress counter and draw a progress bar unless quiet."""
    if counter is None:
        counter = ProgressCounter(total=1)
    alive = ping_fallback(ip, quiet, timeout_ms)

    with _output_lock:
        if alive and not quiet:
            print(ip, file=sys.stderr)
        done = counter.increment()
        if not quiet:
            filled = int(done * _BAR_WIDTH / counter.total) if counter.total > 0 else _BAR_WIDTH
            filled = max(0, min(filled, _BAR_WIDTH))
            bar = "#" * filled + "." * (_BAR_WIDTH - filled)
            print(f"\r[{bar}] {done}/{counter.total}", end="", file=sys.stderr, flush=True)

    return alive