"""Host liveness check by TCP connect."""

from __future__ import annotations

import errno
import select
import socket
import sys
import threading
import time

from . import logger
from .utils import ip_to_uint, uint_to_ip

_output_lock = threading.Lock()
_PENDING = {0, errno.EINPROGRESS, errno.EWOULDBLOCK, errno.EAGAIN}


def ping(ip: str, port: int, quiet: bool = False, timeout_ms: int = 1000) -> bool:
    """Tell whether a TCP connection to ip:port completes within the timeout."""
    address = uint_to_ip(ip_to_uint(ip))
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError:
        logger.debug(f"TCP: cannot create socket for {ip}:{port}")
        return False

    with sock:
        sock.setblocking(False)
        start = time.monotonic()
        try:
            result = sock.connect_ex((address, port))
        except OSError:
            return False
        if result not in _PENDING:
            return False

        _, writable, _ = select.select([], [sock], [], timeout_ms / 1000)
        if not writable:
            return False
        if sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR) != 0:
            return False

        ms = int((time.monotonic() - start) * 1000)
        if not quiet:
            if ms < 30:
                color = "\033[32m"
            elif ms < 100:
                color = "\033[33m"
            else:
                color = "\033[31m"
            with _output_lock:
                print(
                    f"{color}{ip} is alive via TCP port {port} (RTT: {ms} ms)\033[0m",
                    file=sys.stderr,
                    flush=True,
                )
        logger.debug(f"TCP: {ip}:{port} alive (RTT: {ms}ms)")
        return True