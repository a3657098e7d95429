"""Parallel sweeps of an IPv4 range for live hosts."""

from __future__ import annotations

import os
import sys
import threading
from typing import Callable

from . import icmp, logger, signal_handler, tcp
from .icmp import ProgressCounter
from .thread_pool import ThreadPool
from .utils import ip_to_uint, parse_cidr, uint_to_ip

_BAR_WIDTH = 30
_TICK = 0.1


class Scanner:
    """Sweeps a CIDR block with ICMP, TCP or ICMP-then-TCP probes."""

    def __init__(
        self,
        threads: int = 0,
        mode: str = "icmp",
        port: int = 80,
        timeout_ms: int = 1000,
    ) -> None:
        self.thread_count = threads or (os.cpu_count() or 1)
        self.mode = mode
        self.port = port
        self.timeout_ms = timeout_ms

    def _probe(self, ip: str) -> bool:
        if self.mode == "icmp":
            return icmp.ping(ip, True, self.timeout_ms)
        if self.mode == "tcp":
            return tcp.ping(ip, self.port, True, self.timeout_ms)
        if self.mode == "fallback":
            return icmp.ping(ip, True, self.timeout_ms) or tcp.ping(
                ip, self.port, True, self.timeout_ms
            )
        return False

    def _sweep(
        self, cidr: str, probe: Callable[[str], bool], found_label: str = "Host alive"
    ) -> list[str]:
        start_ip, end_ip = parse_cidr(cidr)
        total = end_ip - start_ip + 1
        counter = ProgressCounter(total=total)
        finished = threading.Event()
        scan_complete = threading.Event()
        results_lock = threading.Lock()
        discovered: list[str] = []

        def draw_progress() -> None:
            while not scan_complete.is_set() and not signal_handler.is_interrupted():
                done = counter.done
                filled = min(done * _BAR_WIDTH // total, _BAR_WIDTH)
                bar = "#" * filled + "." * (_BAR_WIDTH - filled)
                print(f"\r[{bar}] {done}/{total}", end="", file=sys.stderr, flush=True)
                scan_complete.wait(_TICK)

        def task(ip_int: int) -> None:
            try:
                if signal_handler.is_interrupted():
                    return
                ip_str = uint_to_ip(ip_int)
                if probe(ip_str):
                    logger.debug(f"{found_label}: {ip_str}")
                    with results_lock:
                        discovered.append(ip_str)
            finally:
                if counter.increment() >= total:
                    finished.set()

        progress = threading.Thread(target=draw_progress, daemon=True)
        progress.start()

        with ThreadPool(self.thread_count) as pool:
            for ip_int in range(start_ip, end_ip + 1):
                pool.enqueue(lambda ip_int=ip_int: task(ip_int))
            while not finished.wait(_TICK) and not signal_handler.is_interrupted():
                pass
            if signal_handler.is_interrupted():
                pool.shutdown()
                logger.verbose("Scan interrupted by user")

        scan_complete.set()
        progress.join()
        print("\r" + " " * 80 + "\r", end="", file=sys.stderr, flush=True)

        with results_lock:
            hosts = sorted(discovered, key=ip_to_uint)
        return [ip for ip in hosts if ip_to_uint(ip) not in (start_ip, end_ip)]

    def run(self, cidr: str) -> None:
        """Sweep the block and print the live hosts on standard output."""
        hosts = self._sweep(cidr, self._probe)
        print(f"Discovered {len(hosts)} live hosts:")
        for ip in hosts:
            print(ip)
        print("Scan completed.", file=sys.stderr)


class NetworkScanner(Scanner):
    """A scanner that returns its findings instead of printing them."""

    def scan(self, cidr: str) -> list[str]:
        """Return the live hosts of the block in address order, without its first and last address."""
        start_ip, end_ip = parse_cidr(cidr)
        logger.verbose(f"Starting scan of {cidr} ({end_ip - start_ip + 1} hosts)")
        hosts = self._sweep(cidr, self._probe)
        logger.verbose(f"Scan complete: {len(hosts)} hosts found")
        return hosts

    def thorough_scan(self, cidr: str) -> list[str]:
        """Like scan, but a host counts only if at least two probes answer."""
        logger.verbose(f"Starting thorough scan of {cidr}")
        hosts = self._sweep(cidr, self._verify_host, "Host verified (thorough)")
        logger.verbose(f"Thorough scan complete: {len(hosts)} hosts verified")
        return hosts

    def _verify_host(self, ip: str) -> bool:
        successes = sum(
            (
                icmp.ping(ip, True, self.timeout_ms),
                tcp.ping(ip, 80, True, self.timeout_ms),
                tcp.ping(ip, 443, True, self.timeout_ms),
                tcp.ping(ip, 22, True, self.timeout_ms),
            )
        )
        return successes >= 2