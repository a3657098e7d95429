"""Command-line entry point: show network details, sweep the subnet, report hosts."""

from __future__ import annotations

import os
import re
import sys
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from . import logger, report, signal_handler
from .colors import palette, should_disable
from .device_identifier import GHOST, DeviceIdentifier
from .logger import Level
from .network_info import NetworkInfo, get_network_info, get_subnet24, ip_to_cidr
from .scanner import NetworkScanner
from .utils import parse_cidr

MODES = ("icmp", "tcp", "fallback")
LARGE_SUBNET_HOSTS = 65536
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_BAR_WIDTH = 30
_TICK = 0.1

HostPairs = list[tuple[str, str]]


def _default_threads() -> int:
    return os.cpu_count() or 1


@dataclass
class Options:
    """Settings taken from the command line."""

    threads: int = field(default_factory=_default_threads)
    mode: str = "fallback"
    port: int = 80
    timeout_ms: int = 1000
    skip_scan: bool = False
    thorough: bool = False
    show_all: bool = False
    show_banner: bool = True
    clear_screen: bool = True
    json_output: bool = False
    no_color: bool = False
    log_level: Level | None = None
    show_help: bool = False
    show_version: bool = False


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    return int(match.group(1))


def parse_args(argv: Sequence[str]) -> Options:
    """Read options from argv (without the program name).

    Bad values fall back to defaults with a notice on standard output;
    parsing stops at --help or --version.
    """
    options = Options()
    args = list(argv)
    i = 0
    while i < len(args):
        arg = args[i]
        has_value = i + 1 < len(args)
        if arg == "--threads" and has_value:
            i += 1
            try:
                threads = _leading_int(args[i])
            except ValueError:
                print("Invalid thread count, using default.")
            else:
                if threads < 1:
                    print("Invalid thread count, using default.")
                    threads = _default_threads()
                options.threads = threads
        elif arg == "--mode" and has_value:
            i += 1
            options.mode = args[i]
            if options.mode not in MODES:
                print("Invalid mode, using default.")
                options.mode = "fallback"
        elif arg == "--port" and has_value:
            i += 1
            try:
                port = _leading_int(args[i])
            except ValueError:
                print("Invalid port, using default.")
            else:
                if not 1 <= port <= 65535:
                    print("Invalid port, using default.")
                    port = 80
                options.port = port
        elif arg == "--timeout" and has_value:
            i += 1
            try:
                timeout = _leading_int(args[i])
            except ValueError:
                print("Invalid timeout, using default.")
            else:
                if not 100 <= timeout <= 30000:
                    print("Timeout must be 100-30000 ms, using default.")
                    timeout = 1000
                options.timeout_ms = timeout
        elif arg == "--help":
            options.show_help = True
            return options
        elif arg in ("--version", "-v"):
            options.show_version = True
            return options
        elif arg == "--skip-scan":
            options.skip_scan = True
        elif arg == "--thorough":
            options.thorough = True
        elif arg == "--show-all":
            options.show_all = True
        elif arg == "--no-banner":
            options.show_banner = False
        elif arg == "--no-clear":
            options.clear_screen = False
        elif arg == "--json":
            options.json_output = True
        elif arg == "--no-color":
            options.no_color = True
        elif arg == "--verbose":
            options.log_level = Level.VERBOSE
        elif arg == "--debug":
            options.log_level = Level.DEBUG
        i += 1
    return options


def process_hosts(identifier, hosts: Sequence[str], json_output: bool) -> HostPairs:
    """Identify each host in turn, drawing a progress bar unless output is JSON."""
    pairs: HostPairs = []
    total = len(hosts)
    done = 0
    complete = threading.Event()

    def draw_progress() -> None:
        p = palette
        while not complete.is_set() and not signal_handler.is_interrupted():
            current = done
            filled = min(current * _BAR_WIDTH // total, _BAR_WIDTH) if total else _BAR_WIDTH
            bar = "#" * filled + "." * (_BAR_WIDTH - filled)
            print(
                f"\r{p.green}[{p.yellow}{bar}{p.green}] {p.yellow}{current}/{total}{p.reset}",
                end="",
                file=sys.stderr,
                flush=True,
            )
            complete.wait(_TICK)

    progress = None
    if not json_output:
        progress = threading.Thread(target=draw_progress, daemon=True)
        progress.start()

    for ip in hosts:
        if signal_handler.is_interrupted():
            break
        pairs.append((ip, identifier.identify_device(ip)))
        done += 1

    complete.set()
    if progress is not None:
        progress.join()
        print("\r" + " " * 80 + "\r", end="", file=sys.stderr, flush=True)
    return pairs


def _ask_yes() -> bool:
    try:
        answer = input().strip()
    except EOFError:
        return False
    return bool(answer) and answer[0].lower() == "y"


def _subnets(info: NetworkInfo) -> tuple[str, str]:
    if info.subnet_mask and info.local_ip:
        local = ip_to_cidr(info.local_ip, info.subnet_mask)
    else:
        local = get_subnet24(info.local_ip)
    gateway = ""
    if info.gateway_ip:
        if info.subnet_mask:
            gateway = ip_to_cidr(info.gateway_ip, info.subnet_mask)
        else:
            gateway = get_subnet24(info.gateway_ip)
    return local, gateway


def _block_size(cidr: str) -> int:
    start, end = parse_cidr(cidr)
    return end - start + 1


def _run_scan(scanner: NetworkScanner, cidr: str, thorough: bool) -> list[str]:
    return scanner.thorough_scan(cidr) if thorough else scanner.scan(cidr)


def _show_results(
    pairs: HostPairs,
    show_all: bool,
    title: str,
    all_suffix: str,
    confirmed_suffix: str,
    duration: float,
    total_scanned: int,
) -> None:
    p = palette
    confirmed = [(ip, kind) for ip, kind in pairs if kind != GHOST]
    if show_all:
        print(f"{p.green}[+] Found {p.yellow}{len(pairs)}{p.green} live hosts{all_suffix}{p.reset}")
    else:
        print(
            f"{p.green}[+] Found {p.yellow}{len(confirmed)}{p.green} confirmed live hosts out of "
            f"{p.yellow}{len(pairs)}{p.green} total hosts detected{confirmed_suffix}{p.reset}"
        )
    report.display_scan_results(pairs if show_all else confirmed, title)
    report.display_scan_stats(duration, total_scanned, len(pairs), len(confirmed))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the analyzer and return the process exit status."""
    if argv is None:
        argv = sys.argv[1:]
    options = parse_args(argv)

    if options.show_help:
        print(report.usage_text(report.PROGRAM_NAME))
        return 0
    if options.show_version:
        report.print_version()
        return 0

    if options.log_level is not None:
        logger.set_level(options.log_level)
    if options.no_color or should_disable():
        palette.disable()
    if options.json_output:
        options.show_banner = False
        options.clear_screen = False
        logger.set_level(Level.QUIET)

    signal_handler.install()

    if options.clear_screen:
        report.clear_screen()
    if options.show_banner:
        report.print_banner()

    p = palette
    info = get_network_info()
    if not options.json_output:
        report.print_network_info(
            info, options.threads, options.mode, options.port, options.thorough, options.timeout_ms
        )

    local_subnet, gateway_subnet = _subnets(info)
    different_subnets = local_subnet != gateway_subnet and bool(info.gateway_ip)

    host_count = _block_size(local_subnet)
    if host_count > LARGE_SUBNET_HOSTS and not options.json_output:
        print(
            f"{p.red}[!] WARNING: Subnet {local_subnet} contains {host_count}"
            f" hosts. This scan may take a very long time.{p.reset}"
        )
        print(f"{p.red}[!] Consider using a smaller subnet range.{p.reset}")

    if options.skip_scan:
        if not options.json_output:
            print(f"{p.green}[!] Skipping network scan as requested.{p.reset}")
        return 0

    if not options.json_output:
        report.prompt_scan(local_subnet)
        if not _ask_yes():
            return 0

    identifier = DeviceIdentifier()
    if not options.json_output:
        print(f"\n{p.green}[+] Starting scan of {p.yellow}{local_subnet}{p.reset}")

    scanner = NetworkScanner(options.threads, options.mode, options.port, options.timeout_ms)
    scan_start = time.monotonic()
    try:
        if options.thorough and not options.json_output:
            print(f"{p.green}[+] Using thorough scan mode (may take longer){p.reset}")
        local_hosts = _run_scan(scanner, local_subnet, options.thorough)
    except Exception as exc:
        print(f"{p.red}[!] Error during scan: {exc}{p.reset}", file=sys.stderr)
        return 1

    if signal_handler.is_interrupted() and not options.json_output:
        print(f"\n{p.yellow}[!] Scan interrupted by user. Showing partial results.{p.reset}")
    if not options.json_output:
        print(f"{p.green}[+] Processing results...{p.reset}")

    pairs = process_hosts(identifier, local_hosts, options.json_output)
    duration = time.monotonic() - scan_start
    total_scanned = _block_size(local_subnet)

    if options.json_output:
        shown = pairs if options.show_all else [(ip, k) for ip, k in pairs if k != GHOST]
        sys.stdout.write(
            report.format_json(
                info, options.mode, options.port, options.threads, options.thorough,
                options.timeout_ms, local_subnet, shown, duration, total_scanned,
            )
        )
        sys.stdout.flush()
        return 0

    _show_results(
        pairs, options.show_all, "SCAN RESULTS", " on local subnet", "", duration, total_scanned
    )

    if different_subnets and not signal_handler.is_interrupted():
        print(f"{p.green}[ GATEWAY ]{p.reset}")
        print(
            f"{p.green}--- Your gateway ({p.yellow}{info.gateway_ip}{p.green}"
            f") is in a different subnet ({p.yellow}{gateway_subnet}{p.green}){p.reset}"
        )
        print(
            f"{p.green}--- Do you want to scan the gateway subnet as well? (y/n): {p.reset}",
            end="",
            flush=True,
        )
        if _ask_yes():
            print(f"\n{p.green}[+] Starting scan of {p.yellow}{gateway_subnet}{p.reset}")
            gw_start = time.monotonic()
            try:
                gateway_hosts = _run_scan(scanner, gateway_subnet, options.thorough)
            except Exception as exc:
                print(f"{p.red}[!] Error during gateway scan: {exc}{p.reset}", file=sys.stderr)
                return 1
            print(f"{p.green}[+] Processing results...{p.reset}")
            gw_pairs = process_hosts(identifier, gateway_hosts, options.json_output)
            gw_duration = time.monotonic() - gw_start
            _show_results(
                gw_pairs,
                options.show_all,
                "GATEWAY RESULTS",
                " on gateway subnet",
                " on gateway subnet",
                gw_duration,
                _block_size(gateway_subnet),
            )

    return 0


if __name__ == "__main__":
    sys.exit(main())