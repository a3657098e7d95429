"""Terminal and JSON presentation of network information and scan results."""

from __future__ import annotations

import json
import os
import random
import subprocess
import sys
from collections.abc import Sequence

from .colors import palette
from .network_info import NetworkInfo

VERSION = "2.0.0"
PROGRAM_NAME = "network-analyzer"
_RULE_WIDTH = 49
_LABEL_WIDTH = 20
_VALUE_WIDTH = 20
_CLEAR_SEQUENCE = "\033[2J\033[1;1H"

_BANNER = r"""
███╗   ██╗███████╗████████╗██╗    ██╗ ██████╗ ██████╗ ██╗  ██╗
████╗  ██║██╔════╝╚══██╔══╝██║    ██║██╔═══██╗██╔══██╗██║ ██╔╝
██╔██╗ ██║█████╗     ██║   ██║ █╗ ██║██║   ██║██████╔╝█████╔╝
██║╚██╗██║██╔══╝     ██║   ██║███╗██║██║   ██║██╔══██╗██╔═██╗
██║ ╚████║███████╗   ██║   ╚███╔███╔╝╚██████╔╝██║  ██║██║  ██╗
╚═╝  ╚═══╝╚══════╝   ╚═╝    ╚══╝╚══╝  ╚═════╝ ╚═╝  ╚═╝╚═╝  ╚═╝

 █████╗ ███╗   ██╗ █████╗ ██╗  ██╗   ██╗███████╗███████╗██████╗
██╔══██╗████╗  ██║██╔══██╗██║  ╚██╗ ██╔╝██╔════╝██╔════╝██╔══██╗
███████║██╔██╗ ██║███████║██║   ╚████╔╝ ███████╗█████╗  ██████╔╝
██╔══██║██║╚██╗██║██╔══██║██║    ╚██╔╝  ╚════██║██╔══╝  ██╔══██╗
██║  ██║██║ ╚████║██║  ██║███████╗██║   ███████║███████╗██║  ██║
╚═╝  ╚═╝╚═╝  ╚═══╝╚═╝  ╚═╝╚══════╝╚═╝   ╚══════╝╚══════╝╚═╝  ╚═╝
"""

_OPTIONS = (
    ("--threads N", "Number of threads to use (default: CPU cores)"),
    ("--mode MODE", "Scan mode: icmp, tcp, or fallback (default: fallback)"),
    ("--port PORT", "Port for TCP scanning (default: 80)"),
    ("--timeout MS", "Probe timeout in milliseconds (default: 1000)"),
    ("--thorough", "Use thorough scanning (higher accuracy, slower)"),
    ("--skip-scan", "Skip network scanning"),
    ("--json", "Output results as JSON (non-interactive)"),
    ("--no-color", "Disable colored output"),
    ("--verbose", "Show informational messages"),
    ("--debug", "Show debug messages"),
    ("--help", "Display this help message"),
    ("--version", "Display version information"),
    ("--show-all", "Show all hosts, including unconfirmed ones"),
    ("--no-banner", "Disable ASCII art banner"),
    ("--no-clear", "Don't clear the screen at start"),
)


def version_text() -> str:
    """Return the text shown by --version."""
    return (
        f"{PROGRAM_NAME} {VERSION}\n"
        f"Built with: Python {sys.version_info.major}.{sys.version_info.minor}"
    )


def print_version() -> None:
    """Write the version text to standard output."""
    out = sys.stdout
    out.write(version_text() + "\n")
    out.flush()


def clear_screen() -> None:
    """Clear the terminal and move the cursor home."""
    if os.name == "nt":
        subprocess.run(["cmd", "/c", "cls"], check=False)
        return
    out = sys.stdout
    out.write(_CLEAR_SEQUENCE)
    out.flush()


def print_banner() -> None:
    """Print the start-up banner with a few lines of random bits."""
    p = palette
    print(f"{p.green}{_BANNER}{p.reset}")
    print(f"{p.green}[ Initializing scan modules... ]{p.reset}")
    print(f"{p.green}[ Scanning network interface... ]{p.reset}")
    for _ in range(3):
        bits = "".join(random.choice("01") for _ in range(50))
        print(f"{p.green}{bits}{p.reset}")
    print(f"{p.green}[ Systems online. Ready to scan. ]{p.reset}\n")


def _rule() -> str:
    """Return a coloured horizontal rule."""
    return f"{palette.green}{'-' * _RULE_WIDTH}{palette.reset}"


def _section(title: str) -> None:
    print(f"{palette.green}[ {title} ]{palette.reset}")
    print(_rule())


def _row(label: str, value: object, value_color: str | None = None) -> None:
    p = palette
    color = p.yellow if value_color is None else value_color
    print(
        f"{p.bold}{label:<{_LABEL_WIDTH}}{p.reset}| "
        f"{color}{str(value):<{_VALUE_WIDTH}}{p.reset}"
    )


def print_network_info(
    info: NetworkInfo,
    thread_count: int,
    mode: str,
    port: int,
    thorough: bool,
    timeout_ms: int,
) -> None:
    """Print the system information and scanner settings tables."""
    _section("SYSTEM INFORMATION")
    _row("NETWORK INTERFACE", info.interface_name)
    _row("LOCAL IP ADDRESS", info.local_ip)
    _row("SUBNET MASK", info.subnet_mask)
    _row("GATEWAY IP ADDRESS", info.gateway_ip or "Not detected")
    _row("PUBLIC IP ADDRESS", info.public_ip)

    print()
    _section("SCANNER SETTINGS")
    _row("THREADS", thread_count)
    _row("SCAN MODE", mode)
    if mode in ("tcp", "fallback"):
        _row("TCP PORT", port)
    _row("TIMEOUT", f"{timeout_ms} ms")
    if thorough:
        _row("SCAN TYPE", "Thorough", palette.red)
    print()


def prompt_scan(subnet: str) -> None:
    """Ask whether to scan the local subnet, leaving the cursor on the line."""
    p = palette
    print(f"{p.green}[ SCAN ]{p.reset}")
    print(
        f"{p.green}--- Do you want to scan your local subnet ({p.yellow}{subnet}"
        f"{p.green})? (y/n): {p.reset}",
        end="",
        flush=True,
    )


def display_scan_results(hosts: Sequence[tuple[str, str]], title: str) -> None:
    """Print a table of addresses and device types."""
    p = palette
    _section(title)
    print(f"{p.bold}{'IP ADDRESS':<18}{p.reset}| {p.bold}{'DEVICE TYPE':<30}{p.reset}")
    print(_rule())
    for ip, device_type in hosts:
        print(f"{p.yellow}{ip:<18}{p.reset}| {p.bright_green}{device_type:<30}{p.reset}")
    print(_rule())
    print()


def display_scan_stats(
    duration_sec: float, total_scanned: int, hosts_found: int, confirmed_hosts: int
) -> None:
    """Print duration, counts and discovery rate of a scan."""
    rate = hosts_found / total_scanned * 100.0 if total_scanned > 0 else 0.0
    _section("SCAN STATISTICS")
    _row("DURATION", f"{duration_sec:.2f} s")
    _row("IPs SCANNED", total_scanned)
    _row("HOSTS FOUND", hosts_found)
    _row("CONFIRMED HOSTS", confirmed_hosts)
    _row("DISCOVERY RATE", f"{rate:.1f}%")
    print(_rule())
    print()


def _q(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def format_json(
    info: NetworkInfo,
    mode: str,
    port: int,
    thread_count: int,
    thorough: bool,
    timeout_ms: int,
    subnet: str,
    hosts: Sequence[tuple[str, str]],
    duration_sec: float,
    total_scanned: int,
) -> str:
    """Return the scan report as a JSON document ending in a newline."""
    results = ",\n".join(
        f'    {{"ip": {_q(ip)}, "device_type": {_q(device_type)}}}'
        for ip, device_type in hosts
    )
    lines = [
        "{",
        '  "network_info": {',
        f'    "interface": {_q(info.interface_name)},',
        f'    "local_ip": {_q(info.local_ip)},',
        f'    "subnet_mask": {_q(info.subnet_mask)},',
        f'    "gateway_ip": {_q(info.gateway_ip)},',
        f'    "public_ip": {_q(info.public_ip)}',
        "  },",
        '  "scan_settings": {',
        f'    "mode": {_q(mode)},',
        f'    "port": {port},',
        f'    "threads": {thread_count},',
        f'    "timeout_ms": {timeout_ms},',
        f'    "thorough": {"true" if thorough else "false"},',
        f'    "subnet": {_q(subnet)}',
        "  },",
        '  "statistics": {',
        f'    "duration_seconds": {duration_sec:.3f},',
        f'    "ips_scanned": {total_scanned},',
        f'    "hosts_found": {len(hosts)}',
        "  },",
        '  "results": [',
    ]
    if results:
        lines.append(results)
    lines += ["  ]", "}"]
    return "\n".join(lines) + "\n"


def usage_text(program_name: str) -> str:
    """Return the help text shown by --help."""
    lines = [f"Usage: {program_name} [options]", "Options:"]
    lines += [f"  {option:<18}{description}" for option, description in _OPTIONS]
    return "\n".join(lines)