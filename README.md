# netanalyzer

A parallel ping scanner for local networks. It finds your network interface
and your local, gateway and public IP addresses. It then sweeps the local
subnet with ICMP echo, TCP connect, or ICMP followed by TCP. Each live host it
finds gets a best-effort guess at what the device is. The guess comes from
reverse DNS, the MAC vendor in the ARP table, or well-known service ports.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

ICMP probes first try an unprivileged datagram ICMP socket. If that fails they
try a raw ICMP socket, which usually needs root. As a last resort they run the
`fping` program, if it is installed.

## Usage

```
network-scanner [options]
```

`network-analyzer` is the same command under another name.

| Option | Meaning |
| --- | --- |
| `--threads N` | Number of worker threads (default: CPU cores) |
| `--mode MODE` | `icmp`, `tcp` or `fallback` (default: `fallback`) |
| `--port PORT` | TCP port for `tcp` and `fallback` modes, 1–65535 (default: 80) |
| `--timeout MS` | Probe timeout, 100–30000 ms (default: 1000) |
| `--thorough` | Report a host only if at least two of ICMP and TCP ports 80, 443 and 22 answer |
| `--skip-scan` | Show network information only |
| `--json` | Scan without prompting and print a JSON report on stdout |
| `--no-color` | Disable ANSI colours (the `NO_COLOR` environment variable does the same) |
| `--verbose` / `--debug` | Log messages on stderr |
| `--show-all` | Include unconfirmed ("Possible Ghost - Unconfirmed") hosts in the results |
| `--no-banner` | Skip the ASCII banner |
| `--no-clear` | Don't clear the screen at start |
| `--help`, `--version` / `-v` | Show help or version |

An invalid value for `--threads`, `--mode`, `--port` or `--timeout` prints a
notice and falls back to the default.

Examples:

```
network-scanner
network-scanner --mode tcp --port 443 --threads 64
network-scanner --json --no-color
```

In interactive mode the scanner asks before it sweeps the local subnet. If the
gateway lies in a different subnet, it offers to sweep that subnet as well. In
JSON mode there is no banner, no screen clearing, no prompt and no logging.

The subnet comes from the interface's netmask, or a /24 around the local
address if no mask is known. The first and last address of the block are never
reported. The command warns before sweeping a block of more than 65536
addresses.

Press Ctrl+C during a sweep to stop it early. The scanner then shows the
results found so far.

## Library use

```python
from netanalyzer.scanner import NetworkScanner
from netanalyzer.network_info import ip_to_cidr, get_network_info
from netanalyzer.device_identifier import DeviceIdentifier

subnet = ip_to_cidr("192.168.1.23", "255.255.255.0")   # "192.168.1.0/24"
hosts = NetworkScanner(threads=64, mode="tcp", port=80).scan(subnet)
identifier = DeviceIdentifier()
for ip in hosts:
    print(ip, identifier.identify_device(ip))
```

The modules:

- `netanalyzer.utils`: `ip_to_uint`, `uint_to_ip`, `parse_cidr` and `is_valid_ipv4`.
- `netanalyzer.network_info`: the `NetworkInfo` dataclass, plus `get_network_info`, `get_public_ip`, `parse_route_table`, `ip_to_cidr` and `get_subnet24`.
- `netanalyzer.icmp`: `checksum`, `build_echo_request`, `ping_datagram_socket`, `ping_raw_socket`, `ping_fallback` and `ping`.
- `netanalyzer.tcp`: `ping`, a TCP-connect liveness check.
- `netanalyzer.scanner`:
  - `Scanner.run` prints the live hosts.
  - `NetworkScanner.scan` and `NetworkScanner.thorough_scan` return the live hosts in address order.
- `netanalyzer.device_identifier`:
  - `DeviceIdentifier` takes an optional path to an nmap-style MAC prefix file (default `/usr/share/nmap/nmap-mac-prefixes`).
  - Helpers: `load_mac_vendors`, `parse_arp_table` and `mac_to_oui`.
- `netanalyzer.thread_pool`: `ThreadPool`, a fixed-size worker pool usable as a context manager.
- `netanalyzer.report`: terminal tables, `format_json` and `usage_text`.
- `netanalyzer.cli`: `parse_args`, `process_hosts` and `main`.
- `netanalyzer.logger`, `netanalyzer.colors` and `netanalyzer.signal_handler`: logging, colour and Ctrl+C support.

## Limitations

- Gateway detection reads `/proc/net/route` on Linux and runs `route -n get default` on macOS. It does nothing on other systems.
- ARP lookups for MAC vendors read `/proc/net/arp` on Linux and run `arp -n` on macOS.
- MAC vendor names appear only when a MAC prefix file is present.
- The public address comes from `https://api.ipify.org`. Without network access the report shows an `Error: ...` text in its place.
- The package installs no man page and no shell completion scripts.