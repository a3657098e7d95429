"""Best-effort identification of the kind of device behind an IPv4 address."""

from __future__ import annotations

import socket
import subprocess
import sys

from . import icmp, logger, tcp

DEFAULT_VENDOR_DB = "/usr/share/nmap/nmap-mac-prefixes"
ARP_TABLE_PATH = "/proc/net/arp"
GHOST = "Possible Ghost - Unconfirmed"
UNKNOWN = "Unknown Device"
_NULL_MAC = "00:00:00:00:00:00"

PORT_TO_SERVICE: dict[int, str] = dict(
    sorted(
        {
            21: "FTP",
            22: "SSH",
            23: "Telnet",
            25: "SMTP",
            53: "DNS",
            80: "HTTP",
            443: "HTTPS",
            445: "SMB",
            3389: "RDP",
            8080: "HTTP-Proxy",
            5900: "VNC",
            139: "NetBIOS",
            67: "DHCP",
            123: "NTP",
            161: "SNMP",
            9100: "Printer",
            62078: "Apple Device",
            5353: "mDNS",
            5228: "Android Device",
            9000: "Android ADB",
            7000: "AirPlay Device",
            8009: "Chromecast",
            8060: "Roku Device",
            1900: "UPNP Device",
            1883: "Smart Home Device",
            1080: "Security Camera",
        }.items()
    )
)

_VERIFY_PORTS = (
    80, 443, 22, 21, 23, 25, 53, 3389, 8080, 445,
    7000, 62078, 5353, 5228, 9000, 8009, 8060, 1900,
)
_CONFIRM_PORTS = (80, 443, 22, 8080, 62078, 7000)


def load_mac_vendors(path: str) -> dict[str, str]:
    """Read an nmap-style MAC prefix file into a prefix -> vendor mapping.

    A missing or unreadable file gives an empty mapping.
    """
    vendors: dict[str, str] = {}
    try:
        with open(path, encoding="utf-8", errors="replace") as db:
            for line in db:
                line = line.rstrip("\r\n")
                if not line or line.startswith("#"):
                    continue
                parts = line.split(None, 1)
                if len(parts) < 2:
                    continue
                prefix, vendor = parts[0], parts[1].strip()
                if vendor:
                    vendors[prefix] = vendor
    except OSError:
        logger.debug(f"MAC vendor database not found at {path}")
        return {}
    logger.debug(f"Loaded {len(vendors)} MAC vendor entries")
    return vendors


def parse_arp_table(text: str, ip: str) -> str | None:
    """Find the hardware address of ip in /proc/net/arp text, skipping the header line."""
    for line in text.splitlines()[1:]:
        columns = line.split()
        if len(columns) < 4:
            continue
        arp_ip, _hw_type, _flags, hw_addr = columns[:4]
        if arp_ip == ip and hw_addr != _NULL_MAC:
            return hw_addr
    return None


def _parse_arp_command(output: str) -> str | None:
    at = output.find(" at ")
    if at == -1:
        return None
    start = at + 4
    end = output.find(" ", start)
    candidate = output[start:] if end == -1 else output[start:end]
    if ":" in candidate and candidate != "(incomplete)":
        return candidate
    return None


def mac_to_oui(mac: str) -> str:
    """Return the first three octets of a MAC address as upper-case hex without separators."""
    digits = [c.upper() for c in mac if c not in ":-"]
    return "".join(digits[:6])


def _identify_by_pattern(ip: str) -> str:
    last_octet = ip[ip.rfind(".") + 1:]
    if last_octet in ("1", "254"):
        return "Possible Router/Gateway"
    if last_octet in ("10", "20", "50", "100"):
        return "Possible Network Device"
    return ""


class DeviceIdentifier:
    """Guesses a device type from its name, MAC vendor and open ports."""

    def __init__(self, vendor_db_path: str = DEFAULT_VENDOR_DB) -> None:
        self.port_to_service = dict(PORT_TO_SERVICE)
        self.mac_to_vendor = load_mac_vendors(vendor_db_path)

    @staticmethod
    def _resolve_hostname(ip: str) -> str:
        try:
            hostname, _ = socket.getnameinfo((ip, 0), socket.NI_NAMEREQD)
        except (OSError, ValueError):
            return ""
        logger.debug(f"Resolved {ip} -> {hostname}")
        return hostname

    @staticmethod
    def _read_arp_mac(ip: str) -> str | None:
        if sys.platform.startswith("linux"):
            try:
                with open(ARP_TABLE_PATH, encoding="ascii", errors="replace") as arp_file:
                    return parse_arp_table(arp_file.read(), ip)
            except OSError:
                return None
        if sys.platform == "darwin":
            try:
                completed = subprocess.run(
                    ["arp", "-n", ip],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.DEVNULL,
                    check=False,
                )
            except OSError:
                return None
            return _parse_arp_command(completed.stdout.decode("utf-8", errors="replace"))
        return None

    def _lookup_mac_vendor(self, ip: str) -> str:
        if not self.mac_to_vendor:
            return ""
        mac = self._read_arp_mac(ip)
        if not mac:
            return ""
        vendor = self.mac_to_vendor.get(mac_to_oui(mac))
        if vendor is None:
            return ""
        logger.debug(f"MAC vendor for {ip} ({mac}): {vendor}")
        return vendor

    def _check_common_services(self, ip: str) -> str:
        if tcp.ping(ip, 62078, True):
            return "Apple iPhone/iPad"
        if tcp.ping(ip, 5228, True) or tcp.ping(ip, 9000, True):
            return "Android Device"
        if tcp.ping(ip, 7000, True) or tcp.ping(ip, 5353, True):
            return "Apple Device"
        if tcp.ping(ip, 8009, True):
            return "Google Chromecast"
        if tcp.ping(ip, 8060, True):
            return "Roku Device"
        for port, service in sorted(self.port_to_service.items()):
            if tcp.ping(ip, port, True):
                return service
        return ""

    @staticmethod
    def _verify_host(ip: str) -> bool:
        if not icmp.ping(ip, True):
            successes = 0
            for port in _VERIFY_PORTS:
                if tcp.ping(ip, port, True):
                    successes += 1
                    if successes >= 2:
                        return True
            return False
        return any(tcp.ping(ip, port, True) for port in _CONFIRM_PORTS)

    def identify_device(self, ip: str) -> str:
        """Return a short description of the device at ip."""
        logger.debug(f"Identifying device: {ip}")

        hostname = self._resolve_hostname(ip)
        if hostname:
            return hostname

        vendor = self._lookup_mac_vendor(ip)
        if vendor:
            return f"Vendor: {vendor}"

        if tcp.ping(ip, 62078, True):
            return "Apple iPhone/iPad"
        if tcp.ping(ip, 5228, True) or tcp.ping(ip, 9000, True):
            return "Android Device"
        if tcp.ping(ip, 7000, True) and tcp.ping(ip, 5353, True):
            return "Apple TV"
        if tcp.ping(ip, 8009, True):
            return "Google Chromecast"
        if tcp.ping(ip, 8060, True):
            return "Roku Device"

        service = self._check_common_services(ip)
        if service:
            return service

        if not self._verify_host(ip):
            return GHOST

        pattern = _identify_by_pattern(ip)
        if pattern:
            return pattern

        return UNKNOWN