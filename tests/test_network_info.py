import sys

import pytest

from netanalyzer.network_info import get_subnet24, ip_to_cidr, parse_route_table

HEADER = "Iface\tDestination\tGateway \tFlags\tRefCnt\tUse\tMetric\tMask\t\tMTU\tWindow\tIRTT"


def _host_hex(octets):
    return f"{int.from_bytes(bytes(octets), sys.byteorder):08X}"


@pytest.mark.parametrize(
    "ip, expected",
    [
        ("192.168.1.100", "192.168.1.0/24"),
        ("10.0.0.1", "10.0.0.0/24"),
        ("172.16.5.42", "172.16.5.0/24"),
    ],
)
def test_get_subnet24(ip, expected):
    assert get_subnet24(ip) == expected


def test_get_subnet24_without_dot():
    assert get_subnet24("localhost") == "localhost/24"


@pytest.mark.parametrize(
    "ip, mask, expected",
    [
        ("192.168.1.100", "255.255.255.0", "192.168.1.0/24"),
        ("10.0.5.42", "255.255.0.0", "10.0.0.0/16"),
        ("172.16.5.42", "255.255.252.0", "172.16.4.0/22"),
        ("10.123.45.67", "255.0.0.0", "10.0.0.0/8"),
        ("192.168.1.1", "255.255.255.255", "192.168.1.1/32"),
    ],
)
def test_ip_to_cidr(ip, mask, expected):
    assert ip_to_cidr(ip, mask) == expected


def test_parse_route_table_finds_default_gateway():
    text = "\n".join(
        [
            HEADER,
            f"eth0\t{_host_hex([192, 168, 1, 0])}\t00000000\t0001\t0\t0\t0\t00FFFFFF\t0\t0\t0",
            f"eth0\t00000000\t{_host_hex([192, 168, 1, 1])}\t0003\t0\t0\t100\t00000000\t0\t0\t0",
        ]
    )
    assert parse_route_table(text, "eth0") == "192.168.1.1"


def test_parse_route_table_matches_interface():
    text = "\n".join(
        [
            HEADER,
            f"wlan0\t00000000\t{_host_hex([10, 0, 0, 1])}\t0003\t0\t0\t600\t00000000\t0\t0\t0",
            f"eth0\t00000000\t{_host_hex([192, 168, 1, 1])}\t0003\t0\t0\t100\t00000000\t0\t0\t0",
        ]
    )
    assert parse_route_table(text, "wlan0") == "10.0.0.1"


def test_parse_route_table_without_default_route():
    text = "\n".join(
        [HEADER, f"eth0\t{_host_hex([192, 168, 1, 0])}\t00000000\t0001\t0\t0\t0\t00FFFFFF\t0\t0\t0"]
    )
    assert parse_route_table(text, "eth0") is None


def test_parse_route_table_ignores_header_line():
    text = f"eth0 00000000 {_host_hex([10, 1, 2, 3])}\n"
    assert parse_route_table(text, "eth0") is None