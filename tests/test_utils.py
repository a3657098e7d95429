import pytest

from netanalyzer.utils import ip_to_uint, is_valid_ipv4, parse_cidr, uint_to_ip


@pytest.mark.parametrize(
    "address", ["192.168.1.1", "10.0.0.1", "255.255.255.255", "0.0.0.0"]
)
def test_ip_to_uint_and_back(address):
    assert uint_to_ip(ip_to_uint(address)) == address


@pytest.mark.parametrize(
    "address, value",
    [
        ("192.168.1.1", 0xC0A80101),
        ("10.0.0.1", 0x0A000001),
        ("0.0.0.0", 0),
        ("255.255.255.255", 0xFFFFFFFF),
    ],
)
def test_ip_to_uint_values(address, value):
    assert ip_to_uint(address) == value


@pytest.mark.parametrize(
    "value, address",
    [(0xC0A80101, "192.168.1.1"), (0x0A000001, "10.0.0.1"), (0, "0.0.0.0")],
)
def test_uint_to_ip(value, address):
    assert uint_to_ip(value) == address


def test_ip_to_uint_invalid_is_zero():
    assert ip_to_uint("not-an-ip") == 0
    assert ip_to_uint("") == 0


def test_parse_cidr_24():
    start, end = parse_cidr("192.168.1.0/24")
    assert uint_to_ip(start) == "192.168.1.0"
    assert uint_to_ip(end) == "192.168.1.255"
    assert end - start + 1 == 256


def test_parse_cidr_16():
    start, end = parse_cidr("10.0.0.0/16")
    assert uint_to_ip(start) == "10.0.0.0"
    assert uint_to_ip(end) == "10.0.255.255"
    assert end - start + 1 == 65536


def test_parse_cidr_32():
    start, end = parse_cidr("192.168.1.100/32")
    assert uint_to_ip(start) == "192.168.1.100"
    assert uint_to_ip(end) == "192.168.1.100"
    assert end - start + 1 == 1


def test_parse_cidr_8():
    start, end = parse_cidr("10.0.0.0/8")
    assert uint_to_ip(start) == "10.0.0.0"
    assert uint_to_ip(end) == "10.255.255.255"


def test_parse_cidr_22():
    start, end = parse_cidr("172.16.4.0/22")
    assert uint_to_ip(start) == "172.16.4.0"
    assert uint_to_ip(end) == "172.16.7.255"
    assert end - start + 1 == 1024


def test_parse_cidr_masks_host_bits():
    assert parse_cidr("192.168.1.77/24") == parse_cidr("192.168.1.0/24")


def test_parse_cidr_zero_prefix_covers_everything():
    assert parse_cidr("10.1.2.3/0") == (0, 0xFFFFFFFF)


@pytest.mark.parametrize("cidr", ["192.168.1.1", "10.0.0.0/abc", "10.0.0.0/33", "10.0.0.0/-1"])
def test_parse_cidr_rejects_bad_prefix(cidr):
    with pytest.raises(ValueError):
        parse_cidr(cidr)


@pytest.mark.parametrize(
    "address", ["192.168.1.1", "10.0.0.1", "0.0.0.0", "255.255.255.255"]
)
def test_is_valid_ipv4_accepts(address):
    assert is_valid_ipv4(address) is True


@pytest.mark.parametrize(
    "address",
    ["", "not-an-ip", "256.1.1.1", "192.168.1", "1.2.3.4.5", "; rm -rf /"],
)
def test_is_valid_ipv4_rejects(address):
    assert is_valid_ipv4(address) is False