import socket
import sys
from unittest.mock import patch

from netanalyzer import device_identifier
from netanalyzer.device_identifier import (
    DeviceIdentifier,
    load_mac_vendors,
    mac_to_oui,
    parse_arp_table,
)

ARP_HEADER = "IP address       HW type     Flags       HW address            Mask     Device\n"


def _write_db(tmp_path):
    db = tmp_path / "prefixes"
    db.write_text(
        "# comment line\n"
        "\n"
        "AABBCC Example Vendor\n"
        "DDEEFF   Another   Maker  \n"
        "123456\n"
    )
    return db


def test_load_mac_vendors_parses_entries(tmp_path):
    vendors = load_mac_vendors(str(_write_db(tmp_path)))
    assert vendors == {"AABBCC": "Example Vendor", "DDEEFF": "Another   Maker"}


def test_load_mac_vendors_missing_file_is_empty(tmp_path):
    assert load_mac_vendors(str(tmp_path / "absent")) == {}


def test_identifier_loads_vendor_db(tmp_path):
    identifier = DeviceIdentifier(str(_write_db(tmp_path)))
    assert identifier.mac_to_vendor["AABBCC"] == "Example Vendor"
    assert identifier.port_to_service[22] == "SSH"


def test_identifier_services_are_ordered_by_port(tmp_path):
    identifier = DeviceIdentifier(str(tmp_path / "absent"))
    ports = list(identifier.port_to_service)
    assert ports == sorted(ports)
    assert ports[0] == 21
    assert ports[-1] == 62078
    assert identifier.mac_to_vendor == {}


def test_parse_arp_table_finds_mac():
    text = ARP_HEADER + "10.0.0.7 0x1 0x2 aa:bb:cc:11:22:33 * eth0\n"
    assert parse_arp_table(text, "10.0.0.7") == "aa:bb:cc:11:22:33"


def test_parse_arp_table_ignores_null_mac_and_other_hosts():
    text = (
        ARP_HEADER
        + "10.0.0.7 0x1 0x0 00:00:00:00:00:00 * eth0\n"
        + "10.0.0.8 0x1 0x2 aa:bb:cc:11:22:44 * eth0\n"
    )
    assert parse_arp_table(text, "10.0.0.7") is None
    assert parse_arp_table(text, "10.0.0.9") is None
    assert parse_arp_table("", "10.0.0.7") is None


def test_mac_to_oui_normalises_separators_and_case():
    assert mac_to_oui("aa:bb:cc:11:22:33") == "AABBCC"
    assert mac_to_oui("aa-bb-cc-11-22-33") == mac_to_oui("AA:BB:CC:11:22:33")
    assert len(mac_to_oui("aa:bb:cc:11:22:33")) == 6


def test_identify_device_prefers_hostname(tmp_path):
    identifier = DeviceIdentifier(str(tmp_path / "absent"))
    with patch("socket.getnameinfo", return_value=("printer.example", "0")) as lookup:
        assert identifier.identify_device("10.0.0.7") == "printer.example"
    assert lookup.call_args.args[1] == socket.NI_NAMEREQD


def test_identify_device_uses_mac_vendor(tmp_path, monkeypatch):
    arp = tmp_path / "arp"
    arp.write_text(ARP_HEADER + "10.0.0.7 0x1 0x2 aa:bb:cc:11:22:33 * eth0\n")
    monkeypatch.setattr(device_identifier, "ARP_TABLE_PATH", str(arp))
    monkeypatch.setattr(sys, "platform", "linux")
    identifier = DeviceIdentifier(str(_write_db(tmp_path)))
    with patch("socket.getnameinfo", side_effect=socket.gaierror("no name")):
        assert identifier.identify_device("10.0.0.7") == "Vendor: Example Vendor"