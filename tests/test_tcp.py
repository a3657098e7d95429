import socket

import pytest

from netanalyzer import tcp


@pytest.fixture
def listening_port():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    yield server.getsockname()[1]
    server.close()


@pytest.fixture
def closed_port():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    return port


def test_open_port_is_alive(listening_port, capsys):
    assert tcp.ping("127.0.0.1", listening_port, quiet=True, timeout_ms=1000) is True
    assert capsys.readouterr().err == ""


def test_open_port_reports_when_not_quiet(listening_port, capsys):
    assert tcp.ping("127.0.0.1", listening_port, quiet=False, timeout_ms=1000) is True
    err = capsys.readouterr().err
    assert f"127.0.0.1 is alive via TCP port {listening_port}" in err
    assert "RTT:" in err


def test_closed_port_is_not_alive(closed_port, capsys):
    assert tcp.ping("127.0.0.1", closed_port, quiet=False, timeout_ms=500) is False
    assert "is alive" not in capsys.readouterr().err