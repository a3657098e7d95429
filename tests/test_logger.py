import pytest

from netanalyzer import logger
from netanalyzer.logger import Level


@pytest.fixture(autouse=True)
def _restore_level():
    yield
    logger.set_level(Level.NORMAL)


def _check_timestamp(ts):
    hours, minutes, rest = ts.split(":")
    seconds, millis = rest.split(".")
    assert len(ts) == 12
    assert len(hours) == 2 and 0 <= int(hours) < 24
    assert len(minutes) == 2 and 0 <= int(minutes) < 60
    assert len(seconds) == 2 and 0 <= int(seconds) <= 60
    assert len(millis) == 3 and 0 <= int(millis) < 1000


def test_timestamp_format():
    _check_timestamp(logger.timestamp())


def test_debug_level_shows_every_kind_of_message(capsys):
    logger.set_level(Level.DEBUG)
    logger.debug("one")
    logger.verbose("two")
    logger.warn("three")
    logger.error("four")
    lines = capsys.readouterr().err.splitlines()
    assert [line.split("] ", 1)[1] for line in lines] == ["one", "two", "three", "four"]
    assert [line.split(" ", 1)[1].split("]")[0] for line in lines] == ["DBG", "INF", "WRN", "ERR"]


def test_debug_shown_at_debug_level(capsys):
    logger.set_level(Level.DEBUG)
    logger.debug("hello")
    err = capsys.readouterr().err
    assert err.startswith("[")
    assert err.endswith(" DBG] hello\n")
    _check_timestamp(err[1:].split(" ", 1)[0])


def test_debug_hidden_at_normal_level(capsys):
    logger.debug("hidden")
    logger.verbose("hidden")
    assert capsys.readouterr().err == ""


def test_verbose_shown_at_verbose_level(capsys):
    logger.set_level(Level.VERBOSE)
    logger.verbose("info")
    logger.debug("nope")
    err = capsys.readouterr().err
    assert "INF] info" in err
    assert "nope" not in err


def test_warn_shown_at_normal_and_hidden_when_quiet(capsys):
    logger.warn("careful")
    assert "WRN] careful" in capsys.readouterr().err
    logger.set_level(Level.QUIET)
    logger.warn("careful")
    assert capsys.readouterr().err == ""


def test_error_always_shown(capsys):
    logger.set_level(Level.QUIET)
    logger.error("broken")
    assert "ERR] broken" in capsys.readouterr().err