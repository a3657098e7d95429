"""Levelled, thread-safe diagnostic output on standard error."""

from __future__ import annotations

import sys
import threading
from datetime import datetime
from enum import IntEnum


class Level(IntEnum):
    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


_current_level = Level.NORMAL
_lock = threading.Lock()


def set_level(level: Level) -> None:
    """Set the level below which messages are dropped."""
    global _current_level
    _current_level = Level(level)


def timestamp() -> str:
    """Return the local time as HH:MM:SS.mmm."""
    now = datetime.now()
    return f"{now:%H:%M:%S}.{now.microsecond // 1000:03d}"


def _emit(tag: str, msg: str) -> None:
    with _lock:
        print(f"[{timestamp()} {tag}] {msg}", file=sys.stderr, flush=True)


def debug(msg: str) -> None:
    if _current_level >= Level.DEBUG:
        _emit("DBG", msg)


def verbose(msg: str) -> None:
    if _current_level >= Level.VERBOSE:
        _emit("INF", msg)


def warn(msg: str) -> None:
    if _current_level >= Level.NORMAL:
        _emit("WRN", msg)


def error(msg: str) -> None:
    _emit("ERR", msg)