"""Records a Ctrl+C so long-running work can stop gracefully."""

from __future__ import annotations

import signal
import threading

_interrupted = threading.Event()


def handler(signum, frame) -> None:
    """Signal handler that only records the interruption."""
    _interrupted.set()


def install() -> None:
    """Install the handler for SIGINT."""
    signal.signal(signal.SIGINT, handler)


def is_interrupted() -> bool:
    return _interrupted.is_set()


def reset() -> None:
    """Forget an earlier interruption."""
    _interrupted.clear()