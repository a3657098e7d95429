"""ANSI colour codes for terminal output."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields


@dataclass
class Palette:
    """A set of ANSI escape sequences that can be switched off."""

    green: str = "\033[32m"
    bright_green: str = "\033[92m"
    cyan: str = "\033[36m"
    yellow: str = "\033[33m"
    red: str = "\033[31m"
    reset: str = "\033[0m"
    bold: str = "\033[1m"

    def disable(self) -> None:
        """Replace every escape sequence with the empty string."""
        for item in fields(self):
            setattr(self, item.name, "")


palette = Palette()


def should_disable() -> bool:
    """Tell whether the NO_COLOR environment variable is set."""
    return "NO_COLOR" in os.environ