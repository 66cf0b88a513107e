# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Cached rich consoles shared by the output helpers."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from functools import cache

from rich.console import Console

ConsoleKey = tuple[bool, bool, bool]


def detect_tty() -> bool:
    """Return ``True`` when stdout is attached to a terminal."""

    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False


@dataclass(slots=True)
class RichConsoleManager:
    """Hand out one console per colour, emoji and terminal combination."""

    consoles: dict[ConsoleKey, Console] = field(default_factory=dict)

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for ``color`` and ``emoji``, creating it on first use.

        Colour is only enabled when stdout is a terminal, so redirected output
        never carries escape codes.
        """

        tty = detect_tty()
        key = (color, emoji, tty)
        console = self.consoles.get(key)
        if console is None:
            styled = color and tty
            console = Console(
                color_system="auto" if styled else None,
                force_terminal=tty,
                no_color=not styled,
                emoji=emoji,
                soft_wrap=True,
            )
            self.consoles[key] = console
        return console


@cache
def get_console_manager() -> RichConsoleManager:
    return RichConsoleManager()


__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager"]
