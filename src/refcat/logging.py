# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status lines and section headers for the command line."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from rich.rule import Rule
from rich.text import Text

from .runtime.console.manager import detect_tty, get_console_manager


class MessageKind(StrEnum):
    """Kinds of status line the CLI prints."""

    INFO = "info"
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class MessageLook:
    """Emoji prefix and rich style used for one :class:`MessageKind`."""

    prefix: str
    style: str


MESSAGE_LOOKS: Final[dict[MessageKind, MessageLook]] = {
    MessageKind.INFO: MessageLook("ℹ️ ", "cyan"),
    MessageKind.OK: MessageLook("✅ ", "green"),
    MessageKind.WARN: MessageLook("⚠️ ", "yellow"),
    MessageKind.FAIL: MessageLook("❌ ", "red"),
}


def format_message(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool) -> Text:
    """Return ``msg`` as rich text carrying the prefix and colour of ``kind``.

    Args:
        kind: Status kind selecting prefix and style.
        msg: Message body.
        use_emoji: Whether to prepend the emoji prefix.
        use_color: Whether to apply the style.

    Returns:
        Text: Renderable line.
    """

    look = MESSAGE_LOOKS[kind]
    text = Text(f"{look.prefix}{msg}" if use_emoji else msg)
    if use_color:
        text.stylize(look.style)
    return text


def emit(kind: MessageKind, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print a status line of ``kind``; colour follows TTY detection when ``use_color`` is ``None``."""

    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    console.print(format_message(kind, msg, use_emoji=use_emoji, use_color=color_enabled))


def section(title: str, *, use_color: bool) -> None:
    """Print a header separating blocks of listing output."""

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color and detect_tty():
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


__all__ = ["MESSAGE_LOOKS", "MessageKind", "MessageLook", "emit", "format_message", "section"]
