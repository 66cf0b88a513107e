# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console utilities for runtime output."""

from __future__ import annotations

from .manager import ConsoleKey, RichConsoleManager, detect_tty, get_console_manager

__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager"]
