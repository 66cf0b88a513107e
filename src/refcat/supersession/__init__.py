# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Supersession chain resolution, replacement, and listing."""

from __future__ import annotations

from .chain import ChainLink, SupersessionChain, list_chain
from .replacer import DEFAULT_BIOS_CATEGORY, ReplacementReport, ReplacementSection, carry_forward, replace
from .resolver import ResolvedRecord, hop_limit, resolve

__all__ = [
    "DEFAULT_BIOS_CATEGORY",
    "ChainLink",
    "ReplacementReport",
    "ReplacementSection",
    "ResolvedRecord",
    "SupersessionChain",
    "carry_forward",
    "hop_limit",
    "list_chain",
    "replace",
    "resolve",
]
