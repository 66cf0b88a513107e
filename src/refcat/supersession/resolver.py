# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve the record a catalog entry should be retired onto."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..catalog.model_record import PoolTag, Record, RecordPool
from ..errors import ChainCycleDetected, ChainTerminated, NoSupersessionTarget, RecordNotFound

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedRecord:
    """Destination record produced by :func:`resolve`.

    Attributes:
        record: The record the start entry resolves to.
        source: Pool the record was taken from.
        hops: Number of superseded-pool lookups performed; ``0`` for an active match.
    """

    record: Record
    source: PoolTag
    hops: int = 0

    @property
    def id(self) -> str:
        return self.record.id


def hop_limit(superseded: RecordPool) -> int:
    """Return the maximum number of hops a walk through ``superseded`` may take."""

    return len(superseded) + 1


def resolve(
    active: RecordPool,
    superseded: RecordPool,
    start_id: str,
    target_id: str | None = None,
) -> ResolvedRecord:
    """Resolve ``target_id`` relative to the active record ``start_id``.

    The active pool is consulted first because catalogs occasionally keep a
    superseded record in the active pool as well. Otherwise the supersession
    chain is walked from the start record through the superseded pool until
    the target is met. When the start record's predecessor is one of those
    active-pool duplicates, the walk steps over it and continues from its own
    ``supersedes``.

    Args:
        active: Pool of currently recommended records.
        superseded: Pool of retired records.
        start_id: Identifier of the active record being retired.
        target_id: Identifier to retire onto; defaults to the start record's ``supersedes``.

    Returns:
        ResolvedRecord: The destination record and the pool it came from.

    Raises:
        RecordNotFound: If ``start_id`` is not active or a chain link is missing.
        NoSupersessionTarget: If no target was given and the start record is a chain root.
        ChainTerminated: If the lineage ends before ``target_id`` is reached.
        ChainCycleDetected: If the walk exceeds :func:`hop_limit`.
    """

    start = active.find(start_id)
    if start is None:
        raise RecordNotFound(start_id)
    target = target_id if target_id is not None else start.supersedes
    if target is None:
        raise NoSupersessionTarget(start_id)
    if target == start_id:
        raise NoSupersessionTarget(start_id, "a record cannot be retired onto itself")

    direct = active.find(target)
    if direct is not None:
        if target in superseded:
            LOGGER.warning("%s is in both pools; using the active pool entry", target)
        LOGGER.debug("resolved %s -> %s in the active pool", start_id, target)
        return ResolvedRecord(record=direct, source=PoolTag.ACTIVE)

    if start.supersedes is None:
        raise ChainTerminated(start_id, target, start_id)

    next_id = start.supersedes
    duplicate = active.find(next_id)
    if duplicate is not None:
        LOGGER.debug("%s supersedes %s, still listed in the active pool", start_id, next_id)
        if duplicate.supersedes is None:
            raise ChainTerminated(start_id, target, duplicate.id)
        next_id = duplicate.supersedes

    limit = hop_limit(superseded)
    hops = 0
    while True:
        hops += 1
        if hops > limit:
            raise ChainCycleDetected(start_id, limit)
        current = superseded.find(next_id)
        if current is None:
            raise RecordNotFound(target, start_id=start_id, missing_link=next_id)
        if current.id == target:
            LOGGER.debug("resolved %s -> %s after %d hop(s)", start_id, target, hops)
            return ResolvedRecord(record=current, source=PoolTag.SUPERSEDED, hops=hops)
        if current.supersedes is None:
            raise ChainTerminated(start_id, target, current.id)
        next_id = current.supersedes


__all__ = ["ResolvedRecord", "hop_limit", "resolve"]
