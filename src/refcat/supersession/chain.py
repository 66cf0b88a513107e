# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Lazy, restartable listing of a record's supersession chain."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..catalog.model_record import PoolTag, Record, RecordPool
from ..errors import ChainCycleDetected, RecordNotFound
from .resolver import hop_limit


@dataclass(frozen=True, slots=True)
class ChainLink:
    """One entry of a supersession chain listing."""

    id: str
    version: str | None
    pool: PoolTag | None
    missing: bool = False

    @classmethod
    def of(cls, record: Record, pool: PoolTag) -> ChainLink:
        return cls(id=record.id, version=record.version, pool=pool)


@dataclass(frozen=True, slots=True)
class SupersessionChain:
    """Iterable view over the chain that starts at an active record.

    Each call to :meth:`__iter__` walks the pools afresh, so the listing can be
    consumed any number of times. A reference to an identifier that is absent
    from the superseded pool ends the walk with a ``missing`` link.
    """

    active: RecordPool
    superseded: RecordPool
    start: Record

    def __iter__(self) -> Iterator[ChainLink]:
        yield ChainLink.of(self.start, PoolTag.ACTIVE)
        next_id = self.start.supersedes
        if next_id is None:
            return
        duplicate = self.active.find(next_id)
        if duplicate is not None:
            yield ChainLink.of(duplicate, PoolTag.ACTIVE)
            next_id = duplicate.supersedes

        limit = hop_limit(self.superseded)
        hops = 0
        while next_id is not None:
            hops += 1
            if hops > limit:
                raise ChainCycleDetected(self.start.id, limit)
            current = self.superseded.find(next_id)
            if current is None:
                yield ChainLink(id=next_id, version=None, pool=None, missing=True)
                return
            yield ChainLink.of(current, PoolTag.SUPERSEDED)
            next_id = current.supersedes

    @property
    def truncated(self) -> bool:
        """Return ``True`` when the chain ends at a dangling reference."""

        return any(link.missing for link in self)


def list_chain(active: RecordPool, superseded: RecordPool, start_id: str) -> SupersessionChain:
    """Return the supersession chain starting at ``start_id``.

    Raises:
        RecordNotFound: If ``start_id`` is not in the active pool.
    """

    start = active.find(start_id)
    if start is None:
        raise RecordNotFound(start_id)
    return SupersessionChain(active=active, superseded=superseded, start=start)


__all__ = ["ChainLink", "SupersessionChain", "list_chain"]
