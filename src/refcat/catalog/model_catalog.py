# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog aggregate model shared by the resolver, replacer, and listings."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .model_record import PoolTag, Record, RecordPool
from .model_references import DeviceRef, InstalledSoftwareRef

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocatedRecord:
    """Record paired with the pool it was found in."""

    record: Record
    pool: PoolTag


@dataclass(frozen=True, slots=True)
class ReferenceCounts:
    """Number of installed-software and device entries pointing at one identifier."""

    installed: int
    devices: int


@dataclass(slots=True)
class CatalogModel:
    """In-memory view over the record pools and their cross references."""

    active: RecordPool
    superseded: RecordPool
    system_bios: str | None = None
    installed: list[InstalledSoftwareRef] = field(default_factory=list)
    devices: list[DeviceRef] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Log identifiers that appear in both pools."""

        for identifier in self.overlapping_ids():
            LOGGER.warning("record %s appears in both the active and superseded pools", identifier)

    @classmethod
    def from_records(
        cls,
        active: Iterable[Record],
        superseded: Iterable[Record] = (),
        *,
        system_bios: str | None = None,
        installed: Iterable[InstalledSoftwareRef] = (),
        devices: Iterable[DeviceRef] = (),
    ) -> CatalogModel:
        """Build a model from plain record sequences.

        Args:
            active: Records currently recommended.
            superseded: Retired records kept for lineage lookup.
            system_bios: Optional top-level BIOS reference.
            installed: Installed-software references.
            devices: Device references.

        Returns:
            CatalogModel: Model with indexed pools.
        """

        return cls(
            active=RecordPool.of(PoolTag.ACTIVE, active),
            superseded=RecordPool.of(PoolTag.SUPERSEDED, superseded),
            system_bios=system_bios,
            installed=list(installed),
            devices=list(devices),
        )

    def pool(self, tag: PoolTag) -> RecordPool:
        """Return the pool identified by ``tag``."""

        return self.active if tag is PoolTag.ACTIVE else self.superseded

    def locate(self, identifier: str) -> LocatedRecord | None:
        """Return ``identifier`` together with its pool, checking the active pool first."""

        for pool in (self.active, self.superseded):
            record = pool.find(identifier)
            if record is not None:
                return LocatedRecord(record=record, pool=pool.tag)
        return None

    def overlapping_ids(self) -> tuple[str, ...]:
        """Return identifiers present in both pools, in superseded-pool order."""

        return tuple(record.id for record in self.superseded if record.id in self.active)

    def reference_counts(self, identifier: str) -> ReferenceCounts:
        """Count installed-software and device references to ``identifier``."""

        return ReferenceCounts(
            installed=sum(1 for entry in self.installed if entry.ref_id == identifier),
            devices=sum(1 for entry in self.devices if entry.ref_id == identifier),
        )


__all__ = ["CatalogModel", "LocatedRecord", "ReferenceCounts"]
