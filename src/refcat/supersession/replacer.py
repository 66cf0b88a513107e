# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Retire an active record onto its resolved destination across the catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from ..catalog.model_catalog import CatalogModel
from ..catalog.model_record import SUPERSEDES_TAG, PoolTag, Record
from ..errors import RecordNotFound, ReplacementSectionFailed
from .resolver import ResolvedRecord

LOGGER = logging.getLogger(__name__)

DEFAULT_BIOS_CATEGORY: Final[str] = "BIOS"


class ReplacementSection(StrEnum):
    """Catalog sections touched by a replacement, in the order they are updated."""

    SYSTEM_BIOS = "system-bios"
    RECORD = "record"
    INSTALLED_SOFTWARE = "installed-software"
    DEVICES = "devices"


@dataclass(slots=True)
class ReplacementReport:
    """Outcome of :func:`replace`, used to drive user-facing output."""

    source_id: str
    target_id: str
    resolved_from: PoolTag
    bios_updated: bool = False
    record_updated: bool = False
    new_supersedes: str | None = None
    duplicate_removed: bool = False
    installed_matches: int = 0
    device_matches: int = 0
    completed_sections: list[ReplacementSection] = field(default_factory=list)

    @property
    def became_root(self) -> bool:
        """Return ``True`` when the rewritten record no longer supersedes anything."""

        return self.record_updated and self.new_supersedes is None


def carry_forward(resolved: Record) -> Record:
    """Return the value that takes over the retired record's slot.

    Every field comes from ``resolved``. Its ``Supersedes`` link is carried over
    so the slot now points one link further down the chain; when ``resolved`` is
    a chain root the field is removed outright rather than left empty.
    """

    return resolved.with_field(SUPERSEDES_TAG, resolved.supersedes)


def replace(
    model: CatalogModel,
    source_id: str,
    resolved: ResolvedRecord,
    *,
    bios_category: str = DEFAULT_BIOS_CATEGORY,
) -> ReplacementReport:
    """Replace the active record ``source_id`` with ``resolved`` everywhere it is referenced.

    Sections are updated in order: the system BIOS reference, the record
    itself, installed-software references, and device references. Matching
    always uses the original ``source_id``.

    Args:
        model: Catalog to mutate in place.
        source_id: Identifier of the active record being retired.
        resolved: Destination produced by :func:`refcat.supersession.resolver.resolve`.
        bios_category: Category name marking BIOS records.

    Returns:
        ReplacementReport: Summary of every section that changed.

    Raises:
        RecordNotFound: If ``source_id`` is not in the active pool.
        ReplacementSectionFailed: If a section could not be updated; earlier sections stay applied.
    """

    source = model.active.find(source_id)
    if source is None:
        raise RecordNotFound(source_id)
    original_id = source.id
    target = resolved.record
    report = ReplacementReport(source_id=original_id, target_id=target.id, resolved_from=resolved.source)

    with _section(report, ReplacementSection.SYSTEM_BIOS):
        if source.is_category(bios_category) and model.system_bios == original_id:
            model.system_bios = target.id
            report.bios_updated = True

    with _section(report, ReplacementSection.RECORD):
        replacement = carry_forward(target)
        position = model.active.replace(original_id, replacement)
        report.record_updated = True
        report.new_supersedes = replacement.supersedes
        if resolved.source is PoolTag.ACTIVE:
            report.duplicate_removed = _drop_duplicate(model, target.id, keep=position)

    with _section(report, ReplacementSection.INSTALLED_SOFTWARE):
        for index, entry in enumerate(model.installed):
            if entry.ref_id == original_id:
                model.installed[index] = entry.retarget(target)
                report.installed_matches += 1

    with _section(report, ReplacementSection.DEVICES):
        for index, device in enumerate(model.devices):
            if device.ref_id == original_id:
                model.devices[index] = device.retarget(target)
                report.device_matches += 1

    LOGGER.debug(
        "replaced %s with %s: bios=%s installed=%d devices=%d",
        original_id,
        target.id,
        report.bios_updated,
        report.installed_matches,
        report.device_matches,
    )
    return report


def _drop_duplicate(model: CatalogModel, identifier: str, *, keep: int) -> bool:
    """Remove the active-pool duplicate of ``identifier`` other than the one at ``keep``."""

    others = [position for position in model.active.positions_of(identifier) if position != keep]
    for position in reversed(others):
        model.active.remove_at(position)
    if others:
        LOGGER.info("removed %d duplicate active entries for %s", len(others), identifier)
    return bool(others)


@contextmanager
def _section(report: ReplacementReport, section: ReplacementSection) -> Iterator[None]:
    try:
        yield
    except (KeyError, ValueError, RecordNotFound) as exc:
        raise ReplacementSectionFailed(section.value, report, str(exc)) from exc
    report.completed_sections.append(section)


__all__ = [
    "DEFAULT_BIOS_CATEGORY",
    "ReplacementReport",
    "ReplacementSection",
    "carry_forward",
    "replace",
]
