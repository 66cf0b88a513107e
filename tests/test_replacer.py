# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for retiring a record across every catalog section."""

from __future__ import annotations

import pytest

from refcat.catalog import CatalogModel, DeviceRef, InstalledSoftwareRef, PoolTag
from refcat.errors import RecordNotFound, ReplacementSectionFailed
from refcat.supersession import ReplacementSection, replace, resolve


def _retire(model: CatalogModel, source_id: str, target_id: str | None = None):
    resolved = resolve(model.active, model.superseded, source_id, target_id)
    return resolved, replace(model, source_id, resolved)


def test_bios_source_updates_system_reference(sample_model: CatalogModel) -> None:
    _, report = _retire(sample_model, "sp200")

    assert report.bios_updated
    assert sample_model.system_bios == "sp150"


def test_non_bios_source_leaves_system_reference(sample_model: CatalogModel) -> None:
    _, report = _retire(sample_model, "sp300")

    assert not report.bios_updated
    assert sample_model.system_bios == "sp200"


def test_bios_reference_pointing_elsewhere_is_untouched(sample_model: CatalogModel) -> None:
    sample_model.system_bios = "sp999"

    _, report = _retire(sample_model, "sp200")

    assert not report.bios_updated
    assert sample_model.system_bios == "sp999"


def test_record_takes_resolved_fields_and_lineage(sample_model: CatalogModel) -> None:
    position = sample_model.active.position("sp200")

    _, report = _retire(sample_model, "sp200")

    updated = sample_model.active.records[position]
    assert updated.id == "sp150"
    assert updated.version == "01.05"
    assert updated.date_released == "2023-11-01"
    assert updated.supersedes == "sp100"
    assert report.record_updated
    assert report.new_supersedes == "sp100"
    assert not report.became_root


def test_chain_root_target_drops_supersedes(sample_model: CatalogModel) -> None:
    _, report = _retire(sample_model, "sp300")

    updated = sample_model.active.find("sp250")
    assert updated is not None
    assert not updated.has_field("Supersedes")
    assert report.became_root


def test_references_follow_the_retired_record(sample_model: CatalogModel) -> None:
    before = sample_model.reference_counts("sp300")

    _, report = _retire(sample_model, "sp300")

    after = sample_model.reference_counts("sp250")
    assert (after.installed, after.devices) == (before.installed, before.devices) == (1, 1)
    assert sample_model.reference_counts("sp300") == type(after)(installed=0, devices=0)
    assert report.installed_matches == 1
    assert report.device_matches == 1
    assert sample_model.installed[1] == InstalledSoftwareRef(
        ref_id="sp250", version="6.0.1", vendor="Realtek", software="Audio Console"
    )
    assert sample_model.devices[0] == DeviceRef(
        ref_id="sp250",
        driver_date="2023-12-01",
        driver_provider="Realtek",
        driver_version="6.0.1",
        device="HDAUDIO-FUNC-01",
    )
    assert sample_model.devices[1].ref_id == "sp400"


def test_old_identifier_is_gone_after_replacement(sample_model: CatalogModel) -> None:
    resolved, _ = _retire(sample_model, "sp200")

    with pytest.raises(RecordNotFound):
        resolve(sample_model.active, sample_model.superseded, "sp200")
    follow_up = resolve(sample_model.active, sample_model.superseded, resolved.id)
    assert follow_up.id == "sp100"


def test_zero_reference_matches_are_reported(make_record) -> None:
    model = CatalogModel.from_records(
        [make_record("sp2", supersedes="sp1")],
        [make_record("sp1")],
        installed=[InstalledSoftwareRef(ref_id="sp7")],
    )

    _, report = _retire(model, "sp2")

    assert report.installed_matches == 0
    assert report.device_matches == 0
    assert report.completed_sections == list(ReplacementSection)


def test_active_duplicate_is_collapsed(sample_model: CatalogModel) -> None:
    position = sample_model.active.position("sp500")
    size = len(sample_model.active)

    resolved, report = _retire(sample_model, "sp500")

    assert resolved.source is PoolTag.ACTIVE
    assert report.duplicate_removed
    assert len(sample_model.active) == size - 1
    assert sample_model.active.positions_of("sp450") == (position,)
    assert sample_model.active.records[position].supersedes == "sp420"
    assert sample_model.installed[0].ref_id == "sp450"


def test_unknown_source_is_record_not_found(sample_model: CatalogModel) -> None:
    resolved = resolve(sample_model.active, sample_model.superseded, "sp300")

    with pytest.raises(RecordNotFound):
        replace(sample_model, "sp404", resolved)


def test_failed_section_keeps_partial_report(sample_model: CatalogModel, monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(self: DeviceRef, record: object) -> DeviceRef:
        raise ValueError("driver metadata unavailable")

    monkeypatch.setattr(DeviceRef, "retarget", _broken)
    resolved = resolve(sample_model.active, sample_model.superseded, "sp300")

    with pytest.raises(ReplacementSectionFailed) as excinfo:
        replace(sample_model, "sp300", resolved)

    assert excinfo.value.section == ReplacementSection.DEVICES.value
    assert excinfo.value.report.completed_sections == [
        ReplacementSection.SYSTEM_BIOS,
        ReplacementSection.RECORD,
        ReplacementSection.INSTALLED_SOFTWARE,
    ]
    assert excinfo.value.report.installed_matches == 1
    assert "devices" in str(excinfo.value)
