# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cross-reference models that denormalise fields from catalog records."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .model_record import Record


@dataclass(frozen=True, slots=True)
class InstalledSoftwareRef:
    """Installed-software inventory entry pointing at a record identifier."""

    ref_id: str
    version: str | None = None
    vendor: str | None = None
    software: str | None = None

    def retarget(self, record: Record) -> InstalledSoftwareRef:
        """Return a copy pointing at ``record`` with its version and vendor copied over."""

        return replace(self, ref_id=record.id, version=record.version, vendor=record.vendor)


@dataclass(frozen=True, slots=True)
class DeviceRef:
    """Hardware device entry pointing at the record that provides its driver."""

    ref_id: str
    driver_date: str | None = None
    driver_provider: str | None = None
    driver_version: str | None = None
    device: str | None = None

    def retarget(self, record: Record) -> DeviceRef:
        """Return a copy pointing at ``record`` with its driver metadata copied over.

        The driver date mirrors the record's release date and the provider its
        vendor.
        """

        return replace(
            self,
            ref_id=record.id,
            driver_date=record.date_released,
            driver_provider=record.vendor,
            driver_version=record.version,
        )


__all__ = ["DeviceRef", "InstalledSoftwareRef"]
