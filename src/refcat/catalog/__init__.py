# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for refcat's catalog models and codecs."""

from __future__ import annotations

from ..errors import CatalogIntegrityError, CatalogSourceError
from .model_catalog import CatalogModel, LocatedRecord, ReferenceCounts
from .model_record import PoolTag, Record, RecordPool
from .model_references import DeviceRef, InstalledSoftwareRef
from .source import CatalogSource, catalog_filename
from .store import CatalogStore

__all__ = [
    "CatalogIntegrityError",
    "CatalogModel",
    "CatalogSource",
    "CatalogSourceError",
    "CatalogStore",
    "DeviceRef",
    "InstalledSoftwareRef",
    "LocatedRecord",
    "PoolTag",
    "Record",
    "RecordPool",
    "ReferenceCounts",
    "catalog_filename",
]
