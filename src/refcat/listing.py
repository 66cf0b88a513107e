# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only listings over the active record pool."""

from __future__ import annotations

from collections.abc import Sequence

from .catalog.model_catalog import CatalogModel
from .catalog.model_record import Record


def list_no_successor(model: CatalogModel) -> tuple[Record, ...]:
    """Return active records that do not supersede anything, in pool order."""

    return tuple(record for record in model.active if record.supersedes is None)


def list_by_category(model: CatalogModel, categories: Sequence[str]) -> dict[str, tuple[Record, ...]]:
    """Group active records by the requested categories.

    A record matches when its category contains the requested text, ignoring
    case, so ``driver`` selects every ``Driver - ...`` category.

    Args:
        model: Catalog to inspect.
        categories: Category names in the order they should be reported.

    Returns:
        dict[str, tuple[Record, ...]]: Matching records keyed by requested category.

    Raises:
        ValueError: If no category is requested.
    """

    requested = [category.strip() for category in categories if category.strip()]
    if not requested:
        raise ValueError("at least one category is required")
    grouped: dict[str, tuple[Record, ...]] = {}
    for category in requested:
        needle = category.casefold()
        grouped[category] = tuple(
            record for record in model.active if record.category is not None and needle in record.category.casefold()
        )
    return grouped


__all__ = ["list_by_category", "list_no_successor"]
