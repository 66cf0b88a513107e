# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Record and pool models describing catalog update entries."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final

from ..errors import CatalogIntegrityError, RecordNotFound

LOGGER = logging.getLogger(__name__)

ID_TAG: Final[str] = "Id"
SUPERSEDES_TAG: Final[str] = "Supersedes"
NAME_TAG: Final[str] = "Name"
CATEGORY_TAG: Final[str] = "Category"
VERSION_TAG: Final[str] = "Version"
VENDOR_TAG: Final[str] = "Vendor"
DATE_RELEASED_TAG: Final[str] = "DateReleased"

FieldPair = tuple[str, str]


class PoolTag(StrEnum):
    """Identify which record pool a record was found in."""

    ACTIVE = "active"
    SUPERSEDED = "superseded"


@dataclass(frozen=True, slots=True)
class Record:
    """Immutable catalog entry made of ordered ``(tag, text)`` fields.

    Field order and XML attributes are preserved so a record serialises back to
    the element it was parsed from. A field that is present but empty keeps an
    empty string, while a missing field is simply absent from ``fields``.
    """

    fields: tuple[FieldPair, ...]
    attributes: tuple[FieldPair, ...] = ()

    def __post_init__(self) -> None:
        """Reject records that carry no usable identifier."""

        identifier = self.get(ID_TAG)
        if identifier is None or not identifier.strip():
            raise CatalogIntegrityError("catalog record is missing its Id field")

    def get(self, tag: str) -> str | None:
        """Return the text of the first field named ``tag``.

        Args:
            tag: Field name to look up.

        Returns:
            str | None: Field text, or ``None`` when the field is absent.
        """

        for name, text in self.fields:
            if name == tag:
                return text
        return None

    def has_field(self, tag: str) -> bool:
        """Return ``True`` when a field named ``tag`` is present, even if empty."""

        return any(name == tag for name, _ in self.fields)

    @property
    def id(self) -> str:
        """Return the record identifier."""

        return (self.get(ID_TAG) or "").strip()

    @property
    def supersedes(self) -> str | None:
        """Return the identifier this record supersedes, ``None`` for a chain root."""

        value = self.get(SUPERSEDES_TAG)
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def name(self) -> str | None:
        return self.get(NAME_TAG)

    @property
    def category(self) -> str | None:
        return self.get(CATEGORY_TAG)

    @property
    def version(self) -> str | None:
        return self.get(VERSION_TAG)

    @property
    def vendor(self) -> str | None:
        return self.get(VENDOR_TAG)

    @property
    def date_released(self) -> str | None:
        return self.get(DATE_RELEASED_TAG)

    def is_category(self, category: str) -> bool:
        """Return ``True`` when the record category equals ``category`` ignoring case."""

        current = self.category
        return current is not None and current.strip().casefold() == category.strip().casefold()

    def with_field(self, tag: str, value: str | None) -> Record:
        """Return a copy with ``tag`` set to ``value``.

        Args:
            tag: Field name to set.
            value: New text. ``None`` removes every field named ``tag``.

        Returns:
            Record: New record value; ``self`` is left untouched.
        """

        if value is None:
            remaining = tuple(pair for pair in self.fields if pair[0] != tag)
            return Record(fields=remaining, attributes=self.attributes)
        if not self.has_field(tag):
            return Record(fields=(*self.fields, (tag, value)), attributes=self.attributes)
        updated: list[FieldPair] = []
        replaced = False
        for name, text in self.fields:
            if name == tag and not replaced:
                updated.append((name, value))
                replaced = True
            elif name != tag:
                updated.append((name, text))
        return Record(fields=tuple(updated), attributes=self.attributes)


@dataclass(slots=True)
class RecordPool:
    """Ordered sequence of records indexed by identifier for O(1) lookups.

    Duplicate identifiers within one pool are tolerated and resolve to their
    first occurrence.
    """

    tag: PoolTag
    _records: list[Record] = field(default_factory=list)
    _index: dict[str, int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Copy the supplied records and build the identifier index."""

        self._records = list(self._records)
        self._index = {}
        self._reindex()

    @classmethod
    def of(cls, tag: PoolTag, records: Iterable[Record]) -> RecordPool:
        """Return a pool tagged ``tag`` holding ``records`` in order."""

        return cls(tag=tag, _records=list(records))

    def _reindex(self) -> None:
        index: dict[str, int] = {}
        for position, record in enumerate(self._records):
            if record.id in index:
                LOGGER.warning(
                    "duplicate id %s in %s pool at positions %d and %d",
                    record.id,
                    self.tag.value,
                    index[record.id],
                    position,
                )
                continue
            index[record.id] = position
        self._index = index

    @property
    def records(self) -> tuple[Record, ...]:
        """Return the records in pool order."""

        return tuple(self._records)

    def find(self, identifier: str) -> Record | None:
        """Return the record stored under ``identifier`` or ``None``."""

        position = self._index.get(identifier)
        return None if position is None else self._records[position]

    def position(self, identifier: str) -> int:
        """Return the position of ``identifier``.

        Raises:
            RecordNotFound: If ``identifier`` is not in the pool.
        """

        try:
            return self._index[identifier]
        except KeyError as exc:
            raise RecordNotFound(identifier) from exc

    def replace(self, identifier: str, record: Record) -> int:
        """Store ``record`` at the position currently held by ``identifier``.

        Args:
            identifier: Identifier of the record being replaced.
            record: Replacement value.

        Returns:
            int: Position the replacement was stored at.
        """

        position = self.position(identifier)
        self._records[position] = record
        self._reindex()
        return position

    def remove_at(self, position: int) -> Record:
        """Remove and return the record stored at ``position``."""

        removed = self._records.pop(position)
        self._reindex()
        return removed

    def positions_of(self, identifier: str) -> tuple[int, ...]:
        """Return every position holding ``identifier``, duplicates included."""

        return tuple(position for position, record in enumerate(self._records) if record.id == identifier)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._index

    def __iter__(self) -> Iterator[Record]:
        return iter(tuple(self._records))

    def __len__(self) -> int:
        return len(self._records)


__all__ = [
    "CATEGORY_TAG",
    "DATE_RELEASED_TAG",
    "ID_TAG",
    "NAME_TAG",
    "SUPERSEDES_TAG",
    "VENDOR_TAG",
    "VERSION_TAG",
    "PoolTag",
    "Record",
    "RecordPool",
]
