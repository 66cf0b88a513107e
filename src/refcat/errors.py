# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by catalog parsing, traversal and replacement."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .supersession.replacer import ReplacementReport


class RefcatError(RuntimeError):
    """Base class for every error raised by refcat."""


class CatalogError(RefcatError):
    """Raised for catalog-level problems outside the supersession core."""


class CatalogIntegrityError(CatalogError):
    """Raised when a catalog document is not well formed or lacks required sections."""


class CatalogSourceError(CatalogError):
    """Raised when a catalog file cannot be located, read, or written."""


class ChainError(RefcatError):
    """Base class for supersession traversal failures."""


class RecordNotFound(ChainError):
    """Raised when an identifier cannot be located in the pool being searched."""

    def __init__(
        self,
        identifier: str,
        *,
        start_id: str | None = None,
        missing_link: str | None = None,
    ) -> None:
        """Create the error for ``identifier``.

        Args:
            identifier: Identifier the caller was looking for.
            start_id: Record the traversal started from, when a walk was underway.
            missing_link: Identifier whose lookup actually failed during the walk.
        """

        self.identifier = identifier
        self.start_id = start_id
        self.missing_link = missing_link
        message = f"record '{identifier}' not found"
        if start_id is not None:
            message += f" while resolving from '{start_id}'"
        if missing_link is not None and missing_link != identifier:
            message += f" (link '{missing_link}' is missing from the superseded pool)"
        super().__init__(message)


class NoSupersessionTarget(ChainError):
    """Raised when no destination can be derived for a record."""

    def __init__(self, start_id: str, reason: str | None = None) -> None:
        self.start_id = start_id
        self.reason = reason or "record does not supersede anything and no target was given"
        super().__init__(f"'{start_id}': {self.reason}")


class ChainTerminated(ChainError):
    """Raised when the lineage ends before the requested target is reached."""

    def __init__(self, start_id: str, target_id: str, last_id: str) -> None:
        self.start_id = start_id
        self.target_id = target_id
        self.last_id = last_id
        super().__init__(
            f"'{target_id}' is not reachable from '{start_id}': chain ends at '{last_id}'",
        )


class ChainCycleDetected(ChainError):
    """Raised when a traversal exceeds its hop bound, which implies a cycle."""

    def __init__(self, start_id: str, limit: int) -> None:
        self.start_id = start_id
        self.limit = limit
        super().__init__(f"supersession chain from '{start_id}' exceeded {limit} hops; the lineage loops")


class ReplacementSectionFailed(RefcatError):
    """Raised when one replacement step fails after earlier steps were applied."""

    def __init__(self, section: str, report: ReplacementReport, detail: str) -> None:
        """Create the error for the failed ``section``.

        Args:
            section: Name of the catalog section whose update failed.
            report: Partial report describing the steps that did complete.
            detail: Description of the underlying failure.
        """

        self.section = section
        self.report = report
        super().__init__(f"replacement failed in section '{section}': {detail}")


__all__ = [
    "CatalogError",
    "CatalogIntegrityError",
    "CatalogSourceError",
    "ChainCycleDetected",
    "ChainError",
    "ChainTerminated",
    "NoSupersessionTarget",
    "RecordNotFound",
    "RefcatError",
    "ReplacementSectionFailed",
]
