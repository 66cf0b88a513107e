# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Locate catalog files on disk, back them up, and write them back."""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..errors import CatalogSourceError

LOGGER = logging.getLogger(__name__)

BACKUP_SUFFIX: Final[str] = ".bak"
PLATFORM_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9A-Fa-f]{4}$")
OS_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9]{2}[hH][12]$|^[0-9]{4}$")
OS_MAJOR_VERSIONS: Final[dict[str, str]] = {
    "win10": "10",
    "win11": "11",
}


def catalog_filename(platform: str, os_name: str, os_version: str) -> str:
    """Return the cache filename for a platform/OS/version triple.

    Args:
        platform: Four hex digit system identifier, e.g. ``83B2``.
        os_name: Operating system family, ``win10`` or ``win11``.
        os_version: Release identifier such as ``22H2`` or ``2004``.

    Returns:
        str: Filename of the form ``83B2_64_11.0.22h2.xml``.

    Raises:
        CatalogSourceError: If any component of the triple is malformed.
    """

    if not PLATFORM_PATTERN.match(platform):
        raise CatalogSourceError(f"platform '{platform}' is not a four digit hex system id")
    major = OS_MAJOR_VERSIONS.get(os_name.lower())
    if major is None:
        supported = ", ".join(sorted(OS_MAJOR_VERSIONS))
        raise CatalogSourceError(f"unsupported OS '{os_name}' (expected one of: {supported})")
    if not OS_VERSION_PATTERN.match(os_version):
        raise CatalogSourceError(f"OS version '{os_version}' is not of the form 22H2 or 2004")
    return f"{platform.upper()}_64_{major}.0.{os_version.lower()}.xml"


@dataclass(frozen=True, slots=True)
class CatalogSource:
    """Filesystem location of a catalog document."""

    path: Path

    @classmethod
    def from_path(cls, path: Path) -> CatalogSource:
        """Return a source for an explicit catalog path."""

        return cls(path=path.expanduser().resolve())

    @classmethod
    def for_platform(
        cls,
        platform: str,
        os_name: str,
        os_version: str,
        *,
        cache_root: Path,
    ) -> CatalogSource:
        """Return the cached catalog source for a platform/OS/version triple.

        Args:
            platform: Four hex digit system identifier.
            os_name: Operating system family.
            os_version: Operating system release identifier.
            cache_root: Directory holding cached catalog files.

        Returns:
            CatalogSource: Source pointing inside ``cache_root``.
        """

        filename = catalog_filename(platform, os_name, os_version)
        return cls(path=cache_root.expanduser().resolve() / filename)

    @property
    def backup_path(self) -> Path:
        """Return the path the pristine catalog is copied to before editing."""

        return self.path.with_name(self.path.name + BACKUP_SUFFIX)

    def read_bytes(self) -> bytes:
        """Return the catalog contents.

        Raises:
            CatalogSourceError: If the catalog file is missing or unreadable.
        """

        if not self.path.is_file():
            raise CatalogSourceError(f"catalog file not found: {self.path}")
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise CatalogSourceError(f"{self.path}: {exc.strerror or exc}") from exc

    def backup(self) -> Path:
        """Copy the catalog next to itself unless a backup already exists.

        Returns:
            Path: Location of the backup copy.

        Raises:
            CatalogSourceError: If the copy fails.
        """

        target = self.backup_path
        if target.exists():
            LOGGER.debug("keeping existing backup %s", target)
            return target
        try:
            shutil.copy2(self.path, target)
        except OSError as exc:
            raise CatalogSourceError(f"unable to back up {self.path}: {exc.strerror or exc}") from exc
        LOGGER.debug("backed up %s to %s", self.path, target)
        return target

    def write_bytes(self, data: bytes) -> None:
        """Atomically replace the catalog with ``data``.

        Raises:
            CatalogSourceError: If the temporary file cannot be written or moved into place.
        """

        directory = self.path.parent
        temp_path: Path | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            handle, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
            temp_path = Path(temp_name)
            with os.fdopen(handle, "wb") as stream:
                stream.write(data)
                stream.flush()
                os.fsync(stream.fileno())
            os.replace(temp_path, self.path)
        except OSError as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise CatalogSourceError(f"unable to write {self.path}: {exc.strerror or exc}") from exc
        LOGGER.debug("wrote %d bytes to %s", len(data), self.path)


__all__ = ["BACKUP_SUFFIX", "CatalogSource", "catalog_filename"]
