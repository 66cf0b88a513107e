# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from refcat.catalog import CatalogModel, CatalogStore, Record

SAMPLE_CATALOG = """<?xml version="1.0" encoding="utf-8"?>
<ImagePal>
  <Header><Version>1.2</Version><Generated>2024-06-01</Generated></Header>
  <SystemInfo>
    <System><SystemID>83B2</SystemID><SolutionID>sp200</SolutionID></System>
  </SystemInfo>
  <Solutions>
    <UpdateInfo>
      <Id>sp200</Id><Name>System BIOS</Name><Category>BIOS</Category><Version>01.10</Version>
      <Vendor>HP</Vendor><DateReleased>2024-05-01</DateReleased><Supersedes>sp150</Supersedes>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp300</Id><Name>Realtek Audio Driver</Name><Category>Driver - Audio</Category><Version>6.0.2</Version>
      <Vendor>Realtek</Vendor><DateReleased>2024-03-02</DateReleased><Supersedes>sp250</Supersedes>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp400</Id><Name>Intel Ethernet Driver</Name><Category>Driver - Network</Category><Version>22.1</Version>
      <Vendor>Intel</Vendor><DateReleased>2024-02-10</DateReleased>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp500</Id><Name>Support Assistant</Name><Category>Software - Support</Category><Version>9.2</Version>
      <Vendor>HP</Vendor><DateReleased>2024-04-15</DateReleased><Supersedes>sp450</Supersedes>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp450</Id><Name>Support Assistant</Name><Category>Software - Support</Category><Version>9.1</Version>
      <Vendor>HP</Vendor><DateReleased>2024-01-20</DateReleased><Supersedes>sp420</Supersedes>
    </UpdateInfo>
  </Solutions>
  <Solutions-Superseded>
    <UpdateInfo>
      <Id>sp150</Id><Name>System BIOS</Name><Category>BIOS</Category><Version>01.05</Version>
      <Vendor>HP</Vendor><DateReleased>2023-11-01</DateReleased><Supersedes>sp100</Supersedes>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp100</Id><Name>System BIOS</Name><Category>BIOS</Category><Version>01.00</Version>
      <Vendor>HP</Vendor><DateReleased>2023-06-01</DateReleased>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp250</Id><Name>Realtek Audio Driver</Name><Category>Driver - Audio</Category><Version>6.0.1</Version>
      <Vendor>Realtek</Vendor><DateReleased>2023-12-01</DateReleased>
    </UpdateInfo>
    <UpdateInfo>
      <Id>sp420</Id><Name>Support Assistant</Name><Category>Software - Support</Category><Version>9.0</Version>
      <Vendor>HP</Vendor><DateReleased>2023-09-09</DateReleased>
    </UpdateInfo>
  </Solutions-Superseded>
  <SW-Installed>
    <Software>
      <Name>Support Assistant</Name>
      <Solutions><UpdateInfo IdRef="sp500"><Version>9.2</Version><Vendor>HP</Vendor></UpdateInfo></Solutions>
    </Software>
    <Software>
      <Name>Audio Console</Name>
      <Solutions><UpdateInfo IdRef="sp300"><Version>6.0.2</Version><Vendor>Realtek</Vendor></UpdateInfo></Solutions>
    </Software>
  </SW-Installed>
  <Devices>
    <Device>
      <DeviceID>HDAUDIO-FUNC-01</DeviceID>
      <Solutions>
        <UpdateInfo IdRef="sp300">
          <DriverDate>2024-03-02</DriverDate><DriverProvider>Realtek</DriverProvider><DriverVersion>6.0.2</DriverVersion>
        </UpdateInfo>
      </Solutions>
    </Device>
    <Device>
      <DeviceID>PCI-VEN-8086</DeviceID>
      <Solutions>
        <UpdateInfo IdRef="sp400">
          <DriverDate>2024-02-10</DriverDate><DriverProvider>Intel</DriverProvider><DriverVersion>22.1</DriverVersion>
        </UpdateInfo>
      </Solutions>
    </Device>
  </Devices>
</ImagePal>
"""

RecordFactory = Callable[..., Record]


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``Path.home`` at an empty directory so user configuration never leaks in."""

    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home_dir)
    return home_dir


@pytest.fixture
def catalog_bytes() -> bytes:
    """Return the sample catalog document."""

    return SAMPLE_CATALOG.encode("utf-8")


@pytest.fixture
def sample_store(catalog_bytes: bytes) -> CatalogStore:
    return CatalogStore.from_bytes(catalog_bytes)


@pytest.fixture
def sample_model(sample_store: CatalogStore) -> CatalogModel:
    return sample_store.model


@pytest.fixture
def catalog_path(tmp_path: Path, catalog_bytes: bytes) -> Path:
    """Write the sample catalog under its cache filename and return the path."""

    path = tmp_path / "83B2_64_11.0.23h2.xml"
    path.write_bytes(catalog_bytes)
    return path


@pytest.fixture
def make_record() -> RecordFactory:
    """Return a factory building records with the usual descriptive fields."""

    def _make(
        identifier: str,
        *,
        supersedes: str | None = None,
        category: str = "Driver - Audio",
        version: str = "1.0",
        vendor: str = "Acme",
        date_released: str | None = None,
    ) -> Record:
        fields = [
            ("Id", identifier),
            ("Name", f"Package {identifier}"),
            ("Category", category),
            ("Version", version),
            ("Vendor", vendor),
        ]
        if date_released is not None:
            fields.append(("DateReleased", date_released))
        if supersedes is not None:
            fields.append(("Supersedes", supersedes))
        return Record(fields=tuple(fields))

    return _make
