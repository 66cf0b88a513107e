# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""XML codec translating catalog documents to and from :class:`CatalogModel`."""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Final

from lxml import etree

from ..errors import CatalogIntegrityError
from .model_catalog import CatalogModel
from .model_record import PoolTag, Record, RecordPool
from .model_references import DeviceRef, InstalledSoftwareRef

ROOT_TAG: Final[str] = "ImagePal"
ACTIVE_SECTION: Final[str] = "Solutions"
SUPERSEDED_SECTION: Final[str] = "Solutions-Superseded"
RECORD_TAG: Final[str] = "UpdateInfo"
BIOS_PATH: Final[str] = "SystemInfo/System/SolutionID"
INSTALLED_PATH: Final[str] = "SW-Installed/Software"
DEVICE_PATH: Final[str] = "Devices/Device"
REF_PATH: Final[str] = "Solutions/UpdateInfo"
REF_ATTRIBUTE: Final[str] = "IdRef"

SOFTWARE_NAME_TAG: Final[str] = "Name"
DEVICE_ID_TAG: Final[str] = "DeviceID"
REF_VERSION_TAG: Final[str] = "Version"
REF_VENDOR_TAG: Final[str] = "Vendor"
DRIVER_DATE_TAG: Final[str] = "DriverDate"
DRIVER_PROVIDER_TAG: Final[str] = "DriverProvider"
DRIVER_VERSION_TAG: Final[str] = "DriverVersion"


def _build_parser() -> etree.XMLParser:
    """Return a parser that never resolves entities or touches the network."""

    return etree.XMLParser(remove_blank_text=True, resolve_entities=False, no_network=True)


@dataclass(slots=True)
class CatalogStore:
    """Parsed catalog document paired with its typed model.

    The lxml tree is retained so sections the model does not describe are
    written back unchanged. Each parsed record keeps the element it came from,
    so attributes, nested children and comments inside a record survive a
    write-back; only the fields that changed are rewritten.
    """

    tree: etree._ElementTree
    model: CatalogModel
    origins: dict[int, tuple[Record, etree._Element]] = field(default_factory=dict, repr=False)

    @classmethod
    def from_bytes(cls, data: bytes) -> CatalogStore:
        """Parse catalog ``data`` into a store.

        Args:
            data: Raw XML catalog bytes.

        Returns:
            CatalogStore: Store exposing the parsed model.

        Raises:
            CatalogIntegrityError: If the bytes are not XML or required sections are missing.
        """

        try:
            root = etree.fromstring(data, _build_parser())
        except etree.XMLSyntaxError as exc:
            raise CatalogIntegrityError(f"catalog is not well-formed XML: {exc}") from exc
        if root.tag != ROOT_TAG:
            raise CatalogIntegrityError(f"expected <{ROOT_TAG}> root element, found <{root.tag}>")
        active_section = root.find(ACTIVE_SECTION)
        if active_section is None:
            raise CatalogIntegrityError(f"catalog has no <{ACTIVE_SECTION}> section")

        superseded_section = root.find(SUPERSEDED_SECTION)
        active_records = _read_records(active_section)
        superseded_records = _read_records(superseded_section) if superseded_section is not None else []
        bios = root.findtext(BIOS_PATH)
        model = CatalogModel(
            active=RecordPool.of(PoolTag.ACTIVE, [record for record, _ in active_records]),
            superseded=RecordPool.of(PoolTag.SUPERSEDED, [record for record, _ in superseded_records]),
            system_bios=_optional_text(bios),
            installed=[
                InstalledSoftwareRef(
                    ref_id=_ref_id(element),
                    version=element.findtext(REF_VERSION_TAG),
                    vendor=element.findtext(REF_VENDOR_TAG),
                    software=owner.findtext(SOFTWARE_NAME_TAG),
                )
                for owner, element in _iter_refs(root, INSTALLED_PATH)
            ],
            devices=[
                DeviceRef(
                    ref_id=_ref_id(element),
                    driver_date=element.findtext(DRIVER_DATE_TAG),
                    driver_provider=element.findtext(DRIVER_PROVIDER_TAG),
                    driver_version=element.findtext(DRIVER_VERSION_TAG),
                    device=owner.findtext(DEVICE_ID_TAG),
                )
                for owner, element in _iter_refs(root, DEVICE_PATH)
            ],
        )
        origins = {id(record): (record, element) for record, element in (*active_records, *superseded_records)}
        return cls(tree=root.getroottree(), model=model, origins=origins)

    def to_bytes(self) -> bytes:
        """Write the model back into the retained tree and serialise it.

        Returns:
            bytes: UTF-8 encoded XML document with a declaration.

        Raises:
            CatalogIntegrityError: If the reference sections no longer line up with the document.
        """

        root = self.tree.getroot()
        templates: dict[str, etree._Element] = {}
        for record, element in self.origins.values():
            templates.setdefault(record.id, element)

        def build(record: Record) -> etree._Element:
            return self._element_for(record, templates)

        _write_pool(_require_section(root, ACTIVE_SECTION), self.model.active, build)
        superseded_section = root.find(SUPERSEDED_SECTION)
        if superseded_section is None and len(self.model.superseded):
            superseded_section = etree.SubElement(root, SUPERSEDED_SECTION)
        if superseded_section is not None:
            _write_pool(superseded_section, self.model.superseded, build)
        self._write_bios(root)
        self._write_installed(root)
        self._write_devices(root)
        return etree.tostring(self.tree, xml_declaration=True, encoding="utf-8", pretty_print=True)

    def _write_bios(self, root: etree._Element) -> None:
        element = root.find(BIOS_PATH)
        if element is None:
            return
        if _optional_text(element.text) == self.model.system_bios:
            return
        if self.model.system_bios is None:
            element.getparent().remove(element)
        else:
            element.text = self.model.system_bios

    def _element_for(self, record: Record, templates: dict[str, etree._Element]) -> etree._Element:
        """Return an element for ``record`` built from the element it was parsed from.

        A record that was not parsed from this document borrows the element of
        the parsed record with the same id, so a record carried over from the
        superseded pool keeps its nested content.
        """

        origin = self.origins.get(id(record))
        source = origin[1] if origin is not None and origin[0] is record else templates.get(record.id)
        if source is None:
            return _record_element(record)
        element = copy.deepcopy(source)
        _sync_record_element(element, record)
        return element

    def _write_installed(self, root: etree._Element) -> None:
        elements = _matching_ref_elements(root, INSTALLED_PATH, self.model.installed, section="SW-Installed")
        for element, ref in zip(elements, self.model.installed, strict=True):
            _set_ref_id(element, ref.ref_id)
            _set_child_text(element, REF_VERSION_TAG, ref.version)
            _set_child_text(element, REF_VENDOR_TAG, ref.vendor)

    def _write_devices(self, root: etree._Element) -> None:
        elements = _matching_ref_elements(root, DEVICE_PATH, self.model.devices, section="Devices")
        for element, ref in zip(elements, self.model.devices, strict=True):
            _set_ref_id(element, ref.ref_id)
            _set_child_text(element, DRIVER_DATE_TAG, ref.driver_date)
            _set_child_text(element, DRIVER_PROVIDER_TAG, ref.driver_provider)
            _set_child_text(element, DRIVER_VERSION_TAG, ref.driver_version)


def _optional_text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _read_records(section: etree._Element) -> list[tuple[Record, etree._Element]]:
    records: list[tuple[Record, etree._Element]] = []
    for element in section.iterfind(RECORD_TAG):
        fields = tuple((child.tag, child.text or "") for child in element if isinstance(child.tag, str))
        attributes = tuple((str(key), str(value)) for key, value in element.attrib.items())
        records.append((Record(fields=fields, attributes=attributes), element))
    return records


def _iter_refs(root: etree._Element, owner_path: str) -> list[tuple[etree._Element, etree._Element]]:
    return [(owner, element) for owner in root.iterfind(owner_path) for element in owner.iterfind(REF_PATH)]


def _ref_id(element: etree._Element) -> str:
    value = element.get(REF_ATTRIBUTE)
    if value is None or not value.strip():
        raise CatalogIntegrityError(f"reference entry at line {element.sourceline} has no {REF_ATTRIBUTE}")
    return value.strip()


def _require_section(root: etree._Element, tag: str) -> etree._Element:
    section = root.find(tag)
    if section is None:
        raise CatalogIntegrityError(f"catalog has no <{tag}> section")
    return section


def _record_element(record: Record) -> etree._Element:
    element = etree.Element(RECORD_TAG, dict(record.attributes))
    for tag, text in record.fields:
        etree.SubElement(element, tag).text = text
    return element


def _sync_record_element(element: etree._Element, record: Record) -> None:
    """Bring ``element`` in line with ``record``, touching only what differs."""

    if dict(element.attrib) != dict(record.attributes):
        element.attrib.clear()
        element.attrib.update(dict(record.attributes))
    unused = [child for child in element if isinstance(child.tag, str)]
    for tag, text in record.fields:
        child = next((candidate for candidate in unused if candidate.tag == tag), None)
        if child is None:
            etree.SubElement(element, tag).text = text
            continue
        unused.remove(child)
        if (child.text or "") != text:
            child.text = text
    for child in unused:
        element.remove(child)


def _write_pool(
    section: etree._Element,
    pool: RecordPool,
    build: Callable[[Record], etree._Element],
) -> None:
    """Replace the record elements of ``section`` with the records held by ``pool``.

    Records fill the slots of the old elements in order, so comments between
    records keep their place. Extra records follow the last slot.
    """

    existing = section.findall(RECORD_TAG)
    slots = [section.index(element) for element in existing]
    for element in existing:
        section.remove(element)
    position = slots[0] if slots else len(section)
    for offset, record in enumerate(pool):
        if offset < len(slots):
            position = slots[offset]
        elif offset:
            position += 1
        section.insert(position, build(record))


def _matching_ref_elements(
    root: etree._Element,
    owner_path: str,
    refs: Sequence[object],
    *,
    section: str,
) -> list[etree._Element]:
    elements = [element for _, element in _iter_refs(root, owner_path)]
    if len(elements) != len(refs):
        raise CatalogIntegrityError(
            f"{section}: model holds {len(refs)} references but the document has {len(elements)}",
        )
    return elements


def _set_ref_id(element: etree._Element, ref_id: str) -> None:
    if _ref_id(element) != ref_id:
        element.set(REF_ATTRIBUTE, ref_id)


def _set_child_text(element: etree._Element, tag: str, value: str | None) -> None:
    child = element.find(tag)
    if value is None:
        if child is not None:
            element.remove(child)
        return
    if child is None:
        child = etree.SubElement(element, tag)
    elif (child.text or "") == value:
        return
    child.text = value


__all__ = [
    "ACTIVE_SECTION",
    "RECORD_TAG",
    "ROOT_TAG",
    "SUPERSEDED_SECTION",
    "CatalogStore",
]
