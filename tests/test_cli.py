# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the refcat command line interface."""

from __future__ import annotations

from pathlib import Path

from lxml import etree
from typer.testing import CliRunner

from refcat.cli.app import app


def _invoke(tmp_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(app, [*args, "--root", str(tmp_path), "--no-emoji", "--no-color"])


def test_replace_writes_backup_and_catalog(tmp_path: Path, catalog_path: Path, catalog_bytes: bytes) -> None:
    result = _invoke(tmp_path, "replace", "sp300", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "Resolved sp300 -> sp250" in result.output
    assert "Installed software references updated: 1" in result.output
    assert "Device references updated: 1" in result.output
    assert "Catalog saved to" in result.output
    backup = catalog_path.with_name(catalog_path.name + ".bak")
    assert backup.read_bytes() == catalog_bytes
    root = etree.fromstring(catalog_path.read_bytes())
    assert [element.findtext("Id") for element in root.iterfind("Solutions/UpdateInfo")][1] == "sp250"


def test_replace_bios_reports_system_reference(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "replace", "sp200", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "System BIOS reference updated: sp200 -> sp150" in result.output
    assert "now supersedes sp100" in result.output


def test_replace_with_explicit_target(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "replace", "sp200", "--to", "sp100", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "after 2 hop(s)" in result.output
    assert "now a chain root" in result.output


def test_dry_run_leaves_catalog_untouched(tmp_path: Path, catalog_path: Path, catalog_bytes: bytes) -> None:
    result = _invoke(tmp_path, "replace", "sp300", "--dry-run", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "DRY RUN" in result.output
    assert catalog_path.read_bytes() == catalog_bytes
    assert not catalog_path.with_name(catalog_path.name + ".bak").exists()


def test_no_backup_flag_skips_backup(tmp_path: Path, catalog_path: Path, catalog_bytes: bytes) -> None:
    result = _invoke(tmp_path, "replace", "sp300", "--no-backup", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert catalog_path.read_bytes() != catalog_bytes
    assert not catalog_path.with_name(catalog_path.name + ".bak").exists()


def test_backup_can_be_disabled_by_configuration(tmp_path: Path, catalog_path: Path) -> None:
    (tmp_path / ".refcat.toml").write_text("backup = false\n", encoding="utf-8")

    result = _invoke(tmp_path, "replace", "sp300", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert not catalog_path.with_name(catalog_path.name + ".bak").exists()


def test_active_duplicate_is_reported(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "replace", "sp500", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "sp450 is still listed in the active pool" in result.output
    assert "Removed the duplicate active entry for sp450" in result.output


def test_replace_past_active_duplicate(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "replace", "sp500", "--to", "sp420", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "Resolved sp500 -> sp420 in the superseded pool after 1 hop(s)" in result.output
    root = etree.fromstring(catalog_path.read_bytes())
    assert [element.findtext("Id") for element in root.iterfind("Solutions/UpdateInfo")][3] == "sp420"


def test_failed_replace_does_not_write(tmp_path: Path, catalog_path: Path, catalog_bytes: bytes) -> None:
    result = _invoke(tmp_path, "replace", "sp400", "--catalog", str(catalog_path))

    assert result.exit_code == 1
    assert "sp400" in result.output
    assert catalog_path.read_bytes() == catalog_bytes
    assert not catalog_path.with_name(catalog_path.name + ".bak").exists()


def test_unreachable_target_fails(tmp_path: Path, catalog_path: Path, catalog_bytes: bytes) -> None:
    result = _invoke(tmp_path, "replace", "sp300", "--to", "sp100", "--catalog", str(catalog_path))

    assert result.exit_code == 1
    assert "not reachable" in result.output
    assert catalog_path.read_bytes() == catalog_bytes


def test_missing_catalog_exits_with_failure(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "list-no-successor", "--catalog", str(tmp_path / "absent.xml"))

    assert result.exit_code == 1
    assert "catalog file not found" in result.output


def test_list_no_successor(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-no-successor", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "sp400" in result.output
    assert "sp300" not in result.output


def test_list_category(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-category", "bios", "firmware", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    assert "Category: bios" in result.output
    assert "sp200" in result.output
    assert "No active records in category 'firmware'" in result.output


def test_list_chain(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-chain", "sp200", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    lines = [line.strip() for line in result.output.splitlines() if line.strip()]
    assert lines[0].startswith("sp200")
    assert lines[1].startswith("-> sp150")
    assert lines[2].startswith("-> sp100")


def test_list_chain_unknown_start_is_a_warning(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-chain", "sp999", "--catalog", str(catalog_path))

    assert result.exit_code == 0
    assert "record 'sp999' not found" in result.output


def test_list_chain_from_superseded_id_names_its_pool(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-chain", "sp150", "--catalog", str(catalog_path))

    assert result.exit_code == 0
    assert "sp150 is in the superseded pool" in result.output


def test_list_chain_steps_over_active_duplicate(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(tmp_path, "list-chain", "sp500", "--catalog", str(catalog_path))

    assert result.exit_code == 0, result.output
    lines = [line.strip() for line in result.output.splitlines() if line.strip()]
    assert lines[1].startswith("-> sp450")
    assert lines[2].startswith("-> sp420")


def test_platform_triple_reads_cached_catalog(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(
        tmp_path,
        "list-no-successor",
        "-p",
        "83b2",
        "--os",
        "win11",
        "--os-version",
        "23H2",
        "--cache-root",
        str(catalog_path.parent),
    )

    assert result.exit_code == 0, result.output
    assert "sp400" in result.output


def test_invalid_platform_triple_fails(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "list-no-successor", "-p", "83B2", "--os", "win7", "--os-version", "23H2")

    assert result.exit_code == 1
    assert "unsupported OS 'win7'" in result.output


def test_catalog_and_platform_are_mutually_exclusive(tmp_path: Path, catalog_path: Path) -> None:
    result = _invoke(
        tmp_path,
        "list-no-successor",
        "--catalog",
        str(catalog_path),
        "-p",
        "83B2",
        "--os",
        "win11",
        "--os-version",
        "23H2",
    )

    assert result.exit_code == 2


def test_catalog_selection_is_required(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "list-no-successor")

    assert result.exit_code == 2


def test_invalid_configuration_fails(tmp_path: Path, catalog_path: Path) -> None:
    (tmp_path / ".refcat.toml").write_text("colour = false\n", encoding="utf-8")

    result = _invoke(tmp_path, "list-no-successor", "--catalog", str(catalog_path))

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_help_groups_catalog_options() -> None:
    result = CliRunner().invoke(app, ["replace", "--help"])

    assert result.exit_code == 0, result.output
    catalog_at = result.output.index("Catalog selection")
    options_at = result.output.index("--dry-run")
    config_at = result.output.index("Configuration")
    assert catalog_at < options_at < config_at
    assert result.output.index("--cache-root") < result.output.index("--catalog")
