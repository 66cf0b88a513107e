# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command retiring a catalog record onto its successor."""

from __future__ import annotations

from typing import Annotated

import typer

from ..catalog.model_record import PoolTag
from ..errors import RefcatError, ReplacementSectionFailed
from ..supersession.replacer import ReplacementReport, replace
from ..supersession.resolver import ResolvedRecord, resolve
from ._catalog_cli_models import (
    CACHE_ROOT_OPTION,
    CATALOG_OPTION,
    CONFIG_OPTION,
    DEBUG_OPTION,
    NO_COLOR_OPTION,
    NO_EMOJI_OPTION,
    OS_OPTION,
    OS_VERSION_OPTION,
    PLATFORM_OPTION,
    ROOT_OPTION,
    CatalogCLIOptions,
    logger_for,
    open_catalog,
    options_or_exit,
)
from .shared import CLILogger

SOURCE_ARGUMENT = Annotated[str, typer.Argument(help="Identifier of the active record to retire.")]
TARGET_OPTION = Annotated[
    str | None,
    typer.Option("--to", "-t", help="Record to retire onto; defaults to the record it supersedes."),
]
DRY_RUN_OPTION = Annotated[bool, typer.Option("--dry-run", help="Report the changes without writing the catalog.")]
NO_BACKUP_OPTION = Annotated[bool, typer.Option("--no-backup", help="Skip the backup copy before writing.")]


def run_replace(
    options: CatalogCLIOptions,
    source_id: str,
    *,
    target_id: str | None = None,
    dry_run: bool = False,
    backup: bool | None = None,
) -> int:
    """Retire ``source_id`` and write the catalog back, returning an exit status.

    The catalog is only written after every section was updated; on any error
    the file on disk is left untouched.

    Args:
        options: Normalised catalog options.
        source_id: Identifier of the active record to retire.
        target_id: Optional destination identifier.
        dry_run: When ``True`` report the changes without writing.
        backup: Override for the configured backup behaviour.

    Returns:
        int: ``0`` on success, ``1`` when the catalog could not be updated.
    """

    logger = logger_for(options)
    try:
        session = open_catalog(options, logger)
        model = session.store.model
        resolved = resolve(model.active, model.superseded, source_id, target_id)
        _emit_resolution(logger, source_id, resolved)
        report = replace(model, source_id, resolved, bios_category=options.config.bios_category)
    except ReplacementSectionFailed as exc:
        logger.fail(str(exc))
        _emit_report(logger, exc.report)
        logger.warn("Catalog not written; the file on disk is unchanged.")
        return 1
    except RefcatError as exc:
        logger.fail(str(exc))
        return 1

    _emit_report(logger, report)
    if dry_run:
        logger.warn("DRY RUN: catalog not written.")
        return 0

    should_backup = options.config.backup if backup is None else backup
    try:
        if should_backup:
            backup_path = session.source.backup()
            logger.info(f"Backup kept at {backup_path}")
        session.source.write_bytes(session.store.to_bytes())
    except RefcatError as exc:
        logger.fail(str(exc))
        return 1
    logger.ok(f"Catalog saved to {session.source.path}")
    return 0


def _emit_resolution(logger: CLILogger, source_id: str, resolved: ResolvedRecord) -> None:
    if resolved.source is PoolTag.ACTIVE:
        logger.warn(f"{resolved.id} is still listed in the active pool; using that entry for {source_id}")
    else:
        logger.info(f"Resolved {source_id} -> {resolved.id} in the superseded pool after {resolved.hops} hop(s)")
    logger.debug(f"source={source_id} target={resolved.id} pool={resolved.source.value} hops={resolved.hops}")


def _emit_report(logger: CLILogger, report: ReplacementReport) -> None:
    if report.bios_updated:
        logger.ok(f"System BIOS reference updated: {report.source_id} -> {report.target_id}")
    if report.record_updated:
        lineage = "now a chain root" if report.became_root else f"now supersedes {report.new_supersedes}"
        logger.ok(f"Record {report.source_id} replaced with {report.target_id} ({lineage})")
    if report.duplicate_removed:
        logger.warn(f"Removed the duplicate active entry for {report.target_id}")
    logger.info(f"Installed software references updated: {report.installed_matches}")
    logger.info(f"Device references updated: {report.device_matches}")


def replace_command(
    source_id: SOURCE_ARGUMENT,
    to: TARGET_OPTION = None,
    dry_run: DRY_RUN_OPTION = False,
    no_backup: NO_BACKUP_OPTION = False,
    catalog: CATALOG_OPTION = None,
    platform: PLATFORM_OPTION = None,
    os_name: OS_OPTION = None,
    os_version: OS_VERSION_OPTION = None,
    cache_root: CACHE_ROOT_OPTION = None,
    config: CONFIG_OPTION = None,
    root: ROOT_OPTION = None,
    no_emoji: NO_EMOJI_OPTION = False,
    no_color: NO_COLOR_OPTION = False,
    debug: DEBUG_OPTION = False,
) -> None:
    """Retire a record and rewrite every catalog reference to it."""

    options = options_or_exit(
        catalog=catalog,
        platform=platform,
        os_name=os_name,
        os_version=os_version,
        cache_root=cache_root,
        config_path=config,
        root=root,
        no_emoji=no_emoji,
        no_color=no_color,
        debug=debug,
    )
    exit_code = run_replace(
        options,
        source_id,
        target_id=to,
        dry_run=dry_run,
        backup=False if no_backup else None,
    )
    raise typer.Exit(code=exit_code)


__all__ = ["replace_command", "run_replace"]
