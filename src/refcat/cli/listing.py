# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read-only catalog listing commands."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

import typer
from rich.table import Table

from ..catalog.model_record import Record
from ..errors import ChainCycleDetected, RecordNotFound, RefcatError
from ..listing import list_by_category, list_no_successor
from ..logging import section
from ..supersession.chain import ChainLink, list_chain
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
    CatalogSession,
    logger_for,
    open_catalog,
    options_or_exit,
)
from .shared import CLILogger

CATEGORIES_ARGUMENT = Annotated[
    list[str],
    typer.Argument(help="Categories to list, matched case-insensitively against record categories."),
]
START_ARGUMENT = Annotated[str, typer.Argument(help="Identifier of the active record the chain starts at.")]


def build_record_table(records: Iterable[Record], *, title: str | None = None) -> Table:
    """Return a table listing identifier, version, category, and name for ``records``."""

    table = Table(title=title, show_lines=False)
    table.add_column("Id", no_wrap=True)
    table.add_column("Version", no_wrap=True)
    table.add_column("Category")
    table.add_column("Name")
    for record in records:
        table.add_row(record.id, record.version or "", record.category or "", record.name or "")
    return table


def format_chain_link(link: ChainLink, *, depth: int) -> str:
    """Return one indented line describing ``link``."""

    indent = "  " * depth
    arrow = "" if depth == 0 else "-> "
    if link.missing:
        return f"{indent}{arrow}{link.id} (missing from catalog; chain truncated)"
    pool = link.pool.value if link.pool is not None else "?"
    return f"{indent}{arrow}{link.id}  {link.version or '-'}  [{pool}]"


def run_list_no_successor(options: CatalogCLIOptions) -> int:
    """Print active records that supersede nothing and return an exit status."""

    logger = logger_for(options)
    session = _open_or_none(options, logger)
    if session is None:
        return 1
    records = list_no_successor(session.store.model)
    if not records:
        logger.info("Every active record supersedes another record.")
        return 0
    logger.console.print(build_record_table(records, title="Records with no supersedes"))
    logger.info(f"{len(records)} record(s) listed")
    return 0


def run_list_category(options: CatalogCLIOptions, categories: list[str]) -> int:
    """Print active records grouped by the requested categories and return an exit status."""

    logger = logger_for(options)
    session = _open_or_none(options, logger)
    if session is None:
        return 1
    try:
        grouped = list_by_category(session.store.model, categories)
    except ValueError as exc:
        logger.fail(str(exc))
        return 1
    for category, records in grouped.items():
        section(f"Category: {category}", use_color=options.use_color)
        if not records:
            logger.warn(f"No active records in category '{category}'")
            continue
        logger.console.print(build_record_table(records))
    return 0


def run_list_chain(options: CatalogCLIOptions, start_id: str) -> int:
    """Print the supersession chain starting at ``start_id`` and return an exit status."""

    logger = logger_for(options)
    session = _open_or_none(options, logger)
    if session is None:
        return 1
    model = session.store.model
    try:
        chain = list_chain(model.active, model.superseded, start_id)
    except RecordNotFound as exc:
        located = model.locate(start_id)
        if located is not None:
            logger.warn(f"{start_id} is in the {located.pool} pool; chains start at an active record")
            return 0
        logger.warn(f"{exc}; nothing to list")
        return 0
    truncated = False
    try:
        for depth, link in enumerate(chain):
            logger.echo(format_chain_link(link, depth=depth))
            truncated = truncated or link.missing
    except ChainCycleDetected as exc:
        logger.warn(str(exc))
        return 0
    if truncated:
        logger.warn(f"Chain for {start_id} is truncated")
    return 0


def _open_or_none(options: CatalogCLIOptions, logger: CLILogger) -> CatalogSession | None:
    try:
        return open_catalog(options, logger)
    except RefcatError as exc:
        logger.fail(str(exc))
        return None


def list_no_successor_command(
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
    """List active records that do not supersede any other record."""

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
    raise typer.Exit(code=run_list_no_successor(options))


def list_category_command(
    categories: CATEGORIES_ARGUMENT,
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
    """List active records in the given categories."""

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
    raise typer.Exit(code=run_list_category(options, categories))


def list_chain_command(
    start_id: START_ARGUMENT,
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
    """Show the supersession chain of an active record."""

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
    raise typer.Exit(code=run_list_chain(options, start_id))


__all__ = [
    "build_record_table",
    "format_chain_link",
    "list_category_command",
    "list_chain_command",
    "list_no_successor_command",
    "run_list_category",
    "run_list_chain",
    "run_list_no_successor",
]
