# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared option declarations and catalog loading for catalog commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import typer

from ..catalog.source import CatalogSource
from ..catalog.store import CatalogStore
from ..config import ConfigError, EditorConfig
from ..config_loader import ConfigLoader
from ..errors import CatalogSourceError
from .shared import CLIError, CLILogger, build_cli_logger

CATALOG_OPTION = Annotated[
    Path | None,
    typer.Option("--catalog", "-c", help="Catalog XML file to operate on."),
]
PLATFORM_OPTION = Annotated[
    str | None,
    typer.Option("--platform", "-p", help="Four digit hex system id of a cached catalog."),
]
OS_OPTION = Annotated[
    str | None,
    typer.Option("--os", help="Operating system family of a cached catalog (win10, win11)."),
]
OS_VERSION_OPTION = Annotated[
    str | None,
    typer.Option("--os-version", help="Operating system release of a cached catalog, e.g. 23H2."),
]
CACHE_ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--cache-root", help="Directory holding cached catalogs."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", help="TOML configuration file overriding discovered settings."),
]
ROOT_OPTION = Annotated[
    Path | None,
    typer.Option("--root", "-r", help="Project root used to discover configuration."),
]
NO_EMOJI_OPTION = Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in output.")]
NO_COLOR_OPTION = Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")]
DEBUG_OPTION = Annotated[bool, typer.Option("--debug", help="Show debug logging.")]


@dataclass(slots=True)
class CatalogCLIOptions:
    """Normalised CLI inputs shared by every catalog command."""

    source: CatalogSource
    config: EditorConfig
    use_emoji: bool
    use_color: bool
    debug: bool


@dataclass(slots=True)
class CatalogSession:
    """Loaded catalog paired with the source it must be written back to."""

    source: CatalogSource
    store: CatalogStore


def build_catalog_options(
    *,
    catalog: Path | None,
    platform: str | None,
    os_name: str | None,
    os_version: str | None,
    cache_root: Path | None,
    config_path: Path | None,
    root: Path | None,
    no_emoji: bool,
    no_color: bool,
    debug: bool,
) -> CatalogCLIOptions:
    """Construct ``CatalogCLIOptions`` from Typer parameters.

    Exactly one of ``catalog`` or the full platform/OS/version triple must be
    supplied. Configuration is loaded from ``root`` and CLI flags override it.

    Raises:
        typer.BadParameter: If the catalog selection is missing or ambiguous.
        CLIError: If configuration or the platform triple is invalid.
    """

    triple = (platform, os_name, os_version)
    has_triple = any(part is not None for part in triple)
    if catalog is not None and has_triple:
        raise typer.BadParameter("Use either --catalog or --platform/--os/--os-version, not both.")
    if catalog is None and not has_triple:
        raise typer.BadParameter("Provide --catalog or --platform with --os and --os-version.")
    if has_triple and not all(part is not None for part in triple):
        raise typer.BadParameter("--platform, --os and --os-version must be given together.")

    project_root = (root or Path.cwd()).resolve()
    try:
        config = ConfigLoader.for_root(project_root, explicit_config=config_path).load().config
    except ConfigError as exc:
        raise CLIError(f"Invalid configuration: {exc}") from exc
    if cache_root is not None:
        config.cache_root = cache_root.expanduser().resolve()

    if platform is not None and os_name is not None and os_version is not None:
        source = _platform_source(platform, os_name, os_version, config.cache_root)
    else:
        assert catalog is not None
        source = CatalogSource.from_path(catalog)

    return CatalogCLIOptions(
        source=source,
        config=config,
        use_emoji=config.emoji and not no_emoji,
        use_color=config.color and not no_color,
        debug=debug,
    )


def options_or_exit(
    *,
    catalog: Path | None,
    platform: str | None,
    os_name: str | None,
    os_version: str | None,
    cache_root: Path | None,
    config_path: Path | None,
    root: Path | None,
    no_emoji: bool,
    no_color: bool,
    debug: bool,
) -> CatalogCLIOptions:
    """Return :func:`build_catalog_options` output, exiting with status 1 on ``CLIError``."""

    try:
        return build_catalog_options(
            catalog=catalog,
            platform=platform,
            os_name=os_name,
            os_version=os_version,
            cache_root=cache_root,
            config_path=config_path,
            root=root,
            no_emoji=no_emoji,
            no_color=no_color,
            debug=debug,
        )
    except CLIError as exc:
        build_cli_logger(emoji=not no_emoji, no_color=no_color).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc


def _platform_source(platform: str, os_name: str, os_version: str, cache_root: Path) -> CatalogSource:
    try:
        return CatalogSource.for_platform(platform, os_name, os_version, cache_root=cache_root)
    except CatalogSourceError as exc:
        raise CLIError(str(exc)) from exc


def logger_for(options: CatalogCLIOptions) -> CLILogger:
    """Return the CLI logger matching ``options``' presentation flags."""

    return build_cli_logger(emoji=options.use_emoji, debug=options.debug, no_color=not options.use_color)


def open_catalog(options: CatalogCLIOptions, logger: CLILogger) -> CatalogSession:
    """Read and parse the catalog selected by ``options``.

    Raises:
        CatalogSourceError: If the catalog file cannot be read.
        CatalogIntegrityError: If the catalog cannot be parsed.
    """

    logger.debug(f"catalog={options.source.path}")
    store = CatalogStore.from_bytes(options.source.read_bytes())
    model = store.model
    logger.debug(
        f"active={len(model.active)} superseded={len(model.superseded)} "
        f"installed={len(model.installed)} devices={len(model.devices)}",
    )
    return CatalogSession(source=options.source, store=store)


__all__ = [
    "CACHE_ROOT_OPTION",
    "CATALOG_OPTION",
    "CONFIG_OPTION",
    "DEBUG_OPTION",
    "NO_COLOR_OPTION",
    "NO_EMOJI_OPTION",
    "OS_OPTION",
    "OS_VERSION_OPTION",
    "PLATFORM_OPTION",
    "ROOT_OPTION",
    "CatalogCLIOptions",
    "CatalogSession",
    "build_catalog_options",
    "logger_for",
    "open_catalog",
    "options_or_exit",
]
