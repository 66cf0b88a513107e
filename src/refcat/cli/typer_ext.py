# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer helpers that group catalog options into labelled help sections."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Final, TypeVar

import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

ARGUMENT_PARAM_TYPE: Final[str] = "argument"
GENERAL_SECTION: Final[str] = "Options"
CATALOG_SECTION: Final[str] = "Catalog selection"
CONFIG_SECTION: Final[str] = "Configuration"
SECTION_ORDER: Final[tuple[str, ...]] = (CATALOG_SECTION, GENERAL_SECTION, CONFIG_SECTION)
OPTION_SECTIONS: Final[dict[str, str]] = {
    "catalog": CATALOG_SECTION,
    "platform": CATALOG_SECTION,
    "os": CATALOG_SECTION,
    "os-version": CATALOG_SECTION,
    "cache-root": CATALOG_SECTION,
    "config": CONFIG_SECTION,
    "root": CONFIG_SECTION,
}

HelpRecord = tuple[str, str]


class CatalogHelpCommand(TyperCommand):
    """Command whose help lists catalog selection, command options, then configuration."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        """Write arguments followed by each option section, sorted by option name.

        Args:
            ctx: Click context describing the invocation.
            formatter: Click help formatter receiving the definition lists.
        """

        arguments: list[HelpRecord] = []
        sections: dict[str, list[tuple[str, HelpRecord]]] = {title: [] for title in SECTION_ORDER}
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if getattr(param, "param_type_name", "") == ARGUMENT_PARAM_TYPE:
                arguments.append(record)
                continue
            name = option_sort_key(param)
            sections[OPTION_SECTIONS.get(name, GENERAL_SECTION)].append((name, record))

        if arguments:
            with formatter.section("Arguments"):
                formatter.write_dl(arguments)
        for title in SECTION_ORDER:
            entries = sections[title]
            if not entries:
                continue
            with formatter.section(title):
                formatter.write_dl([record for _, record in sorted(entries, key=lambda entry: entry[0])])


class CatalogHelpGroup(TyperGroup):
    """Group that builds :class:`CatalogHelpCommand` commands and lists them by name."""

    command_class = CatalogHelpCommand

    def list_commands(self, ctx: Context) -> list[str]:
        return sorted(super().list_commands(ctx))


CommandCallback = TypeVar("CommandCallback", bound=Callable[..., Any])


class RefcatTyper(typer.Typer):
    """Typer application whose commands default to :class:`CatalogHelpCommand`."""

    def __init__(self, *args: Any, cls: type[TyperGroup] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, cls=cls or CatalogHelpGroup, **kwargs)

    def command(
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Callable[[CommandCallback], CommandCallback]:
        """Return a decorator registering a command with grouped help output.

        Args:
            name: Optional explicit command name.
            cls: Command class to use; :class:`CatalogHelpCommand` when ``None``.
            **kwargs: Forwarded to :meth:`typer.Typer.command`.

        Returns:
            Callable[[CommandCallback], CommandCallback]: Registration decorator.
        """

        return super().command(name, cls=cls or CatalogHelpCommand, **kwargs)


def create_typer(**kwargs: Any) -> RefcatTyper:
    """Return a :class:`RefcatTyper` built from ``kwargs``.

    Help is rendered through click unless ``rich_markup_mode`` is given, since
    rich help output bypasses :meth:`CatalogHelpCommand.format_options`.
    """

    kwargs.setdefault("rich_markup_mode", None)
    return RefcatTyper(**kwargs)


def option_sort_key(param: Parameter) -> str:
    """Return the long option name of ``param`` without dashes, lower-cased.

    Args:
        param: Click parameter being inspected.

    Returns:
        str: ``os-version`` for ``--os-version``; the parameter name when no long flag exists.
    """

    names = [*getattr(param, "opts", ()), *getattr(param, "secondary_opts", ())]
    long_names = [name for name in names if name.startswith("--")]
    if long_names:
        return long_names[0].lstrip("-").lower()
    return (names[0] if names else param.name or "").lstrip("-").lower()


__all__ = [
    "CatalogHelpCommand",
    "CatalogHelpGroup",
    "RefcatTyper",
    "create_typer",
    "option_sort_key",
]
