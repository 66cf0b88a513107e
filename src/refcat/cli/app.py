# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the catalog commands."""

from __future__ import annotations

from .listing import list_category_command, list_chain_command, list_no_successor_command
from .replace import replace_command
from .typer_ext import RefcatTyper, create_typer

app = create_typer(
    name="refcat",
    help="Inspect and edit supersession chains in update catalogs.",
    no_args_is_help=True,
    add_completion=False,
)


def register_commands(cli_app: RefcatTyper) -> None:
    """Register the catalog commands on ``cli_app``."""

    cli_app.command("replace")(replace_command)
    cli_app.command("list-no-successor")(list_no_successor_command)
    cli_app.command("list-category")(list_category_command)
    cli_app.command("list-chain")(list_chain_command)


register_commands(app)


def main() -> None:
    """Run the ``refcat`` console script."""

    app()


__all__ = ["app", "main", "register_commands"]
