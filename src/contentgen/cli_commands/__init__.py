"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from contentgen.cli_commands.count_tokens import count_tokens
    from contentgen.cli_commands.generate import generate
    from contentgen.cli_commands.models import models
    from contentgen.cli_commands.providers import providers
    from contentgen.cli_commands.tools import tools

    cli.add_command(generate)
    cli.add_command(count_tokens)
    cli.add_command(providers)
    cli.add_command(models)
    cli.add_command(tools)
