"""``contentgen tools``: discover tool declarations."""

from __future__ import annotations

import asyncio

import click

from contentgen.cli_commands._output import console, print_tools_table
from contentgen.core.tools.discovery import discover_tools
from contentgen.errors import ToolDiscoveryError


@click.group()
def tools() -> None:
    """Discover and inspect tools."""


@tools.command("discover")
@click.argument("command")
@click.option("--json", "as_json", is_flag=True, help="Print the declarations as JSON.")
def discover(command: str, as_json: bool) -> None:
    """Run COMMAND and list the tool declarations it prints."""
    try:
        declarations = asyncio.run(discover_tools(command))
    except ToolDiscoveryError as exc:
        console.print(f"[red]Discovery error:[/red] {exc}")
        return

    if not declarations:
        console.print("[yellow]No tools discovered.[/yellow]")
        return

    if as_json:
        console.print_json(data=[d.model_dump() for d in declarations])
        return

    print_tools_table(declarations)
