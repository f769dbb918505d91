"""``contentgen providers``: list provider ids."""

from __future__ import annotations

import click

from contentgen.cli_commands._output import console
from contentgen.generators.registry import ProviderId, registered_providers


@click.command()
def providers() -> None:
    """List built-in and registered provider ids."""
    builtins = {p.value for p in ProviderId}
    for provider_id in registered_providers():
        suffix = "" if provider_id in builtins else " [dim](registered)[/dim]"
        console.print(f"  {provider_id}{suffix}")
