"""``contentgen models``: show the model catalog."""

from __future__ import annotations

import click

from contentgen.cli_commands._output import console, print_models_table
from contentgen.core.interface.catalog import KNOWN_MODELS


@click.command()
@click.option("--provider", "-p", default=None, help="Only show this provider's models.")
@click.option("--category", "-c", default=None, help="Only show models in this category.")
def models(provider: str | None, category: str | None) -> None:
    """List known models for providers with a fixed catalog."""
    if provider is not None and provider not in KNOWN_MODELS:
        console.print(f"[yellow]No model catalog for provider: {provider}[/yellow]")
        return

    for name, entries in KNOWN_MODELS.items():
        if provider is not None and name != provider:
            continue
        if category is not None:
            entries = [m for m in entries if m.category == category]
        if entries:
            print_models_table(name, entries)
