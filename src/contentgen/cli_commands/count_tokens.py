"""``contentgen count-tokens``: estimate prompt size offline."""

from __future__ import annotations

import click

from contentgen.cli_commands._output import console
from contentgen.core.context.counter import EstimatingCounter
from contentgen.core.interface.models import Content


@click.command("count-tokens")
@click.argument("prompt")
def count_tokens(prompt: str) -> None:
    """Estimate how many tokens PROMPT would use (about four characters per token)."""
    total = EstimatingCounter().count_contents([Content.user(prompt)])
    console.print(f"{total} tokens (estimate)")
