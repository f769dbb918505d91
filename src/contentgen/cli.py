"""contentgen CLI entrypoint."""

from __future__ import annotations

import logging

import click

from contentgen import __version__


@click.group()
@click.version_option(version=__version__, prog_name="contentgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """contentgen: talk to any supported LLM backend."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register subcommands
from contentgen.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
