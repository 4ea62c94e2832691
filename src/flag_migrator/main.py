# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

"""Main CLI for the flag migrator."""

import sys
import logging
from typing import Optional
import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
import tomli

from .config import load_config
from .commands.convert import convert
from .commands.inspect import inspect

console = Console(stderr=True)


def setup_logging(debug: bool) -> None:
    """Send library debug logs to stderr through rich when --debug is set."""
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)]
    )


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Show detailed debug output'
)
@click.pass_context
def cli(ctx, config: Optional[str], debug: bool):
    """Convert feature flag files between TOML, JSON and YAML."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug)
    try:
        ctx.obj['config'] = load_config(config)
    except (ValidationError, tomli.TOMLDecodeError) as e:
        console.print(f"[red]Error: invalid configuration: {escape(str(e))}[/red]")
        sys.exit(1)


# Register commands
cli.add_command(convert)
cli.add_command(inspect)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
