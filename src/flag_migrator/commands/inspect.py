# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import sys
from collections import Counter
from pathlib import Path
from typing import Optional
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import MigratorConfig
from ..errors import FlagMigrationError
from ..migrator import FlagMigrator
from .convert import resolve_input_format

console = Console()


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--input-format', '-i', help='Format of the input file: toml, json or yaml (default: from extension)')
@click.pass_context
def inspect(ctx, input_file: str, input_format: Optional[str]):
    """
    Show the schema each flag of a file is written in.

    Nothing is converted or written; legacy flags are listed as v0.
    """
    config: MigratorConfig = ctx.obj['config']

    try:
        fmt = resolve_input_format(input_file, input_format, config)
        result = FlagMigrator(fmt).normalize_all(Path(input_file).read_bytes())
    except FlagMigrationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Error reading {escape(input_file)}: {escape(str(e))}[/red]")
        sys.exit(1)

    warning_counts = Counter(name for name, _ in result.warnings)

    table = Table(title=f"Flags in {escape(input_file)}")
    table.add_column("Flag", style="cyan")
    table.add_column("Schema")
    table.add_column("Warnings", justify="right")

    for name in sorted(result.flags):
        count = warning_counts.get(name, 0)
        table.add_row(
            escape(name),
            result.shapes[name].value,
            f"[yellow]{count}[/yellow]" if count else "0"
        )

    console.print(table)

    for name, message in result.warnings:
        console.print(f"[yellow]Warning: {escape(name)}: {escape(message)}[/yellow]")
