# SPDX-FileCopyrightText: 2025 Sequent Tech Inc <legal@sequentech.io>
#
# SPDX-License-Identifier: MIT

import sys
from pathlib import Path
from typing import Optional
import click
from rich.console import Console
from rich.markup import escape

from ..config import MigratorConfig
from ..errors import FlagMigrationError
from ..formats import Format
from ..migrator import FlagMigrator

# stdout carries the converted file when no --output-file is given
console = Console(stderr=True)


def resolve_input_format(input_file: str, input_format: Optional[str], config: MigratorConfig) -> Format:
    """Pick the input format: option, then config, then file extension."""
    if input_format:
        return Format.parse(input_format)
    if config.input_format:
        return config.input_format
    return Format.from_path(input_file)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--input-format', '-i', help='Format of the input file: toml, json or yaml (default: from extension)')
@click.option('--output-format', '-f', help='Format of the output: toml or json; anything else writes YAML')
@click.option('--output-file', '-o', type=click.Path(dir_okay=False), help='Write the result here instead of stdout')
@click.option('--dry-run', is_flag=True, help='Convert and report without writing any output')
@click.pass_context
def convert(ctx, input_file: str, input_format: Optional[str], output_format: Optional[str],
            output_file: Optional[str], dry_run: bool):
    """
    Convert a flag file to another format and to the current flag schema.

    Examples:

      flag-migrator convert flags.yaml -f json -o flags.json

      flag-migrator convert legacy.toml --output-format yaml
    """
    config: MigratorConfig = ctx.obj['config']

    try:
        fmt = resolve_input_format(input_file, input_format, config)
        migrator = FlagMigrator(fmt, output_format or config.output_format)
        content = Path(input_file).read_bytes()
        result = migrator.run(content)
    except FlagMigrationError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Error reading {escape(input_file)}: {escape(str(e))}[/red]")
        sys.exit(1)

    for name, message in result.warnings:
        console.print(f"[yellow]Warning: {escape(name)}: {escape(message)}[/yellow]")

    if config.strict and result.warnings:
        console.print(f"[red]Error: {len(result.warnings)} warning(s) in strict mode, no output written[/red]")
        sys.exit(1)

    summary = (
        f"{len(result.flags)} flag(s) from {migrator.input_format.value} "
        f"to {migrator.output_format.value}"
    )

    if dry_run:
        console.print(f"[yellow]Dry-run mode: would convert {summary}[/yellow]")
        return

    if output_file:
        try:
            Path(output_file).write_bytes(result.output)
        except OSError as e:
            console.print(f"[red]Error writing {escape(output_file)}: {escape(str(e))}[/red]")
            sys.exit(1)
        console.print(f"[green]✓ Converted {summary}[/green]")
        console.print(f"[green]✓ Saved to {escape(output_file)}[/green]")
    else:
        click.echo(result.output, nl=False)
