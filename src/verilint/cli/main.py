"""Verilint CLI - verilint command."""

import click

from verilint.cli.lint import lint_command
from verilint.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="verilint")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Verilint - Verilator lint diagnostics, grouped by file."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "CRITICAL")


cli.add_command(lint_command, name="lint")


if __name__ == "__main__":
    cli()
