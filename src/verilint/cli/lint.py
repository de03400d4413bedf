"""verilint lint command - run verilator on one file and print its diagnostics."""

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from verilint.config.constants import (
    LANGUAGE_BY_EXTENSION,
    SYSTEMVERILOG_LANGUAGE_ID,
    VERILOG_LANGUAGE_ID,
)
from verilint.config.loader import load_config
from verilint.config.models import LoggingConfig, LogOutputConfig
from verilint.core.errors import ConfigError
from verilint.core.logging import configure_logging
from verilint.lint.models import DiagnosticSet, LintRunResult, Severity, TextDocument
from verilint.lint.ops import VerilatorLinter
from verilint.lint.store import DiagnosticStore

EXIT_ERRORS_FOUND = 1
EXIT_RUN_FAILED = 2

_SEVERITY_STYLE = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFORMATION: "cyan",
}


def detect_language(path: Path) -> str:
    """Language id from the file extension; plain Verilog when unknown."""
    return LANGUAGE_BY_EXTENSION.get(path.suffix.lower(), VERILOG_LANGUAGE_ID)


def _make_diagnostics_table(diagnostics: DiagnosticSet) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 1), pad_edge=False)
    table.add_column("location", style="white")
    table.add_column("severity")
    table.add_column("code", style="dim")
    table.add_column("message")

    for path, file_diagnostics in diagnostics.items():
        for d in file_diagnostics:
            style = _SEVERITY_STYLE[d.severity]
            # Shown 1-based, as editors display them
            table.add_row(
                f"{path}:{d.line + 1}:{d.column + 1}",
                f"[{style}]{d.severity.value}[/{style}]",
                d.code,
                d.message,
            )
    return table


def _result_to_dict(result: LintRunResult) -> dict[str, Any]:
    return {
        "status": result.status,
        "command": result.invocation.command if result.invocation else None,
        "returncode": result.returncode,
        "error": result.error_detail,
        "duration_seconds": round(result.duration_seconds, 3),
        "diagnostics": result.diagnostics.to_dict(),
    }


def _configure_run_logging(logging_config: LoggingConfig, verbose: bool) -> None:
    """Route events to the configured file outputs; the console stays quiet unless verbose."""
    files = [o for o in logging_config.outputs if o.destination not in ("stderr", "stdout")]
    if not files:
        return
    console = LogOutputConfig(
        destination="stderr",
        format="console",
        level="DEBUG" if verbose else "CRITICAL",
    )
    configure_logging(
        config=LoggingConfig(
            level="DEBUG" if verbose else logging_config.level,
            outputs=[console, *files],
        )
    )


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory)",
)
@click.option(
    "--language",
    type=click.Choice([VERILOG_LANGUAGE_ID, SYSTEMVERILOG_LANGUAGE_ID]),
    default=None,
    help="Source language (default: from the file extension)",
)
@click.option("--verilator-path", default=None, help="Directory containing the verilator binary")
@click.option("--args", "arguments", default=None, help="Extra arguments passed to verilator")
@click.option(
    "--run-at-file-location/--run-at-workspace",
    default=None,
    help="Run verilator from the file's folder or from the workspace root",
)
@click.option("--wsl/--no-wsl", "use_wsl", default=None, help="Run verilator inside WSL")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Extra config file layered over the workspace config",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def lint_command(
    ctx: click.Context,
    file: Path,
    workspace: Path | None,
    language: str | None,
    verilator_path: str | None,
    arguments: str | None,
    run_at_file_location: bool | None,
    use_wsl: bool | None,
    config_file: Path | None,
    as_json: bool,
) -> None:
    """Lint FILE with verilator and print its diagnostics.

    Exits 1 when verilator reports errors, 2 when it could not be run.
    """
    workspace_root = (workspace or Path.cwd()).resolve()

    overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "path": verilator_path,
            "arguments": arguments,
            "run_at_file_location": run_at_file_location,
            "use_wsl": use_wsl,
        }.items()
        if value is not None
    }
    try:
        config = load_config(workspace_root, config_file=config_file)
        linting = config.linting.model_validate({**config.linting.model_dump(), **overrides})
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    except ValueError as e:
        raise click.ClickException(f"Invalid option: {e}") from e

    _configure_run_logging(config.logging, verbose=bool((ctx.obj or {}).get("verbose")))

    document = TextDocument(
        path=str(file.resolve()),
        language_id=language or detect_language(file),
    )
    linter = VerilatorLinter(DiagnosticStore(), linting, workspace_root=str(workspace_root))
    result = asyncio.run(linter.lint(document))

    if as_json:
        click.echo(json.dumps(_result_to_dict(result), indent=2))
    else:
        console = Console()
        if result.status == "error":
            Console(stderr=True).print(f"[red]Lint failed[/red]: {result.error_detail}")
        elif not result.diagnostics:
            console.print(f"[green]No issues[/green] in {document.path}")
        else:
            console.print(_make_diagnostics_table(result.diagnostics))
            console.print(
                f"\n{result.total_diagnostics} issue(s) in {len(result.diagnostics.files)} file(s)"
            )

    if result.status == "error":
        raise SystemExit(EXIT_RUN_FAILED)
    if result.has_errors:
        raise SystemExit(EXIT_ERRORS_FOUND)
