"""
Root Typer application for the framecheck CLI.

Commands::

    framecheck check PATHS...   lint files and directories
    framecheck rules            list rules and the codes they emit
    framecheck explain CODE     show the guidance for one code
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from typer import Typer

from framecheck import __version__
from framecheck.cli.utils import EXIT_FAILED, console, err_console, fail, fail_from
from framecheck.errors import FramecheckError
from framecheck.linter import lint_paths
from framecheck.logging import configure_logging
from framecheck.reporting import FORMATTERS, statistics_table
from framecheck.rules import check_code_prefixes, iter_rules
from framecheck.rules.catalog import CATALOG, explain
from framecheck.settings import load_settings

app = Typer(
    name="framecheck",
    help="framecheck: static checks for pandas code.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"
    GITHUB = "github"


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("framecheck")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"framecheck {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """framecheck CLI: lint pandas code against the frame style rules."""


# ── framecheck check ─────────────────────────────────────────────────────


@app.command("check")
def check_cmd(
    paths: list[Path] = typer.Argument(..., help="Files or directories to lint."),
    select: str | None = typer.Option(
        None, "--select", "-s", help="Comma-separated code prefixes to report (e.g. E,W001)."
    ),
    ignore: str | None = typer.Option(
        None, "--ignore", "-i", help="Comma-separated code prefixes to drop."
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.TEXT, "--format", "-f", help="Output format.", case_sensitive=False
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the report to a file instead of stdout."
    ),
    strict: bool = typer.Option(False, "--strict", help="Exit non-zero on warnings too."),
    no_infos: bool = typer.Option(False, "--no-infos", help="Drop info-level diagnostics."),
    statistics: bool = typer.Option(
        False, "--statistics", help="Show a count of diagnostics per code."
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (.framecheck.yaml or pyproject.toml)."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL."
    ),
) -> None:
    """Lint Python files for pandas style violations.

    Example:
        framecheck check src/
        framecheck check etl.py --select E,W00 --format json
    """
    try:
        settings = load_settings(
            config,
            start=paths[0] if paths else None,
            select=select,
            ignore=ignore,
            include_infos=False if no_infos else None,
            log_level=log_level,
        )
        check_code_prefixes([*settings.select, *settings.ignore])
    except FramecheckError as e:
        raise fail_from(e) from e

    configure_logging(level=settings.log_level, json_format=settings.log_json)

    try:
        report = lint_paths(paths, settings)
    except (FileNotFoundError, ValueError) as e:
        raise fail(str(e)) from e

    rendered = FORMATTERS[fmt.value](report)
    if output is not None:
        output.write_text(rendered + "\n", encoding="utf-8")
        err_console.print(f"Report written to {escape(str(output))}")
    elif rendered:
        typer.echo(rendered)

    if statistics:
        target = console if fmt == OutputFormat.TEXT and output is None else err_console
        target.print(statistics_table(report))

    if not report.passed:
        raise typer.Exit(code=EXIT_FAILED)
    if strict and report.warnings:
        raise typer.Exit(code=EXIT_FAILED)


# ── framecheck rules ─────────────────────────────────────────────────────


@app.command("rules")
def rules_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """List registered rules and the codes they emit."""
    rows = []
    for spec in iter_rules():
        for code in spec.codes or ("",):
            info = CATALOG.get(code)
            rows.append(
                {
                    "rule": spec.name,
                    "code": code or None,
                    "name": info.name if info else None,
                    "severity": info.severity.value if info else None,
                    "summary": info.title if info else spec.summary,
                    "builtin": spec.builtin,
                }
            )

    if json_out:
        typer.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="framecheck rules")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Rule")
    table.add_column("Severity")
    table.add_column("Description")
    for row in rows:
        table.add_row(
            row["code"] or "-",
            row["rule"],
            row["severity"] or "-",
            escape(row["summary"] or ""),
        )
    console.print(table)


# ── framecheck explain ───────────────────────────────────────────────────


@app.command("explain")
def explain_cmd(
    code: str = typer.Argument(..., help="Diagnostic code (W001) or name (chained-assignment)."),
) -> None:
    """Show why a rule exists and how to fix its findings."""
    try:
        info = explain(code)
    except FramecheckError as e:
        raise fail_from(e) from e

    console.print(f"[bold]{info.code}[/bold] {info.name} ([italic]{info.severity.value}[/italic])")
    console.print(f"[bold]{escape(info.title)}[/bold]")
    console.print()
    console.print(escape(info.rationale))
    console.print()
    console.print(f"[green]Fix:[/green] {escape(info.suggestion)}")
    if info.bad:
        console.print()
        console.print("[red]Flagged:[/red]")
        console.print(Syntax(info.bad, "python", theme="ansi_dark"))
    if info.good:
        console.print("[green]Preferred:[/green]")
        console.print(Syntax(info.good, "python", theme="ansi_dark"))
