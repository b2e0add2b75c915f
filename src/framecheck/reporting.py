"""Report formatters: plain text, JSON, and GitHub Actions annotations."""

from __future__ import annotations

import json
from collections.abc import Callable

from rich.table import Table

from framecheck.diagnostics import LintReport, Severity
from framecheck.rules.catalog import CATALOG

_GITHUB_LEVELS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "notice",
}


def format_text(report: LintReport) -> str:
    """One diagnostic per line, then the summary line."""
    lines = [str(d) for d in report.diagnostics]
    lines.append(report.summary())
    return "\n".join(lines)


def format_json(report: LintReport) -> str:
    return json.dumps(report.to_dict(), indent=2)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


def format_github(report: LintReport) -> str:
    """GitHub Actions workflow commands, e.g. ``::error file=a.py,line=3,col=1,title=E001::...``."""
    lines = []
    for d in report.diagnostics:
        props = []
        if d.path is not None:
            props.append(f"file={_escape_property(d.path.as_posix())}")
        props.append(f"line={d.line}")
        props.append(f"col={d.column}")
        props.append(f"title={_escape_property(d.code)}")
        lines.append(f"::{_GITHUB_LEVELS[d.severity]} {','.join(props)}::{_escape_data(d.message)}")
    return "\n".join(lines)


FORMATTERS: dict[str, Callable[[LintReport], str]] = {
    "text": format_text,
    "json": format_json,
    "github": format_github,
}


def statistics_table(report: LintReport) -> Table:
    """Count of findings per code, most frequent first."""
    table = Table(title="Diagnostics by code")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Count", justify="right")

    for code, count in report.counts_by_code().items():
        info = CATALOG.get(code)
        table.add_row(
            code,
            info.name if info else "-",
            info.severity.value if info else "-",
            str(count),
        )
    return table
