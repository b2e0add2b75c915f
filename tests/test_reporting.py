"""Tests for report formatters."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from framecheck.diagnostics import LintDiagnostic, LintReport, LintResult, Severity
from framecheck.reporting import FORMATTERS, format_github, format_json, format_text, statistics_table


@pytest.fixture
def report():
    return LintReport(
        results=[
            LintResult(
                "etl/a.py",
                [
                    LintDiagnostic(
                        code="E001",
                        severity=Severity.ERROR,
                        message="Chained.",
                        path=Path("etl/a.py"),
                        line=3,
                        column=5,
                        suggestion="Use .loc",
                    ),
                    LintDiagnostic(
                        code="I002",
                        severity=Severity.INFO,
                        message="Dict of frames.",
                        path=Path("etl/a.py"),
                        line=9,
                    ),
                ],
            ),
            LintResult("etl/b.py", []),
        ]
    )


class TestFormatters:
    def test_registry(self):
        assert set(FORMATTERS) == {"text", "json", "github"}

    def test_text(self, report):
        lines = format_text(report).splitlines()
        assert lines == [
            "etl/a.py:3:5: [E001] ERROR: Chained. (Use .loc)",
            "etl/a.py:9:1: [I002] INFO: Dict of frames.",
            "FAIL: 2 files | 1 errors | 1 infos",
        ]

    def test_text_empty_report(self):
        assert format_text(LintReport()) == "PASS: 0 files"

    def test_json(self, report):
        data = json.loads(format_json(report))
        assert data["passed"] is False
        assert data["files_checked"] == 2
        assert data["error_count"] == 1
        assert data["info_count"] == 1
        assert [d["code"] for d in data["diagnostics"]] == ["E001", "I002"]

    def test_github(self, report):
        lines = format_github(report).splitlines()
        assert lines == [
            "::error file=etl/a.py,line=3,col=5,title=E001::Chained.",
            "::notice file=etl/a.py,line=9,col=1,title=I002::Dict of frames.",
        ]

    def test_github_escaping(self):
        report = LintReport(
            [
                LintResult(
                    "<source>",
                    [LintDiagnostic(code="W001", severity=Severity.WARNING, message="100% bad\nreally")],
                )
            ]
        )
        assert format_github(report) == "::warning line=1,col=1,title=W001::100%25 bad%0Areally"


class TestStatistics:
    def test_rows_per_code(self, report):
        table = statistics_table(report)
        assert table.row_count == 2
        assert [c.header for c in table.columns] == ["Code", "Name", "Severity", "Count"]
