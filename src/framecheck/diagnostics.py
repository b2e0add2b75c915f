"""Diagnostic model: findings, per-file results, and multi-file reports."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class Severity(str, Enum):
    """Severity level for a lint diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class LintDiagnostic:
    """A single lint finding.

    Attributes:
        code: Short identifier (e.g. ``"E001"``).
        severity: ``error``, ``warning``, or ``info``.
        message: Human-readable description.
        path: File the finding is in (``None`` for in-memory sources).
        line: 1-based line number.
        column: 1-based column number.
        rule: Name of the rule that produced the finding.
        suggestion: Recommended fix (optional).
    """

    code: str
    severity: Severity
    message: str
    path: Path | None = None
    line: int = 1
    column: int = 1
    rule: str | None = None
    suggestion: str | None = None

    @property
    def location(self) -> str:
        where = str(self.path) if self.path is not None else "<source>"
        return f"{where}:{self.line}:{self.column}"

    def sort_key(self) -> tuple[str, int, int, str]:
        return (str(self.path or ""), self.line, self.column, self.code)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "path": str(self.path) if self.path is not None else None,
            "line": self.line,
            "column": self.column,
            "rule": self.rule,
            "suggestion": self.suggestion,
        }

    def __str__(self) -> str:
        prefix = f"{self.location}: [{self.code}] {self.severity.value.upper()}"
        hint = f" ({self.suggestion})" if self.suggestion else ""
        return f"{prefix}: {self.message}{hint}"


@dataclass
class LintResult:
    """Aggregated result of linting one file or snippet.

    Attributes:
        target: Display name of what was linted (file path or ``<source>``).
        diagnostics: All findings from all rules.
    """

    target: str
    diagnostics: list[LintDiagnostic] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if there are no error-level diagnostics."""
        return not any(d.severity == Severity.ERROR for d in self.diagnostics)

    @property
    def errors(self) -> list[LintDiagnostic]:
        """Error-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[LintDiagnostic]:
        """Warning-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def infos(self) -> list[LintDiagnostic]:
        """Info-level diagnostics only."""
        return [d for d in self.diagnostics if d.severity == Severity.INFO]

    @property
    def codes(self) -> list[str]:
        """Codes of all diagnostics, in report order."""
        return [d.code for d in self.diagnostics]

    def summary(self) -> str:
        """One-line summary of the lint result."""
        return _summary_line(self.target, self.passed, self.errors, self.warnings, self.infos)

    def __str__(self) -> str:
        lines = [self.summary()]
        for d in self.diagnostics:
            lines.append(f"  {d}")
        return "\n".join(lines)


@dataclass
class LintReport:
    """Results for a set of files."""

    results: list[LintResult] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[LintDiagnostic]:
        return [d for r in self.results for d in r.diagnostics]

    @property
    def files_checked(self) -> int:
        return len(self.results)

    @property
    def passed(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def errors(self) -> list[LintDiagnostic]:
        return [d for r in self.results for d in r.errors]

    @property
    def warnings(self) -> list[LintDiagnostic]:
        return [d for r in self.results for d in r.warnings]

    @property
    def infos(self) -> list[LintDiagnostic]:
        return [d for r in self.results for d in r.infos]

    def counts_by_code(self) -> dict[str, int]:
        """Number of diagnostics per code, most frequent first."""
        return dict(Counter(d.code for d in self.diagnostics).most_common())

    def summary(self) -> str:
        noun = "file" if self.files_checked == 1 else "files"
        return _summary_line(
            f"{self.files_checked} {noun}", self.passed, self.errors, self.warnings, self.infos
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "files_checked": self.files_checked,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "info_count": len(self.infos),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def _summary_line(
    target: str,
    passed: bool,
    errors: list[LintDiagnostic],
    warnings: list[LintDiagnostic],
    infos: list[LintDiagnostic],
) -> str:
    counts = {
        "errors": len(errors),
        "warnings": len(warnings),
        "infos": len(infos),
    }
    status = "PASS" if passed else "FAIL"
    parts = [f"{status}: {target}"]
    for label, count in counts.items():
        if count:
            parts.append(f"{count} {label}")
    return " | ".join(parts)
