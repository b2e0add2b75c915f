"""
Linter: run every rule over parsed source and collect the findings.

Architecture::

    lint_paths(paths)
    │
    ├── iter_python_files(paths, exclude)
    │
    └── lint_file(path) ── lint_source(text)
                              │
                              ├── parse_module()        (E999 on failure)
                              │
                              └── lint_module(module)
                                   ├── built-in rules
                                   ├── custom rules via register_lint_rule
                                   └── extra_rules (one-shot)
                                   │
                                   ▼
                            suppression comments, select/ignore, include_infos
                                   │
                                   ▼
                              LintResult ──► LintReport

Example::

    from framecheck import lint_source

    result = lint_source("import pandas as pd\\ndf = pd.read_csv('x.csv')\\n")
    for d in result.diagnostics:
        print(d)
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from framecheck.diagnostics import LintDiagnostic, LintReport, LintResult, Severity
from framecheck.errors import SourceParseError
from framecheck.logging import get_logger
from framecheck.rules import LintRule, iter_rules
from framecheck.rules.catalog import CATALOG
from framecheck.settings import FramecheckSettings
from framecheck.source import ParsedModule, iter_python_files, load_module, parse_module

logger = get_logger(__name__)


def _parse_error_diagnostic(error: SourceParseError, path: Path | None) -> LintDiagnostic:
    return LintDiagnostic(
        code="E999",
        severity=CATALOG["E999"].severity,
        message=error.message,
        path=path,
        line=error.line or 1,
        column=error.column or 1,
        rule=CATALOG["E999"].name,
    )


def _keep(module: ParsedModule, diagnostic: LintDiagnostic) -> bool:
    settings = module.settings
    if not settings.include_infos and diagnostic.severity == Severity.INFO:
        return False
    if not settings.is_enabled(diagnostic.code):
        return False
    return not module.is_suppressed(diagnostic.line, diagnostic.code)


def lint_module(module: ParsedModule, *, extra_rules: list[LintRule] | None = None) -> LintResult:
    """Run all rules against an already parsed module."""
    result = LintResult(target=module.display_name)
    all_rules: list[tuple[str, LintRule]] = [(spec.name, spec.check) for spec in iter_rules()]

    if extra_rules:
        for i, rule in enumerate(extra_rules):
            all_rules.append((f"extra_rule_{i}", rule))

    collected: list[LintDiagnostic] = []
    for rule_name, rule in all_rules:
        try:
            collected.extend(rule(module))
        except Exception:
            logger.warning(
                "lint_rule_failed", rule=rule_name, path=module.display_name, exc_info=True
            )
            collected.append(
                LintDiagnostic(
                    code="X001",
                    severity=CATALOG["X001"].severity,
                    message=f"Lint rule '{rule_name}' raised an exception.",
                    path=module.path,
                    rule=rule_name,
                )
            )

    result.diagnostics = sorted(
        (d for d in collected if _keep(module, d)),
        key=LintDiagnostic.sort_key,
    )
    logger.debug("module_linted", path=module.display_name, summary=result.summary())
    return result


def lint_source(
    source: str,
    path: Path | str | None = None,
    settings: FramecheckSettings | None = None,
    extra_rules: list[LintRule] | None = None,
) -> LintResult:
    """Lint Python source text.

    Parameters
    ----------
    source
        Module source code.
    path
        File the source came from; used in diagnostics only.
    settings
        Selection and inference options (defaults when omitted).
    extra_rules
        One-shot rules to run in addition to built-in and registered rules.

    Returns
    -------
    LintResult
        Filtered, sorted diagnostics. Unparsable source yields a single
        E999 diagnostic.
    """
    settings = settings or FramecheckSettings()
    file_path = Path(path) if path is not None else None
    try:
        module = parse_module(source, path=file_path, settings=settings)
    except SourceParseError as e:
        logger.info("source_unparsable", path=str(file_path or "<source>"), error=e.message)
        target = str(file_path) if file_path is not None else "<source>"
        return LintResult(target=target, diagnostics=[_parse_error_diagnostic(e, file_path)])
    return lint_module(module, extra_rules=extra_rules)


def lint_file(path: Path | str, settings: FramecheckSettings | None = None) -> LintResult:
    """Lint one ``.py`` file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a ``.py`` file
    """
    settings = settings or FramecheckSettings()
    file_path = Path(path)
    try:
        module = load_module(file_path, settings)
    except SourceParseError as e:
        logger.info("source_unparsable", path=str(file_path), error=e.message)
        return LintResult(target=str(file_path), diagnostics=[_parse_error_diagnostic(e, file_path)])
    return lint_module(module)


def lint_paths(
    paths: Iterable[Path | str],
    settings: FramecheckSettings | None = None,
) -> LintReport:
    """Lint every Python file under ``paths``.

    Raises:
        FileNotFoundError: If a given path does not exist
    """
    settings = settings or FramecheckSettings()
    report = LintReport()
    for file_path in iter_python_files(paths, settings.exclude):
        report.results.append(lint_file(file_path, settings))

    logger.info(
        "lint_complete",
        files=report.files_checked,
        errors=len(report.errors),
        warnings=len(report.warnings),
        infos=len(report.infos),
    )
    return report
