"""
framecheck: static checks for pandas DataFrame code.

Parses Python source, infers which expressions are DataFrames, and reports
violations of a small set of frame-handling rules (attribute column access,
chained assignment, ``inplace=True``, undeclared read schemas, merges
without a contract, zero-filled new columns, string queries, and functions
that mutate and return their frame argument).

Example::

    from framecheck import lint_paths

    report = lint_paths(["etl/"])
    for diagnostic in report.diagnostics:
        print(diagnostic)
"""

__version__ = "0.1.0"

from framecheck.diagnostics import LintDiagnostic, LintReport, LintResult, Severity
from framecheck.errors import (
    ConfigError,
    FramecheckError,
    InvalidConfigError,
    MissingConfigError,
    RuleRegistrationError,
    SourceParseError,
    UnknownRuleError,
)
from framecheck.linter import lint_file, lint_module, lint_paths, lint_source
from framecheck.rules import (
    RuleSpec,
    clear_custom_rules,
    get_rule,
    list_lint_rules,
    register_lint_rule,
)
from framecheck.rules.catalog import CodeInfo, explain
from framecheck.settings import FramecheckSettings, load_settings
from framecheck.source import ParsedModule, iter_python_files

__all__ = [
    "__version__",
    # Diagnostics
    "LintDiagnostic",
    "LintReport",
    "LintResult",
    "Severity",
    # Linting
    "lint_file",
    "lint_module",
    "lint_paths",
    "lint_source",
    "iter_python_files",
    "ParsedModule",
    # Rules
    "CodeInfo",
    "RuleSpec",
    "clear_custom_rules",
    "explain",
    "get_rule",
    "list_lint_rules",
    "register_lint_rule",
    # Settings
    "FramecheckSettings",
    "load_settings",
    # Errors
    "ConfigError",
    "FramecheckError",
    "InvalidConfigError",
    "MissingConfigError",
    "RuleRegistrationError",
    "SourceParseError",
    "UnknownRuleError",
]
