"""
Catalog of every diagnostic code framecheck can emit.

Each entry fixes the code's severity, its short name, and the guidance
shown by ``framecheck explain``. Rules build diagnostics through
:func:`make_diagnostic` so severity and default suggestion always come
from here.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from framecheck.diagnostics import LintDiagnostic, Severity
from framecheck.errors import UnknownRuleError
from framecheck.source import ParsedModule


@dataclass(frozen=True)
class CodeInfo:
    """Documentation for one diagnostic code."""

    code: str
    name: str
    severity: Severity
    title: str
    rationale: str
    suggestion: str
    bad: str = ""
    good: str = ""


_ENTRIES: list[CodeInfo] = [
    CodeInfo(
        code="W001",
        name="attribute-column-access",
        severity=Severity.WARNING,
        title="Column accessed as an attribute",
        rationale=(
            "Attribute access breaks for column names that collide with frame "
            "methods, contain spaces, or do not exist yet, and assigning to an "
            "attribute never creates a column."
        ),
        suggestion="Use key-based indexing: df['col'].",
        bad="total = df.amount.sum()",
        good="total = df['amount'].sum()",
    ),
    CodeInfo(
        code="E001",
        name="chained-assignment",
        severity=Severity.ERROR,
        title="Assignment through chained indexing",
        rationale=(
            "The second selection runs on a temporary intermediate that may be "
            "a copy, so the write can silently miss the original frame."
        ),
        suggestion="Select rows and column in one .loc call: df.loc[rows, 'col'] = value.",
        bad="df[df['qty'] > 0]['status'] = 'open'",
        good="df.loc[df['qty'] > 0, 'status'] = 'open'",
    ),
    CodeInfo(
        code="W002",
        name="inplace-mutation",
        severity=Severity.WARNING,
        title="In-place mutation flag",
        rationale=(
            "inplace=True hides state changes, returns None, rarely saves memory, "
            "and breaks method chaining."
        ),
        suggestion="Re-assign the result instead of passing inplace=True.",
        bad="df.dropna(inplace=True)",
        good="df = df.dropna()",
    ),
    CodeInfo(
        code="W003",
        name="read-without-dtypes",
        severity=Severity.WARNING,
        title="Frame read without declared column types",
        rationale=(
            "Type inference on external data changes with the data: a column of "
            "IDs becomes floats the day a value is missing."
        ),
        suggestion="Pass dtype={...} to the reader or chain .astype({...}).",
        bad="orders = pd.read_csv(path)",
        good="orders = pd.read_csv(path, usecols=COLUMNS, dtype=DTYPES)",
    ),
    CodeInfo(
        code="W004",
        name="read-without-columns",
        severity=Severity.WARNING,
        title="Frame read without declared columns",
        rationale=(
            "Without an explicit field list, new or renamed upstream columns flow "
            "silently into the pipeline."
        ),
        suggestion="Declare the expected fields with the reader's column keyword or select them: [[...]].",
        bad="events = pd.read_parquet(path)",
        good="events = pd.read_parquet(path, columns=['id', 'ts'])",
    ),
    CodeInfo(
        code="E002",
        name="merge-without-validate",
        severity=Severity.ERROR,
        title="Merge without a cardinality check",
        rationale=(
            "Duplicate keys on the side assumed unique multiply rows without any "
            "error; validate= makes the merge abort instead."
        ),
        suggestion="Pass validate='one_to_one', 'one_to_many' or 'many_to_one'.",
        bad="out = left.merge(right, on='id', how='left')",
        good="out = left.merge(right, on='id', how='left', validate='many_to_one')",
    ),
    CodeInfo(
        code="W005",
        name="merge-without-how",
        severity=Severity.WARNING,
        title="Merge without an explicit join type",
        rationale="The default join type differs between merge (inner) and join (left).",
        suggestion="Pass how='inner', 'left', 'right', 'outer' or 'cross'.",
        bad="out = pd.merge(left, right, on='id', validate='one_to_one')",
        good="out = pd.merge(left, right, on='id', how='inner', validate='one_to_one')",
    ),
    CodeInfo(
        code="W006",
        name="merge-without-key",
        severity=Severity.WARNING,
        title="Merge without an explicit key",
        rationale=(
            "Implicit keys (all shared columns, or the index) change whenever "
            "either side gains a column or a new index."
        ),
        suggestion="Name the key with on=, left_on=/right_on= or left_index=/right_index=.",
        bad="out = left.merge(right, how='left', validate='many_to_one')",
        good="out = left.merge(right, on='id', how='left', validate='many_to_one')",
    ),
    CodeInfo(
        code="W010",
        name="merge-many-to-many",
        severity=Severity.WARNING,
        title="Merge validated as many-to-many",
        rationale="A many-to-many expectation accepts any key multiplicity, so it never aborts.",
        suggestion="State the real cardinality, or deduplicate one side first.",
        bad="out = left.merge(right, on='id', how='inner', validate='many_to_many')",
        good="out = left.merge(right.drop_duplicates('id'), on='id', how='inner', validate='many_to_one')",
    ),
    CodeInfo(
        code="W007",
        name="zero-filled-column",
        severity=Severity.WARNING,
        title="New column filled with a zero-equivalent value",
        rationale=(
            "A placeholder of 0 or '' is indistinguishable from a real zero or "
            "empty string, and it survives aggregations as if it were data."
        ),
        suggestion="Initialise the column with an explicit missing marker: pd.NA or np.nan.",
        bad="df['discount'] = 0",
        good="df['discount'] = pd.NA",
    ),
    CodeInfo(
        code="W008",
        name="string-query",
        severity=Severity.WARNING,
        title="Filtering with an embedded string expression",
        rationale=(
            "Query strings are invisible to linters, type checkers and refactoring "
            "tools, and column typos only fail at run time."
        ),
        suggestion="Use a boolean mask: df[df['col'] > value] or df.loc[...].",
        bad="late = df.query('days_late > 3')",
        good="late = df[df['days_late'] > 3]",
    ),
    CodeInfo(
        code="W009",
        name="mutate-and-return",
        severity=Severity.WARNING,
        title="Function mutates its frame argument and returns it",
        rationale=(
            "Callers cannot tell whether the returned frame is a new object, so "
            "their own copy changes behind their back."
        ),
        suggestion="Return a new frame (df.assign(...), df.copy()) and leave the argument untouched.",
        bad="def clean(df):\n    df['x'] = df['x'].str.strip()\n    return df",
        good="def clean(df):\n    return df.assign(x=df['x'].str.strip())",
    ),
    CodeInfo(
        code="I001",
        name="mutable-frame-record",
        severity=Severity.INFO,
        title="Mutable record carries a frame",
        rationale="Records passed between functions should be immutable so no stage can rewrite another's inputs.",
        suggestion="Declare the record with @dataclass(frozen=True).",
        bad="@dataclass\nclass Batch:\n    rows: pd.DataFrame",
        good="@dataclass(frozen=True)\nclass Batch:\n    rows: pd.DataFrame",
    ),
    CodeInfo(
        code="I002",
        name="dict-interchange",
        severity=Severity.INFO,
        title="Frames returned in an untyped dict",
        rationale="A dict literal has no declared shape; keys and value types are only discoverable by reading the body.",
        suggestion="Return a frozen dataclass or NamedTuple with typed fields.",
        bad="return {'orders': orders, 'lines': lines}",
        good="return OrderBatch(orders=orders, lines=lines)",
    ),
    CodeInfo(
        code="E999",
        name="syntax-error",
        severity=Severity.ERROR,
        title="File could not be parsed",
        rationale="No rule can run on a file that is not valid Python.",
        suggestion="Fix the syntax error.",
    ),
    CodeInfo(
        code="X001",
        name="rule-crashed",
        severity=Severity.WARNING,
        title="A lint rule raised an exception",
        rationale="The rule's findings for this file are missing.",
        suggestion="Report the file that triggers the crash.",
    ),
]

CATALOG: dict[str, CodeInfo] = {entry.code: entry for entry in _ENTRIES}
_BY_NAME: dict[str, CodeInfo] = {entry.name: entry for entry in _ENTRIES}


def explain(code_or_name: str) -> CodeInfo:
    """Look up a catalog entry by code (``"W001"``) or name.

    Raises:
        UnknownRuleError: If nothing matches.
    """
    key = code_or_name.strip()
    entry = CATALOG.get(key.upper()) or _BY_NAME.get(key.lower())
    if entry is None:
        raise UnknownRuleError(code_or_name)
    return entry


def make_diagnostic(
    module: ParsedModule,
    code: str,
    node: ast.AST,
    message: str,
    *,
    rule: str | None = None,
    suggestion: str | None = None,
) -> LintDiagnostic:
    """Build a diagnostic for ``node`` with the catalog's severity and default suggestion."""
    info = CATALOG[code]
    return LintDiagnostic(
        code=code,
        severity=info.severity,
        message=message,
        path=module.path,
        line=getattr(node, "lineno", 1),
        column=getattr(node, "col_offset", 0) + 1,
        rule=rule or info.name,
        suggestion=suggestion or info.suggestion,
    )
