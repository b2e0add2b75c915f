"""
Merge contract rules.

A merge must say how rows are matched (``how``), on what (``on`` /
``left_on`` / ``right_on`` / ``*_index``), and what key multiplicity it
expects (``validate``), so that a duplicate key aborts instead of
silently multiplying rows.

Covered call shapes::

    pd.merge(left, right, ...)     # module function, also `from pandas import merge`
    left.merge(right, ...)         # frame method
    left.join(other, ...)          # frame method, index join by default

Positional arguments are mapped to their parameter names, so
``pd.merge(a, b, "left", "id")`` declares both ``how`` and ``on``.
Calls that forward ``*args`` or ``**kwargs`` are skipped: their
arguments cannot be known statically.
"""

from __future__ import annotations

import ast

from framecheck.diagnostics import LintDiagnostic
from framecheck.pandas_api import (
    MERGE_KEY_KEYWORDS,
    MERGE_ONLY_KEYWORDS,
    UNCHECKED_CARDINALITIES,
)
from framecheck.rules.catalog import make_diagnostic
from framecheck.source import ParsedModule

PD_MERGE_PARAMS = (
    "left",
    "right",
    "how",
    "on",
    "left_on",
    "right_on",
    "left_index",
    "right_index",
    "sort",
    "suffixes",
    "copy",
    "indicator",
    "validate",
)
FRAME_MERGE_PARAMS = PD_MERGE_PARAMS[1:]
FRAME_JOIN_PARAMS = ("other", "on", "how", "lsuffix", "rsuffix", "sort", "validate")


def _merge_signature(module: ParsedModule, call: ast.Call) -> tuple[str, tuple[str, ...]] | None:
    """Return ``(kind, positional parameter names)`` for merge-like calls."""
    func = call.func
    if module.aliases.pandas_attr(func) == "merge":
        return "merge", PD_MERGE_PARAMS
    if not isinstance(func, ast.Attribute):
        return None
    if func.attr == "merge":
        if module.is_frame(func.value):
            return "merge", FRAME_MERGE_PARAMS
        if any(kw.arg in MERGE_ONLY_KEYWORDS for kw in call.keywords):
            return "merge", FRAME_MERGE_PARAMS
        return None
    if func.attr == "join" and module.is_frame(func.value):
        return "join", FRAME_JOIN_PARAMS
    return None


def _declared_arguments(call: ast.Call, params: tuple[str, ...]) -> dict[str, ast.expr]:
    declared = {kw.arg: kw.value for kw in call.keywords if kw.arg is not None}
    for name, value in zip(params, call.args):
        declared.setdefault(name, value)
    return declared


def _constant_str(expr: ast.expr | None) -> str | None:
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return expr.value
    return None


def check_merge_contract(module: ParsedModule) -> list[LintDiagnostic]:
    """E002 / W005 / W006 / W010: merge without an explicit contract."""
    diagnostics: list[LintDiagnostic] = []

    for node in module.walk():
        if not isinstance(node, ast.Call):
            continue
        signature = _merge_signature(module, node)
        if signature is None:
            continue
        if any(kw.arg is None for kw in node.keywords):
            continue
        if any(isinstance(arg, ast.Starred) for arg in node.args):
            continue

        kind, params = signature
        declared = _declared_arguments(node, params)
        label = f"{ast.unparse(node.func)}()"

        if _constant_str(declared.get("how")) == "cross":
            # a cross join has neither key nor cardinality
            continue

        if "validate" not in declared:
            diagnostics.append(
                make_diagnostic(
                    module, "E002", node,
                    f"{label} does not declare the expected key cardinality.",
                )
            )
        elif _constant_str(declared["validate"]) in UNCHECKED_CARDINALITIES:
            diagnostics.append(
                make_diagnostic(
                    module, "W010", node,
                    f"{label} is validated as many-to-many, which never aborts.",
                )
            )

        if "how" not in declared:
            default = "left" if kind == "join" else "inner"
            diagnostics.append(
                make_diagnostic(
                    module, "W005", node,
                    f"{label} relies on the default join type ({default!r}).",
                )
            )

        if kind == "join":
            if "on" not in declared:
                diagnostics.append(
                    make_diagnostic(
                        module, "W006", node,
                        f"{label} joins on the index implicitly.",
                        suggestion="Pass on= or use .merge() with explicit keys.",
                    )
                )
        elif not MERGE_KEY_KEYWORDS & declared.keys():
            diagnostics.append(
                make_diagnostic(
                    module, "W006", node,
                    f"{label} matches on all shared columns implicitly.",
                )
            )

    return diagnostics
