"""Filtering rules."""

from __future__ import annotations

import ast

from framecheck.diagnostics import LintDiagnostic
from framecheck.rules.catalog import make_diagnostic
from framecheck.source import ParsedModule

_EVAL_SUGGESTION = "Compute with plain operators: df.assign(c=df['a'] + df['b'])."


def check_string_query(module: ParsedModule) -> list[LintDiagnostic]:
    """W008: ``df.query("...")``, ``df.eval("...")`` or ``pd.eval("...")``."""
    diagnostics: list[LintDiagnostic] = []
    for node in module.walk():
        if not isinstance(node, ast.Call):
            continue
        func = node.func

        if module.aliases.pandas_attr(func) == "eval":
            diagnostics.append(
                make_diagnostic(
                    module,
                    "W008",
                    node,
                    f"'{ast.unparse(func)}()' evaluates an embedded string expression.",
                    suggestion=_EVAL_SUGGESTION,
                )
            )
            continue

        if not isinstance(func, ast.Attribute) or func.attr not in ("query", "eval"):
            continue
        if not module.is_frame(func.value):
            continue

        receiver = ast.unparse(func.value)
        if func.attr == "query":
            message = f"'{receiver}.query()' filters rows with an embedded string expression."
            suggestion = None
        else:
            message = f"'{receiver}.eval()' evaluates an embedded string expression."
            suggestion = _EVAL_SUGGESTION
        diagnostics.append(make_diagnostic(module, "W008", node, message, suggestion=suggestion))
    return diagnostics
