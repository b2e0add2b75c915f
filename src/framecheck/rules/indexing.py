"""Indexing rules."""

from __future__ import annotations

import ast
from collections.abc import Iterator

from framecheck.diagnostics import LintDiagnostic
from framecheck.pandas_api import INDEXERS
from framecheck.rules.catalog import make_diagnostic
from framecheck.source import ParsedModule


def assignment_targets(node: ast.AST) -> Iterator[ast.expr]:
    """Yield every store target of an assignment statement, unpacking tuples."""
    if isinstance(node, ast.Assign):
        pending = list(node.targets)
    elif isinstance(node, (ast.AugAssign, ast.AnnAssign)):
        pending = [node.target]
    else:
        return
    while pending:
        target = pending.pop()
        if isinstance(target, (ast.Tuple, ast.List)):
            pending.extend(target.elts)
        elif isinstance(target, ast.Starred):
            pending.append(target.value)
        else:
            yield target


def _strip_indexer(expr: ast.expr) -> ast.expr:
    if isinstance(expr, ast.Attribute) and expr.attr in INDEXERS:
        return expr.value
    return expr


def is_chained_target(module: ParsedModule, target: ast.expr) -> bool:
    """True for ``df[a][b]``, ``df.loc[a][b]`` and ``df[a].iloc[b]`` targets."""
    if not isinstance(target, ast.Subscript):
        return False
    inner = _strip_indexer(target.value)
    if not isinstance(inner, ast.Subscript):
        return False
    return module.is_frame(_strip_indexer(inner.value))


def check_chained_assignment(module: ParsedModule) -> list[LintDiagnostic]:
    """E001: Assignment through two chained selections."""
    diagnostics: list[LintDiagnostic] = []
    for node in module.walk():
        for target in assignment_targets(node):
            if is_chained_target(module, target):
                diagnostics.append(
                    make_diagnostic(
                        module,
                        "E001",
                        target,
                        f"Assignment to '{ast.unparse(target)}' goes through chained "
                        "indexing and may modify a temporary copy.",
                    )
                )
    return diagnostics
