"""Column rules: how columns are read and how new ones are introduced."""

from __future__ import annotations

import ast

from framecheck.diagnostics import LintDiagnostic
from framecheck.inference import iter_scope
from framecheck.pandas_api import FRAME_MEMBERS, INDEXERS, ZERO_FACTORIES
from framecheck.rules.catalog import make_diagnostic
from framecheck.source import ParsedModule


def check_attribute_access(module: ParsedModule) -> list[LintDiagnostic]:
    """W001: Column accessed (or assigned) as a frame attribute."""
    members = FRAME_MEMBERS | frozenset(module.settings.extra_frame_members)
    diagnostics: list[LintDiagnostic] = []

    for node in module.walk():
        if not isinstance(node, ast.Attribute):
            continue
        attr = node.attr
        if attr.startswith("_") or attr in members:
            continue
        parent = module.parent(node)
        if isinstance(parent, ast.Call) and parent.func is node:
            # an unknown method call is not a column read
            continue
        if not module.is_frame(node.value):
            continue

        receiver = ast.unparse(node.value)
        if isinstance(node.ctx, ast.Store):
            message = f"Assigning to attribute '{attr}' of '{receiver}' does not create a column."
        else:
            message = f"Column '{attr}' is accessed as an attribute of '{receiver}'."
        diagnostics.append(
            make_diagnostic(
                module,
                "W001",
                node,
                message,
                suggestion=f"Use {receiver}[{attr!r}].",
            )
        )
    return diagnostics


# ---------------------------------------------------------------------------
# W007: zero-filled new columns
# ---------------------------------------------------------------------------


def _is_zero_filler(module: ParsedModule, expr: ast.expr) -> bool:
    if isinstance(expr, ast.Constant):
        value = expr.value
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return value == 0
        return value == ""
    if isinstance(expr, ast.UnaryOp) and isinstance(expr.op, (ast.USub, ast.UAdd)):
        return _is_zero_filler(module, expr.operand)
    if isinstance(expr, ast.Call):
        return module.aliases.numpy_attr(expr.func) in ZERO_FACTORIES
    if isinstance(expr, ast.BinOp) and isinstance(expr.op, ast.Mult):
        for side in (expr.left, expr.right):
            if isinstance(side, ast.List) and len(side.elts) == 1:
                return _is_zero_filler(module, side.elts[0])
    return False


def _column_key(key: ast.expr) -> str | None:
    if isinstance(key, ast.Constant) and isinstance(key.value, str):
        return key.value
    return None


def _column_target(module: ParsedModule, target: ast.expr) -> tuple[str, str] | None:
    """(frame, column) for ``df["x"]`` or ``df.loc[:, "x"]`` assignment targets."""
    if not isinstance(target, ast.Subscript):
        return None
    value = target.value
    if isinstance(value, ast.Attribute) and value.attr in INDEXERS:
        if not module.is_frame(value.value):
            return None
        key = target.slice
        if isinstance(key, ast.Tuple) and len(key.elts) == 2:
            rows, column = key.elts
            if isinstance(rows, ast.Slice) and rows.lower is None and rows.upper is None:
                return _column_slot(value.value, column)
        return None
    if module.is_frame(value):
        return _column_slot(value, target.slice)
    return None


def _column_slot(frame: ast.expr, key: ast.expr) -> tuple[str, str] | None:
    column = _column_key(key)
    if column is None:
        return None
    return ast.unparse(frame), column


def _column_references(module: ParsedModule, scope: ast.AST) -> dict[tuple[str, str], int]:
    """First line each (frame, column) pair is referenced in ``scope``."""
    first_seen: dict[tuple[str, str], int] = {}

    def note(slot: tuple[str, str] | None, line: int) -> None:
        if slot is not None and line < first_seen.get(slot, line + 1):
            first_seen[slot] = line

    for node in iter_scope(scope):
        if isinstance(node, ast.Subscript):
            note(_column_target(module, node), node.lineno)
        elif isinstance(node, ast.Attribute) and node.attr not in FRAME_MEMBERS:
            if module.is_frame(node.value):
                note((ast.unparse(node.value), node.attr), node.lineno)
        elif isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            if node.func.attr == "assign" and module.is_frame(node.func.value):
                frame = ast.unparse(node.func.value)
                for kw in node.keywords:
                    if kw.arg is not None:
                        note((frame, kw.arg), node.lineno)
    return first_seen


def check_zero_filled_column(module: ParsedModule) -> list[LintDiagnostic]:
    """W007: A new column is initialised with 0, 0.0, '' or numpy zeros."""
    diagnostics: list[LintDiagnostic] = []
    references: dict[ast.AST, dict[tuple[str, str], int]] = {}

    def is_new(node: ast.AST, slot: tuple[str, str]) -> bool:
        scope = module.frames.scope_of(node)
        if scope not in references:
            references[scope] = _column_references(module, scope)
        return references[scope].get(slot, node.lineno) >= node.lineno

    def report(node: ast.AST, column: str, value: ast.expr) -> None:
        diagnostics.append(
            make_diagnostic(
                module,
                "W007",
                node,
                f"New column {column!r} is filled with {ast.unparse(value)}.",
            )
        )

    for node in module.walk():
        if isinstance(node, ast.Assign):
            if not _is_zero_filler(module, node.value):
                continue
            for target in node.targets:
                slot = _column_target(module, target)
                if slot is not None and is_new(target, slot):
                    report(target, slot[1], node.value)

        elif isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            method = node.func.attr
            if method not in ("assign", "insert") or not module.is_frame(node.func.value):
                continue
            frame = ast.unparse(node.func.value)
            if method == "assign":
                for kw in node.keywords:
                    if kw.arg is None or not _is_zero_filler(module, kw.value):
                        continue
                    if is_new(node, (frame, kw.arg)):
                        report(node, kw.arg, kw.value)
            else:
                args = list(node.args)
                kwargs = {kw.arg: kw.value for kw in node.keywords if kw.arg is not None}
                column_expr = args[1] if len(args) > 1 else kwargs.get("column")
                value = args[2] if len(args) > 2 else kwargs.get("value")
                column = _column_key(column_expr) if column_expr is not None else None
                if column is not None and value is not None and _is_zero_filler(module, value):
                    if is_new(node, (frame, column)):
                        report(node, column, value)

    return diagnostics
