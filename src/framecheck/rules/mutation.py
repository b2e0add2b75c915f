"""
Mutation rules.

Frames should move through a program as values: each stage re-assigns
a new frame instead of flipping ``inplace=True``, functions do not
rewrite the frame they were handed, and records passed between
functions are typed and immutable.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from framecheck.diagnostics import LintDiagnostic
from framecheck.inference import dotted_name, iter_scope
from framecheck.pandas_api import INDEXERS, MUTATING_METHODS
from framecheck.rules.catalog import make_diagnostic
from framecheck.rules.indexing import assignment_targets
from framecheck.source import ParsedModule

_FRAME_ATTRIBUTES = frozenset({"columns", "index"})


def _inplace_flag(call: ast.Call) -> bool:
    return any(
        kw.arg == "inplace" and isinstance(kw.value, ast.Constant) and kw.value.value is True
        for kw in call.keywords
    )


def check_inplace_mutation(module: ParsedModule) -> list[LintDiagnostic]:
    """W002: Call with ``inplace=True``."""
    diagnostics: list[LintDiagnostic] = []
    for node in module.walk():
        if not isinstance(node, ast.Call) or not _inplace_flag(node):
            continue
        func = node.func
        if isinstance(func, ast.Attribute):
            method = func.attr
            receiver = ast.unparse(func.value)
            message = f"'{receiver}.{method}()' mutates its frame with inplace=True."
            suggestion = None
            if isinstance(func.value, ast.Name):
                suggestion = f"Re-assign instead: {receiver} = {receiver}.{method}(...)."
        else:
            message = f"'{ast.unparse(func)}()' is called with inplace=True."
            suggestion = None
        diagnostics.append(make_diagnostic(module, "W002", node, message, suggestion=suggestion))
    return diagnostics


# ---------------------------------------------------------------------------
# W009: mutate-and-return
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Mutation:
    node: ast.AST
    line: int
    # True when the mutation can only happen to a frame (indexer write, inplace=True)
    frame_only: bool


def _root_name(expr: ast.expr) -> tuple[str | None, bool]:
    """Walk ``df.loc[a][b]`` down to ``df``; report whether an indexer was crossed."""
    via_indexer = False
    while True:
        if isinstance(expr, ast.Subscript):
            expr = expr.value
        elif isinstance(expr, ast.Attribute) and expr.attr in INDEXERS:
            via_indexer = True
            expr = expr.value
        else:
            break
    if isinstance(expr, ast.Name):
        return expr.id, via_indexer
    return None, via_indexer


def _mutations(func: ast.FunctionDef | ast.AsyncFunctionDef, name: str) -> list[_Mutation]:
    found: list[_Mutation] = []
    for node in iter_scope(func):
        targets: list[ast.expr] = list(assignment_targets(node))
        if isinstance(node, ast.Delete):
            targets.extend(node.targets)
        for target in targets:
            if isinstance(target, ast.Subscript):
                root, via_indexer = _root_name(target)
                if root == name:
                    found.append(_Mutation(target, target.lineno, via_indexer))
            elif (
                isinstance(target, ast.Attribute)
                and isinstance(target.value, ast.Name)
                and target.value.id == name
            ):
                found.append(_Mutation(target, target.lineno, target.attr in _FRAME_ATTRIBUTES))

        if isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            root, _ = _root_name(node.func.value)
            if root != name:
                continue
            if _inplace_flag(node):
                found.append(_Mutation(node, node.lineno, True))
            elif node.func.attr in MUTATING_METHODS and isinstance(node.func.value, ast.Name):
                found.append(_Mutation(node, node.lineno, False))
    return found


def _first_rebinding(func: ast.FunctionDef | ast.AsyncFunctionDef, name: str) -> int | None:
    lines: list[int] = []
    for node in iter_scope(func):
        if isinstance(node, (ast.Assign, ast.AugAssign, ast.AnnAssign)):
            for target in assignment_targets(node):
                if isinstance(target, ast.Name) and target.id == name:
                    lines.append(node.lineno)
        elif isinstance(node, (ast.For, ast.AsyncFor)):
            if any(isinstance(n, ast.Name) and n.id == name for n in ast.walk(node.target)):
                lines.append(node.lineno)
        elif isinstance(node, ast.NamedExpr) and node.target.id == name:
            lines.append(node.lineno)
    return min(lines) if lines else None


def _returned_names(func: ast.FunctionDef | ast.AsyncFunctionDef) -> set[str]:
    names: set[str] = set()
    for node in iter_scope(func):
        if not isinstance(node, ast.Return) or node.value is None:
            continue
        values = node.value.elts if isinstance(node.value, ast.Tuple) else [node.value]
        names.update(v.id for v in values if isinstance(v, ast.Name))
    return names


def check_mutate_and_return(module: ParsedModule) -> list[LintDiagnostic]:
    """W009: Function mutates a frame parameter and returns it."""
    diagnostics: list[LintDiagnostic] = []

    for func in module.walk():
        if not isinstance(func, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        returned = _returned_names(func)
        if not returned:
            continue
        args = func.args
        params = [p.arg for p in (*args.posonlyargs, *args.args, *args.kwonlyargs)]

        for param in params:
            if param in ("self", "cls") or param not in returned:
                continue
            rebound_at = _first_rebinding(func, param)
            mutations = [
                m for m in _mutations(func, param)
                if rebound_at is None or m.line < rebound_at
            ]
            if not mutations:
                continue
            is_frame = module.frames.name_is_frame(param, func) or any(m.frame_only for m in mutations)
            if not is_frame:
                continue
            first = min(mutations, key=lambda m: m.line)
            diagnostics.append(
                make_diagnostic(
                    module,
                    "W009",
                    func,
                    f"Function '{func.name}' mutates its argument '{param}' "
                    f"(line {first.line}) and returns it.",
                )
            )

    return diagnostics


# ---------------------------------------------------------------------------
# I001 / I002: interchange records
# ---------------------------------------------------------------------------


def _dataclass_decorator(decorator: ast.expr) -> tuple[bool, bool]:
    """Return ``(is_dataclass, frozen)`` for a class decorator."""
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if dotted_name(target) not in ("dataclass", "dataclasses.dataclass"):
        return False, False
    frozen = isinstance(decorator, ast.Call) and any(
        kw.arg == "frozen" and isinstance(kw.value, ast.Constant) and kw.value.value is True
        for kw in decorator.keywords
    )
    return True, frozen


def check_mutable_frame_record(module: ParsedModule) -> list[LintDiagnostic]:
    """I001: Non-frozen dataclass with a DataFrame field."""
    diagnostics: list[LintDiagnostic] = []
    for node in module.walk():
        if not isinstance(node, ast.ClassDef):
            continue
        flags = [_dataclass_decorator(d) for d in node.decorator_list]
        if not any(is_dc for is_dc, _ in flags) or any(frozen for _, frozen in flags):
            continue
        frame_fields = [
            stmt.target.id
            for stmt in node.body
            if isinstance(stmt, ast.AnnAssign)
            and isinstance(stmt.target, ast.Name)
            and module.frames.annotation_is_frame(stmt.annotation)
        ]
        if frame_fields:
            fields = ", ".join(repr(f) for f in frame_fields)
            diagnostics.append(
                make_diagnostic(
                    module,
                    "I001",
                    node,
                    f"Dataclass '{node.name}' carries frame field(s) {fields} but is not frozen.",
                )
            )
    return diagnostics


def check_dict_interchange(module: ParsedModule) -> list[LintDiagnostic]:
    """I002: Function returns a dict literal holding frames."""
    diagnostics: list[LintDiagnostic] = []
    for func in module.walk():
        if not isinstance(func, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        for node in iter_scope(func):
            if not isinstance(node, ast.Return) or not isinstance(node.value, ast.Dict):
                continue
            if any(v is not None and module.is_frame(v) for v in node.value.values):
                diagnostics.append(
                    make_diagnostic(
                        module,
                        "I002",
                        node,
                        f"Function '{func.name}' returns frames in an untyped dict.",
                    )
                )
    return diagnostics
