"""Schema declaration rules for frames read from external sources."""

from __future__ import annotations

import ast

from framecheck.diagnostics import LintDiagnostic
from framecheck.inference import iter_scope
from framecheck.pandas_api import READERS, TEXT_READERS, TYPED_READERS
from framecheck.rules.catalog import make_diagnostic
from framecheck.source import ParsedModule


def _call_name(call: ast.Call) -> str | None:
    func = call.func
    if isinstance(func, ast.Attribute):
        return func.attr
    if isinstance(func, ast.Name):
        return func.id
    return None


def _callable_name(expr: ast.expr) -> str | None:
    if isinstance(expr, ast.Attribute):
        return expr.attr
    if isinstance(expr, ast.Name):
        return expr.id
    return None


def _wrapped_by_validator(module: ParsedModule, call: ast.Call) -> bool:
    """``schema.validate(pd.read_csv(p))`` or ``pd.read_csv(p).pipe(schema.validate)``."""
    validators = set(module.settings.schema_validators)
    child: ast.AST = call
    parent = module.parent(call)
    while parent is not None and not isinstance(parent, ast.stmt):
        if isinstance(parent, ast.Call):
            if child in parent.args or any(kw.value is child for kw in parent.keywords):
                if _call_name(parent) in validators:
                    return True
            if (
                isinstance(parent.func, ast.Attribute)
                and parent.func.attr == "pipe"
                and parent.args
                and _callable_name(parent.args[0]) in validators
            ):
                return True
        child = parent
        parent = module.parent(parent)
    return False


def _validated_later(module: ParsedModule, call: ast.Call) -> bool:
    """``df = pd.read_csv(p)`` followed by ``validate(df)`` in the same scope."""
    statement = module.parent(call)
    if isinstance(statement, ast.Assign) and statement.value is call:
        targets = statement.targets
    elif isinstance(statement, ast.AnnAssign) and statement.value is call:
        targets = [statement.target]
    else:
        return False
    names = {t.id for t in targets if isinstance(t, ast.Name)}
    if not names:
        return False

    validators = set(module.settings.schema_validators)
    scope = module.frames.scope_of(call)
    for node in iter_scope(scope):
        if not isinstance(node, ast.Call) or node.lineno < statement.lineno:
            continue
        if _call_name(node) not in validators:
            continue
        arguments = [*node.args, *(kw.value for kw in node.keywords)]
        if any(isinstance(arg, ast.Name) and arg.id in names for arg in arguments):
            return True
    return False


def _selected_columns(module: ParsedModule, call: ast.Call) -> bool:
    parent = module.parent(call)
    return (
        isinstance(parent, ast.Subscript)
        and parent.value is call
        and isinstance(parent.slice, ast.List)
    )


def _astyped(module: ParsedModule, call: ast.Call) -> bool:
    parent = module.parent(call)
    if not (isinstance(parent, ast.Attribute) and parent.value is call and parent.attr == "astype"):
        return False
    outer = module.parent(parent)
    return isinstance(outer, ast.Call) and bool(outer.args or outer.keywords)


def check_read_schema(module: ParsedModule) -> list[LintDiagnostic]:
    """W003 / W004: reader call without declared types or columns."""
    diagnostics: list[LintDiagnostic] = []

    for node in module.walk():
        if not isinstance(node, ast.Call):
            continue
        reader = module.aliases.pandas_attr(node.func)
        if reader not in READERS:
            continue
        if any(kw.arg is None for kw in node.keywords):
            continue
        if _wrapped_by_validator(module, node) or _validated_later(module, node):
            continue

        keywords = {kw.arg for kw in node.keywords}
        label = f"{ast.unparse(node.func)}()"

        if reader in TEXT_READERS:
            dtype_keyword, column_keywords = TEXT_READERS[reader]
            if dtype_keyword not in keywords and not _astyped(module, node):
                diagnostics.append(
                    make_diagnostic(
                        module, "W003", node,
                        f"{label} infers column types from the data.",
                    )
                )
        else:
            column_keywords = TYPED_READERS[reader]

        if column_keywords is None:
            continue
        if keywords & set(column_keywords) or _selected_columns(module, node):
            continue
        diagnostics.append(
            make_diagnostic(
                module, "W004", node,
                f"{label} does not declare the expected columns.",
            )
        )

    return diagnostics
