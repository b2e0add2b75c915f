"""
Static frame inference.

Decides, without running anything, which expressions in a module are
pandas DataFrames. The result is deliberately conservative: rules only
fire on expressions this module vouches for, so an unknown object named
``orders`` that was never built by pandas is left alone.

Architecture::

    ast.Module
        │
        ├── collect_aliases()  ──►  ImportAliases
        │                           (pd, np, from-imports)
        │
        └── FrameInference
              ├── one frame-name set per scope (module, each function)
              ├── seeded from DataFrame annotations
              ├── grown to a fixpoint from assignments
              └── is_frame(expr, scope)

Example::

    tree = ast.parse(source)
    inference = FrameInference(tree, collect_aliases(tree), build_parents(tree))
    inference.is_frame(node, inference.scope_of(node))
"""

from __future__ import annotations

import ast
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from framecheck.pandas_api import (
    FRAME_CONSTRUCTORS,
    FRAME_RETURNING_METHODS,
    INDEXERS,
)

Scope = ast.Module | ast.FunctionDef | ast.AsyncFunctionDef

_SCOPE_TYPES = (ast.Module, ast.FunctionDef, ast.AsyncFunctionDef)
_MASK_OPS = (ast.BitAnd, ast.BitOr, ast.BitXor)


@dataclass
class ImportAliases:
    """Names under which pandas and numpy are reachable in a module.

    Attributes:
        pandas_modules: Local names bound to the pandas module (``pd``).
        numpy_modules: Local names bound to numpy (``np``).
        pandas_names: Local name -> pandas attribute for from-imports.
        numpy_names: Local name -> numpy attribute for from-imports.
    """

    pandas_modules: set[str] = field(default_factory=set)
    numpy_modules: set[str] = field(default_factory=set)
    pandas_names: dict[str, str] = field(default_factory=dict)
    numpy_names: dict[str, str] = field(default_factory=dict)

    def pandas_attr(self, expr: ast.expr) -> str | None:
        """Return the pandas attribute ``expr`` refers to, e.g. ``"read_csv"``."""
        return _module_attr(expr, self.pandas_modules, self.pandas_names)

    def numpy_attr(self, expr: ast.expr) -> str | None:
        return _module_attr(expr, self.numpy_modules, self.numpy_names)


def _module_attr(expr: ast.expr, modules: set[str], names: dict[str, str]) -> str | None:
    if isinstance(expr, ast.Attribute) and isinstance(expr.value, ast.Name):
        if expr.value.id in modules:
            return expr.attr
        return None
    if isinstance(expr, ast.Name):
        return names.get(expr.id)
    return None


def collect_aliases(tree: ast.AST) -> ImportAliases:
    """Collect pandas/numpy import aliases anywhere in ``tree``.

    A module that never imports pandas is assumed to use the conventional
    ``pd`` alias; the same goes for numpy and ``np``.
    """
    aliases = ImportAliases()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                top = alias.name.split(".")[0]
                if alias.asname is not None and alias.name != top:
                    # import pandas.api.types as ptypes binds a submodule
                    continue
                local = alias.asname or top
                if top == "pandas":
                    aliases.pandas_modules.add(local)
                elif top == "numpy":
                    aliases.numpy_modules.add(local)
        elif isinstance(node, ast.ImportFrom) and node.module in ("pandas", "numpy"):
            target = aliases.pandas_names if node.module == "pandas" else aliases.numpy_names
            for alias in node.names:
                if alias.name != "*":
                    target[alias.asname or alias.name] = alias.name

    if not aliases.pandas_modules and not aliases.pandas_names:
        aliases.pandas_modules.add("pd")
    if not aliases.numpy_modules and not aliases.numpy_names:
        aliases.numpy_modules.add("np")
    return aliases


def build_parents(tree: ast.AST) -> dict[ast.AST, ast.AST]:
    """Map every node to its parent."""
    parents: dict[ast.AST, ast.AST] = {}
    for node in ast.walk(tree):
        for child in ast.iter_child_nodes(node):
            parents[child] = node
    return parents


def iter_scope(scope: ast.AST) -> Iterator[ast.AST]:
    """Yield the nodes that belong to ``scope``, not descending into nested functions.

    Class bodies belong to the enclosing scope; their methods are scopes
    of their own.
    """
    stack = list(ast.iter_child_nodes(scope))
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            # decorators and defaults are evaluated in the enclosing scope
            stack.extend(node.decorator_list)
            stack.extend(d for d in node.args.defaults if d is not None)
            stack.extend(d for d in node.args.kw_defaults if d is not None)
            continue
        stack.extend(ast.iter_child_nodes(node))


def function_params(func: ast.FunctionDef | ast.AsyncFunctionDef) -> list[ast.arg]:
    """All named parameters of ``func``, in declaration order."""
    args = func.args
    params = [*args.posonlyargs, *args.args, *args.kwonlyargs]
    if args.vararg is not None:
        params.append(args.vararg)
    if args.kwarg is not None:
        params.append(args.kwarg)
    return params


def dotted_name(expr: ast.expr) -> str | None:
    """``a.b.c`` for a Name/Attribute chain, else None."""
    parts: list[str] = []
    while isinstance(expr, ast.Attribute):
        parts.append(expr.attr)
        expr = expr.value
    if isinstance(expr, ast.Name):
        parts.append(expr.id)
        return ".".join(reversed(parts))
    return None


class FrameInference:
    """Per-scope knowledge of which names hold DataFrames.

    Parameters
    ----------
    tree
        Parsed module.
    aliases
        Import aliases for the module.
    parents
        Child -> parent map for ``tree``.
    name_patterns
        Compiled regexes; a name or attribute matching one is a frame.
    """

    def __init__(
        self,
        tree: ast.Module,
        aliases: ImportAliases,
        parents: dict[ast.AST, ast.AST],
        name_patterns: Iterable[re.Pattern[str]] = (),
    ) -> None:
        self.tree = tree
        self.aliases = aliases
        self._parents = parents
        self._patterns = list(name_patterns)
        self._frames: dict[ast.AST, set[str]] = {}
        self._bound: dict[ast.AST, set[str]] = {}

        scopes: list[Scope] = [tree]
        scopes.extend(
            node for node in ast.walk(tree) if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        )
        # Module first: functions may read module-level frames.
        for scope in scopes:
            self._analyse_scope(scope)

    # ------------------------------------------------------------------
    # Scope bookkeeping
    # ------------------------------------------------------------------

    def scope_of(self, node: ast.AST) -> Scope:
        """Return the innermost module/function scope containing ``node``."""
        current = self._parents.get(node)
        while current is not None and not isinstance(current, _SCOPE_TYPES):
            current = self._parents.get(current)
        return current if current is not None else self.tree

    def frame_names(self, scope: ast.AST) -> frozenset[str]:
        """Names known to hold frames in ``scope`` (excluding pattern matches)."""
        return frozenset(self._frames.get(scope, set()))

    def _analyse_scope(self, scope: Scope) -> None:
        frames: set[str] = set()
        bound: set[str] = set()
        self._frames[scope] = frames
        self._bound[scope] = bound

        if isinstance(scope, (ast.FunctionDef, ast.AsyncFunctionDef)):
            for param in function_params(scope):
                bound.add(param.arg)
                if param.annotation is not None and self.annotation_is_frame(param.annotation):
                    frames.add(param.arg)

        assignments: list[tuple[str, ast.expr]] = []
        for node in iter_scope(scope):
            if isinstance(node, ast.Assign):
                for target in node.targets:
                    if isinstance(target, ast.Name):
                        bound.add(target.id)
                        assignments.append((target.id, node.value))
            elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
                bound.add(node.target.id)
                if self.annotation_is_frame(node.annotation):
                    frames.add(node.target.id)
                elif node.value is not None:
                    assignments.append((node.target.id, node.value))
            elif isinstance(node, (ast.For, ast.AsyncFor, ast.With, ast.AsyncWith)):
                for target_node in _binding_targets(node):
                    bound.add(target_node)

        changed = True
        while changed:
            changed = False
            for name, value in assignments:
                if name not in frames and self.is_frame(value, scope):
                    frames.add(name)
                    changed = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def annotation_is_frame(self, annotation: ast.expr) -> bool:
        """True if an annotation mentions a pandas DataFrame anywhere inside it.

        String (forward-reference) annotations are parsed and inspected the
        same way, so ``"pd.DataFrame | None"`` counts.
        """
        for node in ast.walk(annotation):
            if isinstance(node, ast.Constant) and isinstance(node.value, str):
                try:
                    inner = ast.parse(node.value, mode="eval").body
                except SyntaxError:
                    continue
                if self.annotation_is_frame(inner):
                    return True
            elif isinstance(node, (ast.Name, ast.Attribute)):
                if self.aliases.pandas_attr(node) == "DataFrame":
                    return True
                name = dotted_name(node)
                if name is not None and name.startswith("pandas.") and name.endswith(".DataFrame"):
                    return True
        return False

    def name_matches_pattern(self, name: str) -> bool:
        return any(pattern.search(name) for pattern in self._patterns)

    def name_is_frame(self, name: str, scope: ast.AST) -> bool:
        if name in self._frames.get(scope, ()):
            return True
        if scope is not self.tree and name not in self._bound.get(scope, ()):
            if name in self._frames.get(self.tree, ()):
                return True
        return self.name_matches_pattern(name)

    def is_frame(self, expr: ast.AST, scope: ast.AST | None = None) -> bool:
        """True if ``expr`` evaluates to a DataFrame, as far as we can tell."""
        if scope is None:
            scope = self.scope_of(expr)

        if isinstance(expr, ast.Name):
            return self.name_is_frame(expr.id, scope)

        if isinstance(expr, ast.Attribute):
            if expr.attr == "T":
                return self.is_frame(expr.value, scope)
            return self.name_matches_pattern(expr.attr)

        if isinstance(expr, ast.Call):
            if self.aliases.pandas_attr(expr.func) in FRAME_CONSTRUCTORS:
                return True
            func = expr.func
            if isinstance(func, ast.Attribute) and func.attr in FRAME_RETURNING_METHODS:
                return self.is_frame(func.value, scope)
            return False

        if isinstance(expr, ast.Subscript):
            return self._selection_is_frame(expr, scope)

        return False

    def _selection_is_frame(self, expr: ast.Subscript, scope: ast.AST) -> bool:
        value = expr.value
        key = expr.slice

        if isinstance(value, ast.Attribute) and value.attr in ("loc", "iloc"):
            if not self.is_frame(value.value, scope):
                return False
            # df.loc[rows, "col"] is a Series; df.loc[rows, [cols]] a frame
            if isinstance(key, ast.Tuple) and len(key.elts) == 2:
                return not _is_scalar_key(key.elts[1])
            return True

        if not self.is_frame(value, scope):
            return False
        if isinstance(key, (ast.List, ast.Slice, ast.Compare)):
            return True
        if isinstance(key, ast.BinOp) and isinstance(key.op, _MASK_OPS):
            return True
        if isinstance(key, ast.UnaryOp) and isinstance(key.op, ast.Invert):
            return True
        return False

    def is_indexer(self, expr: ast.AST, scope: ast.AST | None = None) -> bool:
        """True for ``<frame>.loc`` / ``.iloc`` / ``.at`` / ``.iat``."""
        return (
            isinstance(expr, ast.Attribute)
            and expr.attr in INDEXERS
            and self.is_frame(expr.value, scope)
        )


def _is_scalar_key(key: ast.expr) -> bool:
    return isinstance(key, ast.Constant) and not isinstance(key.value, bool)


def _binding_targets(node: ast.For | ast.AsyncFor | ast.With | ast.AsyncWith) -> Iterator[str]:
    if isinstance(node, (ast.For, ast.AsyncFor)):
        targets: list[ast.expr] = [node.target]
    else:
        targets = [item.optional_vars for item in node.items if item.optional_vars is not None]
    for target in targets:
        for sub in ast.walk(target):
            if isinstance(sub, ast.Name):
                yield sub.id
