"""
Rule registry.

Every rule is a callable that takes a :class:`ParsedModule` and returns a
list of :class:`LintDiagnostic`. Built-in rules run in a fixed order;
custom rules registered with :func:`register_lint_rule` run after them.

Example::

    import ast
    from framecheck.rules import register_lint_rule
    from framecheck.diagnostics import LintDiagnostic, Severity

    def no_iterrows(module):
        return [
            LintDiagnostic(code="C100", severity=Severity.WARNING,
                           message="iterrows() is slow", path=module.path,
                           line=node.lineno)
            for node in module.walk()
            if isinstance(node, ast.Attribute) and node.attr == "iterrows"
        ]

    register_lint_rule("no_iterrows", no_iterrows, codes=("C100",))
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from framecheck.diagnostics import LintDiagnostic
from framecheck.errors import RuleRegistrationError, UnknownRuleError
from framecheck.logging import get_logger
from framecheck.rules.catalog import CATALOG
from framecheck.rules.columns import check_attribute_access, check_zero_filled_column
from framecheck.rules.indexing import check_chained_assignment
from framecheck.rules.merge import check_merge_contract
from framecheck.rules.mutation import (
    check_dict_interchange,
    check_inplace_mutation,
    check_mutable_frame_record,
    check_mutate_and_return,
)
from framecheck.rules.query import check_string_query
from framecheck.rules.schema import check_read_schema
from framecheck.source import ParsedModule

logger = get_logger(__name__)

# Type alias for lint rules: takes a ParsedModule, returns diagnostics
LintRule = Callable[[ParsedModule], list[LintDiagnostic]]


@dataclass(frozen=True)
class RuleSpec:
    """A named rule and the codes it can emit."""

    name: str
    check: LintRule
    codes: tuple[str, ...] = ()
    summary: str = ""
    builtin: bool = False


# Ordered list of built-in rules
_BUILT_IN_RULES: list[RuleSpec] = [
    RuleSpec("attribute_access", check_attribute_access, ("W001",),
             "Columns read or written as attributes", builtin=True),
    RuleSpec("chained_assignment", check_chained_assignment, ("E001",),
             "Writes through two chained selections", builtin=True),
    RuleSpec("inplace_mutation", check_inplace_mutation, ("W002",),
             "Calls with inplace=True", builtin=True),
    RuleSpec("read_schema", check_read_schema, ("W003", "W004"),
             "Readers without declared types or columns", builtin=True),
    RuleSpec("merge_contract", check_merge_contract, ("E002", "W005", "W006", "W010"),
             "Merges without validate/how/key", builtin=True),
    RuleSpec("zero_filled_column", check_zero_filled_column, ("W007",),
             "New columns filled with 0 or ''", builtin=True),
    RuleSpec("string_query", check_string_query, ("W008",),
             "query()/eval() string expressions", builtin=True),
    RuleSpec("mutate_and_return", check_mutate_and_return, ("W009",),
             "Functions that mutate and return their frame argument", builtin=True),
    RuleSpec("mutable_frame_record", check_mutable_frame_record, ("I001",),
             "Non-frozen dataclasses with frame fields", builtin=True),
    RuleSpec("dict_interchange", check_dict_interchange, ("I002",),
             "Frames returned in dict literals", builtin=True),
]

_RULES: list[RuleSpec] = []


def register_lint_rule(
    name: str,
    rule: LintRule,
    *,
    codes: tuple[str, ...] | list[str] = (),
    summary: str = "",
) -> RuleSpec:
    """Register a custom lint rule.

    Parameters
    ----------
    name
        Unique rule name (e.g. ``"no_iterrows"``).
    rule
        Callable that takes a ``ParsedModule`` and returns a list of
        ``LintDiagnostic`` objects.
    codes
        Codes the rule emits, shown by ``framecheck rules``.

    Raises
    ------
    RuleRegistrationError
        If the name is empty, already taken, or ``rule`` is not callable.
    """
    if not name:
        raise RuleRegistrationError("Rule name must not be empty")
    if not callable(rule):
        raise RuleRegistrationError(f"Rule {name!r} is not callable").with_context(rule=name)
    if any(spec.name == name for spec in iter_rules()):
        raise RuleRegistrationError(f"Rule {name!r} is already registered").with_context(rule=name)

    spec = RuleSpec(name=name, check=rule, codes=tuple(codes), summary=summary)
    _RULES.append(spec)
    logger.debug("lint_rule_registered", rule=name, codes=list(spec.codes))
    return spec


def iter_rules() -> Iterator[RuleSpec]:
    """Yield built-in rules, then custom rules, in run order."""
    yield from _BUILT_IN_RULES
    yield from _RULES


def list_lint_rules() -> list[str]:
    """Return names of all registered lint rules (built-in + custom)."""
    return [spec.name for spec in iter_rules()]


def get_rule(code_or_name: str) -> RuleSpec:
    """Find the rule with this name, or the rule that emits this code.

    Raises:
        UnknownRuleError: If no rule matches.
    """
    key = code_or_name.strip()
    for spec in iter_rules():
        if spec.name == key or key.upper() in spec.codes:
            return spec
    raise UnknownRuleError(code_or_name)


def known_codes() -> set[str]:
    """Catalog codes plus every code a registered rule declares."""
    codes = set(CATALOG)
    for spec in iter_rules():
        codes.update(spec.codes)
    return codes


def check_code_prefixes(prefixes: list[str]) -> None:
    """Reject ``select``/``ignore`` prefixes that match no known code.

    Raises:
        UnknownRuleError: For the first prefix that matches nothing.
    """
    codes = known_codes()
    for prefix in prefixes:
        if not any(code.startswith(prefix) for code in codes):
            raise UnknownRuleError(prefix, f"Code prefix {prefix!r} matches no known code")


def clear_custom_rules() -> None:
    """Remove all custom lint rules (built-in rules are preserved)."""
    _RULES.clear()


__all__ = [
    "LintRule",
    "RuleSpec",
    "check_code_prefixes",
    "clear_custom_rules",
    "get_rule",
    "iter_rules",
    "known_codes",
    "list_lint_rules",
    "register_lint_rule",
]
