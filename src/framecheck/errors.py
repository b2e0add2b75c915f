"""
Structured error types for framecheck.

Every failure the library raises on purpose derives from
:class:`FramecheckError`, which carries a category, a free-form context
mapping, and an optional chained cause. The CLI turns these into exit
code 2; anything else is a bug.

Architecture:
    ::

        FramecheckError  (category, context, cause)
        ├── ConfigError            CONFIG
        │   ├── MissingConfigError
        │   └── InvalidConfigError
        ├── SourceParseError       PARSE
        ├── UnknownRuleError       RULE
        └── RuleRegistrationError  RULE

Examples:
    >>> err = InvalidConfigError("select", "Q1")
    >>> err.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> err.to_dict()["error_type"]
    'InvalidConfigError'

Guardrails:
    ❌ DON'T: raise bare ``Exception`` from library code
    ✅ DO: pick the closest FramecheckError subclass

    ❌ DON'T: drop the original exception when wrapping
    ✅ DO: pass it as ``cause=``
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any


class ErrorCategory(str, Enum):
    """Broad classification used for reporting and exit codes."""

    CONFIG = "CONFIG"
    PARSE = "PARSE"
    RULE = "RULE"
    INTERNAL = "INTERNAL"


class FramecheckError(Exception):
    """Base exception for all framecheck errors.

    Subclasses set ``default_category``. Extra metadata goes in
    ``context`` and is emitted by :meth:`to_dict` for structured logs.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FramecheckError:
        """Add context to this error (fluent API).

        Usage:
            raise ConfigError("bad file").with_context(path=str(path))
        """
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(FramecheckError):
    """Configuration could not be loaded or is invalid."""

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """An explicitly requested config file does not exist."""

    def __init__(self, path: Path | str, message: str | None = None):
        self.path = Path(path)
        super().__init__(message or f"Config file not found: {self.path}")
        self.context["path"] = str(self.path)


class InvalidConfigError(ConfigError):
    """A configuration key or value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, **kwargs: Any):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", **kwargs)
        self.context.setdefault("key", key)


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class SourceParseError(FramecheckError):
    """A source file could not be decoded or parsed as Python."""

    default_category = ErrorCategory.PARSE

    def __init__(
        self,
        message: str,
        *,
        path: Path | str | None = None,
        line: int | None = None,
        column: int | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.path = Path(path) if path is not None else None
        self.line = line
        self.column = column

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.path is not None:
            result["path"] = str(self.path)
        if self.line is not None:
            result["line"] = self.line
        return result


# =============================================================================
# RULE ERRORS
# =============================================================================


class UnknownRuleError(FramecheckError):
    """A code or rule name does not match any registered rule."""

    default_category = ErrorCategory.RULE

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or f"Unknown rule or code: {code!r}")


class RuleRegistrationError(FramecheckError):
    """A custom rule could not be registered."""

    default_category = ErrorCategory.RULE
