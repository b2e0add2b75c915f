"""Tests for the framecheck error hierarchy."""

from __future__ import annotations

from pathlib import Path

import pytest

from framecheck.errors import (
    ConfigError,
    ErrorCategory,
    FramecheckError,
    InvalidConfigError,
    MissingConfigError,
    RuleRegistrationError,
    SourceParseError,
    UnknownRuleError,
)


class TestFramecheckError:
    def test_default_category(self):
        err = FramecheckError("boom")
        assert err.category == ErrorCategory.INTERNAL
        assert str(err) == "boom"

    def test_with_context_is_fluent(self):
        err = ConfigError("bad file").with_context(path="x.yaml")
        assert isinstance(err, ConfigError)
        assert err.context == {"path": "x.yaml"}

    def test_to_dict(self):
        cause = ValueError("inner")
        err = InvalidConfigError("select", "Q1", cause=cause)
        data = err.to_dict()
        assert data["error_type"] == "InvalidConfigError"
        assert data["category"] == "CONFIG"
        assert data["context"] == {"key": "select"}
        assert data["cause"] == "inner"
        assert err.__cause__ is cause

    def test_repr(self):
        assert repr(UnknownRuleError("Z9")) == "UnknownRuleError(\"Unknown rule or code: 'Z9'\", category=RULE)"

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (ConfigError("x"), ErrorCategory.CONFIG),
            (MissingConfigError("a.yaml"), ErrorCategory.CONFIG),
            (InvalidConfigError("k", 1), ErrorCategory.CONFIG),
            (SourceParseError("x"), ErrorCategory.PARSE),
            (UnknownRuleError("Z9"), ErrorCategory.RULE),
            (RuleRegistrationError("x"), ErrorCategory.RULE),
        ],
    )
    def test_categories(self, error, category):
        assert isinstance(error, FramecheckError)
        assert error.category == category


class TestSubclasses:
    def test_missing_config(self):
        err = MissingConfigError("conf/a.yaml")
        assert err.path == Path("conf/a.yaml")
        assert "conf/a.yaml" in err.message

    def test_invalid_config_default_message(self):
        err = InvalidConfigError("log_level", "LOUD")
        assert err.message == "Invalid configuration for log_level: 'LOUD'"

    def test_source_parse_error_location(self):
        err = SourceParseError("bad", path="a.py", line=3, column=7)
        assert err.path == Path("a.py")
        assert (err.line, err.column) == (3, 7)
        data = err.to_dict()
        assert data["path"] == "a.py"
        assert data["line"] == 3
