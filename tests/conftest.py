"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
import sys
import textwrap
from pathlib import Path

import pytest
import structlog

from framecheck.diagnostics import LintResult
from framecheck.linter import lint_source
from framecheck.rules import clear_custom_rules
from framecheck.settings import FramecheckSettings
from framecheck.source import ParsedModule, parse_module


@pytest.fixture
def lint():
    """Lint a dedented snippet; returns the LintResult."""

    def _lint(source: str, **settings) -> LintResult:
        return lint_source(textwrap.dedent(source), settings=FramecheckSettings(**settings))

    return _lint


@pytest.fixture
def codes(lint):
    """Lint a dedented snippet; returns the reported codes in order."""

    def _codes(source: str, **settings) -> list[str]:
        return lint(source, **settings).codes

    return _codes


@pytest.fixture
def parse():
    """Parse a dedented snippet into a ParsedModule."""

    def _parse(source: str, **settings) -> ParsedModule:
        return parse_module(textwrap.dedent(source), settings=FramecheckSettings(**settings))

    return _parse


@pytest.fixture
def write_py(tmp_path):
    """Write a dedented Python file under tmp_path and return its path."""

    def _write(content: str, filename: str = "etl.py") -> Path:
        path = tmp_path / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_custom_rules():
    yield
    clear_custom_rules()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep FRAMECHECK_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("FRAMECHECK_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() so handlers never point at a closed capture stream."""
    yield
    structlog.reset_defaults()
    logging.basicConfig(stream=sys.__stderr__, level=logging.WARNING, force=True)
