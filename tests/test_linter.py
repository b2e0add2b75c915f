"""Tests for the linter entry points: lint_source, lint_file, lint_paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from framecheck.diagnostics import LintDiagnostic, Severity
from framecheck.linter import lint_file, lint_paths, lint_source
from framecheck.settings import FramecheckSettings

_MIXED = """
import pandas as pd

orders = pd.read_csv("orders.csv")
items = pd.read_csv("items.csv", usecols=["id"], dtype={"id": "int64"})
joined = orders.merge(items, on="id", how="left")
"""


class TestLintSource:
    def test_clean_source(self):
        result = lint_source("import pandas as pd\nx = 1\n")
        assert result.passed
        assert result.diagnostics == []
        assert result.target == "<source>"

    def test_syntax_error_becomes_e999(self):
        result = lint_source("def broken(:\n", path="bad.py")
        assert result.codes == ["E999"]
        d = result.diagnostics[0]
        assert d.severity == Severity.ERROR
        assert d.path == Path("bad.py")
        assert d.line == 1
        assert not result.passed

    def test_diagnostics_sorted_by_position(self):
        result = lint_source(_MIXED)
        assert result.codes == ["W003", "W004", "E002"]
        assert [d.line for d in result.diagnostics] == [4, 4, 6]

    def test_select_prefix(self):
        result = lint_source(_MIXED, settings=FramecheckSettings(select=["E"]))
        assert result.codes == ["E002"]

    def test_ignore_wins_over_select(self):
        settings = FramecheckSettings(select=["W", "E"], ignore=["W004", "E"])
        assert lint_source(_MIXED, settings=settings).codes == ["W003"]

    def test_extra_rules(self):
        def flag_everything(module):
            return [LintDiagnostic(code="C001", severity=Severity.INFO, message="hi", path=module.path)]

        result = lint_source("x = 1\n", extra_rules=[flag_everything])
        assert result.codes == ["C001"]
        assert result.diagnostics[0].severity == Severity.INFO

    def test_path_recorded(self):
        result = lint_source(_MIXED, path="etl/orders.py")
        assert result.target == "etl/orders.py"
        assert {d.path for d in result.diagnostics} == {Path("etl/orders.py")}


class TestLintFile:
    def test_lint_file(self, write_py):
        path = write_py("""
            import pandas as pd
            df = pd.DataFrame()
            df.dropna(inplace=True)
        """)
        result = lint_file(path)
        assert result.target == str(path)
        assert result.codes == ["W002"]
        assert result.diagnostics[0].path == path

    def test_undecodable_file_becomes_e999(self, tmp_path):
        path = tmp_path / "latin.py"
        path.write_bytes(b"name = '\xff'\n")
        assert lint_file(path).codes == ["E999"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            lint_file(tmp_path / "missing.py")


class TestLintPaths:
    def test_directory(self, write_py, tmp_path):
        write_py("import pandas as pd\nx = 1\n", "clean.py")
        write_py("""
            import pandas as pd
            df = pd.DataFrame()
            df[df["a"] > 0]["b"] = 1
        """, "pkg/bad.py")
        write_py("def broken(:\n", "pkg/broken.py")
        write_py("import pandas as pd\ndf = pd.read_csv('x.csv')\n", "build/gen.py")

        report = lint_paths([tmp_path])
        assert report.files_checked == 3
        assert not report.passed
        assert report.counts_by_code() == {"E001": 1, "E999": 1}

    def test_exclude_from_settings(self, write_py, tmp_path):
        write_py("import pandas as pd\ndf = pd.read_csv('x.csv')\n", "generated/gen.py")
        report = lint_paths([tmp_path], FramecheckSettings(exclude=["generated"]))
        assert report.files_checked == 0
        assert report.passed

    def test_missing_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            lint_paths([tmp_path / "nope"])
