"""Tests for E001 chained assignment."""

from __future__ import annotations

_HEADER = """
    import pandas as pd
    df = pd.DataFrame({"qty": [1], "status": ["x"]})
"""


class TestChainedAssignment:
    def test_mask_then_column(self, codes):
        assert codes(_HEADER + """
    df[df["qty"] > 0]["status"] = "open"
""") == ["E001"]

    def test_loc_then_column(self, codes):
        assert codes(_HEADER + """
    df.loc[df["qty"] > 0]["status"] = "open"
""") == ["E001"]

    def test_column_then_iloc(self, codes):
        assert codes(_HEADER + """
    df["status"].iloc[0] = "open"
""") == ["E001"]

    def test_augmented_assignment(self, codes):
        assert codes(_HEADER + """
    df["qty"][0] += 1
""") == ["E001"]

    def test_single_loc_clean(self, codes):
        assert codes(_HEADER + """
    df.loc[df["qty"] > 0, "status"] = "open"
""") == []

    def test_plain_column_assignment_clean(self, codes):
        assert codes(_HEADER + """
    df["status"] = "open"
""") == []

    def test_nested_dict_not_flagged(self, codes):
        src = """
            config = {"a": {}}
            config["a"]["b"] = 1
        """
        assert codes(src) == []

    def test_message_names_target(self, lint):
        result = lint(_HEADER + """
    df["status"].iloc[0] = "open"
""")
        d = result.diagnostics[0]
        assert "df['status'].iloc[0]" in d.message
        assert d.suggestion.startswith("Select rows and column in one .loc call")
        assert not result.passed
