"""Tests for W008 string queries."""

from __future__ import annotations


class TestStringQuery:
    def test_frame_query_flagged(self, codes):
        src = """
            import pandas as pd
            df = pd.DataFrame({"qty": [1]})
            late = df.query("qty > 0")
        """
        assert codes(src) == ["W008"]

    def test_boolean_mask_clean(self, codes):
        src = """
            import pandas as pd
            df = pd.DataFrame({"qty": [1]})
            late = df[df["qty"] > 0]
        """
        assert codes(src) == []

    def test_frame_eval_flagged(self, lint):
        src = """
            import pandas as pd
            df = pd.DataFrame({"a": [1], "b": [2]})
            out = df.eval("c = a + b")
        """
        result = lint(src)
        assert result.codes == ["W008"]
        assert "df.assign" in result.diagnostics[0].suggestion

    def test_pd_eval_flagged(self, codes):
        src = """
            import pandas as pd
            total = pd.eval("1 + 2")
        """
        assert codes(src) == ["W008"]

    def test_from_import_eval_flagged(self, codes):
        src = """
            from pandas import eval as pd_eval
            total = pd_eval("1 + 2")
        """
        assert codes(src) == ["W008"]

    def test_non_frame_query_clean(self, codes):
        src = """
            rows = session.query("select 1")
        """
        assert codes(src) == []

    def test_builtin_eval_clean(self, codes):
        src = """
            import pandas as pd
            value = eval("1 + 2")
        """
        assert codes(src) == []
