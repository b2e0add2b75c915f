"""Tests for import alias collection and frame inference."""

from __future__ import annotations

import ast

from framecheck.inference import collect_aliases, dotted_name, iter_scope


def _function(module, name):
    return next(
        node for node in ast.walk(module.tree)
        if isinstance(node, ast.FunctionDef) and node.name == name
    )


# ---------------------------------------------------------------------------
# Import aliases
# ---------------------------------------------------------------------------

class TestCollectAliases:
    def test_module_aliases(self):
        tree = ast.parse("import pandas as pandas_mod\nimport numpy as np\n")
        aliases = collect_aliases(tree)
        assert aliases.pandas_modules == {"pandas_mod"}
        assert aliases.numpy_modules == {"np"}

    def test_from_imports(self):
        tree = ast.parse("from pandas import read_csv as rc, DataFrame\n")
        aliases = collect_aliases(tree)
        assert aliases.pandas_names == {"rc": "read_csv", "DataFrame": "DataFrame"}
        assert aliases.pandas_modules == set()

    def test_conventional_alias_assumed(self):
        aliases = collect_aliases(ast.parse("x = 1\n"))
        assert aliases.pandas_modules == {"pd"}
        assert aliases.numpy_modules == {"np"}

    def test_submodule_alias_is_not_pandas(self):
        aliases = collect_aliases(ast.parse("import pandas.api.types as ptypes\n"))
        assert "ptypes" not in aliases.pandas_modules

    def test_pandas_attr(self):
        tree = ast.parse("import pandas as p\np.read_csv\nother.read_csv\n")
        aliases = collect_aliases(tree)
        first, second = (stmt.value for stmt in tree.body[1:])
        assert aliases.pandas_attr(first) == "read_csv"
        assert aliases.pandas_attr(second) is None


# ---------------------------------------------------------------------------
# Frame inference
# ---------------------------------------------------------------------------

class TestFrameInference:
    def test_module_frames(self, parse):
        module = parse("""
            import pandas as pd
            raw = pd.read_csv("x.csv")
            clean = raw.dropna()
            subset = raw[["a", "b"]]
            column = raw["a"]
            rows = raw[raw["a"] > 0]
            flipped = raw.T
            n = len(raw)
        """)
        assert module.frames.frame_names(module.tree) == {"raw", "clean", "subset", "rows", "flipped"}

    def test_fixpoint_independent_of_order(self, parse):
        module = parse("""
            import pandas as pd

            def build():
                for _ in range(2):
                    b = a.copy()
                    a = pd.DataFrame()
        """)
        func = _function(module, "build")
        assert module.frames.frame_names(func) == {"a", "b"}

    def test_annotations(self, parse):
        module = parse("""
            from typing import Optional
            import pandas as pd

            def f(x: "pd.DataFrame", y: Optional[pd.DataFrame], z: int, w: pandas.core.frame.DataFrame):
                pass
        """)
        assert module.frames.frame_names(_function(module, "f")) == {"x", "y", "w"}

    def test_read_html_returns_a_list_not_a_frame(self, parse):
        module = parse("""
            import pandas as pd
            tables = pd.read_html("page.html")
            first = tables[0]
        """)
        assert module.frames.frame_names(module.tree) == frozenset()

    def test_other_library_frame_not_pandas(self, parse):
        module = parse("""
            import pandas as pd
            import polars as pl

            def f(x: pl.DataFrame):
                pass
        """)
        assert module.frames.frame_names(_function(module, "f")) == frozenset()

    def test_loc_with_scalar_column_is_series(self, parse):
        module = parse("""
            import pandas as pd
            df_raw = pd.DataFrame()
            one = df_raw.loc[:, "a"]
            many = df_raw.loc[:, ["a", "b"]]
            rows = df_raw.iloc[0:5]
        """)
        assert module.frames.frame_names(module.tree) == {"df_raw", "many", "rows"}

    def test_default_name_patterns(self, parse):
        module = parse("x = 1\n")
        frames = module.frames
        assert frames.name_matches_pattern("df")
        assert frames.name_matches_pattern("df_orders")
        assert frames.name_matches_pattern("orders_df")
        assert frames.name_matches_pattern("orders_frame")
        assert not frames.name_matches_pattern("dfs")

    def test_custom_name_patterns(self, parse):
        module = parse("x = 1\n", frame_name_patterns=["^tbl_"])
        assert module.frames.name_matches_pattern("tbl_orders")
        assert not module.frames.name_matches_pattern("df")

    def test_self_attribute_matching_pattern(self, parse):
        module = parse("""
            class Loader:
                def total(self):
                    return self.df
        """)
        ret = next(node for node in ast.walk(module.tree) if isinstance(node, ast.Return))
        assert module.is_frame(ret.value)

    def test_is_indexer(self, parse):
        module = parse("""
            import pandas as pd
            df = pd.DataFrame()
            x = df.loc
            y = cfg.loc
        """)
        first, second = (stmt.value for stmt in module.tree.body[2:])
        assert module.frames.is_indexer(first)
        assert not module.frames.is_indexer(second)


class TestHelpers:
    def test_dotted_name(self):
        expr = ast.parse("a.b.c", mode="eval").body
        assert dotted_name(expr) == "a.b.c"
        assert dotted_name(ast.parse("f().x", mode="eval").body) is None

    def test_iter_scope_skips_nested_function_bodies(self):
        tree = ast.parse(
            "def outer():\n"
            "    a = 1\n"
            "    def inner(x=default):\n"
            "        b = 2\n"
        )
        outer = tree.body[0]
        names = {n.id for n in iter_scope(outer) if isinstance(n, ast.Name)}
        assert "a" in names
        assert "default" in names
        assert "b" not in names
