"""Tests for W003 / W004 reader schema declarations."""

from __future__ import annotations

import pytest


class TestReadSchema:
    def test_bare_read_csv(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv")
        """
        assert codes(src) == ["W003", "W004"]

    def test_fully_declared_read_csv_clean(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", usecols=["id", "qty"], dtype={"id": "int64", "qty": "int64"})
        """
        assert codes(src) == []

    def test_dtype_only(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", dtype={"id": "int64"})
        """
        assert codes(src) == ["W004"]

    def test_names_declares_columns(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", names=["id", "qty"], dtype=str)
        """
        assert codes(src) == []

    def test_chained_selection_declares_columns(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv")[["id", "qty"]]
        """
        assert codes(src) == ["W003"]

    def test_chained_astype_declares_types(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", usecols=["id"]).astype({"id": "int64"})
        """
        assert codes(src) == []

    def test_empty_astype_does_not_count(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", usecols=["id"]).astype()
        """
        assert codes(src) == ["W003"]

    @pytest.mark.parametrize("reader", ["read_parquet", "read_feather", "read_orc"])
    def test_typed_formats_need_columns_only(self, codes, reader):
        src = f"""
            import pandas as pd
            events = pd.{reader}("events.bin")
        """
        assert codes(src) == ["W004"]

    def test_parquet_with_columns_clean(self, codes):
        src = """
            import pandas as pd
            events = pd.read_parquet("events.parquet", columns=["id", "ts"])
        """
        assert codes(src) == []

    def test_read_sql_needs_dtype_only(self, codes):
        src = """
            import pandas as pd
            rows = pd.read_sql("select id from t", conn)
            typed = pd.read_sql("select id from t", conn, dtype={"id": "int64"})
        """
        assert codes(src) == ["W003"]

    def test_from_import_alias(self, codes):
        src = """
            from pandas import read_csv as rc
            orders = rc("orders.csv")
        """
        assert codes(src) == ["W003", "W004"]

    def test_forwarded_kwargs_skipped(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv", **options)
        """
        assert codes(src) == []


class TestSchemaValidators:
    def test_wrapped_in_validator(self, codes):
        src = """
            import pandas as pd
            orders = schema.validate(pd.read_csv("orders.csv"))
        """
        assert codes(src) == []

    def test_piped_to_validator(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv").pipe(schema.validate)
        """
        assert codes(src) == []

    def test_validated_later_in_scope(self, codes):
        src = """
            import pandas as pd

            def load(path):
                orders = pd.read_csv(path)
                schema.validate(orders)
                return orders
        """
        assert codes(src) == []

    def test_annotated_assignment_validated_later(self, codes):
        src = """
            import pandas as pd

            def load(path):
                orders: pd.DataFrame = pd.read_csv(path)
                validate(orders)
                return orders
        """
        assert codes(src) == []

    def test_validated_in_other_scope_does_not_count(self, codes):
        src = """
            import pandas as pd
            orders = pd.read_csv("orders.csv")

            def check():
                validate(orders)
        """
        assert codes(src) == ["W003", "W004"]

    def test_custom_validator_name(self, codes):
        src = """
            import pandas as pd
            orders = check_orders(pd.read_csv("orders.csv"))
        """
        assert codes(src) == ["W003", "W004"]
        assert codes(src, schema_validators=["check_orders"]) == []
