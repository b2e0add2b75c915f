"""
Facts about the pandas API that the rules match against.

Frame members are read from the installed pandas so that attribute
access on a real method or property (``df.shape``, ``df.plot``) is never
mistaken for column access.
"""

from __future__ import annotations

import pandas as pd

#: Every public and private name defined on ``DataFrame``.
FRAME_MEMBERS: frozenset[str] = frozenset(dir(pd.DataFrame))

#: Location-based indexers.
INDEXERS: frozenset[str] = frozenset({"loc", "iloc", "at", "iat"})

# reader -> (dtype keyword, column keywords)
# A column keyword tuple of ``None`` means the reader declares fields in
# its query text; an empty tuple means only a chained ``[[...]]``
# selection can declare them.
TEXT_READERS: dict[str, tuple[str, tuple[str, ...] | None]] = {
    "read_csv": ("dtype", ("usecols", "names")),
    "read_table": ("dtype", ("usecols", "names")),
    "read_fwf": ("dtype", ("usecols", "names", "colspecs")),
    "read_clipboard": ("dtype", ("usecols", "names")),
    "read_excel": ("dtype", ("usecols", "names")),
    "read_json": ("dtype", ()),
    "read_xml": ("dtype", ("names",)),
    "read_sql": ("dtype", None),
    "read_sql_query": ("dtype", None),
    "read_sql_table": ("dtype", ("columns",)),
}

# Self-describing formats carry their types; only fields must be declared.
TYPED_READERS: dict[str, tuple[str, ...]] = {
    "read_parquet": ("columns",),
    "read_feather": ("columns",),
    "read_orc": ("columns",),
    "read_stata": ("columns",),
    "read_hdf": ("columns",),
    "read_spss": ("usecols",),
    "read_pickle": (),
}

READERS: frozenset[str] = frozenset(TEXT_READERS) | frozenset(TYPED_READERS)

#: Module-level pandas callables that return a DataFrame.
FRAME_CONSTRUCTORS: frozenset[str] = READERS | frozenset(
    {
        "DataFrame",
        "merge",
        "merge_asof",
        "merge_ordered",
        "concat",
        "pivot",
        "pivot_table",
        "crosstab",
        "get_dummies",
        "json_normalize",
        "melt",
        "wide_to_long",
    }
)

#: DataFrame methods whose result is again a DataFrame.
FRAME_RETURNING_METHODS: frozenset[str] = frozenset(
    {
        "abs",
        "add_prefix",
        "add_suffix",
        "apply",
        "assign",
        "astype",
        "bfill",
        "clip",
        "combine_first",
        "convert_dtypes",
        "copy",
        "describe",
        "diff",
        "drop",
        "drop_duplicates",
        "droplevel",
        "dropna",
        "explode",
        "ffill",
        "fillna",
        "filter",
        "head",
        "infer_objects",
        "interpolate",
        "join",
        "mask",
        "melt",
        "merge",
        "nlargest",
        "nsmallest",
        "pipe",
        "pivot",
        "pivot_table",
        "query",
        "reindex",
        "rename",
        "rename_axis",
        "replace",
        "reset_index",
        "round",
        "sample",
        "select_dtypes",
        "set_axis",
        "set_index",
        "shift",
        "sort_index",
        "sort_values",
        "tail",
        "transpose",
        "where",
    }
)

#: Methods that modify the frame they are called on.
MUTATING_METHODS: frozenset[str] = frozenset({"insert", "pop", "update", "__setitem__", "__delitem__"})

#: Keywords that name a merge key.
MERGE_KEY_KEYWORDS: frozenset[str] = frozenset({"on", "left_on", "right_on", "left_index", "right_index"})

#: Keywords that only make sense on a frame merge.
MERGE_ONLY_KEYWORDS: frozenset[str] = frozenset(
    {"how", "on", "left_on", "right_on", "left_index", "right_index", "validate", "suffixes", "indicator"}
)

#: ``validate=`` values that never abort.
UNCHECKED_CARDINALITIES: frozenset[str] = frozenset({"many_to_many", "m:m"})

#: numpy factories that produce zero filler.
ZERO_FACTORIES: frozenset[str] = frozenset({"zeros", "zeros_like"})
