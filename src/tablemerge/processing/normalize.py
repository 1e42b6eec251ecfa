# src/tablemerge/processing/normalize.py
from __future__ import annotations

from typing import Literal, Optional

import pandas as pd
from pandas.api import types as ptypes

from tablemerge.core.types import LabeledTable

ValueKind = Literal["numeric", "text"]


def trim_label(x: object) -> object:
    if isinstance(x, str):
        return x.strip()
    return x


def trim_row_labels(table: LabeledTable) -> LabeledTable:
    """Strip surrounding whitespace from string row labels; other labels pass through."""
    if not table.has_row_labels:
        return table
    df = table.frame.copy()
    df.index = pd.Index([trim_label(x) for x in df.index], dtype=object)
    return table.with_frame(df)


def pad_rows(frame: pd.DataFrame, n: int) -> pd.DataFrame:
    """
    Positionally extend *frame* to *n* rows.
    - Labels are dropped; the result has a 0..n-1 index
    - New cells hold each column's own missing marker (NaN, NaT, <NA>, ...)
    """
    out = frame.reset_index(drop=True)
    if len(out) >= n:
        return out
    return out.reindex(pd.RangeIndex(n))


def _column_kind(col: pd.Series) -> Optional[ValueKind]:
    if ptypes.is_bool_dtype(col.dtype):
        return None
    if ptypes.is_numeric_dtype(col.dtype):
        return "numeric"
    if ptypes.is_string_dtype(col.dtype) and ptypes.infer_dtype(col, skipna=True) in (
        "string",
        "empty",
    ):
        return "text"
    return None


def value_kind(frame: pd.DataFrame) -> Optional[ValueKind]:
    """'numeric' or 'text' when every column has that kind, else None."""
    kinds = {_column_kind(frame.iloc[:, i]) for i in range(frame.shape[1])}
    if len(kinds) == 1:
        return kinds.pop()
    return None


def is_bindable(left: pd.DataFrame, right: pd.DataFrame) -> bool:
    """Whether the two tables can be combined into one single-typed matrix."""
    kind = value_kind(left)
    return kind is not None and kind == value_kind(right)


def to_matrix(frame: pd.DataFrame) -> pd.DataFrame:
    """Coerce to one dtype for all cells: float when numeric, object otherwise."""
    kind = value_kind(frame)
    if kind == "numeric":
        return frame.astype(float)
    return frame.astype(object)
