"""Normalize one merge input into a 2-D labeled table.

The engine always aligns on row labels. Up-and-down inputs are therefore
transposed on the way in (:meth:`TableShaper.shape`) and back on the way out
(:meth:`TableShaper.orient`). Bare vectors become a single column in engine
orientation whatever the direction, so their element labels are always the
alignment key.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from tablemerge.config import settings as config
from tablemerge.config.settings import Settings
from tablemerge.core.errors import MultipleStatisticsWarning, TooManyDimensionsError
from tablemerge.core.report import WarningSink, emit
from tablemerge.core.types import LabeledTable, MergeDirection, is_default_index
from tablemerge.processing.normalize import trim_row_labels

logger = logging.getLogger(__name__)

TableInput = Union[
    LabeledTable, pd.DataFrame, pd.Series, np.ndarray, Mapping, Sequence[Any]
]

MAX_DIMENSIONS = 3


def _vector_table(series: pd.Series) -> LabeledTable:
    stat = series.name if series.name is not None else series.attrs.get("statistic")
    df = pd.DataFrame({0 if stat is None else stat: series.to_numpy()}, index=series.index)
    return LabeledTable(
        df,
        has_row_labels=not is_default_index(series.index),
        has_col_labels=stat is not None,
        name=series.attrs.get("name"),
        statistic=stat,
    )


def table_identity(x: object) -> Optional[str]:
    """The identity a caller attached to *x*, if any."""
    if isinstance(x, LabeledTable):
        return x.name
    if isinstance(x, (pd.DataFrame, pd.Series)):
        return x.attrs.get("name")
    return None


def label_single_column(x: TableInput, label: Any) -> TableInput:
    """
    Give a bare single column (or an unnamed vector) *label* as its column label.
    Anything that already carries a label, or has several columns, is returned as is.
    """
    if isinstance(x, LabeledTable):
        if x.shape[1] == 1 and not x.has_col_labels:
            df = x.frame.set_axis([label], axis=1)
            return x.with_frame(df, has_col_labels=True)
        return x
    if isinstance(x, pd.Series):
        if x.name is None and x.attrs.get("statistic") is None:
            return x.rename(label)
        return x
    if isinstance(x, pd.DataFrame):
        if x.shape[1] == 1 and is_default_index(x.columns):
            return x.set_axis([label], axis=1)
        return x
    if isinstance(x, Mapping):
        return pd.Series(dict(x), name=label)
    arr = np.asarray(x)
    if arr.ndim <= 1:
        return pd.Series(arr.reshape(-1), name=label)
    if arr.ndim == 2 and arr.shape[1] == 1:
        return LabeledTable.from_array(arr, col_labels=[label])
    return x


@dataclass
class TableShaper:
    """Turn vectors, matrices, frames and 3-axis arrays into engine-oriented tables."""

    settings: Optional[Settings] = None

    def _settings(self) -> Settings:
        return self.settings if self.settings is not None else config.settings

    def _collapse(self, label: str, sink: Optional[WarningSink]) -> None:
        emit(
            MultipleStatisticsWarning,
            f"'{label}' contains multiple statistics. Only using the first statistic.",
            sink,
        )

    def coerce(
        self,
        x: TableInput,
        *,
        label: str = "table",
        sink: Optional[WarningSink] = None,
    ) -> Tuple[LabeledTable, bool]:
        """Return ``(table, is_vector)`` in the caller's own orientation."""
        if isinstance(x, LabeledTable):
            return x, False
        if isinstance(x, pd.Series):
            return _vector_table(x), True
        if isinstance(x, Mapping):
            return _vector_table(pd.Series(dict(x))), True
        if isinstance(x, pd.DataFrame):
            ndim = 1 + x.columns.nlevels
            if ndim > MAX_DIMENSIONS:
                raise TooManyDimensionsError(ndim, label)
            if ndim == MAX_DIMENSIONS:
                self._collapse(x.attrs.get("name") or label, sink)
                first = x.columns.get_level_values(-1)[0]
                collapsed = x.xs(first, axis=1, level=-1)
                collapsed.attrs = dict(x.attrs)
                x = collapsed
            return LabeledTable.from_frame(x), False

        arr = np.asarray(x)
        if arr.ndim > MAX_DIMENSIONS:
            raise TooManyDimensionsError(arr.ndim, label)
        if arr.ndim == MAX_DIMENSIONS:
            self._collapse(label, sink)
            arr = arr[:, :, 0]
        if arr.ndim <= 1:
            return _vector_table(pd.Series(arr.reshape(-1))), True
        return LabeledTable.from_array(arr), False

    def shape(
        self,
        x: TableInput,
        direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
        *,
        label: str = "table",
        sink: Optional[WarningSink] = None,
    ) -> LabeledTable:
        """Coerce *x* and orient it so that the alignment key is the row labels."""
        direction = MergeDirection(direction)
        table, is_vector = self.coerce(x, label=label, sink=sink)
        if direction is MergeDirection.UP_AND_DOWN and not is_vector:
            table = table.transpose()
        if self._settings().TRIM_ROW_LABELS:
            table = trim_row_labels(table)
        logger.debug("shaped %s to %s (vector=%s)", label, table.shape, is_vector)
        return table

    @staticmethod
    def orient(
        table: LabeledTable, direction: Union[MergeDirection, str]
    ) -> LabeledTable:
        """Undo the engine orientation applied by :meth:`shape`."""
        if MergeDirection(direction) is MergeDirection.UP_AND_DOWN:
            return table.transpose()
        return table


def shape(
    x: TableInput,
    direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
    *,
    sink: Optional[WarningSink] = None,
) -> LabeledTable:
    return TableShaper().shape(x, direction, sink=sink)
