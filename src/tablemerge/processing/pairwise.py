"""Merge two tables by aligning their row labels (or column labels, up-and-down).

Steps, in engine orientation (rows are always the alignment key):

  1. shape both inputs
  2. no row labels on either side -> positional bind, done
  3. validate labels (overlap, missing, duplicated)
  4. disambiguate colliding column labels with the table identity
  5. join with the pandas merge kind matching the non-matching policy
  6. restore an intuitive row order
  7. orient back and coerce to a single-typed matrix where possible
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, List, Optional, Union

import pandas as pd
from pandas.api import types as ptypes

from tablemerge.config import settings as config
from tablemerge.config.settings import Settings
from tablemerge.core.errors import (
    DuplicateLabelError,
    MissingLabelError,
    NoMatchingLabelsWarning,
    NoOverlapError,
    UnnamedTableWarning,
)
from tablemerge.core.report import WarningSink, emit
from tablemerge.core.types import LabeledTable, MergeDirection, NonMatchingPolicy
from tablemerge.processing.normalize import is_bindable, pad_rows, to_matrix
from tablemerge.processing.reconcile import LabelReconciler
from tablemerge.processing.shape import TableInput, TableShaper, table_identity

logger = logging.getLogger(__name__)


def _is_missing(x: Any) -> bool:
    return ptypes.is_scalar(x) and bool(pd.isna(x))


def check_missing_labels(table: LabeledTable, label: str) -> None:
    positions = [i + 1 for i, x in enumerate(table.frame.index) if _is_missing(x)]
    if positions:
        raise MissingLabelError(positions, label)


def check_duplicate_labels(table: LabeledTable, label: str) -> None:
    labels = list(table.frame.index)
    counts = Counter(labels)
    dups: Dict[Hashable, List[int]] = {}
    for i, x in enumerate(labels):
        if counts[x] > 1:
            dups.setdefault(x, []).append(i + 1)
    if dups:
        raise DuplicateLabelError(dups, label)


@dataclass(frozen=True)
class _Unlabeled:
    """Stand-in label for a column without one; never equal to a caller label."""

    position: int


def _positional_columns(table: LabeledTable, offset: int) -> pd.DataFrame:
    df = table.frame
    if table.has_col_labels:
        return df
    placeholders = [_Unlabeled(i) for i in range(offset, offset + df.shape[1])]
    return df.set_axis(pd.Index(placeholders, dtype=object), axis=1)


def _final_columns(
    df: pd.DataFrame, left: LabeledTable, right: LabeledTable
) -> tuple[pd.DataFrame, bool]:
    """Columns that never had a label become '' once the other side is labeled."""
    if not left.has_col_labels and not right.has_col_labels:
        return df.set_axis(pd.RangeIndex(df.shape[1]), axis=1), False
    n_left = left.shape[1]
    labels = [
        c
        if (left.has_col_labels if i < n_left else right.has_col_labels)
        else ""
        for i, c in enumerate(df.columns)
    ]
    return df.set_axis(labels, axis=1), True


@dataclass
class PairwiseMerger:
    """Merge a left and a right table into one (see module docstring)."""

    settings: Optional[Settings] = None
    shaper: TableShaper = field(default_factory=TableShaper)
    reconciler: LabelReconciler = field(default_factory=LabelReconciler)

    def __post_init__(self) -> None:
        if self.settings is not None:
            if self.shaper.settings is None:
                self.shaper.settings = self.settings
            if self.reconciler.settings is None:
                self.reconciler.settings = self.settings

    def _settings(self) -> Settings:
        return self.settings if self.settings is not None else config.settings

    def placeholder(self, index: int) -> str:
        return self._settings().UNNAMED_TABLE_TEMPLATE.format(index=index)

    # ------------------------------------------------------------------
    def merge(
        self,
        left: TableInput,
        right: TableInput,
        direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
        non_matching: Union[NonMatchingPolicy, str] = NonMatchingPolicy.KEEP_ALL,
        disambiguation_labels: Optional[Iterable[Any]] = None,
        *,
        sink: Optional[WarningSink] = None,
    ) -> LabeledTable:
        direction = MergeDirection(direction)
        non_matching = NonMatchingPolicy(non_matching)
        left_label = table_identity(left) or self.placeholder(1)
        right_label = table_identity(right) or self.placeholder(2)

        lt = self.shaper.shape(left, direction, label=left_label, sink=sink)
        rt = self.shaper.shape(right, direction, label=right_label, sink=sink)
        merged = self.merge_shaped(
            lt,
            rt,
            direction,
            non_matching,
            disambiguation_labels,
            left_label=left_label,
            right_label=right_label,
            sink=sink,
        )
        return self.shaper.orient(merged, direction)

    # ------------------------------------------------------------------
    def merge_shaped(
        self,
        left: LabeledTable,
        right: LabeledTable,
        direction: MergeDirection,
        non_matching: NonMatchingPolicy,
        disambiguation_labels: Optional[Iterable[Any]] = None,
        *,
        left_label: str,
        right_label: str,
        sink: Optional[WarningSink] = None,
    ) -> LabeledTable:
        """Merge two tables already in engine orientation; the result stays in it."""
        if not left.has_row_labels or not right.has_row_labels:
            return self._bind_positionally(left, right, direction, sink)

        left_rows = list(left.frame.index)
        right_rows = list(right.frame.index)

        if non_matching is NonMatchingPolicy.MATCHING_ONLY and not set(left_rows) & set(
            right_rows
        ):
            raise NoOverlapError(
                f"{direction.axis_kind}s",
                direction.other.value.lower(),
                left_label,
                right_label,
            )
        check_missing_labels(left, left_label)
        check_missing_labels(right, right_label)
        check_duplicate_labels(left, left_label)
        check_duplicate_labels(right, right_label)

        lf, rf = self._disambiguate(
            left, right, set(disambiguation_labels or ()), left_label, sink
        )
        joined = lf.merge(rf, how=non_matching.how, left_index=True, right_index=True)

        order = self._row_order(left_rows, right_rows, non_matching)
        joined = joined.reindex(pd.Index(order, dtype=object))
        logger.debug(
            "merged %s x %s -> %s (%s)", left.shape, right.shape, joined.shape, non_matching.value
        )

        joined, has_cols = _final_columns(joined, left, right)
        if direction is MergeDirection.UP_AND_DOWN or is_bindable(left.frame, right.frame):
            joined = to_matrix(joined)
        return LabeledTable(joined, has_row_labels=True, has_col_labels=has_cols)

    # ------------------------------------------------------------------
    def _bind_positionally(
        self,
        left: LabeledTable,
        right: LabeledTable,
        direction: MergeDirection,
        sink: Optional[WarningSink],
    ) -> LabeledTable:
        kind = direction.axis_kind
        emit(
            NoMatchingLabelsWarning,
            f"There are no matching {kind} names. Merging is based on {kind} index order.",
            sink,
        )
        n = max(left.shape[0], right.shape[0])
        lf = pad_rows(_positional_columns(left, 0), n)
        rf = pad_rows(_positional_columns(right, left.shape[1]), n)
        bound, has_cols = _final_columns(pd.concat([lf, rf], axis=1), left, right)

        source = left if left.has_row_labels else right if right.has_row_labels else None
        if source is not None:
            labels = list(source.frame.index)
            bound.index = pd.Index(labels + [""] * (n - len(labels)), dtype=object)

        if direction is MergeDirection.UP_AND_DOWN or is_bindable(lf, rf):
            bound = to_matrix(bound)
        return LabeledTable(
            bound, has_row_labels=source is not None, has_col_labels=has_cols
        )

    def _disambiguate(
        self,
        left: LabeledTable,
        right: LabeledTable,
        extra: set,
        left_label: str,
        sink: Optional[WarningSink],
    ) -> tuple[pd.DataFrame, pd.DataFrame]:
        """
        Prefix colliding column labels with the table identity.
        - the left side is always prefixed, with a placeholder when unnamed
        - the right side only when it is named; an unnamed right table is the
          output of an earlier merge and already carries its prefixes
        """
        sep = self._settings().DISAMBIGUATION_SEPARATOR
        lf = _positional_columns(left, 0)
        rf = _positional_columns(right, left.shape[1])
        lcols = set(lf.columns) if left.has_col_labels else set()
        rcols = set(rf.columns) if right.has_col_labels else set()

        hit_left = {c for c in lcols if c in extra or c in rcols}
        hit_right = {c for c in rcols if c in extra or c in lcols}

        if hit_left:
            if not left.name:
                emit(
                    UnnamedTableWarning,
                    f"Assign a name to '{left_label}' (LabeledTable.name or "
                    f"DataFrame.attrs['name']) so its columns can be disambiguated.",
                    sink,
                )
            prefix = left.name or left_label
            lf = lf.set_axis(
                [f"{prefix}{sep}{c}" if c in hit_left else c for c in lf.columns], axis=1
            )
        if hit_right and right.name:
            rf = rf.set_axis(
                [f"{right.name}{sep}{c}" if c in hit_right else c for c in rf.columns],
                axis=1,
            )
        return lf, rf

    def _row_order(
        self, left_rows: List[Any], right_rows: List[Any], non_matching: NonMatchingPolicy
    ) -> List[Any]:
        if non_matching is NonMatchingPolicy.MATCHING_ONLY:
            shared = set(right_rows)
            return [x for x in left_rows if x in shared]
        if non_matching is NonMatchingPolicy.KEEP_ALL_FROM_FIRST:
            return left_rows
        if non_matching is NonMatchingPolicy.KEEP_ALL_FROM_SECOND:
            return right_rows
        return self.reconciler.reconcile(left_rows, right_rows)


def merge_two(
    left: TableInput,
    right: TableInput,
    direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
    non_matching: Union[NonMatchingPolicy, str] = NonMatchingPolicy.KEEP_ALL,
    disambiguation_labels: Optional[Iterable[Any]] = None,
    *,
    sink: Optional[WarningSink] = None,
) -> LabeledTable:
    """Merge *left* and *right*; see :class:`PairwiseMerger`."""
    return PairwiseMerger().merge(
        left, right, direction, non_matching, disambiguation_labels, sink=sink
    )
