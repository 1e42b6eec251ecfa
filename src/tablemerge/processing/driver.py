"""N-way merge as a right fold of the pairwise merge.

``merge_all([t1, t2, t3])`` computes ``merge(t1, merge(t2, t3))``. The step
that brings in ``tables[i]`` is told which column labels occur more than once
across ``tables[i:]``, so a label shared by non-adjacent tables is still
disambiguated once the final merge puts them side by side.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set, Union

from tablemerge.config.settings import Settings
from tablemerge.core.report import WarningSink
from tablemerge.core.types import LabeledTable, MergeDirection, NonMatchingPolicy
from tablemerge.processing.pairwise import PairwiseMerger
from tablemerge.processing.shape import TableInput, label_single_column, table_identity

logger = logging.getLogger(__name__)

SUPPORTED_POLICIES = (NonMatchingPolicy.KEEP_ALL, NonMatchingPolicy.MATCHING_ONLY)


def _axis_labels(table: LabeledTable) -> List[Any]:
    return list(table.frame.columns) if table.has_col_labels else []


def duplicated_labels(tables: Iterable[LabeledTable]) -> Set[Any]:
    """Column labels (engine orientation) that occur more than once across *tables*."""
    counts: Counter = Counter()
    for t in tables:
        counts.update(_axis_labels(t))
    return {label for label, n in counts.items() if n > 1}


@dataclass
class MergeDriver:
    settings: Optional[Settings] = None
    merger: PairwiseMerger = field(default_factory=PairwiseMerger)

    def __post_init__(self) -> None:
        if self.settings is not None and self.merger.settings is None:
            self.merger.settings = self.settings
            if self.merger.shaper.settings is None:
                self.merger.shaper.settings = self.settings
            if self.merger.reconciler.settings is None:
                self.merger.reconciler.settings = self.settings

    def merge_all(
        self,
        tables: Union[Iterable[TableInput], Mapping],
        direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
        non_matching: Union[NonMatchingPolicy, str] = NonMatchingPolicy.KEEP_ALL,
        *,
        sink: Optional[WarningSink] = None,
    ) -> LabeledTable:
        direction = MergeDirection(direction)
        non_matching = NonMatchingPolicy(non_matching)
        if non_matching not in SUPPORTED_POLICIES:
            raise ValueError(
                f"merge_all supports {[p.value for p in SUPPORTED_POLICIES]}, "
                f"got {non_matching.value!r}; use merge_two instead"
            )

        if isinstance(tables, Mapping):
            items = [label_single_column(x, key) for key, x in tables.items()]
        else:
            items = list(tables)
        if not items:
            raise ValueError("merge_all needs at least one table")

        labels = [
            table_identity(x) or self.merger.placeholder(i + 1) for i, x in enumerate(items)
        ]
        shaper = self.merger.shaper
        shaped = [
            shaper.shape(x, direction, label=label, sink=sink)
            for x, label in zip(items, labels)
        ]
        if len(shaped) == 1:
            return shaper.orient(shaped[0], direction)

        n = len(shaped)
        acc, acc_label = shaped[-1], labels[-1]
        for i in range(n - 2, -1, -1):
            # a plain pair gets no extra labels; longer suffixes carry their duplicates
            extra = None if i == n - 2 else duplicated_labels(shaped[i:])
            logger.debug("fold step %d/%d, extra labels %s", n - 1 - i, n - 1, extra)
            acc = self.merger.merge_shaped(
                shaped[i],
                acc,
                direction,
                non_matching,
                extra,
                left_label=labels[i],
                right_label=acc_label,
                sink=sink,
            )
            acc_label = " + ".join(labels[i:])
        return shaper.orient(acc, direction)


def merge_all(
    tables: Union[Iterable[TableInput], Mapping],
    direction: Union[MergeDirection, str] = MergeDirection.SIDE_BY_SIDE,
    non_matching: Union[NonMatchingPolicy, str] = NonMatchingPolicy.KEEP_ALL,
    *,
    sink: Optional[WarningSink] = None,
) -> LabeledTable:
    """Merge one or more tables; see :class:`MergeDriver`."""
    return MergeDriver().merge_all(tables, direction, non_matching, sink=sink)
