"""Merge labeled tables side-by-side or up-and-down, aligning on names."""
from __future__ import annotations

from tablemerge.core.errors import (
    DuplicateLabelError,
    MissingLabelError,
    MultipleStatisticsWarning,
    NoMatchingLabelsWarning,
    NoOverlapError,
    TableMergeError,
    TableMergeWarning,
    TooManyDimensionsError,
    UnnamedTableWarning,
)
from tablemerge.core.types import LabeledTable, MergeDirection, MergeWarning, NonMatchingPolicy
from tablemerge.processing import (
    LabelReconciler,
    MergeDriver,
    PairwiseMerger,
    TableShaper,
    merge_all,
    merge_two,
    reconcile,
    shape,
)

__version__ = "0.1.0"

__all__ = [
    "LabeledTable",
    "MergeDirection",
    "NonMatchingPolicy",
    "MergeWarning",
    "TableShaper",
    "LabelReconciler",
    "PairwiseMerger",
    "MergeDriver",
    "shape",
    "reconcile",
    "merge_two",
    "merge_all",
    "TableMergeError",
    "TooManyDimensionsError",
    "NoOverlapError",
    "MissingLabelError",
    "DuplicateLabelError",
    "TableMergeWarning",
    "NoMatchingLabelsWarning",
    "MultipleStatisticsWarning",
    "UnnamedTableWarning",
    "__version__",
]
