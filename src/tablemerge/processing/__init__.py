from .shape import TableShaper, shape, label_single_column
from .reconcile import LabelReconciler, reconcile
from .pairwise import PairwiseMerger, merge_two
from .driver import MergeDriver, merge_all, duplicated_labels

__all__ = [
    "TableShaper",
    "shape",
    "label_single_column",
    "LabelReconciler",
    "reconcile",
    "PairwiseMerger",
    "merge_two",
    "MergeDriver",
    "merge_all",
    "duplicated_labels",
]
