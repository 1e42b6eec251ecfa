from __future__ import annotations

from typing import Any, Dict, List, Optional


class TableMergeError(Exception):
    """Base class for failures raised while merging tables."""


class TooManyDimensionsError(TableMergeError):
    """Raised when an input table has more than 3 axes."""

    def __init__(self, ndim: int, table: Optional[str] = None):
        self.ndim = ndim
        self.table = table
        where = f"'{table}'" if table else "One of the input tables"
        super().__init__(f"{where} has {ndim} dimensions; at most 3 are supported.")


class NoOverlapError(TableMergeError):
    """Raised when only matching labels are kept but the two tables share none."""

    def __init__(self, kind: str, other_direction: str, left: str, right: str):
        self.kind = kind
        self.other_direction = other_direction
        self.left = left
        self.right = right
        super().__init__(
            f"Can not find any matching {kind} between '{left}' and '{right}'. "
            f"Perhaps you meant to join {other_direction}?"
        )


class MissingLabelError(TableMergeError):
    """Raised when one or more row labels are unset (positions are 1-based)."""

    def __init__(self, positions: List[int], table: str):
        self.positions = list(positions)
        self.table = table
        if len(self.positions) == 1:
            head, verb = "Row", "has missing name"
        else:
            head, verb = "Rows", "have missing names"
        joined = ", ".join(str(p) for p in self.positions)
        super().__init__(
            f"{head} {joined} in '{table}' {verb}. "
            "Please give the affected rows a unique name before merging."
        )


class DuplicateLabelError(TableMergeError):
    """Raised when row labels repeat; maps each label to all of its 1-based positions."""

    def __init__(self, duplicates: Dict[Any, List[int]], table: str):
        self.duplicates = {k: list(v) for k, v in duplicates.items()}
        self.table = table
        parts = [
            f"'{label}' in rows {', '.join(str(p) for p in pos)}"
            for label, pos in self.duplicates.items()
        ]
        super().__init__(
            f"Duplicated row names ({'; '.join(parts)}) in '{table}'. "
            "Merge duplicated rows or remove duplicated rows before merging."
        )


class TableMergeWarning(UserWarning):
    """Base category for recoverable merge conditions."""


class NoMatchingLabelsWarning(TableMergeWarning):
    """Labels are absent on one side; rows were aligned by index order."""


class MultipleStatisticsWarning(TableMergeWarning):
    """A 3-axis input was collapsed to its first plane."""


class UnnamedTableWarning(TableMergeWarning):
    """Columns of a table without an identity were disambiguated with a placeholder."""
