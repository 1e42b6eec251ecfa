from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Type

import numpy as np
import pandas as pd


def _token(value: str) -> str:
    return "".join(ch for ch in value.lower() if ch.isalnum())


class _LenientEnum(str, Enum):
    """Accept member names or values regardless of case and separators."""

    @classmethod
    def _missing_(cls, value: object) -> Optional["_LenientEnum"]:
        if isinstance(value, str):
            key = _token(value)
            for member in cls:
                if key in (_token(member.value), _token(member.name)):
                    return member
        return None


class MergeDirection(_LenientEnum):
    """Side-by-side aligns on row labels; up-and-down aligns on column labels."""

    SIDE_BY_SIDE = "Side-by-side"
    UP_AND_DOWN = "Up-and-down"

    @property
    def axis_kind(self) -> str:
        """Name of the caller-facing axis the engine aligns on."""
        return "row" if self is MergeDirection.SIDE_BY_SIDE else "column"

    @property
    def other(self) -> "MergeDirection":
        if self is MergeDirection.SIDE_BY_SIDE:
            return MergeDirection.UP_AND_DOWN
        return MergeDirection.SIDE_BY_SIDE


class NonMatchingPolicy(_LenientEnum):
    """How rows whose label exists on one side only are treated."""

    KEEP_ALL = "Keep all"
    KEEP_ALL_FROM_FIRST = "Keep all from first table"
    KEEP_ALL_FROM_SECOND = "Keep all from second table"
    MATCHING_ONLY = "Matching only"

    @property
    def how(self) -> str:
        """The pandas join kind implementing this policy."""
        return _JOIN_KIND[self]


_JOIN_KIND = {
    NonMatchingPolicy.KEEP_ALL: "outer",
    NonMatchingPolicy.KEEP_ALL_FROM_FIRST: "left",
    NonMatchingPolicy.KEEP_ALL_FROM_SECOND: "right",
    NonMatchingPolicy.MATCHING_ONLY: "inner",
}


@dataclass(frozen=True)
class MergeWarning:
    """A recoverable condition reported during a merge."""

    category: Type[Warning]
    message: str


def is_default_index(index: pd.Index) -> bool:
    """True for the positional 0..n-1 index pandas assigns to unlabeled axes."""
    return (
        isinstance(index, pd.RangeIndex) and index.start == 0 and index.step == 1
    )


@dataclass(frozen=True, eq=False)
class LabeledTable:
    """
    A 2-D table with optional row and column labels.

    - ``frame`` holds the values; unlabeled axes carry a default RangeIndex
    - ``name`` is the table identity used when disambiguating column labels
    - ``statistic`` names what the values measure (the label of a vector)

    The frame is copied on construction, so instances never share data.
    """

    frame: pd.DataFrame
    has_row_labels: bool = True
    has_col_labels: bool = True
    name: Optional[str] = None
    statistic: Optional[str] = None

    def __post_init__(self) -> None:
        df = self.frame.copy()
        if not self.has_row_labels:
            df.index = pd.RangeIndex(len(df.index))
        if not self.has_col_labels:
            df.columns = pd.RangeIndex(len(df.columns))
        object.__setattr__(self, "frame", df)

    # -- constructors ------------------------------------------------------

    @classmethod
    def from_array(
        cls,
        values: Any,
        row_labels: Optional[Sequence[Any]] = None,
        col_labels: Optional[Sequence[Any]] = None,
        *,
        name: Optional[str] = None,
        statistic: Optional[str] = None,
    ) -> "LabeledTable":
        arr = np.asarray(values)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(f"LabeledTable needs 2-D values, got {arr.ndim}-D")
        df = pd.DataFrame(
            arr,
            index=list(row_labels) if row_labels is not None else None,
            columns=list(col_labels) if col_labels is not None else None,
        )
        return cls(
            df,
            has_row_labels=row_labels is not None,
            has_col_labels=col_labels is not None,
            name=name,
            statistic=statistic,
        )

    @classmethod
    def from_frame(cls, df: pd.DataFrame, *, name: Optional[str] = None) -> "LabeledTable":
        """Wrap a DataFrame; default RangeIndex axes count as unlabeled."""
        return cls(
            df,
            has_row_labels=not is_default_index(df.index),
            has_col_labels=not is_default_index(df.columns),
            name=name if name is not None else df.attrs.get("name"),
            statistic=df.attrs.get("statistic"),
        )

    # -- accessors ---------------------------------------------------------

    @property
    def shape(self) -> Tuple[int, int]:
        return self.frame.shape

    @property
    def row_labels(self) -> Optional[List[Any]]:
        return list(self.frame.index) if self.has_row_labels else None

    @property
    def col_labels(self) -> Optional[List[Any]]:
        return list(self.frame.columns) if self.has_col_labels else None

    def to_frame(self) -> pd.DataFrame:
        return self.frame.copy()

    def to_numpy(self) -> np.ndarray:
        return self.frame.to_numpy()

    # -- derived tables ----------------------------------------------------

    def transpose(self) -> "LabeledTable":
        return replace(
            self,
            frame=self.frame.T,
            has_row_labels=self.has_col_labels,
            has_col_labels=self.has_row_labels,
        )

    def with_name(self, name: Optional[str]) -> "LabeledTable":
        return replace(self, name=name)

    def with_frame(self, frame: pd.DataFrame, **changes: Any) -> "LabeledTable":
        return replace(self, frame=frame, **changes)
