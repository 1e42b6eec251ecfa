from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from pandas.api import types as ptypes

from tablemerge.core.errors import (
    DuplicateLabelError,
    MissingLabelError,
    MultipleStatisticsWarning,
    NoMatchingLabelsWarning,
    NoOverlapError,
    TooManyDimensionsError,
    UnnamedTableWarning,
)
from tablemerge.core.types import LabeledTable, MergeDirection, NonMatchingPolicy
from tablemerge.processing.pairwise import merge_two

LEFT = {"A": 1, "B": 2}
RIGHT = {"B": 3, "C": 4}


def _table(value: int, name: str | None, col: str = "x", row: str = "A") -> LabeledTable:
    return LabeledTable.from_array([[value]], [row], [col], name=name)


# ---------------------------------------------------------------------------
# join modes
# ---------------------------------------------------------------------------


class TestJoinModes:
    def test_keep_all(self) -> None:
        out = merge_two(LEFT, RIGHT)
        assert out.row_labels == ["A", "B", "C"]
        assert out.shape == (3, 2)
        df = out.frame
        assert df.iloc[0, 0] == 1 and pd.isna(df.iloc[0, 1])
        assert df.iloc[1].tolist() == [2, 3]
        assert pd.isna(df.iloc[2, 0]) and df.iloc[2, 1] == 4

    def test_matching_only(self) -> None:
        out = merge_two(LEFT, RIGHT, non_matching=NonMatchingPolicy.MATCHING_ONLY)
        assert out.row_labels == ["B"]
        assert out.frame.iloc[0].tolist() == [2, 3]

    def test_keep_all_from_first(self) -> None:
        out = merge_two(LEFT, RIGHT, non_matching="Keep all from first table")
        assert out.row_labels == ["A", "B"]

    def test_keep_all_from_second(self) -> None:
        out = merge_two(LEFT, RIGHT, non_matching="Keep all from second table")
        assert out.row_labels == ["B", "C"]

    def test_disjoint_union_is_commutative(self) -> None:
        a = {"A": 1, "B": 2}
        b = {"C": 3, "D": 4}
        assert set(merge_two(a, b).row_labels) == set(merge_two(b, a).row_labels)

    def test_net_row_last(self) -> None:
        out = merge_two({"A": 1, "NET": 3}, {"A": 2, "B": 5})
        assert out.row_labels == ["A", "B", "NET"]

    def test_row_labels_trimmed_before_matching(self) -> None:
        out = merge_two({" A ": 1}, {"A": 2})
        assert out.row_labels == ["A"]
        assert out.shape == (1, 2)


class TestUpAndDown:
    def test_aligns_on_columns(self) -> None:
        top = pd.DataFrame({"a": [1], "b": [2]}, index=["r1"])
        bottom = pd.DataFrame({"b": [3], "c": [4]}, index=["r2"])
        out = merge_two(top, bottom, MergeDirection.UP_AND_DOWN)
        assert out.row_labels == ["r1", "r2"]
        assert out.col_labels == ["a", "b", "c"]
        df = out.frame
        assert df.loc["r1", "b"] == 2
        assert df.loc["r2", "c"] == 4
        assert pd.isna(df.loc["r1", "c"])

    def test_no_overlap_suggests_side_by_side(self) -> None:
        top = pd.DataFrame({"a": [1]}, index=["r1"])
        bottom = pd.DataFrame({"b": [2]}, index=["r2"])
        with pytest.raises(NoOverlapError, match="side-by-side"):
            merge_two(top, bottom, "Up-and-down", "Matching only")

    def test_result_is_always_a_single_typed_matrix(self) -> None:
        top = pd.DataFrame({"n": [1], "s": ["u"]}, index=["r1"])
        bottom = pd.DataFrame({"n": [2]}, index=["r2"])
        out = merge_two(top, bottom, MergeDirection.UP_AND_DOWN)
        assert out.col_labels == ["n", "s"]
        assert all(dt == object for dt in out.frame.dtypes)
        assert out.frame.loc["r2", "n"] == 2
        assert pd.isna(out.frame.loc["r2", "s"])


# ---------------------------------------------------------------------------
# validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_no_overlap(self) -> None:
        with pytest.raises(NoOverlapError, match="up-and-down") as exc:
            merge_two({"A": 1}, {"B": 2}, non_matching=NonMatchingPolicy.MATCHING_ONLY)
        assert (exc.value.left, exc.value.right) == ("T1", "T2")
        assert "between 'T1' and 'T2'" in str(exc.value)

    def test_no_overlap_names_tables(self) -> None:
        left = pd.Series([1], index=["A"], name="x")
        left.attrs["name"] = "survey"
        with pytest.raises(NoOverlapError, match="'survey' and 'T2'"):
            merge_two(left, {"B": 2}, non_matching="Matching only")

    def test_duplicate_labels_list_all_positions(self) -> None:
        left = pd.DataFrame({"x": [1, 2, 3]}, index=["A", "B", "A"])
        with pytest.raises(DuplicateLabelError) as exc:
            merge_two(left, {"A": 1})
        assert exc.value.duplicates == {"A": [1, 3]}
        assert exc.value.table == "T1"
        assert "rows 1, 3" in str(exc.value)

    def test_duplicates_in_right_named_table(self) -> None:
        right = pd.DataFrame({"x": [1, 2]}, index=["B", "B"])
        right.attrs["name"] = "survey"
        with pytest.raises(DuplicateLabelError, match="survey"):
            merge_two({"A": 1}, right)

    def test_missing_labels(self) -> None:
        left = LabeledTable.from_array([[1], [2]], ["A", None], ["x"])
        with pytest.raises(MissingLabelError) as exc:
            merge_two(left, {"A": 1})
        assert exc.value.positions == [2]
        assert "Row 2" in str(exc.value)

    def test_missing_labels_in_right_table(self) -> None:
        right = LabeledTable.from_array([[1], [2], [3]], [None, "A", None], ["y"])
        with pytest.raises(MissingLabelError) as exc:
            merge_two({"A": 1}, right)
        assert exc.value.positions == [1, 3]
        assert exc.value.table == "T2"
        assert "Rows 1, 3 in 'T2' have missing names" in str(exc.value)

    def test_too_many_dimensions(self) -> None:
        with pytest.raises(TooManyDimensionsError):
            merge_two(np.zeros((1, 1, 1, 1)), [1])


# ---------------------------------------------------------------------------
# positional fallback
# ---------------------------------------------------------------------------


class TestPositional:
    def test_pads_shorter_table(self) -> None:
        with pytest.warns(NoMatchingLabelsWarning, match="row index order"):
            out = merge_two([10, 20], {"P": 1, "Q": 2, "R": 3})
        assert out.shape == (3, 2)
        assert out.row_labels == ["P", "Q", "R"]
        assert out.frame.iloc[:2, 0].tolist() == [10, 20]
        assert pd.isna(out.frame.iloc[2, 0])
        assert out.frame.iloc[:, 1].tolist() == [1, 2, 3]

    def test_unlabeled_columns_bound_beside_integer_labels(self) -> None:
        left = LabeledTable.from_array([[1, 2]], ["r"], [2, 3])
        with pytest.warns(NoMatchingLabelsWarning):
            out = merge_two(left, np.array([[3, 4]]))
        assert out.col_labels == [2, 3, "", ""]
        assert out.row_labels == ["r"]
        assert out.frame.iloc[0].tolist() == [1, 2, 3, 4]

    def test_duplicates_ignored_without_labels_on_other_side(self) -> None:
        left = pd.DataFrame({"x": [1, 2]}, index=["A", "A"])
        with pytest.warns(NoMatchingLabelsWarning):
            out = merge_two(left, [5, 6])
        assert out.shape == (2, 2)

    def test_up_and_down_warns_about_columns(self) -> None:
        with pytest.warns(NoMatchingLabelsWarning, match="column"):
            out = merge_two(np.array([[1, 2]]), np.array([[3, 4, 5]]), "Up-and-down")
        assert out.shape == (2, 3)

    def test_sink_collects_records(self) -> None:
        sink: list = []
        with pytest.warns(NoMatchingLabelsWarning):
            merge_two([1], [2], sink=sink)
        assert [w.category for w in sink] == [NoMatchingLabelsWarning]

    def test_3d_inputs_collapsed(self) -> None:
        sink: list = []
        with pytest.warns(MultipleStatisticsWarning):
            out = merge_two(np.ones((2, 2, 2)), np.zeros((2, 1)), sink=sink)
        assert out.shape == (2, 3)
        assert [w.category for w in sink] == [MultipleStatisticsWarning, NoMatchingLabelsWarning]


# ---------------------------------------------------------------------------
# disambiguation
# ---------------------------------------------------------------------------


class TestDisambiguation:
    def test_both_named(self) -> None:
        out = merge_two(_table(1, "L"), _table(2, "R"))
        assert out.col_labels == ["L - x", "R - x"]

    def test_unnamed_right_is_not_prefixed(self) -> None:
        out = merge_two(_table(1, "L"), _table(2, None))
        assert out.col_labels == ["L - x", "x"]

    def test_unnamed_left_warns_and_uses_placeholder(self) -> None:
        with pytest.warns(UnnamedTableWarning, match="T1"):
            out = merge_two(_table(1, None), _table(2, "R"))
        assert out.col_labels == ["T1 - x", "R - x"]

    def test_extra_labels(self) -> None:
        out = merge_two(_table(1, "L", col="y"), _table(2, "R", col="z"), disambiguation_labels={"y"})
        assert out.col_labels == ["L - y", "z"]

    def test_no_collision_no_prefix(self) -> None:
        out = merge_two(_table(1, "L", col="y"), _table(2, "R", col="z"))
        assert out.col_labels == ["y", "z"]

    def test_unlabeled_column_beside_integer_label(self) -> None:
        left = pd.DataFrame({1: [10, 20]}, index=["A", "B"])
        right = pd.Series([5, 6], index=["A", "B"])
        out = merge_two(left, right)
        assert out.col_labels == [1, ""]
        assert out.frame.iloc[:, 0].tolist() == [10, 20]
        assert out.frame.iloc[:, 1].tolist() == [5, 6]


# ---------------------------------------------------------------------------
# output types
# ---------------------------------------------------------------------------


class TestOutputTypes:
    def test_numeric_becomes_float_matrix(self) -> None:
        out = merge_two(LEFT, RIGHT)
        assert all(dt == np.float64 for dt in out.frame.dtypes)

    def test_text_becomes_object_matrix(self) -> None:
        left = pd.Series(["x", "y"], index=["A", "B"], name="s1")
        right = pd.Series(["z"], index=["B"], name="s2")
        out = merge_two(left, right)
        assert all(dt == object for dt in out.frame.dtypes)
        assert pd.isna(out.frame.loc["A", "s2"])

    def test_mixed_keeps_column_types(self) -> None:
        left = pd.DataFrame({"n": [1, 2]}, index=["A", "B"])
        right = pd.DataFrame({"s": ["u"]}, index=["B"])
        out = merge_two(left, right)
        assert ptypes.is_numeric_dtype(out.frame["n"])
        assert ptypes.is_string_dtype(out.frame["s"])
