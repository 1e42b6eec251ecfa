"""Ordering of the label union produced by a full outer join.

``reconcile(left, right)`` keeps *left* in its own order and slots each label
found only in *right* next to the neighbours it has in *right*. Matched
labels are anchored at their position in *left*; a run of ``k`` unmatched
labels between anchors ``p0`` and ``p1`` is spread evenly over the open
interval ``(p0, p1)``. Positions are :class:`fractions.Fraction`, so the
result does not depend on float rounding.

Example::

    >>> reconcile(["A", "B", "C"], ["B", "X", "C", "D"])
    ['A', 'B', 'X', 'C', 'D']
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple, cast

from tablemerge.config import settings as config
from tablemerge.config.settings import Settings

logger = logging.getLogger(__name__)

Position = Fraction


def _spread(lo: Position, hi: Position, k: int) -> List[Position]:
    """k evenly spaced points strictly inside (lo, hi)."""
    return [lo + (hi - lo) * i / (k + 1) for i in range(1, k + 1)]


def _runs(matches: Sequence[Optional[int]]) -> List[Tuple[int, int]]:
    """Half-open ``(start, stop)`` spans of consecutive unmatched entries."""
    out: List[Tuple[int, int]] = []
    start: Optional[int] = None
    for i, m in enumerate(matches):
        if m is None and start is None:
            start = i
        elif m is not None and start is not None:
            out.append((start, i))
            start = None
    if start is not None:
        out.append((start, len(matches)))
    return out


def right_positions(left: Sequence[Hashable], right: Sequence[Hashable]) -> List[Position]:
    """Sort keys for *right* relative to *left*'s 0-based positions.

    Requires at least one matched and one unmatched label in *right*.
    """
    first_pos: Dict[Hashable, int] = {}
    for i, label in enumerate(left):
        first_pos.setdefault(label, i)
    matches = [first_pos.get(label) for label in right]
    matched = [m for m in matches if m is not None]

    min_match = min(matched)
    max_match = max(max(matched), len(left) - 1)

    keys: List[Position] = [Fraction(m) if m is not None else Fraction(0) for m in matches]
    for start, stop in _runs(matches):
        k = stop - start
        if start == 0:
            lo, hi = Fraction(min_match - 1), Fraction(min_match)
        elif stop == len(matches):
            last = cast(int, matches[start - 1])
            upper = max_match + 1 if last == max_match else max_match
            lo, hi = Fraction(last), Fraction(upper + 1)
        else:
            before, after = cast(int, matches[start - 1]), cast(int, matches[stop])
            lo, hi = Fraction(before), Fraction(after)
        keys[start:stop] = _spread(lo, hi, k)
    return keys


def move_last(labels: List[Any], label: Any) -> List[Any]:
    if label not in labels:
        return labels
    return [x for x in labels if x != label] + [label]


@dataclass
class LabelReconciler:
    """Merge two label sequences into the row order of a full outer join."""

    settings: Optional[Settings] = None

    def _settings(self) -> Settings:
        return self.settings if self.settings is not None else config.settings

    def reconcile(self, left: Sequence[Hashable], right: Sequence[Hashable]) -> List[Any]:
        left, right = list(left), list(right)
        known = set(left)
        n_matched = sum(1 for label in right if label in known)

        if n_matched == 0:
            merged = left + right
        elif n_matched == len(right):
            merged = list(left)
        else:
            keyed = [(Fraction(i), label) for i, label in enumerate(left)]
            keyed += list(zip(right_positions(left, right), right))
            seen: set = set()
            unique = []
            for key, label in keyed:
                if label not in seen:
                    seen.add(label)
                    unique.append((key, label))
            # sorted() is stable, so left wins ties
            merged = [label for _, label in sorted(unique, key=lambda kl: kl[0])]

        logger.debug("reconciled %d + %d labels into %d", len(left), len(right), len(merged))
        return move_last(merged, self._settings().NET_LABEL)


def reconcile(left: Sequence[Hashable], right: Sequence[Hashable]) -> List[Any]:
    return LabelReconciler().reconcile(left, right)
