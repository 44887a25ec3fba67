"""Balanced LCS alignment of two line sequences.

``align`` walks the longest common subsequence of ``old`` and ``new``. Lines
on the LCS become ``Match`` events. Between two consecutive matches, lines
are paired positionally as ``Replace`` events while both sides still have
lines left; the surplus becomes ``Delete`` (old side) or ``Insert`` (new
side) events. Events are ordered left to right on both sides.

Example:
    >>> align(["a", "b", "c"], ["a", "x", "c", "d"])
    [Match(old='a', new='a'), Replace(old='b', new='x'), Match(old='c', new='c'), Insert(new='d')]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

__all__ = [
    "AlignmentEvent",
    "Aligner",
    "Delete",
    "Insert",
    "Match",
    "Replace",
    "align",
    "lcs_pairs",
]


@dataclass(frozen=True, slots=True)
class Match:
    old: str
    new: str


@dataclass(frozen=True, slots=True)
class Insert:
    new: str


@dataclass(frozen=True, slots=True)
class Delete:
    old: str


@dataclass(frozen=True, slots=True)
class Replace:
    old: str
    new: str


type AlignmentEvent = Match | Insert | Delete | Replace


class Aligner(Protocol):
    def __call__(self, old: Sequence[str], new: Sequence[str]) -> list[AlignmentEvent]: ...


def lcs_pairs(old: Sequence[str], new: Sequence[str]) -> list[tuple[int, int]]:
    """Return index pairs ``(i, j)`` of a longest common subsequence.

    The common prefix and suffix are matched directly; only the middle goes
    through the quadratic table.
    """
    n, m = len(old), len(new)

    start = 0
    while start < n and start < m and old[start] == new[start]:
        start += 1

    end_old, end_new = n, m
    while end_old > start and end_new > start and old[end_old - 1] == new[end_new - 1]:
        end_old -= 1
        end_new -= 1

    pairs = [(i, i) for i in range(start)]

    a = old[start:end_old]
    b = new[start:end_new]
    rows, cols = len(a), len(b)
    if rows and cols:
        # lengths[i][j] is the LCS length of a[i:] and b[j:]
        lengths = [[0] * (cols + 1) for _ in range(rows + 1)]
        for i in range(rows - 1, -1, -1):
            row, below = lengths[i], lengths[i + 1]
            for j in range(cols - 1, -1, -1):
                if a[i] == b[j]:
                    row[j] = below[j + 1] + 1
                else:
                    row[j] = max(below[j], row[j + 1])

        i = j = 0
        while i < rows and j < cols:
            if a[i] == b[j]:
                pairs.append((start + i, start + j))
                i += 1
                j += 1
            elif lengths[i + 1][j] >= lengths[i][j + 1]:
                i += 1
            else:
                j += 1

    pairs.extend((end_old + k, end_new + k) for k in range(n - end_old))
    return pairs


def align(old: Sequence[str], new: Sequence[str]) -> list[AlignmentEvent]:
    events: list[AlignmentEvent] = []
    ai = bj = 0

    def flush(until_old: int, until_new: int) -> None:
        nonlocal ai, bj
        while ai < until_old or bj < until_new:
            if ai < until_old and bj < until_new:
                events.append(Replace(old=old[ai], new=new[bj]))
                ai += 1
                bj += 1
            elif ai < until_old:
                events.append(Delete(old=old[ai]))
                ai += 1
            else:
                events.append(Insert(new=new[bj]))
                bj += 1

    for ma, mb in lcs_pairs(old, new):
        flush(ma, mb)
        events.append(Match(old=old[ma], new=new[mb]))
        ai += 1
        bj += 1

    flush(len(old), len(new))
    return events
