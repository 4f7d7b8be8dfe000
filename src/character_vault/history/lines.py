"""Line- and segment-level comparison of normalized section text.

Both differs are deliberately approximate. Lines are aligned by position,
so inserting a line mid-field marks every later line as changed. Within a
line only one contiguous changed run is isolated by trimming the common
prefix and suffix; two disjoint edits show as one region spanning both.
Section values are short prose, which keeps this adequate without an
edit-distance algorithm.
"""

from __future__ import annotations

from itertools import zip_longest

from pydantic import BaseModel, ConfigDict


class LineDiff(BaseModel):
    """One positionally aligned line pair."""

    model_config = ConfigDict(frozen=True)

    value: str
    compare_value: str
    changed: bool


class DiffSegment(BaseModel):
    """A run of a line's text, flagged when it differs from the other side."""

    model_config = ConfigDict(frozen=True)

    text: str
    changed: bool


def diff_lines(value: str, compare_value: str) -> list[LineDiff]:
    """Pair the lines of two strings by index and flag differing pairs."""
    if not value and not compare_value:
        return []
    return [
        LineDiff(value=line, compare_value=other, changed=line != other)
        for line, other in zip_longest(
            value.split("\n"), compare_value.split("\n"), fillvalue=""
        )
    ]


def count_changed_lines(value: str, compare_value: str) -> int:
    return sum(1 for line in diff_lines(value, compare_value) if line.changed)


def diff_segments(line: str, compare_line: str) -> list[DiffSegment]:
    """Split ``line`` into unchanged prefix, changed middle and unchanged suffix.

    Joining the returned ``text`` fields always reproduces ``line``.
    """
    if line == compare_line:
        return [DiffSegment(text=line, changed=False)] if line else []
    if not line:
        return []
    if not compare_line:
        return [DiffSegment(text=line, changed=True)]

    limit = min(len(line), len(compare_line))
    prefix = 0
    while prefix < limit and line[prefix] == compare_line[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and line[len(line) - 1 - suffix] == compare_line[len(compare_line) - 1 - suffix]
    ):
        suffix += 1

    middle_end = len(line) - suffix
    segments: list[DiffSegment] = []
    if prefix:
        segments.append(DiffSegment(text=line[:prefix], changed=False))
    if middle_end > prefix:
        segments.append(DiffSegment(text=line[prefix:middle_end], changed=True))
    if suffix:
        segments.append(DiffSegment(text=line[middle_end:], changed=False))
    return segments
