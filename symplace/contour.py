"""Skyline contour of placed modules, kept as sorted segments."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterator


@dataclass
class ContourSegment:
    """A span [start, end) of the contour at a given height."""

    start: int
    end: int
    height: int


class Contour:
    """Sorted, non-redundant list of contour segments."""

    def __init__(self) -> None:
        self._segments: list[ContourSegment] = []
        self.max_coordinate = 0
        self.max_height = 0

    def __repr__(self) -> str:
        return f"Contour({self._segments!r})"

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator[ContourSegment]:
        return iter(self.segments)

    @property
    def segments(self) -> tuple[ContourSegment, ...]:
        return tuple(
            ContourSegment(s.start, s.end, s.height) for s in self._segments
        )

    @property
    def is_empty(self) -> bool:
        return not self._segments

    def clear(self) -> None:
        self._segments.clear()
        self.max_coordinate = 0
        self.max_height = 0

    def copy(self) -> "Contour":
        """Return an independent copy."""
        other = Contour()
        other._segments = [
            ContourSegment(s.start, s.end, s.height) for s in self._segments
        ]
        other.max_coordinate = self.max_coordinate
        other.max_height = self.max_height
        return other

    def _lower_bound(self, coordinate: int) -> int:
        return bisect_left(self._segments, coordinate, key=lambda s: s.start)

    def add_segment(self, start: int, end: int, height: int) -> None:
        """Raise the contour over [start, end) to the given height.

        Segments starting inside the span are replaced; neighbours of the
        same height that touch the span are joined to it. Empty spans are
        ignored.
        """
        if start >= end:
            return
        self.max_coordinate = max(self.max_coordinate, end)
        self.max_height = max(self.max_height, height)

        if not self._segments:
            self._segments.append(ContourSegment(start, end, height))
            return

        first = self._lower_bound(start)
        last = self._lower_bound(end)

        if first > 0:
            prev = self._segments[first - 1]
            if prev.end == start and prev.height == height:
                start = prev.start
                first -= 1

        if last < len(self._segments):
            following = self._segments[last]
            if following.start == end and following.height == height:
                end = following.end
                last += 1

        self._segments[first:last] = [ContourSegment(start, end, height)]

    def height_between(self, start: int, end: int) -> int:
        """Return the highest contour level over [start, end), 0 if none."""
        if start >= end or not self._segments:
            return 0

        i = self._lower_bound(start)
        if i > 0 and (i == len(self._segments) or self._segments[i].start > start):
            i -= 1
            if self._segments[i].end <= start:
                i += 1

        highest = 0
        for segment in self._segments[i:]:
            if segment.start >= end:
                break
            if segment.end > start:
                highest = max(highest, segment.height)
        return highest

    def merge(self, other: "Contour") -> None:
        """Interleave another contour's segments into this one by start."""
        if not other._segments:
            return
        if not self._segments:
            self._segments = [
                ContourSegment(s.start, s.end, s.height) for s in other._segments
            ]
            self.max_coordinate = other.max_coordinate
            self.max_height = other.max_height
            return

        mine, theirs = self._segments, other._segments
        result: list[ContourSegment] = []
        i = j = 0
        while i < len(mine) and j < len(theirs):
            if mine[i].start < theirs[j].start:
                result.append(mine[i])
                i += 1
            else:
                s = theirs[j]
                result.append(ContourSegment(s.start, s.end, s.height))
                j += 1
        result.extend(mine[i:])
        result.extend(ContourSegment(s.start, s.end, s.height) for s in theirs[j:])

        self._segments = result
        self.max_coordinate = max(self.max_coordinate, other.max_coordinate)
        self.max_height = max(self.max_height, other.max_height)
        self._join_touching()

    def _join_touching(self) -> None:
        joined: list[ContourSegment] = []
        for segment in self._segments:
            if joined and joined[-1].end == segment.start and joined[-1].height == segment.height:
                joined[-1].end = segment.end
            else:
                joined.append(segment)
        self._segments = joined