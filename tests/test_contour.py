import pytest

from symplace.contour import Contour, ContourSegment


def test_new_contour_is_empty():
    c = Contour()
    assert c.is_empty
    assert len(c) == 0
    assert c.height_between(0, 10) == 0
    assert c.max_coordinate == 0 and c.max_height == 0


def test_add_single_segment():
    c = Contour()
    c.add_segment(0, 10, 5)
    assert c.segments == (ContourSegment(0, 10, 5),)
    assert c.max_coordinate == 10
    assert c.max_height == 5


@pytest.mark.parametrize("start,end", [(5, 5), (7, 3)])
def test_empty_span_ignored(start, end):
    c = Contour()
    c.add_segment(start, end, 4)
    assert c.is_empty
    assert c.max_height == 0


def test_adjacent_same_height_joined():
    c = Contour()
    c.add_segment(0, 5, 3)
    c.add_segment(5, 10, 3)
    assert c.segments == (ContourSegment(0, 10, 3),)


def test_joins_following_segment_of_same_height():
    c = Contour()
    c.add_segment(5, 10, 3)
    c.add_segment(0, 5, 3)
    assert c.segments == (ContourSegment(0, 10, 3),)


def test_different_heights_kept_apart_and_sorted():
    c = Contour()
    c.add_segment(4, 8, 6)
    c.add_segment(0, 4, 2)
    starts = [s.start for s in c]
    assert starts == sorted(starts)
    assert c.segments == (ContourSegment(0, 4, 2), ContourSegment(4, 8, 6))


def test_height_between():
    c = Contour()
    c.add_segment(0, 4, 2)
    c.add_segment(4, 8, 6)
    assert c.height_between(0, 8) == 6
    assert c.height_between(0, 4) == 2
    assert c.height_between(4, 8) == 6
    assert c.height_between(2, 5) == 6
    assert c.height_between(8, 12) == 0
    assert c.height_between(3, 3) == 0


def test_height_between_inside_segment():
    c = Contour()
    c.add_segment(0, 10, 7)
    assert c.height_between(3, 5) == 7


def test_new_segment_replaces_covered_segments():
    c = Contour()
    c.add_segment(0, 2, 1)
    c.add_segment(2, 4, 9)
    c.add_segment(0, 4, 5)
    assert c.segments == (ContourSegment(0, 4, 5),)
    assert c.max_height == 9


def test_clear():
    c = Contour()
    c.add_segment(0, 10, 5)
    c.clear()
    assert c.is_empty
    assert c.max_coordinate == 0 and c.max_height == 0


def test_copy_is_independent():
    c = Contour()
    c.add_segment(0, 10, 5)
    d = c.copy()
    d.add_segment(10, 20, 8)
    assert c.segments == (ContourSegment(0, 10, 5),)
    assert len(d) == 2
    assert d.max_coordinate == 20
    assert c.max_coordinate == 10


def test_segments_view_does_not_alias():
    c = Contour()
    c.add_segment(0, 10, 5)
    c.segments[0].height = 99
    assert c.height_between(0, 10) == 5


def test_merge_into_empty_copies():
    a = Contour()
    b = Contour()
    b.add_segment(0, 6, 4)
    a.merge(b)
    assert a.segments == b.segments
    assert a.max_coordinate == b.max_coordinate
    assert a.max_height == b.max_height


def test_merge_empty_other_is_noop():
    a = Contour()
    a.add_segment(0, 6, 4)
    a.merge(Contour())
    assert a.segments == (ContourSegment(0, 6, 4),)


def test_merge_interleaves_and_joins():
    a = Contour()
    a.add_segment(0, 5, 3)
    a.add_segment(10, 15, 1)
    b = Contour()
    b.add_segment(5, 10, 3)
    a.merge(b)
    assert a.segments == (ContourSegment(0, 10, 3), ContourSegment(10, 15, 1))
    assert a.max_coordinate == 15
    assert a.max_height == 3


def test_merge_keeps_max_values():
    a = Contour()
    a.add_segment(0, 4, 2)
    b = Contour()
    b.add_segment(20, 30, 9)
    a.merge(b)
    assert a.max_coordinate == 30
    assert a.max_height == 9
    assert a.height_between(0, 30) == 9