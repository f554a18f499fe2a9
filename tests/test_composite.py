import pytest
from shapely.geometry import MultiPolygon, Polygon

from conftest import make_part, make_room
from floorplanner.core.model import Point, Rect, Segment
from floorplanner.engine.resolver import resolve
from floorplanner.geom.composite import (
    composite_outline,
    merge_parts,
    outline_points,
    shared_edges,
    visible_borders,
)


def test_full_shared_edge():
    edges = shared_edges([Rect(0, 0, 1000, 1000), Rect(1000, 0, 1000, 1000)])
    assert edges == [Segment(Point(1000, 0), Point(1000, 1000))]


def test_partial_shared_edge():
    edges = shared_edges([Rect(0, 0, 1000, 1000), Rect(1000, 500, 500, 2000)])
    assert edges == [Segment(Point(1000, 500), Point(1000, 1000))]


def test_shared_edge_in_either_order():
    edges = shared_edges([Rect(0, 1000, 500, 500), Rect(0, 0, 1000, 1000)])
    assert edges == [Segment(Point(0, 1000), Point(500, 1000))]
    assert edges[0].is_horizontal
    assert edges[0].length == 500


@pytest.mark.parametrize(
    "other",
    [
        Rect(1100, 0, 1000, 1000),  # gap
        Rect(1000, 1000, 500, 500),  # corner contact only
        Rect(0, 2000, 1000, 1000),  # below with a gap
    ],
)
def test_no_shared_edge(other):
    assert shared_edges([Rect(0, 0, 1000, 1000), other]) == []


def test_tolerance_absorbs_rounding():
    edges = shared_edges([Rect(0, 0, 0.1 + 0.2, 1), Rect(0.3, 0, 1, 1)])
    assert len(edges) == 1


def test_merge_parts_from_resolved_room():
    parts = (
        make_part("nook", "parent:top-right", 1000, 1500),
        make_part("bay", "parent:bottom-left", 2000, 500),
    )
    result = resolve([make_room("living", "zeropoint:top-left", 4000, 3000, parts=parts)])
    composite = merge_parts(result.rooms["living"], result.parts_of("living"))

    assert composite.rectangles == (
        Rect(0, 0, 4000, 3000),
        Rect(4000, 0, 1000, 1500),
        Rect(0, 3000, 2000, 500),
    )
    assert set(composite.shared_edges) == {
        Segment(Point(4000, 0), Point(4000, 1500)),
        Segment(Point(0, 3000), Point(2000, 3000)),
    }


def test_room_without_parts():
    result = resolve([make_room("a")])
    composite = merge_parts(result.rooms["a"], [])
    assert composite.rectangles == (Rect(0, 0, 3000, 3000),)
    assert composite.shared_edges == ()


def test_composite_outline():
    outline = composite_outline([Rect(0, 0, 1000, 1000), Rect(1000, 0, 500, 500)])
    assert isinstance(outline, Polygon)
    assert outline.area == pytest.approx(1250000)
    (ring,) = outline_points(outline)
    assert Point(1500, 0) in ring
    assert Point(1000, 1000) in ring

    split = composite_outline([Rect(0, 0, 1000, 1000), Rect(2000, 0, 500, 500)])
    assert isinstance(split, MultiPolygon)
    assert len(outline_points(split)) == 2

    assert composite_outline([]).is_empty
    assert outline_points(composite_outline([])) == []


def _polyline_length(points):
    return sum(abs(b.x - a.x) + abs(b.y - a.y) for a, b in zip(points, points[1:]))


def test_visible_borders_drop_shared_span():
    rect = Rect(0, 0, 1000, 1000)
    seam = Segment(Point(1000, 0), Point(1000, 1000))

    (line,) = visible_borders(rect, [seam])
    assert _polyline_length(line) == pytest.approx(3000)
    assert all(not (p.x == 1000 and 0 < p.y < 1000) for p in line)


def test_visible_borders_without_seams():
    (line,) = visible_borders(Rect(0, 0, 1000, 500), [])
    assert _polyline_length(line) == pytest.approx(3000)
