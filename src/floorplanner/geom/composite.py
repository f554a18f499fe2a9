"""Composite room geometry.

A composite room is a room plus its parts, drawn as one shape. The rooms
and parts only touch, never overlap, so merging them means finding the
edge spans two rectangles share: those spans are internal seams the renderer
leaves out. The merged outer boundary is built with Shapely.
"""

from __future__ import annotations

from typing import List, Sequence

from shapely.geometry import LineString, MultiPolygon, Polygon, box
from shapely.ops import linemerge, unary_union

from ..config import EPSILON
from ..core.model import CompositeGeometry, Point, Rect, ResolvedPart, ResolvedRoom, Segment


def merge_parts(room: ResolvedRoom, parts: Sequence[ResolvedPart]) -> CompositeGeometry:
    """Collect a room's rectangles and the edges they share.

    Args:
        room: The resolved room.
        parts: Its resolved parts, in declaration order.

    Returns:
        CompositeGeometry with the room rectangle first, then one rectangle
        per part, and every shared edge segment.
    """
    rectangles = (room.rect,) + tuple(part.rect for part in parts)
    return CompositeGeometry(rectangles=rectangles, shared_edges=tuple(shared_edges(rectangles)))


def shared_edges(rectangles: Sequence[Rect], tolerance: float = EPSILON) -> List[Segment]:
    """Find the touching edge spans of every pair of rectangles.

    Each pair is checked for a vertical contact (one's right side on the
    other's left side) and a horizontal contact (one's bottom on the other's
    top). A contact yields one segment spanning exactly the overlap; contacts
    of zero length (corners touching) yield nothing.

    Args:
        rectangles: Rectangles of one composite room.
        tolerance: Absolute tolerance for coordinate equality.

    Returns:
        Shared segments in pair order.
    """
    segments = []
    for i, a in enumerate(rectangles):
        for b in rectangles[i + 1 :]:
            vertical = _vertical_contact(a, b, tolerance)
            if vertical is not None:
                segments.append(vertical)
            horizontal = _horizontal_contact(a, b, tolerance)
            if horizontal is not None:
                segments.append(horizontal)
    return segments


def _vertical_contact(a: Rect, b: Rect, tolerance: float) -> Segment | None:
    if abs(a.right - b.x) <= tolerance:
        x = a.right
    elif abs(b.right - a.x) <= tolerance:
        x = a.x
    else:
        return None

    low = max(a.y, b.y)
    high = min(a.bottom, b.bottom)
    if high - low <= tolerance:
        return None
    return Segment(Point(x, low), Point(x, high))


def _horizontal_contact(a: Rect, b: Rect, tolerance: float) -> Segment | None:
    if abs(a.bottom - b.y) <= tolerance:
        y = a.bottom
    elif abs(b.bottom - a.y) <= tolerance:
        y = a.y
    else:
        return None

    low = max(a.x, b.x)
    high = min(a.right, b.right)
    if high - low <= tolerance:
        return None
    return Segment(Point(low, y), Point(high, y))


def composite_outline(rectangles: Sequence[Rect]) -> Polygon | MultiPolygon:
    """Outer boundary of the merged rectangles as a Shapely geometry.

    Touching rectangles merge into one Polygon; disconnected groups (a part
    attached with an offset that leaves a gap) give a MultiPolygon.
    """
    if not rectangles:
        return Polygon()
    return unary_union([box(r.x, r.y, r.right, r.bottom) for r in rectangles])


def outline_points(geometry: Polygon | MultiPolygon) -> List[List[Point]]:
    """Exterior rings of an outline, one point list per polygon.

    The closing point is not repeated.
    """
    if geometry.is_empty:
        return []
    polygons = geometry.geoms if isinstance(geometry, MultiPolygon) else [geometry]
    return [[Point(x, y) for x, y in list(polygon.exterior.coords)[:-1]] for polygon in polygons]


def visible_borders(rect: Rect, edges: Sequence[Segment]) -> List[List[Point]]:
    """Border polylines of a rectangle with the shared spans removed.

    Args:
        rect: One rectangle of a composite room.
        edges: Shared edges of the composite.

    Returns:
        Polylines (lists of points) that remain visible.
    """
    border = LineString(
        [
            (rect.x, rect.y),
            (rect.right, rect.y),
            (rect.right, rect.bottom),
            (rect.x, rect.bottom),
            (rect.x, rect.y),
        ]
    )
    if edges:
        seams = unary_union(
            [LineString([(e.start.x, e.start.y), (e.end.x, e.end.y)]) for e in edges]
        )
        border = border.difference(seams)
    if border.is_empty:
        return []

    merged = linemerge(border) if border.geom_type == "MultiLineString" else border
    lines = merged.geoms if merged.geom_type == "MultiLineString" else [merged]
    return [[Point(x, y) for x, y in line.coords] for line in lines]
