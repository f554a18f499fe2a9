"""Corner arithmetic shared by the resolver, wall math and composite merge."""

from __future__ import annotations

from ..core.model import Corner, Point, Rect


def get_corner(rect: Rect, corner: Corner) -> Point:
    """Get the absolute position of a rectangle's corner.

    Args:
        rect: The rectangle.
        corner: Which corner to return.

    Returns:
        The corner point.
    """
    if corner is Corner.TOP_LEFT:
        return Point(rect.x, rect.y)
    if corner is Corner.TOP_RIGHT:
        return Point(rect.x + rect.width, rect.y)
    if corner is Corner.BOTTOM_LEFT:
        return Point(rect.x, rect.y + rect.height)
    if corner is Corner.BOTTOM_RIGHT:
        return Point(rect.x + rect.width, rect.y + rect.height)
    raise ValueError(f"Unknown corner: {corner!r}")


def anchor_adjustment(anchor: Corner, width: float, height: float) -> Point:
    """Offset from an anchor corner to the top-left corner of a rectangle."""
    if anchor is Corner.TOP_LEFT:
        return Point(0.0, 0.0)
    if anchor is Corner.TOP_RIGHT:
        return Point(-width, 0.0)
    if anchor is Corner.BOTTOM_LEFT:
        return Point(0.0, -height)
    if anchor is Corner.BOTTOM_RIGHT:
        return Point(-width, -height)
    raise ValueError(f"Unknown corner: {anchor!r}")


def place_anchored(
    anchor_point: Point,
    anchor: Corner,
    width: float,
    height: float,
    offset: tuple[float, float] = (0.0, 0.0),
) -> Point:
    """Top-left corner of a rectangle whose ``anchor`` corner sits on a point.

    Args:
        anchor_point: Absolute point the anchor corner is aligned to.
        anchor: Which corner of the rectangle is aligned.
        width: Rectangle width.
        height: Rectangle height.
        offset: Translation applied after alignment.

    Returns:
        The absolute top-left corner.
    """
    adjust = anchor_adjustment(anchor, width, height)
    return Point(
        anchor_point.x + offset[0] + adjust.x,
        anchor_point.y + offset[1] + adjust.y,
    )
