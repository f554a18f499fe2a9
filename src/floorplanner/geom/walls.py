"""Wall anchor math for doors and windows.

A door or window is drawn once in its own local frame, as if it sat on a
top wall: the element runs along local +x from 0 to its width, and local +y
points into the room. ``place_on_wall`` gives the absolute base point and a
clockwise rotation (degrees, y-down screen coordinates) that carry this frame
onto any of the four walls.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.model import DoorSwing, Point, Rect, WallPlacement, WallSide

WALL_ROTATIONS = {
    WallSide.TOP: 0.0,
    WallSide.RIGHT: 90.0,
    WallSide.BOTTOM: 180.0,
    WallSide.LEFT: 270.0,
}


@dataclass(frozen=True)
class DoorArc:
    """Swing arc of a door leaf, centred on the hinge.

    Angles are in degrees, measured clockwise from local +x in the element's
    local frame. The arc runs from ``start_angle`` (leaf closed, lying in the
    wall) to ``end_angle`` (leaf open).
    """

    center: Point
    radius: float
    start_angle: float
    end_angle: float

    def point_at(self, angle: float) -> Point:
        rad = math.radians(angle)
        return Point(
            self.center.x + self.radius * round(math.cos(rad), 12),
            self.center.y + self.radius * round(math.sin(rad), 12),
        )

    @property
    def start_point(self) -> Point:
        return self.point_at(self.start_angle)

    @property
    def end_point(self) -> Point:
        return self.point_at(self.end_angle)


@dataclass(frozen=True)
class SwingGeometry:
    """Local-frame drawing of a door.

    Attributes:
        gap: The wall gap the door occupies, from (0, 0) to (width, 0).
        leaf: The door leaf rectangle, or None for plain openings.
        arc: The swing arc, or None for plain openings.
    """

    gap: tuple[Point, Point]
    leaf: Rect | None
    arc: DoorArc | None

    @property
    def hinge(self) -> Point | None:
        return self.arc.center if self.arc else None


def place_on_wall(rect: Rect, wall: WallSide, offset: float, element_width: float) -> WallPlacement:
    """Position and rotation of an element attached to a wall.

    The base point is ``offset`` along the wall from its top or left end:

    ====== ======================= ========
    wall   base point              rotation
    ====== ======================= ========
    top    (x + offset, y)         0
    bottom (x + offset, y + h)     180
    left   (x, y + offset)         270
    right  (x + w, y + offset)     90
    ====== ======================= ========

    No bounds check is made; see ``fits_on_wall``.

    Args:
        rect: Resolved rectangle of the owning room or part.
        wall: Which side of the rectangle.
        offset: Distance from the wall's start.
        element_width: Width of the element along the wall.

    Returns:
        The WallPlacement.
    """
    if wall is WallSide.TOP:
        x, y = rect.x + offset, rect.y
    elif wall is WallSide.BOTTOM:
        x, y = rect.x + offset, rect.y + rect.height
    elif wall is WallSide.LEFT:
        x, y = rect.x, rect.y + offset
    elif wall is WallSide.RIGHT:
        x, y = rect.x + rect.width, rect.y + offset
    else:
        raise ValueError(f"Unknown wall: {wall!r}")
    return WallPlacement(x=x, y=y, rotation=WALL_ROTATIONS[wall], width=element_width)


def wall_length(rect: Rect, wall: WallSide) -> float:
    """Length of one side of a rectangle."""
    if wall in (WallSide.TOP, WallSide.BOTTOM):
        return rect.width
    return rect.height


def fits_on_wall(rect: Rect, wall: WallSide, offset: float, element_width: float) -> bool:
    """Whether an element stays within its wall."""
    return offset >= 0 and offset + element_width <= wall_length(rect, wall)


def to_global(placement: WallPlacement, local: Point) -> Point:
    """Map a point from an element's local frame to absolute coordinates.

    Rotating by 180 or 270 degrees would run the element backwards from its
    base point, so the element is shifted by its width along the wall to keep
    it on the span ``[offset, offset + width]``.
    """
    rad = math.radians(placement.rotation)
    cos, sin = round(math.cos(rad)), round(math.sin(rad))
    gx = local.x * cos - local.y * sin
    gy = local.x * sin + local.y * cos
    if placement.rotation == 180.0:
        gx += placement.width
    elif placement.rotation == 270.0:
        gy += placement.width
    return Point(placement.x + gx, placement.y + gy)


def door_swing(swing: DoorSwing, width: float, depth: float, is_opening: bool = False) -> SwingGeometry:
    """Local-frame geometry of a door.

    ``*-right`` doors hinge at local x = 0, ``*-left`` doors at x = width.
    Inward doors put the leaf and arc on +y (into the room), outward doors
    on -y. Openings have neither leaf nor arc, only the wall gap.

    Args:
        swing: Swing direction.
        width: Door width along the wall.
        depth: Wall-crossing thickness of the leaf.
        is_opening: Render as a plain opening regardless of swing.

    Returns:
        The SwingGeometry.
    """
    gap = (Point(0.0, 0.0), Point(width, 0.0))
    if is_opening or swing is DoorSwing.OPENING:
        return SwingGeometry(gap=gap, leaf=None, arc=None)

    inwards = swing in (DoorSwing.INWARDS_LEFT, DoorSwing.INWARDS_RIGHT)
    right = swing in (DoorSwing.INWARDS_RIGHT, DoorSwing.OUTWARDS_RIGHT)

    side = 1.0 if inwards else -1.0
    leaf = Rect(0.0, 0.0 if inwards else -depth, width, depth)
    hinge = Point(0.0 if right else width, side * depth)
    start_angle = 0.0 if right else 180.0
    sweep = 90.0 * side * (1.0 if right else -1.0)
    arc = DoorArc(center=hinge, radius=width, start_angle=start_angle, end_angle=start_angle + sweep)
    return SwingGeometry(gap=gap, leaf=leaf, arc=arc)


def window_frame(width: float, depth: float) -> Rect:
    """Local-frame rectangle of a window, centred on the wall line."""
    return Rect(0.0, -depth / 2, width, depth)
