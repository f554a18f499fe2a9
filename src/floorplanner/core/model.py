"""Core data models for floor planning.

This module defines the declarative room graph (rooms, parts, objects, doors
and windows, each attached relative to another entity) and the resolved
geometry the anchor resolver produces from it. Every model is immutable;
a new graph is built for every edit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..config import (
    DEFAULT_GRID_STEP,
    DEFAULT_OBJECT_COLOR,
    DEFAULT_OBJECT_SIZE,
    DOOR_THICKNESS,
    PARENT_ID,
    WINDOW_THICKNESS,
    ZEROPOINT_ID,
)


class Corner(str, Enum):
    """One of a rectangle's four corners."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class WallSide(str, Enum):
    """One of a rectangle's four sides."""

    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class DoorSwing(str, Enum):
    INWARDS_LEFT = "inwards-left"
    INWARDS_RIGHT = "inwards-right"
    OUTWARDS_LEFT = "outwards-left"
    OUTWARDS_RIGHT = "outwards-right"
    OPENING = "opening"


class DoorType(str, Enum):
    NORMAL = "normal"
    OPENING = "opening"


class ObjectShape(str, Enum):
    SQUARE = "square"
    CIRCLE = "circle"


class TargetKind(str, Enum):
    """Tag of an attachment target."""

    ORIGIN = "origin"
    PARENT = "parent"
    ENTITY = "entity"


@dataclass(frozen=True)
class Point:
    """Represents a 2D point in space.

    Attributes:
        x: The x-coordinate of the point.
        y: The y-coordinate of the point (grows downwards).
    """

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True)
class Segment:
    """An axis-aligned line segment shared by two touching rectangles."""

    start: Point
    end: Point

    @property
    def is_horizontal(self) -> bool:
        return self.start.y == self.end.y

    @property
    def length(self) -> float:
        return abs(self.end.x - self.start.x) + abs(self.end.y - self.start.y)


@dataclass(frozen=True)
class AttachmentTarget:
    """Closed tagged union of the things an entity can attach to.

    Attributes:
        kind: Which variant this is.
        entity_id: The room or part id for ``TargetKind.ENTITY``, else None.
    """

    kind: TargetKind
    entity_id: str | None = None


ORIGIN_TARGET = AttachmentTarget(TargetKind.ORIGIN)
PARENT_TARGET = AttachmentTarget(TargetKind.PARENT)


@dataclass(frozen=True)
class AttachmentRef:
    """A reference to a corner of another entity, written "<targetId>:<corner>".

    Attributes:
        target_id: The referenced id, "zeropoint" or "parent".
        corner: The corner of the target the entity attaches to.
    """

    target_id: str
    corner: Corner = Corner.TOP_LEFT

    @classmethod
    def parse(cls, value: str) -> AttachmentRef:
        """Parse an attachment string.

        Args:
            value: String in format "<targetId>:<corner>".

        Returns:
            The parsed AttachmentRef.

        Raises:
            ValueError: If the string has no corner or an unknown corner.
        """
        if not isinstance(value, str) or ":" not in value:
            raise ValueError(f"Invalid attachment reference: {value!r}")
        target_id, corner = value.rsplit(":", 1)
        if not target_id:
            raise ValueError(f"Attachment reference has no target: {value!r}")
        try:
            return cls(target_id=target_id, corner=Corner(corner))
        except ValueError:
            raise ValueError(f"Unknown corner '{corner}' in attachment reference {value!r}")

    @property
    def target(self) -> AttachmentTarget:
        if self.target_id == ZEROPOINT_ID:
            return ORIGIN_TARGET
        if self.target_id == PARENT_ID:
            return PARENT_TARGET
        return AttachmentTarget(TargetKind.ENTITY, self.target_id)

    def __str__(self) -> str:
        return f"{self.target_id}:{self.corner.value}"


@dataclass(frozen=True)
class RoomObject:
    """A decorative square or circle placed inside a room or part.

    The point ``corner(owner, room_anchor) + (x, y)`` is where the object's
    own ``anchor`` corner sits. Circles use ``width`` as their diameter.
    """

    shape: ObjectShape
    x: float = 0.0
    y: float = 0.0
    width: float = DEFAULT_OBJECT_SIZE
    height: float | None = None
    room_anchor: Corner = Corner.TOP_LEFT
    anchor: Corner = Corner.TOP_LEFT
    color: str = DEFAULT_OBJECT_COLOR
    text: str | None = None

    @property
    def size(self) -> tuple[float, float]:
        if self.shape is ObjectShape.CIRCLE or self.height is None:
            return (self.width, self.width)
        return (self.width, self.height)


@dataclass(frozen=True)
class RoomPart:
    """A rectangular sub-part of a room, attached to the parent or a sibling."""

    id: str
    width: float
    depth: float
    attach_to: AttachmentRef
    name: str | None = None
    anchor: Corner = Corner.TOP_LEFT
    offset: tuple[float, float] = (0.0, 0.0)
    objects: tuple[RoomObject, ...] = ()


@dataclass(frozen=True)
class Room:
    """Represents a room in the floor plan.

    Attributes:
        id: Unique identifier for the room.
        width: Size along x.
        depth: Size along y.
        attach_to: Where the room attaches.
        name: Optional display label.
        anchor: Which of this room's corners sits on the attachment point.
        offset: Translation applied after anchor alignment.
        parts: Ordered sub-parts forming a composite room.
        objects: Decorative objects inside the room.
    """

    id: str
    width: float
    depth: float
    attach_to: AttachmentRef
    name: str | None = None
    anchor: Corner = Corner.TOP_LEFT
    offset: tuple[float, float] = (0.0, 0.0)
    parts: tuple[RoomPart, ...] = ()
    objects: tuple[RoomObject, ...] = ()

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Door:
    """A door attached to a wall, written "<roomOrPartId>:<wall>"."""

    room: str
    width: float
    offset: float = 0.0
    depth: float = DOOR_THICKNESS
    swing: DoorSwing = DoorSwing.INWARDS_RIGHT
    type: DoorType = DoorType.NORMAL

    @property
    def is_opening(self) -> bool:
        return self.type is DoorType.OPENING or self.swing is DoorSwing.OPENING


@dataclass(frozen=True)
class Window:
    """A window attached to a wall, written "<roomOrPartId>:<wall>"."""

    room: str
    width: float
    offset: float = 0.0
    depth: float = WINDOW_THICKNESS


@dataclass(frozen=True)
class FloorPlan:
    """Represents a complete floor plan document.

    Attributes:
        rooms: Top-level rooms in declaration order.
        doors: Doors in declaration order; the index is the door's identity.
        windows: Windows in declaration order.
        grid_step: Spacing of the background grid.
    """

    rooms: tuple[Room, ...] = ()
    doors: tuple[Door, ...] = ()
    windows: tuple[Window, ...] = ()
    grid_step: float = DEFAULT_GRID_STEP


@dataclass(frozen=True)
class ResolvedRoom:
    """A room with its absolute top-left corner."""

    room: Room
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.room.id

    @property
    def key(self) -> str:
        return self.room.id

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.room.width, self.room.depth)


@dataclass(frozen=True)
class ResolvedPart:
    """A part with its absolute top-left corner.

    Parts are keyed "<roomId>/<partId>" so equal part ids in different rooms
    never collide.
    """

    part: RoomPart
    parent_id: str
    x: float
    y: float

    @property
    def id(self) -> str:
        return self.part.id

    @property
    def key(self) -> str:
        return part_key(self.parent_id, self.part.id)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.part.width, self.part.depth)


@dataclass(frozen=True)
class ResolvedObject:
    """A room object with its absolute bounding box.

    Attributes:
        owner_key: Key of the owning room or part.
        index: Position of the object in its owner's object list.
        obj: The source object.
        rect: Absolute bounding box (the circumscribing square for circles).
    """

    owner_key: str
    index: int
    obj: RoomObject
    rect: Rect

    @property
    def center(self) -> Point:
        return Point(self.rect.x + self.rect.width / 2, self.rect.y + self.rect.height / 2)


@dataclass(frozen=True)
class WallPlacement:
    """Absolute base point and clockwise rotation (degrees) of a wall element.

    Attributes:
        x: Base point x.
        y: Base point y.
        rotation: 0, 90, 180 or 270.
        width: Element width along the wall.
    """

    x: float
    y: float
    rotation: float
    width: float = 0.0


@dataclass(frozen=True)
class PlacedDoor:
    index: int
    door: Door
    owner_key: str
    wall: WallSide
    placement: WallPlacement

    @property
    def element(self) -> Door:
        return self.door

    @property
    def label(self) -> str:
        return f"door[{self.index}]"


@dataclass(frozen=True)
class PlacedWindow:
    index: int
    window: Window
    owner_key: str
    wall: WallSide
    placement: WallPlacement

    @property
    def element(self) -> Window:
        return self.window

    @property
    def label(self) -> str:
        return f"window[{self.index}]"


@dataclass(frozen=True)
class CompositeGeometry:
    """A room's rectangles (room first, then parts) and their shared edges."""

    rectangles: tuple[Rect, ...]
    shared_edges: tuple[Segment, ...] = field(default_factory=tuple)


def part_key(parent_id: str, part_id: str) -> str:
    """Build the table key of a resolved part."""
    return f"{parent_id}/{part_id}"


def split_wall_ref(value: str) -> tuple[str, str]:
    """Split a "<roomOrPartId>:<wall>" reference.

    The wall name is returned unchecked, and is empty when the separator is
    missing, so callers can report bad walls instead of failing.
    """
    if ":" not in value:
        return value, ""
    entity_id, wall = value.rsplit(":", 1)
    return entity_id, wall
