"""Parser for floor plan JSON documents.

This module converts the JSON documents written by the authoring tool into
FloorPlan objects, and serialises resolved geometry back to plain JSON.
Document-level problems (wrong types, unknown enum names, duplicate ids) are
rejected with ValueError; graph-level problems such as missing references or
cycles are left for the resolver to report.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Tuple

from typing_extensions import TypedDict

from ..config import (
    DEFAULT_GRID_STEP,
    DEFAULT_OBJECT_COLOR,
    DEFAULT_OBJECT_SIZE,
    DOOR_THICKNESS,
    PARENT_ID,
    WINDOW_THICKNESS,
    ZEROPOINT_ID,
)
from ..core.model import (
    AttachmentRef,
    Corner,
    Door,
    DoorSwing,
    DoorType,
    FloorPlan,
    ObjectShape,
    Room,
    RoomObject,
    RoomPart,
    Window,
)
from ..engine.api import FloorPlanGeometry
from ..geom.composite import composite_outline, outline_points
from ..geom.walls import door_swing, to_global


class ObjectData(TypedDict, total=False):
    type: str
    x: float
    y: float
    width: float
    height: float
    radius: float
    roomAnchor: str
    anchor: str
    color: str
    text: str


class PartData(TypedDict, total=False):
    id: str
    name: str
    attachTo: str
    width: float
    depth: float
    anchor: str
    offset: List[float]
    objects: List[ObjectData]


class RoomData(PartData, total=False):
    parts: List[PartData]


class DoorData(TypedDict, total=False):
    room: str
    offset: float
    width: float
    depth: float
    swing: str
    type: str


class FloorPlanData(TypedDict, total=False):
    grid_step: float
    rooms: List[RoomData]
    doors: List[DoorData]
    windows: List[DoorData]


def _number(value: Any, field: str, owner: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"{owner}: '{field}' must be a finite number, got {value!r}")
    return float(value)


def _positive(value: Any, field: str, owner: str) -> float:
    number = _number(value, field, owner)
    if number <= 0:
        raise ValueError(f"{owner}: '{field}' must be positive, got {value!r}")
    return number


def _enum(enum_cls, value: Any, field: str, owner: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"{owner}: unknown {field} {value!r} (expected one of {allowed})")


def _offset(value: Any, owner: str) -> Tuple[float, float]:
    if value is None:
        return (0.0, 0.0)
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{owner}: 'offset' must be a pair of numbers, got {value!r}")
    return (_number(value[0], "offset", owner), _number(value[1], "offset", owner))


def _attachment(value: Any, owner: str) -> AttachmentRef:
    if value is None:
        raise ValueError(f"{owner}: missing 'attachTo'")
    try:
        return AttachmentRef.parse(value)
    except ValueError as e:
        raise ValueError(f"{owner}: {e}") from e


def _parse_object(data: ObjectData, owner: str) -> RoomObject:
    if not isinstance(data, dict):
        raise ValueError(f"{owner}: object must be a mapping, got {data!r}")

    shape = _enum(ObjectShape, data.get("type", ObjectShape.SQUARE.value), "object type", owner)

    if "width" in data:
        width = _positive(data["width"], "width", owner)
    elif "radius" in data:
        # Older documents give circles a radius
        width = 2 * _positive(data["radius"], "radius", owner)
    else:
        width = DEFAULT_OBJECT_SIZE

    height = None
    if shape is ObjectShape.SQUARE and "height" in data:
        height = _positive(data["height"], "height", owner)

    text = data.get("text")
    return RoomObject(
        shape=shape,
        x=_number(data.get("x", 0), "x", owner),
        y=_number(data.get("y", 0), "y", owner),
        width=width,
        height=height,
        room_anchor=_enum(Corner, data.get("roomAnchor", Corner.TOP_LEFT.value), "roomAnchor", owner),
        anchor=_enum(Corner, data.get("anchor", Corner.TOP_LEFT.value), "anchor", owner),
        color=str(data.get("color", DEFAULT_OBJECT_COLOR)),
        text=str(text) if text is not None else None,
    )


def _parse_objects(items: Any, owner: str) -> Tuple[RoomObject, ...]:
    if items is None:
        return ()
    if not isinstance(items, list):
        raise ValueError(f"{owner}: 'objects' must be a list")
    return tuple(_parse_object(item, f"{owner} object {i}") for i, item in enumerate(items))


def _entity_fields(data: PartData, owner: str) -> Dict[str, Any]:
    name = data.get("name")
    return dict(
        id=data["id"],
        name=str(name) if name is not None else None,
        width=_positive(data.get("width"), "width", owner),
        depth=_positive(data.get("depth"), "depth", owner),
        attach_to=_attachment(data.get("attachTo"), owner),
        anchor=_enum(Corner, data.get("anchor", Corner.TOP_LEFT.value), "anchor", owner),
        offset=_offset(data.get("offset"), owner),
        objects=_parse_objects(data.get("objects"), owner),
    )


def _check_id(data: Any, kind: str, index: int) -> str:
    if not isinstance(data, dict):
        raise ValueError(f"{kind} {index} must be a mapping, got {data!r}")
    entity_id = data.get("id")
    if not isinstance(entity_id, str) or not entity_id:
        raise ValueError(f"{kind} {index} has no 'id'")
    if entity_id in (ZEROPOINT_ID, PARENT_ID):
        raise ValueError(f'{kind} {index}: id "{entity_id}" is reserved')
    return entity_id


def _parse_room(data: RoomData, index: int) -> Room:
    room_id = _check_id(data, "Room", index)
    owner = f'Room "{room_id}"'

    raw_parts = data.get("parts")
    if raw_parts is None:
        raw_parts = []
    if not isinstance(raw_parts, list):
        raise ValueError(f"{owner}: 'parts' must be a list")

    parts = []
    seen = set()
    for i, part_data in enumerate(raw_parts):
        part_id = _check_id(part_data, f"{owner} part", i)
        if part_id in seen:
            raise ValueError(f'{owner}: duplicate part id "{part_id}"')
        seen.add(part_id)
        parts.append(RoomPart(**_entity_fields(part_data, f'Part "{room_id}/{part_id}"')))

    return Room(parts=tuple(parts), **_entity_fields(data, owner))


def _parse_door(data: DoorData, index: int) -> Door:
    owner = f"Door {index}"
    if not isinstance(data, dict) or not isinstance(data.get("room"), str):
        raise ValueError(f"{owner}: 'room' must be a \"<roomId>:<wall>\" string")
    return Door(
        room=data["room"],
        width=_positive(data.get("width"), "width", owner),
        offset=_number(data.get("offset", 0), "offset", owner),
        depth=_positive(data.get("depth", DOOR_THICKNESS), "depth", owner),
        swing=_enum(DoorSwing, data.get("swing", DoorSwing.INWARDS_RIGHT.value), "swing", owner),
        type=_enum(DoorType, data.get("type", DoorType.NORMAL.value), "door type", owner),
    )


def _parse_window(data: DoorData, index: int) -> Window:
    owner = f"Window {index}"
    if not isinstance(data, dict) or not isinstance(data.get("room"), str):
        raise ValueError(f"{owner}: 'room' must be a \"<roomId>:<wall>\" string")
    return Window(
        room=data["room"],
        width=_positive(data.get("width"), "width", owner),
        offset=_number(data.get("offset", 0), "offset", owner),
        depth=_positive(data.get("depth", WINDOW_THICKNESS), "depth", owner),
    )


def _list(data: FloorPlanData, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list")
    return value


def parse_floorplan(data: FloorPlanData) -> FloorPlan:
    """Build a FloorPlan from a decoded JSON document.

    Args:
        data: The decoded document.

    Returns:
        The FloorPlan.

    Raises:
        ValueError: If the document is malformed.
    """
    if not isinstance(data, dict):
        raise ValueError("Floor plan document must be a JSON object")

    rooms = []
    seen = set()
    for index, room_data in enumerate(_list(data, "rooms")):
        room = _parse_room(room_data, index)
        if room.id in seen:
            raise ValueError(f'Duplicate room id "{room.id}"')
        seen.add(room.id)
        rooms.append(room)

    doors = tuple(_parse_door(d, i) for i, d in enumerate(_list(data, "doors")))
    windows = tuple(_parse_window(w, i) for i, w in enumerate(_list(data, "windows")))

    return FloorPlan(
        rooms=tuple(rooms),
        doors=doors,
        windows=windows,
        grid_step=_positive(data.get("grid_step", DEFAULT_GRID_STEP), "grid_step", "Floor plan"),
    )


def load_floorplan(path: str) -> FloorPlan:
    """Load a floor plan from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        FloorPlan object.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the JSON data is invalid or malformed.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(file_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    return parse_floorplan(data)


def _rect_dict(rect) -> Dict[str, float]:
    return {"x": rect.x, "y": rect.y, "width": rect.width, "height": rect.height}


def _point_dict(point) -> Dict[str, float]:
    return {"x": point.x, "y": point.y}


def geometry_to_dict(geometry: FloorPlanGeometry) -> Dict[str, Any]:
    """Convert resolved geometry to a JSON-serialisable dictionary.

    Rooms are keyed by id, parts by "room/part" key, doors and windows carry
    their index in the source plan so renderers can map shapes back to it.
    """
    resolution = geometry.resolution

    rooms = {}
    for room_id, room in resolution.rooms.items():
        composite = geometry.composites[room_id]
        rooms[room_id] = {
            "name": room.room.label,
            **_rect_dict(room.rect),
            "parts": [part.key for part in resolution.parts_of(room_id)],
            "shared_edges": [
                {"start": _point_dict(e.start), "end": _point_dict(e.end)}
                for e in composite.shared_edges
            ],
            "outline": [
                [_point_dict(p) for p in ring]
                for ring in outline_points(composite_outline(composite.rectangles))
            ],
        }

    doors = []
    for placed in geometry.doors:
        swing = door_swing(placed.door.swing, placed.door.width, placed.door.depth, placed.door.is_opening)
        doors.append(
            {
                "index": placed.index,
                "owner": placed.owner_key,
                "wall": placed.wall.value,
                "x": placed.placement.x,
                "y": placed.placement.y,
                "rotation": placed.placement.rotation,
                "width": placed.door.width,
                "swing": placed.door.swing.value,
                "hinge": _point_dict(to_global(placed.placement, swing.hinge)) if swing.hinge else None,
            }
        )

    return {
        "grid_step": geometry.plan.grid_step,
        "viewport": _rect_dict(geometry.viewport),
        "rooms": rooms,
        "parts": {
            key: {"name": part.part.name or part.id, "room": part.parent_id, **_rect_dict(part.rect)}
            for key, part in resolution.parts.items()
        },
        "objects": [
            {
                "owner": obj.owner_key,
                "index": obj.index,
                "type": obj.obj.shape.value,
                "color": obj.obj.color,
                "text": obj.obj.text,
                **_rect_dict(obj.rect),
            }
            for obj in resolution.objects
        ],
        "doors": doors,
        "windows": [
            {
                "index": placed.index,
                "owner": placed.owner_key,
                "wall": placed.wall.value,
                "x": placed.placement.x,
                "y": placed.placement.y,
                "rotation": placed.placement.rotation,
                "width": placed.window.width,
            }
            for placed in geometry.windows
        ],
        "errors": [error.to_dict() for error in geometry.errors],
    }


def save_geometry(geometry: FloorPlanGeometry, output_path: str) -> None:
    """Save resolved geometry to a JSON file.

    Args:
        geometry: The geometry to save.
        output_path: Path where to save the JSON file.
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(geometry_to_dict(geometry), f, indent=2)
