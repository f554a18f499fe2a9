"""Core API for turning a floor plan into absolute geometry.

This module runs the whole pipeline: anchor resolution, composite merge per
room, wall placement per door and window, validation and viewport bounds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..core.model import (
    CompositeGeometry,
    Door,
    FloorPlan,
    PlacedDoor,
    PlacedWindow,
    Rect,
    WallSide,
    Window,
    split_wall_ref,
)
from ..geom.bounds import compute_bounds, grid_bounds
from ..geom.composite import merge_parts
from ..geom.walls import place_on_wall
from .errors import ErrorKind, ResolutionError, Severity
from .resolver import ResolutionResult, resolve
from .validators import raise_for_errors, validate_all

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class FloorPlanGeometry:
    """Everything a renderer needs to draw a floor plan.

    Attributes:
        plan: The source floor plan.
        resolution: Resolved rooms, parts and objects.
        composites: Composite geometry per resolved room id.
        doors: Placed doors; ``index`` is the position in ``plan.doors``.
        windows: Placed windows; ``index`` is the position in ``plan.windows``.
        viewport: Padded bounds of all room and part rectangles.
        errors: Resolution, placement and validation records.
    """

    plan: FloorPlan
    resolution: ResolutionResult
    composites: Mapping[str, CompositeGeometry]
    doors: Tuple[PlacedDoor, ...]
    windows: Tuple[PlacedWindow, ...]
    viewport: Rect
    errors: Tuple[ResolutionError, ...]

    @property
    def ok(self) -> bool:
        return not any(error.is_error for error in self.errors)

    @property
    def grid(self) -> Rect:
        return grid_bounds(self.viewport, self.plan.grid_step)


def build_geometry(
    plan: FloorPlan, config: ResolverConfig | None = None, strict: bool = False
) -> FloorPlanGeometry:
    """Resolve a floor plan into renderable geometry.

    Args:
        plan: The floor plan to resolve.
        config: Resolution settings and validation policies.
        strict: Raise instead of returning a partial result when any
            error-severity record is produced.

    Returns:
        FloorPlanGeometry for every entity that could be positioned.

    Raises:
        InvalidFloorPlan: If ``strict`` is set and errors were found.
    """
    config = config or DEFAULT_CONFIG
    result = resolve(plan.rooms, config)

    composites = {
        room_id: merge_parts(room, result.parts_of(room_id))
        for room_id, room in result.rooms.items()
    }

    doors, door_errors = place_doors(plan.doors, result)
    windows, window_errors = place_windows(plan.windows, result)

    errors = list(result.errors) + door_errors + window_errors
    errors.extend(validate_all(plan.rooms, list(doors) + list(windows), result.rect_of, config))

    rectangles = [rect for composite in composites.values() for rect in composite.rectangles]
    viewport = compute_bounds(rectangles, config.padding_ratio)

    LOGGER.debug(
        "Built geometry: %d rooms, %d parts, %d doors, %d windows, %d errors",
        len(result.rooms),
        len(result.parts),
        len(doors),
        len(windows),
        len(errors),
    )

    if strict:
        raise_for_errors(errors)

    return FloorPlanGeometry(
        plan=plan,
        resolution=result,
        composites=composites,
        doors=tuple(doors),
        windows=tuple(windows),
        viewport=viewport,
        errors=tuple(errors),
    )


def find_owner(result: ResolutionResult, entity_id: str) -> Optional[Tuple[str, Rect]]:
    """Find the resolved room or part a door/window reference names.

    Rooms are matched by id, parts by their "room/part" key or by bare part
    id when exactly one resolved part has it.

    Args:
        result: Resolution to search.
        entity_id: The id part of a "<roomOrPartId>:<wall>" reference.

    Returns:
        The owner key and rectangle, or None if nothing resolved matches.
    """
    if entity_id in result.rooms:
        return entity_id, result.rooms[entity_id].rect
    if entity_id in result.parts:
        return entity_id, result.parts[entity_id].rect

    matches = [part for part in result.parts.values() if part.id == entity_id]
    if len(matches) == 1:
        return matches[0].key, matches[0].rect
    return None


def place_doors(
    doors: Sequence[Door], result: ResolutionResult
) -> Tuple[List[PlacedDoor], List[ResolutionError]]:
    """Place every door on its wall; bad references are reported, not raised."""
    placed = []
    errors = []
    for index, door in enumerate(doors):
        target = _resolve_wall_ref(door.room, f"door[{index}]", result)
        if isinstance(target, ResolutionError):
            errors.append(target)
            continue
        owner_key, rect, wall = target
        placement = place_on_wall(rect, wall, door.offset, door.width)
        placed.append(PlacedDoor(index, door, owner_key, wall, placement))
    return placed, errors


def place_windows(
    windows: Sequence[Window], result: ResolutionResult
) -> Tuple[List[PlacedWindow], List[ResolutionError]]:
    """Place every window on its wall; bad references are reported, not raised."""
    placed = []
    errors = []
    for index, window in enumerate(windows):
        target = _resolve_wall_ref(window.room, f"window[{index}]", result)
        if isinstance(target, ResolutionError):
            errors.append(target)
            continue
        owner_key, rect, wall = target
        placement = place_on_wall(rect, wall, window.offset, window.width)
        placed.append(PlacedWindow(index, window, owner_key, wall, placement))
    return placed, errors


def _resolve_wall_ref(reference: str, label: str, result: ResolutionResult):
    entity_id, wall_name = split_wall_ref(reference)

    try:
        wall = WallSide(wall_name)
    except ValueError:
        return _invalid_wall(
            label, reference, f'{label} names unknown wall "{wall_name}" in "{reference}".'
        )

    owner = find_owner(result, entity_id)
    if owner is None:
        return _invalid_wall(
            label, reference, f'{label} is attached to "{entity_id}", which was not positioned.'
        )

    owner_key, rect = owner
    return owner_key, rect, wall


def _invalid_wall(label: str, reference: str, message: str) -> ResolutionError:
    LOGGER.warning("%s: %s", ErrorKind.INVALID_WALL_REFERENCE.value, message)
    return ResolutionError(
        kind=ErrorKind.INVALID_WALL_REFERENCE,
        entity_id=label,
        target_id=reference,
        message=message,
        severity=Severity.WARNING,
    )


def errors_by_entity(errors: Sequence[ResolutionError]) -> Dict[str, List[ResolutionError]]:
    """Group records by the entity they concern, keeping their order."""
    grouped: Dict[str, List[ResolutionError]] = {}
    for error in errors:
        grouped.setdefault(error.entity_id, []).append(error)
    return grouped
