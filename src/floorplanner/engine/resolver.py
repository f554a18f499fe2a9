"""Anchor resolution for floor plan room graphs.

Rooms are positioned relative to a corner of another room or of the origin,
and parts relative to their parent room or a sibling part. References may
point forwards, backwards, nowhere, or around in a circle, so positions are
found by repeated passes over the unresolved entities until a pass makes no
progress (or the iteration ceiling is reached). Whatever is left over is
diagnosed through the attachment graph and reported as a ResolutionError;
the rest of the plan still resolves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..core.model import (
    Rect,
    ResolvedObject,
    ResolvedPart,
    ResolvedRoom,
    Room,
    RoomObject,
    RoomPart,
    TargetKind,
    part_key,
)
from ..core.topology import (
    CHAIN_CYCLE,
    CHAIN_MISSING,
    build_attachment_graph,
    diagnose_chain,
)
from ..geom.corners import get_corner, place_anchored
from .errors import ErrorKind, ResolutionError, Severity

LOGGER = logging.getLogger(__name__)

ORIGIN_RECT = Rect(0.0, 0.0, 0.0, 0.0)

Entity = Union[Room, RoomPart]


@dataclass(frozen=True)
class ResolutionResult:
    """Resolved positions plus the problems found along the way.

    Attributes:
        rooms: Resolved rooms by id, in declaration order.
        parts: Resolved parts by "room/part" key, grouped by room.
        objects: Placed objects of every resolved room and part.
        errors: Problems, in declaration order.
    """

    rooms: Mapping[str, ResolvedRoom]
    parts: Mapping[str, ResolvedPart]
    objects: Tuple[ResolvedObject, ...]
    errors: Tuple[ResolutionError, ...]

    @property
    def ok(self) -> bool:
        return not any(error.is_error for error in self.errors)

    def parts_of(self, room_id: str) -> List[ResolvedPart]:
        """Resolved parts of a room in declaration order."""
        room = self.rooms.get(room_id)
        if room is None:
            return []
        keys = [part_key(room_id, part.id) for part in room.room.parts]
        return [self.parts[key] for key in keys if key in self.parts]

    def rect_of(self, key: str) -> Optional[Rect]:
        """Rectangle of a room id or part key, or None if unresolved."""
        if key in self.rooms:
            return self.rooms[key].rect
        if key in self.parts:
            return self.parts[key].rect
        return None


def resolve(rooms: Sequence[Room], config: ResolverConfig | None = None) -> ResolutionResult:
    """Resolve every room, part and object of a room graph.

    Args:
        rooms: Top-level rooms in declaration order.
        config: Resolution settings; only ``max_iterations`` and
            ``normalize`` are used here.

    Returns:
        A ResolutionResult. Never raises for unresolvable references.
    """
    config = config or DEFAULT_CONFIG
    errors: List[ResolutionError] = []

    room_rects, leftover, ceiling_hit = _resolve_layer(
        rooms, TargetKind.ORIGIN, ORIGIN_RECT, config.max_iterations, "rooms"
    )
    errors.extend(
        _report_unresolved(rooms, leftover, ceiling_hit, TargetKind.ORIGIN, str, "Room")
    )

    resolved_rooms: Dict[str, ResolvedRoom] = {}
    for room in rooms:
        rect = room_rects.get(room.id)
        if rect is not None and room.id not in resolved_rooms:
            resolved_rooms[room.id] = ResolvedRoom(room, rect.x, rect.y)

    resolved_parts: Dict[str, ResolvedPart] = {}
    for resolved in resolved_rooms.values():
        room = resolved.room
        if not room.parts:
            continue

        def to_key(part_id: str, _room_id: str = room.id) -> str:
            return part_key(_room_id, part_id)

        part_rects, part_leftover, part_ceiling_hit = _resolve_layer(
            room.parts,
            TargetKind.PARENT,
            resolved.rect,
            config.max_iterations,
            f"parts of {room.id}",
        )
        for part in room.parts:
            rect = part_rects.get(part.id)
            key = to_key(part.id)
            if rect is not None and key not in resolved_parts:
                resolved_parts[key] = ResolvedPart(part, room.id, rect.x, rect.y)
        errors.extend(
            _report_unresolved(
                room.parts, part_leftover, part_ceiling_hit, TargetKind.PARENT, to_key, "Part"
            )
        )

    objects: List[ResolvedObject] = []
    for resolved in resolved_rooms.values():
        objects.extend(place_objects(resolved.key, resolved.rect, resolved.room.objects))
        for part in resolved.room.parts:
            resolved_part = resolved_parts.get(part_key(resolved.id, part.id))
            if resolved_part is not None:
                objects.extend(
                    place_objects(resolved_part.key, resolved_part.rect, part.objects)
                )

    for error in errors:
        LOGGER.warning("%s: %s", error.kind.value, error.message)

    result = ResolutionResult(
        rooms=resolved_rooms,
        parts=resolved_parts,
        objects=tuple(objects),
        errors=tuple(errors),
    )
    if config.normalize:
        result = normalize_positions(result)
    return result


def place_objects(owner_key: str, owner: Rect, objects: Sequence[RoomObject]) -> List[ResolvedObject]:
    """Place a room's (or part's) objects in one direct pass.

    The point ``corner(owner, room_anchor) + (x, y)`` is where the object's
    own ``anchor`` corner lands.

    Args:
        owner_key: Room id or part key of the owner.
        owner: Absolute rectangle of the owner.
        objects: The owner's objects in declaration order.

    Returns:
        One ResolvedObject per object, in order.
    """
    placed = []
    for index, obj in enumerate(objects):
        corner = get_corner(owner, obj.room_anchor)
        width, height = obj.size
        top_left = place_anchored(corner, obj.anchor, width, height, (obj.x, obj.y))
        placed.append(
            ResolvedObject(owner_key, index, obj, Rect(top_left.x, top_left.y, width, height))
        )
    return placed


def normalize_positions(result: ResolutionResult) -> ResolutionResult:
    """Shift all geometry so the top-left-most room or part sits at (0, 0)."""
    rects = [r.rect for r in result.rooms.values()] + [p.rect for p in result.parts.values()]
    if not rects:
        return result

    min_x = min(rect.x for rect in rects)
    min_y = min(rect.y for rect in rects)
    if min_x == 0 and min_y == 0:
        return result

    rooms = {k: replace(r, x=r.x - min_x, y=r.y - min_y) for k, r in result.rooms.items()}
    parts = {k: replace(p, x=p.x - min_x, y=p.y - min_y) for k, p in result.parts.items()}
    objects = tuple(
        replace(o, rect=replace(o.rect, x=o.rect.x - min_x, y=o.rect.y - min_y))
        for o in result.objects
    )
    return replace(result, rooms=rooms, parts=parts, objects=objects)


def _resolve_layer(
    entities: Sequence[Entity],
    terminal: TargetKind,
    terminal_rect: Rect,
    max_iterations: int,
    label: str,
) -> Tuple[Dict[str, Rect], List[Entity], bool]:
    """Run the fixed-point passes over one namespace of entities.

    Args:
        entities: Rooms, or the parts of one room.
        terminal: The reserved target that is always resolved in this
            namespace (the origin for rooms, the parent for parts).
        terminal_rect: Rectangle bound to the terminal target.
        max_iterations: Pass ceiling.
        label: Namespace name for log messages.

    Returns:
        Rectangles by entity id, the entities left unresolved, and whether
        the pass ceiling stopped the loop while it was still progressing.
        Only the first declaration of a repeated id takes part.
    """
    positions: Dict[str, Rect] = {}
    pending = _first_declarations(entities)
    passes = 0
    progress = True

    while pending and passes < max_iterations:
        passes += 1
        remaining = []
        for entity in pending:
            anchor_rect = _lookup_target(entity, terminal, terminal_rect, positions)
            if anchor_rect is None:
                remaining.append(entity)
                continue
            anchor_point = get_corner(anchor_rect, entity.attach_to.corner)
            top_left = place_anchored(
                anchor_point, entity.anchor, entity.width, entity.depth, entity.offset
            )
            positions[entity.id] = Rect(top_left.x, top_left.y, entity.width, entity.depth)

        progress = len(remaining) < len(pending)
        pending = remaining
        if not progress:
            break

    LOGGER.debug(
        "Resolved %d/%d %s in %d passes",
        len(positions),
        len(entities),
        label,
        passes,
    )
    if pending:
        LOGGER.debug("Unresolved %s: %s", label, [entity.id for entity in pending])
    return positions, pending, bool(pending) and progress


def _first_declarations(entities: Sequence[Entity]) -> List[Entity]:
    seen = set()
    unique = []
    for entity in entities:
        if entity.id not in seen:
            seen.add(entity.id)
            unique.append(entity)
    return unique


def _lookup_target(
    entity: Entity,
    terminal: TargetKind,
    terminal_rect: Rect,
    positions: Mapping[str, Rect],
) -> Optional[Rect]:
    """Rectangle an entity attaches to, or None if not (yet) available."""
    target = entity.attach_to.target
    if target.kind is TargetKind.ENTITY:
        return positions.get(target.entity_id)
    if target.kind is TargetKind.ORIGIN:
        return terminal_rect if terminal is TargetKind.ORIGIN else None
    if target.kind is TargetKind.PARENT:
        return terminal_rect if terminal is TargetKind.PARENT else None
    raise AssertionError(f"Unhandled attachment target: {target!r}")


def _report_unresolved(
    entities: Sequence[Entity],
    leftover: Sequence[Entity],
    ceiling_hit: bool,
    terminal: TargetKind,
    to_key: Callable[[str], str],
    noun: str,
) -> List[ResolutionError]:
    """Diagnose each unresolved entity through the attachment graph.

    Repeated ids are reported as DUPLICATE_ID; the first declaration keeps
    the id.
    """
    unique = _first_declarations(entities)
    if not leftover and len(unique) == len(entities):
        return []

    graph = build_attachment_graph(unique, terminal)
    unresolved_ids = {entity.id for entity in leftover}
    declared = set()
    errors = []

    for entity in entities:
        target_id = entity.attach_to.target_id
        entity_key = to_key(entity.id)
        name = entity.name or entity.id

        if entity.id in declared:
            errors.append(
                ResolutionError(
                    kind=ErrorKind.DUPLICATE_ID,
                    entity_id=entity_key,
                    target_id=target_id,
                    message=(
                        f'{noun} "{name}" could not be positioned. '
                        f'Id "{entity.id}" is already declared.'
                    ),
                )
            )
            continue
        declared.add(entity.id)
        if entity.id not in unresolved_ids:
            continue

        diagnosis = diagnose_chain(graph, entity.id)

        if diagnosis.status == CHAIN_MISSING:
            if diagnosis.missing_id == target_id:
                message = (
                    f'{noun} "{name}" could not be positioned. '
                    f'Referenced entity "{target_id}" not found.'
                )
            else:
                message = (
                    f'{noun} "{name}" could not be positioned. Referenced entity '
                    f'"{target_id}" depends on "{diagnosis.missing_id}", which is not found.'
                )
            errors.append(
                ResolutionError(
                    kind=ErrorKind.MISSING_REFERENCE,
                    entity_id=entity_key,
                    target_id=target_id,
                    message=message,
                    missing_id=diagnosis.missing_id,
                )
            )
        elif diagnosis.status == CHAIN_CYCLE:
            members = tuple(to_key(member) for member in diagnosis.members)
            message = (
                f'{noun} "{name}" could not be positioned. Circular dependency detected: '
                + " -> ".join(members + members[:1])
            )
            errors.append(
                ResolutionError(
                    kind=ErrorKind.CIRCULAR_DEPENDENCY,
                    entity_id=entity_key,
                    target_id=target_id,
                    message=message,
                    members=members,
                )
            )
        elif not ceiling_hit:
            # A sound chain that stalled without hitting the ceiling ends at
            # a target this namespace cannot bind
            errors.append(
                ResolutionError(
                    kind=ErrorKind.MISSING_REFERENCE,
                    entity_id=entity_key,
                    target_id=target_id,
                    message=(
                        f'{noun} "{name}" could not be positioned. '
                        f'Referenced entity "{target_id}" not found.'
                    ),
                    missing_id=target_id,
                )
            )
        else:
            errors.append(
                ResolutionError(
                    kind=ErrorKind.MAX_ITERATIONS_EXCEEDED,
                    entity_id=entity_key,
                    target_id=target_id,
                    message=(
                        f'{noun} "{name}" could not be positioned within the '
                        "iteration limit; its attachment chain is too long."
                    ),
                    severity=Severity.WARNING,
                )
            )

    return errors
