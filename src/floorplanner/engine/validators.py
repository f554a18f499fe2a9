"""Post-resolution validation for floor plans.

This module provides the optional checks run after a room graph has been
resolved. Each check is governed by a policy from ResolverConfig: "ignore"
skips it, "advisory" reports warnings and "strict" reports errors. None of
the checks removes geometry; they only add ResolutionError records.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Union

from ..config import DEFAULT_CONFIG, POLICY_IGNORE, POLICY_STRICT, ResolverConfig
from ..core.model import PlacedDoor, PlacedWindow, Rect, Room, TargetKind
from ..geom.walls import fits_on_wall, wall_length
from .errors import ErrorKind, ResolutionError, Severity


class InvalidFloorPlan(Exception):
    """Raised when a floor plan is required to resolve without errors but doesn't."""

    def __init__(self, errors: Sequence[ResolutionError]):
        self.errors = tuple(errors)
        summary = "; ".join(error.message for error in self.errors)
        super().__init__(f"{len(self.errors)} resolution error(s): {summary}")


def _severity(policy: str) -> Severity:
    return Severity.ERROR if policy == POLICY_STRICT else Severity.WARNING


def validate_origin_anchor(rooms: Sequence[Room], policy: str) -> List[ResolutionError]:
    """Check that at least one top-level room attaches to the origin.

    Without such a room nothing in the plan can resolve. Whether this is
    reported at all, and how severely, depends on the policy.

    Args:
        rooms: Top-level rooms.
        policy: "ignore", "advisory" or "strict".

    Returns:
        A single NO_ORIGIN_ANCHOR record, or an empty list.
    """
    if policy == POLICY_IGNORE or not rooms:
        return []

    if any(room.attach_to.target.kind is TargetKind.ORIGIN for room in rooms):
        return []

    return [
        ResolutionError(
            kind=ErrorKind.NO_ORIGIN_ANCHOR,
            entity_id=rooms[0].id,
            target_id=None,
            message="No room is attached to the origin (zeropoint); nothing can be positioned.",
            severity=_severity(policy),
        )
    ]


def validate_wall_fit(
    placed: Sequence[Union[PlacedDoor, PlacedWindow]],
    rect_of: Callable[[str], Optional[Rect]],
    policy: str,
) -> List[ResolutionError]:
    """Check that every door and window stays within its wall.

    Args:
        placed: Placed doors and windows.
        rect_of: Looks up the rectangle of a room id or part key.
        policy: "ignore", "advisory" or "strict".

    Returns:
        One WALL_OVERFLOW record per element that runs past its wall.
    """
    if policy == POLICY_IGNORE:
        return []

    errors = []
    for item in placed:
        rect = rect_of(item.owner_key)
        if rect is None:
            continue
        element = item.element
        if fits_on_wall(rect, item.wall, element.offset, element.width):
            continue
        errors.append(
            ResolutionError(
                kind=ErrorKind.WALL_OVERFLOW,
                entity_id=item.label,
                target_id=element.room,
                message=(
                    f"{item.label} on {element.room} spans {element.offset:g}..."
                    f"{element.offset + element.width:g} but the wall is "
                    f"{wall_length(rect, item.wall):g} long."
                ),
                severity=_severity(policy),
            )
        )
    return errors


def validate_all(
    rooms: Sequence[Room],
    placed: Sequence[Union[PlacedDoor, PlacedWindow]],
    rect_of: Callable[[str], Optional[Rect]],
    config: ResolverConfig | None = None,
) -> List[ResolutionError]:
    """Run every post-resolution check.

    Args:
        rooms: Top-level rooms.
        placed: Placed doors and windows.
        rect_of: Looks up the rectangle of a room id or part key.
        config: Policies to apply.

    Returns:
        All records found, origin check first.
    """
    config = config or DEFAULT_CONFIG
    errors = validate_origin_anchor(rooms, config.origin_policy)
    errors.extend(validate_wall_fit(placed, rect_of, config.wall_fit_policy))
    return errors


def raise_for_errors(errors: Sequence[ResolutionError]) -> None:
    """Raise InvalidFloorPlan if any record has error severity.

    Raises:
        InvalidFloorPlan: If at least one error-severity record exists.
    """
    failures = [error for error in errors if error.is_error]
    if failures:
        raise InvalidFloorPlan(failures)
