"""Structured error records produced while resolving a floor plan.

The engine never raises for a malformed room graph. Every problem is reported
as a ResolutionError and the offending entity is left out of the geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    MISSING_REFERENCE = "missing_reference"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"
    DUPLICATE_ID = "duplicate_id"
    INVALID_WALL_REFERENCE = "invalid_wall_reference"
    NO_ORIGIN_ANCHOR = "no_origin_anchor"
    WALL_OVERFLOW = "wall_overflow"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class ResolutionError:
    """A single resolution problem.

    Attributes:
        kind: What went wrong.
        entity_id: The room id, part key ("room/part") or door/window label
            that was left out.
        target_id: The id the entity referenced, if any.
        message: Human-readable description.
        members: Cycle member ids for circular dependencies.
        missing_id: The undefined id at the end of a broken chain.
        severity: ERROR for omitted geometry, WARNING for advisories.
    """

    kind: ErrorKind
    entity_id: str
    target_id: str | None
    message: str
    members: tuple[str, ...] = ()
    missing_id: str | None = None
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "entity_id": self.entity_id,
            "target_id": self.target_id,
            "message": self.message,
            "members": list(self.members),
            "missing_id": self.missing_id,
            "severity": self.severity.value,
        }
