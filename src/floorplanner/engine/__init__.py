"""Engine module for floor plan resolution.

This module provides the anchor resolver, its structured error records and
the API that runs the full resolution pipeline.
"""

from .api import FloorPlanGeometry, build_geometry
from .errors import ErrorKind, ResolutionError, Severity
from .resolver import ResolutionResult, resolve
from .validators import InvalidFloorPlan

__all__ = [
    "ErrorKind",
    "FloorPlanGeometry",
    "InvalidFloorPlan",
    "ResolutionError",
    "ResolutionResult",
    "Severity",
    "build_geometry",
    "resolve",
]
