"""Geometry utilities for floor planning.

This module provides the corner formula, composite room merging, wall
placement for doors and windows, and viewport bounds.
"""

from .bounds import compute_bounds, grid_bounds
from .composite import composite_outline, merge_parts, shared_edges
from .corners import get_corner
from .walls import door_swing, place_on_wall, to_global

__all__ = [
    "compute_bounds",
    "grid_bounds",
    "composite_outline",
    "merge_parts",
    "shared_edges",
    "get_corner",
    "door_swing",
    "place_on_wall",
    "to_global",
]
