"""Floor Planner - resolve relatively anchored floor plans into absolute geometry."""

__version__ = "0.1.0"
__author__ = "Marco"
__email__ = "marco@example.com"

from .core.model import Door, FloorPlan, Rect, Room, RoomPart, Window
from .engine.api import FloorPlanGeometry, build_geometry
from .engine.resolver import resolve

__all__ = [
    "Door",
    "FloorPlan",
    "FloorPlanGeometry",
    "Rect",
    "Room",
    "RoomPart",
    "Window",
    "build_geometry",
    "resolve",
]
