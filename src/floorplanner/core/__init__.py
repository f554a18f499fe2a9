"""Core data models for floor planning."""

from .model import AttachmentRef, Corner, FloorPlan, Point, Rect, Room, RoomPart, WallSide
from .topology import build_attachment_graph, diagnose_chain

__all__ = [
    "AttachmentRef",
    "Corner",
    "FloorPlan",
    "Point",
    "Rect",
    "Room",
    "RoomPart",
    "WallSide",
    "build_attachment_graph",
    "diagnose_chain",
]
