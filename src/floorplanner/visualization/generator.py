"""Image generation for floor plan visualization.

This module draws resolved floor plan geometry to PNG with matplotlib:
composite room outlines with internal seams left out, doors with their
swing arcs, windows, room objects and labels.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

import matplotlib

matplotlib.use("Agg")

from ..core.model import ObjectShape, Point, Rect, WallPlacement
from ..engine.api import FloorPlanGeometry
from ..geom.composite import composite_outline, outline_points, visible_borders
from ..geom.walls import door_swing, to_global, window_frame

LOGGER = logging.getLogger(__name__)

ROOM_FILL = "#f3efe6"
WALL_COLOR = "#222222"
WALL_WIDTH = 2.0
DOOR_COLOR = "#8b5a2b"
WINDOW_COLOR = "#6fa8dc"
GRID_COLOR = "#e6e6e6"
ARC_SEGMENTS = 24


def _rect_corners(rect: Rect) -> List[Point]:
    return [
        Point(rect.x, rect.y),
        Point(rect.right, rect.y),
        Point(rect.right, rect.bottom),
        Point(rect.x, rect.bottom),
    ]


def _globals(placement: WallPlacement, points: Sequence[Point]) -> List[tuple]:
    return [(p.x, p.y) for p in (to_global(placement, point) for point in points)]


def _draw_grid(ax, geometry: FloorPlanGeometry) -> None:
    grid = geometry.grid
    step = geometry.plan.grid_step
    x = grid.x
    while x <= grid.right:
        ax.plot([x, x], [grid.y, grid.bottom], color=GRID_COLOR, linewidth=0.5, zorder=0)
        x += step
    y = grid.y
    while y <= grid.bottom:
        ax.plot([grid.x, grid.right], [y, y], color=GRID_COLOR, linewidth=0.5, zorder=0)
        y += step


def _draw_rooms(ax, geometry: FloorPlanGeometry) -> None:
    from matplotlib.patches import Polygon as PolygonPatch

    for room_id, composite in geometry.composites.items():
        for ring in outline_points(composite_outline(composite.rectangles)):
            ax.add_patch(
                PolygonPatch([(p.x, p.y) for p in ring], closed=True, facecolor=ROOM_FILL, edgecolor="none", zorder=1)
            )
        for rect in composite.rectangles:
            for line in visible_borders(rect, composite.shared_edges):
                ax.plot([p.x for p in line], [p.y for p in line], color=WALL_COLOR, linewidth=WALL_WIDTH, zorder=3)

        room = geometry.resolution.rooms[room_id]
        rect = room.rect
        ax.text(
            rect.x + rect.width / 2,
            rect.y + rect.height / 2,
            room.room.label,
            ha="center",
            va="center",
            fontsize=9,
            fontweight="bold",
            zorder=6,
        )


def _draw_objects(ax, geometry: FloorPlanGeometry) -> None:
    from matplotlib.patches import Circle, Rectangle

    for placed in geometry.resolution.objects:
        rect = placed.rect
        if placed.obj.shape is ObjectShape.CIRCLE:
            center = placed.center
            patch = Circle((center.x, center.y), rect.width / 2, facecolor=placed.obj.color, alpha=0.6, zorder=2)
        else:
            patch = Rectangle((rect.x, rect.y), rect.width, rect.height, facecolor=placed.obj.color, alpha=0.6, zorder=2)
        ax.add_patch(patch)
        if placed.obj.text:
            center = placed.center
            ax.text(center.x, center.y, placed.obj.text, ha="center", va="center", fontsize=7, zorder=6)


def _draw_doors(ax, geometry: FloorPlanGeometry) -> None:
    from matplotlib.patches import Polygon as PolygonPatch

    for placed in geometry.doors:
        door = placed.door
        swing = door_swing(door.swing, door.width, door.depth, door.is_opening)

        # Clear the wall where the door sits
        gap = _globals(placed.placement, swing.gap)
        ax.plot([p[0] for p in gap], [p[1] for p in gap], color="white", linewidth=WALL_WIDTH + 1.5, zorder=4)

        if swing.leaf is not None:
            leaf = _globals(placed.placement, _rect_corners(swing.leaf))
            ax.add_patch(PolygonPatch(leaf, closed=True, facecolor=DOOR_COLOR, edgecolor=DOOR_COLOR, zorder=5))
        if swing.arc is not None:
            arc = swing.arc
            step = (arc.end_angle - arc.start_angle) / ARC_SEGMENTS
            points = [arc.point_at(arc.start_angle + step * i) for i in range(ARC_SEGMENTS + 1)]
            line = _globals(placed.placement, points)
            ax.plot([p[0] for p in line], [p[1] for p in line], color=DOOR_COLOR, linewidth=0.8, linestyle="--", zorder=5)


def _draw_windows(ax, geometry: FloorPlanGeometry) -> None:
    from matplotlib.patches import Polygon as PolygonPatch

    for placed in geometry.windows:
        frame = window_frame(placed.window.width, placed.window.depth)
        corners = _globals(placed.placement, _rect_corners(frame))
        ax.add_patch(PolygonPatch(corners, closed=True, facecolor=WINDOW_COLOR, edgecolor=WALL_COLOR, linewidth=0.8, zorder=5))


def generate_floorplan_image(geometry: FloorPlanGeometry, output_path: Path, show_grid: bool = True) -> bool:
    """Generate a PNG image of a resolved floor plan.

    Args:
        geometry: Geometry from build_geometry.
        output_path: Path where to save the PNG image.
        show_grid: Draw the background grid.

    Returns:
        True if the image was generated successfully, False otherwise.
    """
    import matplotlib.pyplot as plt

    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)

        fig, ax = plt.subplots(figsize=(12, 12))
        if show_grid:
            _draw_grid(ax, geometry)
        _draw_rooms(ax, geometry)
        _draw_objects(ax, geometry)
        _draw_doors(ax, geometry)
        _draw_windows(ax, geometry)

        viewport = geometry.viewport
        ax.set_xlim(viewport.x, viewport.right)
        # Screen coordinates grow downwards
        ax.set_ylim(viewport.bottom, viewport.y)
        ax.set_aspect("equal", adjustable="box")
        ax.axis("off")
        fig.tight_layout()
        fig.savefig(output_path, dpi=140)
        plt.close(fig)
        return True

    except (OSError, ValueError) as e:
        LOGGER.error("Error in image generation: %s", e)
        plt.close("all")
        return False
