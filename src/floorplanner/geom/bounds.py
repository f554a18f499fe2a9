"""Viewport bounds for rendering a resolved floor plan."""

from __future__ import annotations

import math
from typing import Iterable

from ..config import BOUNDS_PADDING_RATIO, DEFAULT_VIEWPORT_SIZE
from ..core.model import Rect

DEFAULT_VIEWPORT = Rect(0.0, 0.0, DEFAULT_VIEWPORT_SIZE, DEFAULT_VIEWPORT_SIZE)


def compute_bounds(
    rectangles: Iterable[Rect],
    padding_ratio: float = BOUNDS_PADDING_RATIO,
    default: Rect = DEFAULT_VIEWPORT,
) -> Rect:
    """Padded bounding box of every room and part rectangle.

    The box is padded by ``padding_ratio * max(width, height)`` on every
    side, so a single W x D room with W >= D gets a viewport of
    (W * 1.2, D + 0.2 * W) at the default ratio.

    Args:
        rectangles: Resolved room and part rectangles.
        padding_ratio: Padding as a fraction of the larger dimension.
        default: Viewport returned when there is nothing to show.

    Returns:
        The padded viewport rectangle.
    """
    rects = list(rectangles)
    if not rects:
        return default

    min_x = min(r.x for r in rects)
    min_y = min(r.y for r in rects)
    max_x = max(r.right for r in rects)
    max_y = max(r.bottom for r in rects)

    width = max_x - min_x
    height = max_y - min_y
    padding = max(width, height) * padding_ratio

    return Rect(
        x=min_x - padding,
        y=min_y - padding,
        width=width + padding * 2,
        height=height + padding * 2,
    )


def grid_bounds(bounds: Rect, grid_step: float) -> Rect:
    """Snap a viewport outwards to whole grid cells."""
    if grid_step <= 0:
        raise ValueError("grid_step must be positive")
    min_x = math.floor(bounds.x / grid_step) * grid_step
    min_y = math.floor(bounds.y / grid_step) * grid_step
    max_x = math.ceil(bounds.right / grid_step) * grid_step
    max_y = math.ceil(bounds.bottom / grid_step) * grid_step
    return Rect(min_x, min_y, max_x - min_x, max_y - min_y)
