"""Visualization module for floor planning.

This module provides functionality to render resolved floor plans to PNG.
"""

from .generator import generate_floorplan_image

__all__ = ["generate_floorplan_image"]
