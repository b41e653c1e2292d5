"""Geometry module for extents and rounding.

Components:
    bounds: 3D bounding boxes, 2D integer rectangles, nearest-integer rounding

Both projection directions share these types: the view builder derives its
screen envelope from a BoundingBox, and sprite painting maps pixels between
two Rects through normalized coordinates.
"""

from .bounds import BoundingBox, IVec2, IVec3, Rect, round_cell, round_half_up

__all__ = [
    "BoundingBox",
    "Rect",
    "IVec2",
    "IVec3",
    "round_cell",
    "round_half_up",
]
