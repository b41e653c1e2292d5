"""Core projection module.

This module contains both directions of the sprite/voxel pipeline:

Components:
    tracer: Unbounded DDA-style cell traversal along a direction
    view: Forward projection, sampling surface + camera -> sparse pixel hits
    reconstruct: Inverse projection, oblique views -> colored voxel set

Forward projection runs in plain Python over the sampling surface protocol.
The reconstruction cube scan is a Taichi kernel, so ``ti.init()`` must have
been called before ``build_model``/``scan_views``.
"""

from .reconstruct import (
    DEFAULT_RADIUS,
    VoxelMatch,
    build_model,
    estimate_face_normal,
    pack_colors,
    resolve_colors,
    scan_views,
    select_match,
    unpack_color,
)
from .tracer import DEFAULT_MAX_STEPS, trace_cells, unit_step
from .view import ViewHit, build_view, screen_envelope

__all__ = [
    "DEFAULT_MAX_STEPS",
    "trace_cells",
    "unit_step",
    "ViewHit",
    "build_view",
    "screen_envelope",
    "DEFAULT_RADIUS",
    "VoxelMatch",
    "build_model",
    "scan_views",
    "estimate_face_normal",
    "select_match",
    "resolve_colors",
    "pack_colors",
    "unpack_color",
]
