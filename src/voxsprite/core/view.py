"""Forward projection: render a sampling surface through a camera.

For every screen pixel covering the surface's bounding box, a ray starts at
the top of the box in camera space, is mapped back to world space through
the inverse camera, and marches along the camera's forward axis. The first
cell that samples to a value is that pixel's hit. Later cells along the same
ray are never looked at, so the nearest sample to the camera wins.

The result is sparse: pixels whose ray finds nothing are left out.

Example:
    >>> from voxsprite.camera.oblique import Heading, oblique_matrix
    >>> from voxsprite.core.view import build_view
    >>> from voxsprite.scene.surface import VoxelBody
    >>> body = VoxelBody((1, 1, 1), {(0, 0, 0): 7})
    >>> build_view(body, oblique_matrix(Heading.OBLIQUE_NORTH))
    {(0, 0): ViewHit(position=(0, 0, 0), value=7)}
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import islice
from typing import Any, Generic, TypeVar

import numpy as np
import numpy.typing as npt

from voxsprite.camera.oblique import forward_direction, transform_point
from voxsprite.core.tracer import DEFAULT_MAX_STEPS, trace_cells
from voxsprite.geometry.bounds import IVec2, IVec3, Rect
from voxsprite.scene.surface import SamplingSurface

T = TypeVar("T")


@dataclass(frozen=True)
class ViewHit(Generic[T]):
    """The first sampled cell seen through one screen pixel."""

    position: IVec3
    value: T


def screen_envelope(
    surface: SamplingSurface[Any], camera: npt.NDArray[np.float64]
) -> tuple[Rect, float] | None:
    """Screen rectangle and top depth of a surface seen through a camera.

    Returns:
        ``(rect, depth)`` where ``rect`` covers every pixel the bounding box
        projects onto and ``depth`` is the largest camera-space z of its
        corners, or None if the surface has an empty bounding box.
    """
    box = surface.bounding_box()
    if box.is_empty:
        return None
    projected = np.array([transform_point(camera, corner) for corner in box.corners()])
    low = projected.min(axis=0)
    high = projected.max(axis=0)
    rect = Rect(
        (math.floor(low[0]), math.floor(low[1])),
        (math.ceil(high[0]) + 1, math.ceil(high[1]) + 1),
    )
    return rect, float(high[2])


def build_view(
    surface: SamplingSurface[T],
    camera: npt.NDArray[np.float64],
    max_steps: int = DEFAULT_MAX_STEPS,
) -> dict[IVec2, ViewHit[T]]:
    """Project a sampling surface into a sparse pixel map.

    Args:
        surface: Content to render; its bounding box limits the screen area.
        camera: World-to-camera 4x4 transform.
        max_steps: Number of cells walked along each pixel's ray.

    Returns:
        Mapping from screen pixel (x, y) to the first hit along its ray.
    """
    envelope = screen_envelope(surface, camera)
    if envelope is None:
        return {}
    rect, depth = envelope

    inverse = np.linalg.inv(camera)
    direction = forward_direction(camera)

    hits: dict[IVec2, ViewHit[T]] = {}
    for py in range(rect.min[1], rect.max[1]):
        for px in range(rect.min[0], rect.max[0]):
            origin = transform_point(inverse, (px, py, depth))
            for cell in islice(trace_cells(origin, direction), max_steps):
                value = surface.sample(cell)
                if value is not None:
                    hits[(px, py)] = ViewHit(cell, value)
                    break
    return hits
