"""Oblique camera transforms for the four fixed sprite headings.

A sprite camera is a 4x4 affine matrix mapping world space to camera space:

- x, y: screen pixel coordinates (y runs down the image rows)
- z: depth; the camera looks along camera-space -z

Each heading combines a quarter-turn rotation about the vertical (world z)
axis with a fixed oblique shear that slides every unit of height by
(-1/sqrt2, +1/sqrt2) on screen:

    M = S @ R

The rotation uses exact quarter-turn sines and cosines, so integer voxel
positions stay exact after rotation.

Example:
    >>> from voxsprite.camera.oblique import Heading, oblique_matrix, transform_point
    >>> camera = oblique_matrix(Heading.OBLIQUE_NORTH)
    >>> transform_point(camera, (0.0, 0.0, 1.0)).round(4).tolist()
    [-0.7071, 0.7071, 1.0]
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from enum import Enum

import numpy as np
import numpy.typing as npt

# Oblique unit: screen offset per unit of height along each axis
OBLIQUE_UNIT = 1.0 / math.sqrt(2.0)

# Exact (cos, sin) for 0, 90, 180 and 270 degree turns
_QUARTER_TURNS = ((1.0, 0.0), (0.0, 1.0), (-1.0, 0.0), (0.0, -1.0))


class Heading(Enum):
    """The four supported oblique viewpoints.

    The value is the number of quarter turns about the vertical axis.
    """

    OBLIQUE_NORTH = 0
    OBLIQUE_WEST = 1
    OBLIQUE_SOUTH = 2
    OBLIQUE_EAST = 3

    @classmethod
    def parse(cls, name: str) -> Heading:
        """Look up a heading by a short name such as ``"north"``.

        Raises:
            ValueError: If the name does not match any heading.
        """
        key = name.strip().upper()
        if not key.startswith("OBLIQUE_"):
            key = f"OBLIQUE_{key}"
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(h.short_name for h in cls)
            raise ValueError(f"Unknown heading {name!r} (expected one of: {choices})") from None

    @property
    def short_name(self) -> str:
        return self.name.removeprefix("OBLIQUE_").lower()


def rotation_matrix(turns: int) -> npt.NDArray[np.float64]:
    """Return the 4x4 rotation by ``turns`` quarter turns about world z."""
    c, s = _QUARTER_TURNS[turns % 4]
    rotation = np.identity(4)
    rotation[0, 0] = c
    rotation[0, 1] = -s
    rotation[1, 0] = s
    rotation[1, 1] = c
    return rotation


def shear_matrix() -> npt.NDArray[np.float64]:
    """Return the oblique shear that maps height onto a screen offset."""
    shear = np.identity(4)
    shear[0, 2] = -OBLIQUE_UNIT
    shear[1, 2] = OBLIQUE_UNIT
    return shear


def oblique_matrix(heading: Heading) -> npt.NDArray[np.float64]:
    """Return the world-to-camera transform for a heading."""
    return shear_matrix() @ rotation_matrix(heading.value)


# =============================================================================
# Transform Helpers
# =============================================================================


def transform_point(
    matrix: npt.NDArray[np.float64], point: Iterable[float]
) -> npt.NDArray[np.float64]:
    """Apply an affine 4x4 transform to a 3D point (w is ignored)."""
    p = np.asarray(tuple(point), dtype=np.float64)
    return matrix[:3, :3] @ p + matrix[:3, 3]


def transform_vector(
    matrix: npt.NDArray[np.float64], vector: Iterable[float]
) -> npt.NDArray[np.float64]:
    """Apply the linear part of a 4x4 transform to a 3D direction."""
    v = np.asarray(tuple(vector), dtype=np.float64)
    return matrix[:3, :3] @ v


def forward_direction(matrix: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """World-space direction the camera looks along (camera-space -z)."""
    return transform_vector(np.linalg.inv(matrix), (0.0, 0.0, -1.0))


def view_normal(matrix: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Unit world-space vector pointing from the scene toward the camera."""
    toward = -forward_direction(matrix)
    return toward / np.linalg.norm(toward)
