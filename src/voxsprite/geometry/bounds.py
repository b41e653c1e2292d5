"""Axis-aligned bounds in 3D and integer rectangles in 2D.

This module provides the two extent types used throughout projection and
reconstruction:

- BoundingBox: real-valued 3D box folded from sampled cell positions.
- Rect: integer 2D rectangle (min inclusive, max exclusive) with a mapping
  to and from normalized [0, 1) coordinates.

Rounding to the nearest integer is always floor(v + 0.5) so that the
Python sampling path and the Taichi kernels agree on half-way values.

Example:
    >>> from voxsprite.geometry.bounds import BoundingBox, Rect
    >>> box = BoundingBox.from_points([(0, 0, 0), (2, 1, 3)])
    >>> box.max.tolist()
    [2.0, 1.0, 3.0]
    >>> rect = Rect.from_points([(0, 0), (3, 1)])
    >>> rect.normalize((0, 0))
    (0.0, 0.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

# Integer 2D and 3D points used as dictionary keys
IVec2 = tuple[int, int]
IVec3 = tuple[int, int, int]


def round_half_up(value: float) -> int:
    """Round a real value to the nearest integer, halves toward +inf."""
    return int(math.floor(value + 0.5))


def round_cell(point: Iterable[float]) -> IVec3:
    """Round a real 3D point to the integer cell containing it."""
    x, y, z = point
    return (round_half_up(x), round_half_up(y), round_half_up(z))


# =============================================================================
# 3D Bounding Box
# =============================================================================


def _empty_min() -> npt.NDArray[np.float64]:
    return np.full(3, np.inf)


def _empty_max() -> npt.NDArray[np.float64]:
    return np.full(3, -np.inf)


@dataclass(frozen=True, eq=False)
class BoundingBox:
    """Axis-aligned 3D bounding box.

    A freshly created box is empty (min = +inf, max = -inf) and is grown by
    folding points into it. Callers check ``is_empty`` before using the
    extent; an empty box has no corners.

    Attributes:
        min: Componentwise minimum corner.
        max: Componentwise maximum corner.
    """

    min: npt.NDArray[np.float64] = field(default_factory=_empty_min)
    max: npt.NDArray[np.float64] = field(default_factory=_empty_max)

    @classmethod
    def empty(cls) -> BoundingBox:
        """Return a box containing nothing."""
        return cls()

    @classmethod
    def from_points(cls, points: Iterable[Iterable[float]]) -> BoundingBox:
        """Fold a sequence of 3D points into a tight box."""
        box = cls.empty()
        for point in points:
            box = box.include(point)
        return box

    @property
    def is_empty(self) -> bool:
        """Whether no point has been folded into the box yet."""
        return bool(np.any(self.min > self.max))

    def include(self, point: Iterable[float]) -> BoundingBox:
        """Return a new box grown to contain ``point``."""
        p = np.asarray(tuple(point), dtype=np.float64)
        return BoundingBox(np.minimum(self.min, p), np.maximum(self.max, p))

    def corners(self) -> list[npt.NDArray[np.float64]]:
        """Return the eight corners of the box.

        Raises:
            ValueError: If the box is empty.
        """
        if self.is_empty:
            raise ValueError("Empty bounding box has no corners")
        return [
            np.array([x, y, z], dtype=np.float64)
            for x in (self.min[0], self.max[0])
            for y in (self.min[1], self.max[1])
            for z in (self.min[2], self.max[2])
        ]


# =============================================================================
# 2D Integer Rectangle
# =============================================================================


@dataclass(frozen=True)
class Rect:
    """Integer rectangle with inclusive ``min`` and exclusive ``max``.

    Built from observed points, so ``max`` is always the observed maximum
    plus one on each axis.
    """

    min: IVec2
    max: IVec2

    @classmethod
    def from_points(cls, points: Iterable[IVec2]) -> Rect:
        """Build the tight rectangle around a set of integer points.

        Raises:
            ValueError: If ``points`` is empty.
        """
        xs: list[int] = []
        ys: list[int] = []
        for x, y in points:
            xs.append(int(x))
            ys.append(int(y))
        if not xs:
            raise ValueError("Cannot build a Rect from an empty point set")
        return cls((min(xs), min(ys)), (max(xs) + 1, max(ys) + 1))

    @classmethod
    def from_image(
        cls, image: npt.NDArray[np.uint8], key: npt.ArrayLike | None = None
    ) -> Rect:
        """Build the rectangle around all non-key pixels of an RGBA image.

        The key color defaults to the pixel at (0, 0).

        Raises:
            ValueError: If every pixel equals the key color.
        """
        if key is None:
            key = image[0, 0]
        rows, cols = np.nonzero(np.any(image != key, axis=-1))
        return cls.from_points(zip(cols.tolist(), rows.tolist()))

    @property
    def width(self) -> int:
        return self.max[0] - self.min[0]

    @property
    def height(self) -> int:
        return self.max[1] - self.min[1]

    def contains(self, point: IVec2) -> bool:
        """Whether ``point`` lies inside the rectangle."""
        x, y = point
        return self.min[0] <= x < self.max[0] and self.min[1] <= y < self.max[1]

    def normalize(self, point: IVec2) -> tuple[float, float]:
        """Map an integer point to normalized [0, 1) coordinates."""
        x, y = point
        return (
            (x - self.min[0]) / self.width,
            (y - self.min[1]) / self.height,
        )

    def denormalize(self, uv: tuple[float, float]) -> IVec2:
        """Map normalized coordinates back to an integer point.

        Truncation means the result can land one unit below the point that
        was normalized; it never leaves the rectangle for ``uv`` in [0, 1).
        """
        u, v = uv
        return (
            self.min[0] + int(math.floor(u * self.width)),
            self.min[1] + int(math.floor(v * self.height)),
        )
