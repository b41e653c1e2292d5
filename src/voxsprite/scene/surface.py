"""Sampling surfaces: anything that answers "what is at this 3D point?".

A sampling surface implements a single method, ``sample(position)``, which
returns a value (a palette index, a color) or ``None`` where there is
nothing. Absence is the ordinary case and never an error.

Classes that subclass ``SamplingSurface`` explicitly pick up two shared
behaviours:

- ``bounding_box()``: an empty box unless the surface knows its extent.
- ``normal(position)``: a crude outward normal estimated by probing the six
  axis neighbours of an *empty* position next to filled ones. Each neighbour
  that samples to ``None`` adds its offset; the sum is normalized (zero
  vector when no neighbour is exposed).

The sparse voxel body realization lives here; the image-backed realization
is ``voxsprite.scene.focus.FocusImage``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol, TypeVar, runtime_checkable

import numpy as np
import numpy.typing as npt

from voxsprite.geometry.bounds import BoundingBox, IVec3

T_co = TypeVar("T_co", covariant=True)

# Axis-aligned unit offsets to the six face neighbours of a cell
FACE_OFFSETS: tuple[IVec3, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def normalize_or_zero(vector: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Return ``vector`` scaled to unit length, or zeros if it has none."""
    length = float(np.linalg.norm(vector))
    if length == 0.0:
        return np.zeros(3)
    return vector / length


@runtime_checkable
class SamplingSurface(Protocol[T_co]):
    """Protocol for point-sampled 3D content.

    Any class with a matching ``sample`` satisfies the protocol structurally;
    subclass it explicitly to inherit the default ``bounding_box`` and
    ``normal`` implementations.
    """

    def sample(self, position: Iterable[float]) -> T_co | None:
        """Return the value at ``position``, or None where nothing is."""
        ...

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.empty()

    def normal(self, position: Iterable[float]) -> npt.NDArray[np.float64]:
        p = np.asarray(tuple(position), dtype=np.float64)
        accumulated = np.zeros(3)
        for offset in FACE_OFFSETS:
            if self.sample(p + offset) is None:
                accumulated += offset
        return normalize_or_zero(accumulated)


class VoxelBody(SamplingSurface[int]):
    """Sparse voxel grid sampled by integer-truncated position.

    Positions with a negative component, or at or beyond ``size`` on any
    axis, are outside the body and sample to None.

    Attributes:
        size: Model extent (x, y, z); valid cells lie in [0, size).
        voxels: Occupied cells mapped to palette indices.
    """

    def __init__(self, size: IVec3, voxels: Mapping[IVec3, int]) -> None:
        self.size = tuple(int(s) for s in size)
        self.voxels = dict(voxels)

    def sample(self, position: Iterable[float]) -> int | None:
        x, y, z = position
        if x < 0 or y < 0 or z < 0:
            return None
        cell = (int(x), int(y), int(z))
        if any(c >= s for c, s in zip(cell, self.size)):
            return None
        return self.voxels.get(cell)

    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.voxels)

    def __len__(self) -> int:
        return len(self.voxels)
