"""Discrete cell-stepping ray traversal.

The tracer walks a ray through the integer voxel grid DDA-style: the
direction is rescaled so its largest-magnitude component is exactly one,
which advances at most one cell per axis per step.

The walk always produces a connected line of cells, but on shallow diagonals
it can step past "side" cells that a continuous ray would clip. Callers that
need every touched cell must not rely on this tracer.

The sequence is unbounded; callers cap it themselves, e.g. with
``itertools.islice``.

Example:
    >>> from itertools import islice
    >>> from voxsprite.core.tracer import trace_cells
    >>> list(islice(trace_cells((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)), 3))
    [(0, 0, 0), (1, 0, 0), (2, 0, 0)]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np
import numpy.typing as npt

from voxsprite.geometry.bounds import IVec3, round_cell

# Directions shorter than this (squared) are rejected
MIN_DIRECTION_LENGTH_SQUARED = 1e-5

# Default cap on the number of cells a caller walks along one ray
DEFAULT_MAX_STEPS = 256


def unit_step(direction: Iterable[float]) -> npt.NDArray[np.float64]:
    """Rescale a direction so its largest-magnitude component is one.

    Raises:
        ValueError: If the direction is (near) zero length.
    """
    d = np.asarray(tuple(direction), dtype=np.float64)
    if float(np.dot(d, d)) < MIN_DIRECTION_LENGTH_SQUARED:
        raise ValueError(f"Ray direction {d.tolist()} is too short to trace")
    return d / np.max(np.abs(d))


def trace_cells(origin: Iterable[float], direction: Iterable[float]) -> Iterator[IVec3]:
    """Yield the integer cells along a ray, starting at the origin's cell.

    Args:
        origin: Real-valued ray start.
        direction: Non-zero ray direction; only its orientation matters.

    Yields:
        Integer cell positions, one per step, forever.

    Raises:
        ValueError: If the direction is (near) zero length. Raised on the
            call, before the first cell is produced.
    """
    step = unit_step(direction)
    start = np.asarray(tuple(origin), dtype=np.float64)
    return _walk(start, step)


def _walk(start: npt.NDArray[np.float64], step: npt.NDArray[np.float64]) -> Iterator[IVec3]:
    k = 0
    while True:
        # origin + k * step avoids drift from repeated accumulation
        yield round_cell(start + k * step)
        k += 1
