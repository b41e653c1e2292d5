"""Multi-view voxel reconstruction from oblique sprites.

Reconstruction intersects the silhouettes of several Prisms. Every integer
position in the cube [-radius, radius]^3 is projected through every view;
a position is kept only if *all* views see a non-transparent pixel there.
An OR across views would keep whole extruded prisms; the AND is what
triangulates the solid.

Each kept position then needs one color. Its exposed faces (axis neighbours
that were not kept) sum to a crude outward surface normal, and the view
whose normal has the largest dot product with it supplies the color. Ties,
including the zero normal of fully enclosed positions, go to the view that
comes first in the input order.

The cube scan runs in a Taichi kernel (one thread per position, views looped
serially inside). Sprites are packed into a (views, H, W) uint32 ndarray,
RGBA as r | g << 8 | b << 16 | a << 24, so 0 marks a transparent pixel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from voxsprite.core.reconstruct import build_model
    >>> model = build_model(views, radius=16)  # views: list[Prism]
"""

import logging
from collections.abc import Collection, Mapping, Sequence
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from voxsprite.geometry.bounds import IVec3
from voxsprite.scene.focus import Color, Prism
from voxsprite.scene.surface import FACE_OFFSETS, normalize_or_zero

LOGGER = logging.getLogger(__name__)

# Half-width of the scanned cube
DEFAULT_RADIUS = 64


@dataclass(frozen=True, eq=False)
class VoxelMatch:
    """A candidate color for one position and the normal of the view it came from."""

    color: Color
    normal: npt.NDArray[np.float64]


# =============================================================================
# Color Packing
# =============================================================================


def pack_colors(image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint32]:
    """Pack an (H, W, 4) RGBA array into (H, W) uint32."""
    channels = image.astype(np.uint32)
    return (
        channels[..., 0]
        | (channels[..., 1] << 8)
        | (channels[..., 2] << 16)
        | (channels[..., 3] << 24)
    )


def unpack_color(packed: int) -> Color:
    """Unpack a uint32 RGBA value into a color tuple."""
    packed = int(packed)
    return (packed & 0xFF, (packed >> 8) & 0xFF, (packed >> 16) & 0xFF, (packed >> 24) & 0xFF)


# =============================================================================
# Cube Scan Kernel
# =============================================================================


@ti.kernel
def _scan_cube(
    images: ti.types.ndarray(dtype=ti.u32, ndim=3),
    sizes: ti.types.ndarray(dtype=ti.i32, ndim=2),
    offsets: ti.types.ndarray(dtype=ti.i32, ndim=2),
    cameras: ti.types.ndarray(dtype=ti.f32, ndim=3),
    radius: ti.i32,
    colors: ti.types.ndarray(dtype=ti.u32, ndim=4),
    occupied: ti.types.ndarray(dtype=ti.i32, ndim=3),
):
    """Sample every view at every position of the cube.

    Args:
        images: Packed sprites, shape (V, H, W), zero-padded.
        sizes: Active (width, height) of each sprite, shape (V, 2).
        offsets: Per-view focus center (x, y), added to the rounded
            camera-space point to get the array cell, shape (V, 2). Cells in
            array row 0 or column 0 are never sampled.
        cameras: World-to-camera transforms, shape (V, 4, 4).
        radius: Half-width of the cube.
        colors: Output packed color per position and view, shape (S, S, S, V).
        occupied: Output 1 where every view saw a color, shape (S, S, S).
    """
    side = 2 * radius + 1
    num_views = images.shape[0]
    for i, j, k in ti.ndrange(side, side, side):
        x = ti.cast(i - radius, ti.f32)
        y = ti.cast(j - radius, ti.f32)
        z = ti.cast(k - radius, ti.f32)

        seen_by_all = 1
        for v in range(num_views):
            u = cameras[v, 0, 0] * x + cameras[v, 0, 1] * y + cameras[v, 0, 2] * z + cameras[v, 0, 3]
            w = cameras[v, 1, 0] * x + cameras[v, 1, 1] * y + cameras[v, 1, 2] * z + cameras[v, 1, 3]
            col = ti.cast(ti.floor(u + 0.5), ti.i32) + offsets[v, 0]
            row = ti.cast(ti.floor(w + 0.5), ti.i32) + offsets[v, 1]

            color = ti.cast(0, ti.u32)
            if col > 0 and row > 0 and col < sizes[v, 0] and row < sizes[v, 1]:
                color = images[v, row, col]

            colors[i, j, k, v] = color
            if color == 0:
                seen_by_all = 0

        occupied[i, j, k] = seen_by_all


def _pack_views(views: Sequence[Prism]):
    """Lay out the views' sprites and cameras as kernel-ready arrays."""
    num_views = len(views)
    max_height = max(view.image.height for view in views)
    max_width = max(view.image.width for view in views)

    images = np.zeros((num_views, max_height, max_width), dtype=np.uint32)
    sizes = np.zeros((num_views, 2), dtype=np.int32)
    offsets = np.zeros((num_views, 2), dtype=np.int32)
    cameras = np.zeros((num_views, 4, 4), dtype=np.float32)

    for v, view in enumerate(views):
        focus = view.image
        images[v, : focus.height, : focus.width] = pack_colors(focus.image)
        sizes[v] = (focus.width, focus.height)
        offsets[v] = focus.center
        cameras[v] = view.camera

    return images, sizes, offsets, cameras


# =============================================================================
# Public Reconstruction API
# =============================================================================


def scan_views(views: Sequence[Prism], radius: int = DEFAULT_RADIUS) -> dict[IVec3, list[VoxelMatch]]:
    """Find every cube position that all views agree is solid.

    Args:
        views: Prisms to intersect, at least one.
        radius: Half-width of the scanned cube.

    Returns:
        Mapping from accepted position to one VoxelMatch per view, in view
        order. Positions are listed in x-fastest scan order.

    Raises:
        ValueError: If ``views`` is empty or ``radius`` is negative.
    """
    if not views:
        raise ValueError("Reconstruction needs at least one view")
    if radius < 0:
        raise ValueError(f"Radius must be non-negative, got {radius}")

    side = 2 * radius + 1
    images, sizes, offsets, cameras = _pack_views(views)
    colors = np.zeros((side, side, side, len(views)), dtype=np.uint32)
    occupied = np.zeros((side, side, side), dtype=np.int32)

    LOGGER.debug("Scanning %d^3 positions against %d views", side, len(views))
    _scan_cube(images, sizes, offsets, cameras, radius, colors, occupied)

    normals = [view.normal() for view in views]
    matches: dict[IVec3, list[VoxelMatch]] = {}
    # argwhere is row-major over (x, y, z); reorder to z, y, x loops
    accepted = np.argwhere(occupied.transpose(2, 1, 0) != 0)
    for k, j, i in accepted.tolist():
        position = (i - radius, j - radius, k - radius)
        matches[position] = [
            VoxelMatch(unpack_color(colors[i, j, k, v]), normals[v]) for v in range(len(views))
        ]
    return matches


def estimate_face_normal(position: IVec3, accepted: Collection[IVec3]) -> npt.NDArray[np.float64]:
    """Sum the offsets of a position's exposed faces into a unit normal.

    A face is exposed when the neighbour across it is not in ``accepted``.
    Returns the zero vector for positions with no exposed face.
    """
    x, y, z = position
    accumulated = np.zeros(3)
    for dx, dy, dz in FACE_OFFSETS:
        if (x + dx, y + dy, z + dz) not in accepted:
            accumulated += (dx, dy, dz)
    return normalize_or_zero(accumulated)


def select_match(matches: Sequence[VoxelMatch], normal: npt.NDArray[np.float64]) -> VoxelMatch:
    """Pick the match whose view faces ``normal`` most directly.

    The first match wins ties.

    Raises:
        ValueError: If ``matches`` is empty.
    """
    if not matches:
        raise ValueError("No candidate matches to choose from")
    best = matches[0]
    best_score = float(np.dot(best.normal, normal))
    for match in matches[1:]:
        score = float(np.dot(match.normal, normal))
        if score > best_score:
            best, best_score = match, score
    return best


def resolve_colors(matches: Mapping[IVec3, Sequence[VoxelMatch]]) -> dict[IVec3, Color]:
    """Collapse each position's candidates to the best-facing view's color."""
    return {
        position: select_match(candidates, estimate_face_normal(position, matches)).color
        for position, candidates in matches.items()
    }


def build_model(views: Sequence[Prism], radius: int = DEFAULT_RADIUS) -> dict[IVec3, Color]:
    """Reconstruct a sparse colored voxel set from oblique views.

    Args:
        views: Prisms to intersect, at least one.
        radius: Half-width of the scanned cube.

    Returns:
        Mapping from integer position to its resolved RGBA color.

    Raises:
        ValueError: If ``views`` is empty or ``radius`` is negative.
    """
    matches = scan_views(views, radius)
    LOGGER.info("Accepted %d positions from %d views", len(matches), len(views))
    return resolve_colors(matches)
