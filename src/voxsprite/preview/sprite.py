"""Sprite rendering, focus marking, outline stripping and painting.

These functions sit between voxel models and sprite images:

- render_sprite: project a model under a heading into an RGBA sprite
- focus_sprite: lay out a sparse pixel map as a raw sprite whose row 0 and
  column 0 carry focus markers at the projection origin
- strip_outline: remove a one-pixel outline that borders transparency, so
  reconstruction does not mistake it for surface
- paint_model: recolor a model's visible surface from a reference sprite

Example:
    >>> from voxsprite.camera.oblique import Heading
    >>> from voxsprite.model.vox import load_vox
    >>> from voxsprite.preview.sprite import render_sprite
    >>> sprite = render_sprite(load_vox("chair.vox"), Heading.OBLIQUE_NORTH)
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
import numpy.typing as npt

from voxsprite.camera.oblique import Heading, oblique_matrix
from voxsprite.core.tracer import DEFAULT_MAX_STEPS
from voxsprite.core.view import build_view
from voxsprite.geometry.bounds import IVec2, Rect
from voxsprite.model.palette import nearest_palette_index
from voxsprite.model.vox import VoxelModel
from voxsprite.scene.focus import Color

# Marker color written on row 0 / column 0 of focus sprites
FOCUS_MARKER: Color = (255, 0, 255, 255)


def project_colors(
    model: VoxelModel, heading: Heading, max_steps: int = DEFAULT_MAX_STEPS
) -> dict[IVec2, Color]:
    """Opaque palette color of the first voxel seen through each pixel."""
    hits = build_view(model.body(), oblique_matrix(heading), max_steps)
    colors = {}
    for pixel, hit in hits.items():
        r, g, b, _ = model.palette[hit.value]
        colors[pixel] = (r, g, b, 255)
    return colors


def sparse_to_image(pixels: Mapping[IVec2, Color], rect: Rect) -> npt.NDArray[np.uint8]:
    """Paint a sparse pixel map into a transparent array covering ``rect``."""
    image = np.zeros((rect.height, rect.width, 4), dtype=np.uint8)
    for (x, y), color in pixels.items():
        image[y - rect.min[1], x - rect.min[0]] = color
    return image


def focus_sprite(
    pixels: Mapping[IVec2, Color], marker: Color = FOCUS_MARKER
) -> npt.NDArray[np.uint8]:
    """Lay out screen pixels as a raw sprite with focus markers.

    The sprite covers the pixels and the projection origin (0, 0). It is
    shifted two rows and columns down: row 0 and column 0 hold the markers,
    row 1 and column 1 stay transparent because FocusImage never samples
    them. A screen pixel p lands on raw pixel ``p + center + 1``. The pixel
    at (0, 0) stays transparent and acts as the key color.
    """
    rect = Rect.from_points([*pixels, (0, 0)])
    body = sparse_to_image(pixels, rect)

    raw = np.zeros((rect.height + 2, rect.width + 2, 4), dtype=np.uint8)
    raw[2:, 2:] = body
    raw[0, 1 - rect.min[0]] = marker
    raw[1 - rect.min[1], 0] = marker
    return raw


def render_sprite(
    model: VoxelModel,
    heading: Heading,
    *,
    focus: bool = False,
    max_steps: int = DEFAULT_MAX_STEPS,
) -> npt.NDArray[np.uint8]:
    """Render a model as an RGBA sprite seen from ``heading``.

    Args:
        model: Voxel model to project.
        heading: Oblique viewpoint.
        focus: Add focus markers so the sprite can be reconstructed from.
        max_steps: Number of cells walked along each pixel's ray.

    Raises:
        ValueError: If no voxel is visible.
    """
    colors = project_colors(model, heading, max_steps)
    if not colors:
        raise ValueError("Model has no visible voxels to render")
    if focus:
        return focus_sprite(colors)
    return sparse_to_image(colors, Rect.from_points(colors))


def strip_outline(raw: npt.NDArray[np.uint8], outline: Color) -> npt.NDArray[np.uint8]:
    """Replace outline pixels that touch transparency with the key color.

    Only the sprite area is touched; row 0 and column 0 (focus markers) are
    left as they are. Pixels beyond the image edge count as transparent.
    A single pass removes a one-pixel-wide outline.
    """
    result = raw.copy()
    key = raw[0, 0]
    area = result[1:, 1:]

    is_key = np.pad(np.all(area == key, axis=-1), 1, constant_values=True)
    touches_key = is_key[:-2, 1:-1] | is_key[2:, 1:-1] | is_key[1:-1, :-2] | is_key[1:-1, 2:]
    is_outline = np.all(area == np.asarray(outline, dtype=np.uint8), axis=-1)

    area[is_outline & touches_key] = key
    return result


def paint_model(
    model: VoxelModel,
    reference: npt.NDArray[np.uint8],
    heading: Heading,
    max_steps: int = DEFAULT_MAX_STEPS,
    *,
    focus: bool = False,
) -> VoxelModel:
    """Recolor the voxels visible from ``heading`` to match a reference sprite.

    Each visible pixel is mapped into the reference sprite's opaque area
    through normalized coordinates; the voxel under it takes the palette
    entry nearest to the reference pixel. Voxels under transparent reference
    pixels, and hidden voxels, keep their color.

    With ``focus`` set, the reference is a focus-marked sprite: row 0 and
    column 0 hold markers and are left out of the mapping.

    Raises:
        ValueError: If the reference sprite has no opaque pixels.
    """
    hits = build_view(model.body(), oblique_matrix(heading), max_steps)
    voxels = dict(model.voxels)
    if hits:
        key = reference[0, 0]
        area = reference[1:, 1:] if focus else reference
        view_rect = Rect.from_points(hits)
        reference_rect = Rect.from_image(area, key=key)
        for pixel, hit in hits.items():
            x, y = reference_rect.denormalize(view_rect.normalize(pixel))
            color = area[y, x]
            if np.array_equal(color, key):
                continue
            voxels[hit.position] = nearest_palette_index(model.palette, color.tolist())
    return VoxelModel(model.size, voxels, list(model.palette))
