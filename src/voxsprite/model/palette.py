"""Color palette quantization.

Voxel containers index a bounded palette. ``quantize_colors`` builds one from
a sparse color map, reusing an index whenever a color repeats, and
``nearest_palette_index`` maps an arbitrary color onto an existing palette.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TypeVar

import numpy as np

from voxsprite.errors import PaletteOverflowError
from voxsprite.scene.focus import Color

K = TypeVar("K")

# Maximum number of palette entries a voxel container can index
MAX_PALETTE_SIZE = 256


def quantize_colors(
    colors: Mapping[K, Color], max_size: int = MAX_PALETTE_SIZE
) -> tuple[dict[K, int], list[Color]]:
    """Replace colors by palette indices, in first-seen order.

    Args:
        colors: Mapping from any key (usually a position) to a color.
        max_size: Largest palette allowed.

    Returns:
        ``(indices, palette)`` where ``palette[indices[key]] == colors[key]``.

    Raises:
        PaletteOverflowError: If more than ``max_size`` distinct colors occur.
    """
    palette: list[Color] = []
    lookup: dict[Color, int] = {}
    indices: dict[K, int] = {}
    for key, color in colors.items():
        color = tuple(int(c) for c in color)
        index = lookup.get(color)
        if index is None:
            if len(palette) >= max_size:
                raise PaletteOverflowError(
                    f"More than {max_size} distinct colors needed for the palette"
                )
            index = len(palette)
            lookup[color] = index
            palette.append(color)
        indices[key] = index
    return indices, palette


def nearest_palette_index(palette: Sequence[Color], color: Iterable[int]) -> int:
    """Index of the palette entry closest to ``color`` in RGB space.

    Alpha is ignored. The lowest index wins ties.

    Raises:
        ValueError: If the palette is empty.
    """
    if len(palette) == 0:
        raise ValueError("Cannot match a color against an empty palette")
    entries = np.asarray(palette, dtype=np.int64)[:, :3]
    target = np.asarray(tuple(color), dtype=np.int64)[:3]
    distances = np.sum((entries - target) ** 2, axis=1)
    return int(np.argmin(distances))
