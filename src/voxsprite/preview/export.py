"""Sprite image loading and export.

Sprites are handled as RGBA uint8 NumPy arrays of shape (H, W, 4), row 0 at
the top. Pillow does the file I/O.

Supported formats:
    - PNG (8-bit RGBA via Pillow), plus anything Pillow can read on load

Example:
    >>> from voxsprite.preview.export import load_image, save_png, scale_image
    >>> sprite = load_image("north.png")
    >>> save_png(scale_image(sprite, 4), "north_x4.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage


def load_image(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Read an image file as an RGBA array.

    Args:
        filepath: Path to any image format Pillow understands.

    Returns:
        Array of shape (H, W, 4) with dtype uint8.
    """
    with PILImage.open(filepath) as pil_image:
        return np.array(pil_image.convert("RGBA"), dtype=np.uint8)


def save_png(image: npt.NDArray[np.uint8], filepath: str | Path) -> None:
    """Save an RGBA array as a PNG file.

    Args:
        image: Array of shape (H, W, 4) with dtype uint8.
        filepath: Output file path (should end in .png).

    Raises:
        ValueError: If the array is not (H, W, 4).
    """
    if image.ndim != 3 or image.shape[2] != 4:
        raise ValueError(f"Expected an RGBA array of shape (H, W, 4), got {image.shape}")

    pil_image = PILImage.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    pil_image.save(filepath, format="PNG")


def scale_image(image: npt.NDArray[np.uint8], scale: int) -> npt.NDArray[np.uint8]:
    """Enlarge an image by an integer factor with nearest-neighbour pixels.

    Raises:
        ValueError: If ``scale`` is less than 1.
    """
    if scale < 1:
        raise ValueError(f"Scale must be a positive integer, got {scale}")
    if scale == 1:
        return image
    return np.repeat(np.repeat(image, scale, axis=0), scale, axis=1)
