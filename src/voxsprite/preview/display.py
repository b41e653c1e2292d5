"""Matplotlib-based preview of sprites.

Example:
    >>> from voxsprite.preview.display import show_views
    >>> show_views({"north": north, "east": east}, block=True)
"""

from __future__ import annotations

from collections.abc import Mapping

import numpy as np
import numpy.typing as npt


def show_sprite(
    image: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (6, 6),
    block: bool = True,
) -> None:
    """Display an RGBA sprite in a Matplotlib window.

    Pixels are drawn unsmoothed so individual voxels stay visible.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(image, interpolation="nearest")
    ax.axis("off")
    if title is not None:
        ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)


def show_views(
    images: Mapping[str, npt.NDArray[np.uint8]],
    *,
    figsize: tuple[float, float] = (16, 5),
    block: bool = True,
) -> None:
    """Display several labelled sprites side by side.

    Raises:
        ValueError: If ``images`` is empty.
    """
    import matplotlib.pyplot as plt

    if not images:
        raise ValueError("No images to display")

    fig, axes = plt.subplots(1, len(images), figsize=figsize, squeeze=False)
    for ax, (label, image) in zip(axes[0], images.items()):
        ax.imshow(image, interpolation="nearest")
        ax.set_title(label)
        ax.axis("off")

    plt.tight_layout()
    plt.show(block=block)
