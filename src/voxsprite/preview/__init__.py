"""Preview module for sprite output and visualization.

Components:
    sprite: Model rendering, focus markers, outline stripping, painting
    export: Pillow-based RGBA image load/save and integer upscaling
    display: Matplotlib-based static preview

Example:
    >>> from voxsprite.camera.oblique import Heading
    >>> from voxsprite.model.vox import load_vox
    >>> from voxsprite.preview import render_sprite, save_png, scale_image
    >>>
    >>> sprite = render_sprite(load_vox("chair.vox"), Heading.OBLIQUE_NORTH)
    >>> save_png(scale_image(sprite, 4), "chair.png")
"""

from voxsprite.preview.display import show_sprite, show_views
from voxsprite.preview.export import load_image, save_png, scale_image
from voxsprite.preview.sprite import (
    FOCUS_MARKER,
    focus_sprite,
    paint_model,
    project_colors,
    render_sprite,
    sparse_to_image,
    strip_outline,
)

__all__ = [
    # Display functions
    "show_sprite",
    "show_views",
    # Export functions
    "load_image",
    "save_png",
    "scale_image",
    # Sprite functions
    "FOCUS_MARKER",
    "project_colors",
    "sparse_to_image",
    "focus_sprite",
    "render_sprite",
    "strip_outline",
    "paint_model",
]
