"""Scene module for sampled content.

Components:
    surface: SamplingSurface protocol with shared defaults, VoxelBody
    focus: FocusImage (sprite with projection center) and Prism (sprite + camera)

Both realizations answer ``sample(position)`` with a value or None:
VoxelBody drives forward projection (voxels to sprite), FocusImage and
Prism drive reconstruction (sprites to voxels).
"""

from .focus import TRANSPARENT, Color, FocusImage, Prism
from .surface import FACE_OFFSETS, SamplingSurface, VoxelBody, normalize_or_zero

__all__ = [
    "SamplingSurface",
    "VoxelBody",
    "FACE_OFFSETS",
    "normalize_or_zero",
    "FocusImage",
    "Prism",
    "Color",
    "TRANSPARENT",
]
