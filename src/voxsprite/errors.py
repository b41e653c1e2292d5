"""Exceptions raised by voxsprite.

All of them derive from ValueError: each reports input data that cannot be
used, not a fault in the library. Missing samples are never exceptions;
they are ``None``.
"""


class FocusImageError(ValueError):
    """A sprite's focus markers are missing, ambiguous, or the image is too small."""


class PaletteOverflowError(ValueError):
    """More distinct colors are needed than the palette can index."""


class VoxFormatError(ValueError):
    """A .vox file is truncated or not in the MagicaVoxel layout."""
