"""Voxel model module for containers and palettes.

Components:
    vox: VoxelModel container and MagicaVoxel .vox reading/writing
    palette: First-seen palette quantization and nearest-color lookup
"""

from .palette import MAX_PALETTE_SIZE, nearest_palette_index, quantize_colors
from .vox import (
    MAX_VOX_COLORS,
    VoxelModel,
    encode_vox,
    load_vox,
    parse_vox,
    save_vox,
    to_voxel_model,
)

__all__ = [
    "MAX_PALETTE_SIZE",
    "quantize_colors",
    "nearest_palette_index",
    "MAX_VOX_COLORS",
    "VoxelModel",
    "to_voxel_model",
    "parse_vox",
    "load_vox",
    "encode_vox",
    "save_vox",
]
