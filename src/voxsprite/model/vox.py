"""Sparse voxel container and MagicaVoxel .vox reading/writing.

A VoxelModel is a bounded grid of palette-indexed voxels:

- size: (x, y, z) extent; every voxel lies in [0, size)
- voxels: mapping from integer position to 0-based palette index
- palette: list of RGBA colors

On disk (.vox, version 150) the model is a MAIN chunk holding SIZE, XYZI
and RGBA children. XYZI color bytes are 1-based (0 means empty), so palette
entry ``i`` is written as color byte ``i + 1`` and only 255 entries fit.
Chunks other than SIZE, XYZI and RGBA are skipped on read; for multi-model
files only the first model is loaded.

Example:
    >>> from voxsprite.model.vox import VoxelModel, save_vox, load_vox
    >>> model = VoxelModel((1, 1, 1), {(0, 0, 0): 0}, [(255, 0, 0, 255)])
    >>> save_vox(model, "cube.vox")
    >>> load_vox("cube.vox").palette[0]
    (255, 0, 0, 255)
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import numpy as np

from voxsprite.errors import PaletteOverflowError, VoxFormatError
from voxsprite.geometry.bounds import IVec3
from voxsprite.model.palette import quantize_colors
from voxsprite.scene.focus import TRANSPARENT, Color
from voxsprite.scene.surface import VoxelBody

LOGGER = logging.getLogger(__name__)

VOX_MAGIC = b"VOX "
VOX_VERSION = 150

# Color byte 0 is reserved for "empty", leaving 255 usable palette entries
MAX_VOX_COLORS = 255
# Coordinates are stored as single bytes
MAX_VOX_EXTENT = 256

_CHUNK_HEADER = struct.Struct("<4sii")


@dataclass
class VoxelModel:
    """Palette-indexed sparse voxel grid."""

    size: IVec3
    voxels: dict[IVec3, int] = field(default_factory=dict)
    palette: list[Color] = field(default_factory=list)

    def body(self) -> VoxelBody:
        """Sampling surface over this model's voxels."""
        return VoxelBody(self.size, self.voxels)

    def color_at(self, position: IVec3) -> Color | None:
        index = self.voxels.get(position)
        if index is None:
            return None
        return self.palette[index]


def to_voxel_model(colors: Mapping[IVec3, Color]) -> VoxelModel:
    """Build a container from a sparse color map.

    Positions are shifted so the tight bounding box starts at the origin and
    colors are deduplicated into a palette in first-seen order.

    Raises:
        ValueError: If ``colors`` is empty.
        PaletteOverflowError: If more than 256 distinct colors are present.
    """
    if not colors:
        raise ValueError("Cannot build a voxel model from an empty color map")
    positions = np.array(list(colors), dtype=np.int64)
    low = positions.min(axis=0)
    high = positions.max(axis=0)

    indices, palette = quantize_colors(colors)
    voxels = {
        (x - int(low[0]), y - int(low[1]), z - int(low[2])): index
        for (x, y, z), index in indices.items()
    }
    size = tuple(int(s) for s in high - low + 1)
    return VoxelModel(size, voxels, palette)


# =============================================================================
# Reading
# =============================================================================


def _iter_chunks(data: bytes, start: int, end: int):
    """Yield (chunk_id, content, children_start, children_end) in a byte range."""
    offset = start
    while offset < end:
        if offset + _CHUNK_HEADER.size > end:
            raise VoxFormatError(f"Truncated chunk header at byte {offset}")
        chunk_id, content_size, children_size = _CHUNK_HEADER.unpack_from(data, offset)
        offset += _CHUNK_HEADER.size
        content_end = offset + content_size
        children_end = content_end + children_size
        if content_size < 0 or children_size < 0 or children_end > end:
            raise VoxFormatError(f"Chunk {chunk_id!r} overruns the file at byte {offset}")
        yield chunk_id, data[offset:content_end], content_end, children_end
        offset = children_end


def _read_palette(content: bytes, used: int) -> list[Color]:
    entries = np.frombuffer(content, dtype=np.uint8, count=256 * 4).reshape(256, 4)
    palette = [tuple(int(c) for c in entry) for entry in entries[:MAX_VOX_COLORS]]
    # Drop unused trailing blanks
    while len(palette) > used and palette[-1] == TRANSPARENT:
        palette.pop()
    return palette


def parse_vox(data: bytes) -> VoxelModel:
    """Decode the first model of a .vox byte string.

    Raises:
        VoxFormatError: If the data is not a well-formed .vox file.
    """
    if len(data) < 8 or data[:4] != VOX_MAGIC:
        raise VoxFormatError("Missing 'VOX ' header")
    (version,) = struct.unpack_from("<i", data, 4)
    LOGGER.debug("Reading .vox version %d", version)

    main = next(_iter_chunks(data, 8, len(data)), None)
    if main is None or main[0] != b"MAIN":
        raise VoxFormatError("Missing MAIN chunk")
    _, _, children_start, children_end = main

    size: IVec3 | None = None
    xyzi: bytes | None = None
    rgba: bytes | None = None
    for chunk_id, content, _, _ in _iter_chunks(data, children_start, children_end):
        if chunk_id == b"SIZE" and size is None:
            size = struct.unpack_from("<3i", content)
        elif chunk_id == b"XYZI" and xyzi is None:
            xyzi = content
        elif chunk_id == b"RGBA":
            rgba = content

    if size is None or xyzi is None:
        raise VoxFormatError("Model has no SIZE/XYZI chunks")
    if rgba is None or len(rgba) < 256 * 4:
        raise VoxFormatError("Model has no RGBA palette chunk")

    (count,) = struct.unpack_from("<i", xyzi)
    if len(xyzi) < 4 + 4 * count:
        raise VoxFormatError(f"XYZI chunk is too short for {count} voxels")
    cells = np.frombuffer(xyzi, dtype=np.uint8, count=4 * count, offset=4).reshape(count, 4)

    voxels = {(int(x), int(y), int(z)): int(c) - 1 for x, y, z, c in cells if c != 0}
    used = max(voxels.values(), default=-1) + 1
    return VoxelModel(tuple(size), voxels, _read_palette(rgba, used))


def load_vox(path: str | Path) -> VoxelModel:
    """Read the first model of a .vox file."""
    model = parse_vox(Path(path).read_bytes())
    LOGGER.info("Loaded %s: size %s, %d voxels", path, model.size, len(model.voxels))
    return model


# =============================================================================
# Writing
# =============================================================================


def _chunk(chunk_id: bytes, content: bytes, children: bytes = b"") -> bytes:
    return _CHUNK_HEADER.pack(chunk_id, len(content), len(children)) + content + children


def encode_vox(model: VoxelModel) -> bytes:
    """Encode a model as .vox bytes.

    Raises:
        PaletteOverflowError: If the palette has more than 255 entries.
        ValueError: If the model extent or a voxel lies outside 0..255.
    """
    if len(model.palette) > MAX_VOX_COLORS:
        raise PaletteOverflowError(
            f"Palette has {len(model.palette)} colors; .vox files hold at most {MAX_VOX_COLORS}"
        )
    if any(s < 0 or s > MAX_VOX_EXTENT for s in model.size):
        raise ValueError(f"Model size {model.size} does not fit a .vox file")

    cells = np.zeros((len(model.voxels), 4), dtype=np.uint8)
    for row, ((x, y, z), index) in enumerate(model.voxels.items()):
        if not all(0 <= c < s for c, s in zip((x, y, z), model.size)):
            raise ValueError(f"Voxel {(x, y, z)} lies outside model size {model.size}")
        if not 0 <= index < len(model.palette):
            raise ValueError(f"Voxel {(x, y, z)} uses palette index {index} out of range")
        cells[row] = (x, y, z, index + 1)

    palette = np.zeros((256, 4), dtype=np.uint8)
    if model.palette:
        palette[: len(model.palette)] = np.asarray(model.palette, dtype=np.uint8)

    children = (
        _chunk(b"SIZE", struct.pack("<3i", *model.size))
        + _chunk(b"XYZI", struct.pack("<i", len(cells)) + cells.tobytes())
        + _chunk(b"RGBA", palette.tobytes())
    )
    return VOX_MAGIC + struct.pack("<i", VOX_VERSION) + _chunk(b"MAIN", b"", children)


def save_vox(model: VoxelModel, path: str | Path) -> None:
    """Write a model to a .vox file."""
    Path(path).write_bytes(encode_vox(model))
    LOGGER.info("Wrote %s: size %s, %d voxels, %d colors", path, model.size, len(model.voxels), len(model.palette))
