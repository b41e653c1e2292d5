"""Tests for the voxel container and .vox codec.

Tests cover:
- Building containers from sparse color maps
- Encoding and decoding .vox bytes
- Format errors and skipped chunks
"""

import struct

import pytest

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


def _chunk(chunk_id, content, children=b""):
    return struct.pack("<4sii", chunk_id, len(content), len(children)) + content + children


class TestVoxelModel:
    """Tests for VoxelModel and to_voxel_model."""

    def test_color_at(self):
        from voxsprite.model.vox import VoxelModel

        model = VoxelModel((2, 1, 1), {(1, 0, 0): 0}, [RED])

        assert model.color_at((1, 0, 0)) == RED
        assert model.color_at((0, 0, 0)) is None

    def test_body_samples_indices(self):
        """Test the sampling body exposes palette indices."""
        from voxsprite.model.vox import VoxelModel

        body = VoxelModel((2, 2, 2), {(1, 1, 1): 3}, [RED] * 4).body()

        assert body.sample((1, 1, 1)) == 3
        assert body.sample((0, 0, 0)) is None

    def test_rebases_to_origin(self):
        """Test positions are shifted so the bounding box starts at zero."""
        from voxsprite.model.vox import to_voxel_model

        model = to_voxel_model({(-2, 5, 1): RED, (0, 6, 1): BLUE})

        assert model.size == (3, 2, 1)
        assert model.color_at((0, 0, 0)) == RED
        assert model.color_at((2, 1, 0)) == BLUE

    def test_deduplicates_palette(self):
        from voxsprite.model.vox import to_voxel_model

        model = to_voxel_model({(0, 0, 0): RED, (1, 0, 0): RED, (2, 0, 0): BLUE})

        assert model.palette == [RED, BLUE]
        assert model.voxels == {(0, 0, 0): 0, (1, 0, 0): 0, (2, 0, 0): 1}

    def test_empty_colors_raise(self):
        from voxsprite.model.vox import to_voxel_model

        with pytest.raises(ValueError):
            to_voxel_model({})


class TestVoxCodec:
    """Tests for encode_vox and parse_vox."""

    def test_header(self):
        """Test encoded files start with the magic and version 150."""
        from voxsprite.model.vox import VoxelModel, encode_vox

        data = encode_vox(VoxelModel((1, 1, 1), {(0, 0, 0): 0}, [RED]))

        assert data[:4] == b"VOX "
        assert struct.unpack_from("<i", data, 4)[0] == 150
        assert data[8:12] == b"MAIN"

    def test_color_bytes_are_one_based(self):
        """Test palette index 0 is stored as color byte 1."""
        from voxsprite.model.vox import VoxelModel, encode_vox

        data = encode_vox(VoxelModel((4, 4, 4), {(1, 2, 3): 0}, [RED]))

        xyzi = data.index(b"XYZI")
        # header (12) + voxel count (4)
        assert data[xyzi + 16 : xyzi + 20] == bytes([1, 2, 3, 1])

    def test_decode_matches_model(self):
        """Test a written model reads back with the same voxels and colors."""
        from voxsprite.model.vox import VoxelModel, encode_vox, parse_vox

        model = VoxelModel((3, 2, 5), {(0, 0, 0): 0, (2, 1, 4): 1}, [RED, BLUE])

        decoded = parse_vox(encode_vox(model))

        assert decoded.size == (3, 2, 5)
        assert decoded.voxels == model.voxels
        assert decoded.palette[:2] == [RED, BLUE]

    def test_save_and_load(self, tmp_path):
        from voxsprite.model.vox import VoxelModel, load_vox, save_vox

        path = tmp_path / "model.vox"
        save_vox(VoxelModel((1, 1, 1), {(0, 0, 0): 0}, [BLUE]), path)

        assert load_vox(path).color_at((0, 0, 0)) == BLUE

    def test_too_many_colors_raise(self):
        """Test a 256-color palette cannot be written."""
        from voxsprite.errors import PaletteOverflowError
        from voxsprite.model.vox import VoxelModel, encode_vox

        palette = [(i, 0, 0, 255) for i in range(256)]

        with pytest.raises(PaletteOverflowError):
            encode_vox(VoxelModel((1, 1, 1), {(0, 0, 0): 255}, palette))

    def test_voxel_outside_size_raises(self):
        from voxsprite.model.vox import VoxelModel, encode_vox

        with pytest.raises(ValueError):
            encode_vox(VoxelModel((1, 1, 1), {(1, 0, 0): 0}, [RED]))

    def test_bad_palette_index_raises(self):
        from voxsprite.model.vox import VoxelModel, encode_vox

        with pytest.raises(ValueError):
            encode_vox(VoxelModel((1, 1, 1), {(0, 0, 0): 1}, [RED]))

    def test_oversized_model_raises(self):
        from voxsprite.model.vox import VoxelModel, encode_vox

        with pytest.raises(ValueError):
            encode_vox(VoxelModel((300, 1, 1), {}, [RED]))


class TestVoxFormatErrors:
    """Tests for malformed and extended .vox input."""

    def test_bad_magic(self):
        from voxsprite.errors import VoxFormatError
        from voxsprite.model.vox import parse_vox

        with pytest.raises(VoxFormatError):
            parse_vox(b"NOPE" + struct.pack("<i", 150))

    def test_missing_main(self):
        from voxsprite.errors import VoxFormatError
        from voxsprite.model.vox import parse_vox

        data = b"VOX " + struct.pack("<i", 150) + _chunk(b"PACK", struct.pack("<i", 1))

        with pytest.raises(VoxFormatError):
            parse_vox(data)

    def test_missing_palette(self):
        from voxsprite.errors import VoxFormatError
        from voxsprite.model.vox import parse_vox

        children = _chunk(b"SIZE", struct.pack("<3i", 1, 1, 1)) + _chunk(
            b"XYZI", struct.pack("<i", 1) + bytes([0, 0, 0, 1])
        )
        data = b"VOX " + struct.pack("<i", 150) + _chunk(b"MAIN", b"", children)

        with pytest.raises(VoxFormatError):
            parse_vox(data)

    def test_truncated_chunk(self):
        from voxsprite.errors import VoxFormatError
        from voxsprite.model.vox import VoxelModel, encode_vox, parse_vox

        data = encode_vox(VoxelModel((1, 1, 1), {(0, 0, 0): 0}, [RED]))

        with pytest.raises(VoxFormatError):
            parse_vox(data[:-100])

    def test_unknown_chunks_skipped(self):
        """Test chunks other than SIZE/XYZI/RGBA are ignored."""
        from voxsprite.model.vox import parse_vox

        palette = bytes(RED) + bytes(1020)
        children = (
            _chunk(b"nTRN", b"\x00" * 12)
            + _chunk(b"SIZE", struct.pack("<3i", 2, 2, 2))
            + _chunk(b"XYZI", struct.pack("<i", 1) + bytes([1, 1, 1, 1]))
            + _chunk(b"MATL", b"\x01\x02\x03")
            + _chunk(b"RGBA", palette)
        )
        data = b"VOX " + struct.pack("<i", 150) + _chunk(b"MAIN", b"", children)

        model = parse_vox(data)

        assert model.size == (2, 2, 2)
        assert model.color_at((1, 1, 1)) == RED

    def test_first_model_only(self):
        """Test later SIZE/XYZI pairs are ignored."""
        from voxsprite.model.vox import parse_vox

        palette = bytes(RED) + bytes(1020)
        children = (
            _chunk(b"SIZE", struct.pack("<3i", 1, 1, 1))
            + _chunk(b"XYZI", struct.pack("<i", 1) + bytes([0, 0, 0, 1]))
            + _chunk(b"SIZE", struct.pack("<3i", 9, 9, 9))
            + _chunk(b"XYZI", struct.pack("<i", 1) + bytes([5, 5, 5, 1]))
            + _chunk(b"RGBA", palette)
        )
        data = b"VOX " + struct.pack("<i", 150) + _chunk(b"MAIN", b"", children)

        model = parse_vox(data)

        assert model.size == (1, 1, 1)
        assert model.voxels == {(0, 0, 0): 0}

    def test_format_error_is_value_error(self):
        from voxsprite.errors import VoxFormatError

        assert issubclass(VoxFormatError, ValueError)
