"""Unit tests for sampling surfaces.

Tests cover:
- VoxelBody sampling, truncation and bounds
- Default and voxel-body bounding boxes
- Neighbour-probe normal estimation
- Structural protocol checks
"""

import numpy as np


def _body(voxels, size=(4, 4, 4)):
    from voxsprite.scene.surface import VoxelBody

    return VoxelBody(size, voxels)


class TestVoxelBodySample:
    """Tests for VoxelBody.sample."""

    def test_occupied_cell_returns_index(self):
        """Test an occupied cell returns its palette index."""
        body = _body({(1, 2, 3): 9})

        assert body.sample((1, 2, 3)) == 9

    def test_empty_cell_returns_none(self):
        """Test an unoccupied in-bounds cell is absent."""
        body = _body({(1, 2, 3): 9})

        assert body.sample((0, 0, 0)) is None

    def test_position_is_truncated(self):
        """Test real positions truncate toward zero."""
        body = _body({(1, 2, 3): 9})

        assert body.sample((1.9, 2.99, 3.5)) == 9
        assert body.sample(np.array([1.0, 2.0, 3.0])) == 9

    def test_negative_positions_are_absent(self):
        """Test negative coordinates never fault and are absent."""
        body = _body({(0, 0, 0): 1})

        assert body.sample((-0.5, 0.0, 0.0)) is None
        assert body.sample((0.0, -1.0, 0.0)) is None
        assert body.sample((0.0, 0.0, -100.0)) is None

    def test_beyond_size_is_absent(self):
        """Test cells at or past the model size are absent."""
        body = _body({(3, 3, 3): 1, (4, 0, 0): 2}, size=(4, 4, 4))

        assert body.sample((3, 3, 3)) == 1
        assert body.sample((4, 0, 0)) is None
        assert body.sample((0, 0, 1000)) is None

    def test_len_counts_voxels(self):
        """Test len reports the number of occupied cells."""
        assert len(_body({(0, 0, 0): 1, (1, 0, 0): 1})) == 2


class TestBoundingBox:
    """Tests for bounding_box."""

    def test_voxel_body_box_is_tight(self):
        """Test the box spans the occupied cells only."""
        box = _body({(1, 0, 2): 0, (3, 1, 2): 0}, size=(8, 8, 8)).bounding_box()

        assert box.min.tolist() == [1.0, 0.0, 2.0]
        assert box.max.tolist() == [3.0, 1.0, 2.0]

    def test_empty_body_box_is_empty(self):
        """Test a body with no voxels has an empty box."""
        assert _body({}).bounding_box().is_empty

    def test_default_box_is_empty(self):
        """Test surfaces without extent knowledge report an empty box."""
        from voxsprite.scene.surface import SamplingSurface

        class Everywhere(SamplingSurface[int]):
            def sample(self, position):
                return 1

        assert Everywhere().bounding_box().is_empty


class TestNormal:
    """Tests for the neighbour-probe normal."""

    def test_normal_above_a_voxel(self):
        """Test the empty cell above a lone voxel faces up."""
        body = _body({(1, 1, 1): 0})

        normal = body.normal((1, 1, 2))

        assert np.allclose(normal, (0.0, 0.0, 1.0))

    def test_normal_in_a_corner(self):
        """Test two filled neighbours give a diagonal unit normal."""
        body = _body({(1, 1, 1): 0, (2, 2, 1): 0})

        normal = body.normal((2, 1, 1))

        assert np.allclose(normal, np.array([1.0, -1.0, 0.0]) / np.sqrt(2.0))

    def test_isolated_position_has_zero_normal(self):
        """Test a position with no filled neighbours gets the zero vector."""
        body = _body({(0, 0, 0): 0})

        assert np.array_equal(body.normal((2, 2, 2)), np.zeros(3))

    def test_enclosed_position_has_zero_normal(self):
        """Test a position surrounded on all six sides gets the zero vector."""
        voxels = {(1 + dx, 1 + dy, 1 + dz): 0 for dx, dy, dz in
                  [(1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]}
        body = _body(voxels)

        assert np.array_equal(body.normal((1, 1, 1)), np.zeros(3))


class TestProtocol:
    """Tests for the SamplingSurface protocol."""

    def test_voxel_body_is_a_sampling_surface(self):
        """Test VoxelBody satisfies the runtime protocol check."""
        from voxsprite.scene.surface import SamplingSurface

        assert isinstance(_body({}), SamplingSurface)

    def test_focus_image_is_a_sampling_surface(self):
        """Test FocusImage satisfies the runtime protocol check."""
        from voxsprite.scene.focus import FocusImage
        from voxsprite.scene.surface import SamplingSurface

        image = FocusImage(np.zeros((2, 2, 4), dtype=np.uint8), (1, 1))
        assert isinstance(image, SamplingSurface)

    def test_plain_object_is_not(self):
        """Test objects without sample() are rejected."""
        from voxsprite.scene.surface import SamplingSurface

        assert not isinstance(object(), SamplingSurface)
