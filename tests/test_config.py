"""Tests for run configuration and color parsing."""

import pytest


class TestParseColor:
    """Tests for parse_color."""

    def test_hex_rgb(self):
        from voxsprite.config import parse_color

        assert parse_color("#ff8000") == (255, 128, 0, 255)

    def test_hex_rgba(self):
        from voxsprite.config import parse_color

        assert parse_color("#00000080") == (0, 0, 0, 128)

    def test_components(self):
        from voxsprite.config import parse_color

        assert parse_color("1, 2, 3") == (1, 2, 3, 255)
        assert parse_color("1,2,3,4") == (1, 2, 3, 4)

    @pytest.mark.parametrize("text", ["#fff", "1,2", "1,2,3,4,5", "300,0,0", "red"])
    def test_invalid(self, text):
        from voxsprite.config import parse_color

        with pytest.raises(ValueError):
            parse_color(text)


class TestConfigValidation:
    """Tests for the configuration dataclasses."""

    def test_defaults(self):
        from voxsprite.config import ProjectionConfig, ReconstructionConfig

        assert ProjectionConfig().max_steps == 256
        assert ProjectionConfig().scale == 1
        assert ReconstructionConfig().radius == 64
        assert ReconstructionConfig().outline is None

    def test_bad_max_steps(self):
        from voxsprite.config import ProjectionConfig

        with pytest.raises(ValueError):
            ProjectionConfig(max_steps=0)

    def test_bad_scale(self):
        from voxsprite.config import ProjectionConfig

        with pytest.raises(ValueError):
            ProjectionConfig(scale=0)

    def test_negative_radius(self):
        from voxsprite.config import ReconstructionConfig

        with pytest.raises(ValueError):
            ReconstructionConfig(radius=-1)
