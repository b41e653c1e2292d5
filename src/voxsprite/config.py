"""Configuration for projection and reconstruction runs.

Attributes mirror the command-line options; library functions take the
individual values, the CLI builds these dataclasses from its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass

from voxsprite.core.reconstruct import DEFAULT_RADIUS
from voxsprite.core.tracer import DEFAULT_MAX_STEPS
from voxsprite.scene.focus import Color


@dataclass
class ProjectionConfig:
    """Settings for rendering a model into a sprite.

    Attributes:
        max_steps: Number of cells walked along each pixel's ray.
        scale: Integer upscaling applied to the rendered sprite.
        focus: Whether to add focus markers on row 0 / column 0.
    """

    max_steps: int = DEFAULT_MAX_STEPS
    scale: int = 1
    focus: bool = False

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")
        if self.scale < 1:
            raise ValueError(f"scale must be at least 1, got {self.scale}")


@dataclass
class ReconstructionConfig:
    """Settings for rebuilding a model from sprites.

    Attributes:
        radius: Half-width of the scanned cube of positions.
        outline: Outline color stripped from sprites before use, if any.
    """

    radius: int = DEFAULT_RADIUS
    outline: Color | None = None

    def __post_init__(self) -> None:
        if self.radius < 0:
            raise ValueError(f"radius must be non-negative, got {self.radius}")


def parse_color(text: str) -> Color:
    """Parse ``#rrggbb``, ``#rrggbbaa`` or ``r,g,b[,a]`` into an RGBA color.

    Missing alpha defaults to 255.

    Raises:
        ValueError: If the text is not a recognised color.
    """
    value = text.strip()
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color {text!r}")
        channels = [int(digits[i : i + 2], 16) for i in range(0, len(digits), 2)]
    else:
        channels = [int(part) for part in value.split(",")]
        if len(channels) not in (3, 4):
            raise ValueError(f"Invalid color {text!r}: expected 3 or 4 components")
    if any(not 0 <= c <= 255 for c in channels):
        raise ValueError(f"Invalid color {text!r}: components must be 0-255")
    if len(channels) == 3:
        channels.append(255)
    r, g, b, a = channels
    return (r, g, b, a)
