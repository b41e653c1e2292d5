"""Focus images and prisms: the image-backed side of reconstruction.

A raw sprite carries its projection center on its border. Row 0 and
column 0 are filled with the key (transparent) color, the pixel at (0, 0),
except for one marker pixel on each line:

    key  key  MARK key  key
    key  .    .    .    .
    MARK .    sprite    .
    key  .    .    .    .

The marker's column on row 0 and row on column 0 give ``center``. The stored
image drops row 0 and column 0, so array cells sit one unit up and left of
the raw sprite coordinates they came from. Key pixels become fully
transparent black.

A camera-space point samples stored cell ``round(x, y) + center``, so the
projection origin is the raw pixel one step down and right of where the
marker row and column cross. Stored row 0 and column 0 are never sampled.

A Prism binds a FocusImage to a camera matrix: sampling a world position
projects it through the camera and looks up the image.

Example:
    >>> import numpy as np
    >>> from voxsprite.scene.focus import FocusImage
    >>> raw = np.zeros((3, 3, 4), dtype=np.uint8)
    >>> raw[0, 1] = raw[1, 0] = raw[1, 1] = (255, 0, 0, 255)
    >>> FocusImage.from_array(raw).center
    (1, 1)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from voxsprite.camera.oblique import Heading, oblique_matrix, transform_point, view_normal
from voxsprite.errors import FocusImageError
from voxsprite.geometry.bounds import IVec2, round_half_up
from voxsprite.scene.surface import SamplingSurface

# RGBA color as four 0-255 ints
Color = tuple[int, int, int, int]

TRANSPARENT: Color = (0, 0, 0, 0)


def _unique_marker(line: npt.NDArray[np.uint8], key: npt.NDArray[np.uint8], axis: str) -> int:
    positions = np.nonzero(np.any(line != key, axis=-1))[0]
    if len(positions) == 0:
        raise FocusImageError(f"No {axis}-focus pixel found")
    if len(positions) > 1:
        raise FocusImageError(
            f"No unique {axis}-focus pixel found ({len(positions)} candidates at "
            f"{positions.tolist()})"
        )
    return int(positions[0])


class FocusImage(SamplingSurface[Color]):
    """RGBA sprite with an explicit projection center.

    Attributes:
        image: Stripped RGBA array of shape (H - 1, W - 1, 4), key pixels
            replaced by transparent black.
        center: Raw-sprite (x, y) of the focus markers.
    """

    def __init__(self, image: npt.NDArray[np.uint8], center: IVec2) -> None:
        self.image = image
        self.center = center

    @classmethod
    def from_array(cls, raw: npt.NDArray[np.uint8]) -> FocusImage:
        """Build a FocusImage from a raw RGBA sprite with focus markers.

        Args:
            raw: Array of shape (H, W, 4), dtype uint8.

        Raises:
            FocusImageError: If the sprite is smaller than 2x2, or row 0 or
                column 0 does not hold exactly one non-key pixel.
        """
        raw = np.asarray(raw, dtype=np.uint8)
        if raw.ndim != 3 or raw.shape[2] != 4:
            raise FocusImageError(f"Expected an RGBA array, got shape {raw.shape}")
        height, width = raw.shape[:2]
        if width < 2 or height < 2:
            raise FocusImageError(f"Invalid image size {width}x{height}")

        key = raw[0, 0]
        cx = _unique_marker(raw[0, :], key, "x")
        cy = _unique_marker(raw[:, 0], key, "y")

        image = raw[1:, 1:].copy()
        image[np.all(image == key, axis=-1)] = TRANSPARENT
        return cls(image, (cx, cy))

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])

    def cell_for(self, point: Iterable[float]) -> IVec2:
        """Array (column, row) that a camera-space point falls on."""
        x, y = tuple(point)[:2]
        return (round_half_up(x) + self.center[0], round_half_up(y) + self.center[1])

    def sample(self, position: Iterable[float]) -> Color | None:
        col, row = self.cell_for(position)
        if not (0 < col < self.width and 0 < row < self.height):
            return None
        pixel = tuple(int(c) for c in self.image[row, col])
        if pixel == TRANSPARENT:
            return None
        return pixel


@dataclass(frozen=True, eq=False)
class Prism:
    """One oblique viewpoint's contribution to reconstruction.

    Attributes:
        image: The sprite seen from this viewpoint.
        camera: World-to-camera 4x4 transform.
    """

    image: FocusImage
    camera: npt.NDArray[np.float64]

    @classmethod
    def for_heading(cls, image: FocusImage, heading: Heading) -> Prism:
        return cls(image, oblique_matrix(heading))

    def sample(self, position: Iterable[float]) -> Color | None:
        return self.image.sample(transform_point(self.camera, position))

    def normal(self) -> npt.NDArray[np.float64]:
        """Unit world-space direction from the scene toward this view."""
        return view_normal(self.camera)
