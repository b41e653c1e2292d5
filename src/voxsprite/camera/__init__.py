"""Camera module for the fixed oblique sprite views.

Components:
    oblique: Heading enumeration and world-to-camera matrices

Camera responsibilities:
    - Map a heading to its 4x4 oblique transform (pure lookup, no state)
    - Transform points and directions between world and camera space
    - Report the forward axis and the unit normal facing the viewer
"""

from .oblique import (
    OBLIQUE_UNIT,
    Heading,
    forward_direction,
    oblique_matrix,
    rotation_matrix,
    shear_matrix,
    transform_point,
    transform_vector,
    view_normal,
)

__all__ = [
    "OBLIQUE_UNIT",
    "Heading",
    "oblique_matrix",
    "rotation_matrix",
    "shear_matrix",
    "transform_point",
    "transform_vector",
    "forward_direction",
    "view_normal",
]
