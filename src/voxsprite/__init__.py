"""Oblique sprite projection and multi-view voxel reconstruction.

This package converts between sparse voxel models and 2D sprites drawn in a
fixed oblique projection:
- Forward: ray-march a voxel model through one of four oblique cameras
- Inverse: intersect up to four headed sprites into a colored voxel set
- MagicaVoxel .vox container reading/writing with palette quantization

Subpackages:
    geometry: Bounding boxes, integer rectangles, rounding
    camera: Oblique headings and camera transforms
    core: Cell tracer, view builder, Taichi reconstruction kernel
    scene: Sampling surface protocol, voxel bodies, focus images, prisms
    model: Voxel container, .vox codec, palettes
    preview: Sprite rendering, image export, Matplotlib preview
"""

__version__ = "0.1.0"
