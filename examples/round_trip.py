#!/usr/bin/env python3
"""Project a voxel model into focus sprites and rebuild it from them.

This script demonstrates both directions of the pipeline: a small stepped
block (or a .vox file) is rendered under all four oblique headings with focus
markers, and the sprites are intersected back into a voxel model.

Usage:
    python -m examples.round_trip [options]

Options:
    --model MODEL       Input .vox file (default: built-in stepped block)
    --radius RADIUS     Half-width of the reconstruction scan (default: 16)
    --output OUTPUT     Output .vox path (default: round_trip.vox)
    --show              Show the four sprites in a Matplotlib window
    --quiet             Only log warnings and errors

Example:
    python -m examples.round_trip --radius 8 --show
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

import taichi as ti

LOGGER = logging.getLogger("round_trip")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Project a voxel model into sprites and rebuild it.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Input .vox file (default: built-in stepped block)",
    )
    parser.add_argument(
        "--radius",
        type=int,
        default=16,
        help="Half-width of the reconstruction scan (default: 16)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="round_trip.vox",
        help="Output .vox path (default: round_trip.vox)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the four sprites in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors",
    )
    return parser.parse_args()


def stepped_block():
    """A 4x4 base with a 2x2 tower, colored by height."""
    from voxsprite.model.vox import VoxelModel

    palette = [(120, 90, 60, 255), (90, 160, 70, 255), (220, 220, 230, 255)]
    voxels = {(x, y, 0): 0 for x in range(4) for y in range(4)}
    voxels.update({(x, y, 1): 1 for x in range(1, 3) for y in range(1, 3)})
    voxels[(1, 1, 2)] = 2
    return VoxelModel((4, 4, 3), voxels, palette)


def round_trip(
    model_path: str | None = None,
    radius: int = 16,
    output_path: str = "round_trip.vox",
    show: bool = False,
) -> Path:
    """Render four focus sprites of a model, rebuild it and save the result.

    Args:
        model_path: .vox file to project, or None for the built-in block.
        radius: Half-width of the reconstruction scan.
        output_path: Where to write the rebuilt .vox file.
        show: Display the sprites before rebuilding.

    Returns:
        Path to the saved .vox file.
    """
    # Lazy imports to allow Taichi initialization first
    from voxsprite.camera.oblique import Heading
    from voxsprite.core.reconstruct import build_model
    from voxsprite.model.vox import load_vox, save_vox, to_voxel_model
    from voxsprite.preview.sprite import render_sprite
    from voxsprite.scene.focus import FocusImage, Prism

    model = load_vox(model_path) if model_path else stepped_block()
    LOGGER.info("Projecting %d voxels", len(model.voxels))

    sprites = {heading.short_name: render_sprite(model, heading, focus=True) for heading in Heading}
    if show:
        from voxsprite.preview.display import show_views

        show_views(sprites)

    views = [
        Prism.for_heading(FocusImage.from_array(sprites[heading.short_name]), heading)
        for heading in Heading
    ]

    start_time = time.time()
    colors = build_model(views, radius=radius)
    LOGGER.info("Reconstructed %d voxels in %.2fs", len(colors), time.time() - start_time)

    missing = [position for position in model.voxels if position not in colors]
    if missing:
        LOGGER.warning("%d source voxels were not recovered", len(missing))

    output_file = Path(output_path)
    save_vox(to_voxel_model(colors), output_file)
    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        LOGGER.info("Using GPU backend")
    except RuntimeError:
        ti.init(arch=ti.cpu)
        LOGGER.info("Using CPU backend")

    try:
        output = round_trip(
            model_path=args.model,
            radius=args.radius,
            output_path=args.output,
            show=args.show,
        )
        LOGGER.info("Saved to: %s", output.absolute())
        return 0
    except (ValueError, OSError) as e:
        LOGGER.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
