"""Command-line interface for sprite dumping, painting and reconstruction.

Usage:
    voxsprite dump MODEL.vox [--heading north] [--scale 4] [--focus] [-o out.png]
    voxsprite paint MODEL.vox REFERENCE.png [--heading north] [--focus] [-o out.vox]
    voxsprite build --north n.png [--east e.png ...] [--radius 64] [-o out.vox]

Commands:
    dump    Render a .vox model into an oblique PNG sprite
    paint   Recolor a model's visible surface from a reference sprite
    build   Reconstruct a .vox model from focus-marked sprites

Example:
    voxsprite dump chair.vox --heading east --scale 4 -o chair_east.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import taichi as ti

from voxsprite.camera.oblique import Heading
from voxsprite.config import ProjectionConfig, ReconstructionConfig, parse_color
from voxsprite.core.tracer import DEFAULT_MAX_STEPS
from voxsprite.errors import FocusImageError

LOGGER = logging.getLogger("voxsprite")

HEADING_NAMES = [heading.short_name for heading in Heading]


def _add_dump_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("dump", help="Render a .vox model into an oblique sprite")
    parser.add_argument("model", help="Input .vox file")
    parser.add_argument(
        "--heading",
        choices=HEADING_NAMES,
        default="north",
        help="Oblique viewpoint (default: north)",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=1,
        help="Integer pixel upscaling (default: 1)",
    )
    parser.add_argument(
        "--focus",
        action="store_true",
        help="Add focus markers so the sprite can be fed to 'build'",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=DEFAULT_MAX_STEPS,
        help=f"Cells walked along each pixel's ray (default: {DEFAULT_MAX_STEPS})",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Show the sprite in a Matplotlib window",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="output.png",
        help="Output PNG path (default: output.png)",
    )


def _add_paint_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("paint", help="Recolor a model from a reference sprite")
    parser.add_argument("model", help="Input .vox file")
    parser.add_argument("reference", help="Reference sprite image")
    parser.add_argument(
        "--heading",
        choices=HEADING_NAMES,
        default="north",
        help="Viewpoint the reference sprite was drawn from (default: north)",
    )
    parser.add_argument(
        "--focus",
        action="store_true",
        help="The reference sprite carries focus markers on row 0 / column 0",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=DEFAULT_MAX_STEPS,
        help=f"Cells walked along each pixel's ray (default: {DEFAULT_MAX_STEPS})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="painted.vox",
        help="Output .vox path (default: painted.vox)",
    )


def _add_build_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("build", help="Reconstruct a .vox model from sprites")
    for name in HEADING_NAMES:
        parser.add_argument(
            f"--{name}",
            metavar="SPRITE",
            help=f"Focus-marked sprite seen from the {name}",
        )
    parser.add_argument(
        "--radius",
        type=int,
        default=ReconstructionConfig.radius,
        help=f"Half-width of the scanned cube (default: {ReconstructionConfig.radius})",
    )
    parser.add_argument(
        "--outline",
        type=parse_color,
        default=None,
        help="Outline color to strip first, as #rrggbb or r,g,b",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default="cpu",
        help="Taichi backend for the reconstruction scan (default: cpu)",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="output.vox",
        help="Output .vox path (default: output.vox)",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="voxsprite",
        description="Oblique sprite projection and voxel reconstruction.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_dump_parser(subparsers)
    _add_paint_parser(subparsers)
    _add_build_parser(subparsers)
    return parser.parse_args(argv)


def init_backend(arch: str) -> None:
    """Initialize Taichi, falling back to CPU when no GPU backend is usable."""
    if arch == "gpu":
        try:
            ti.init(arch=ti.gpu)
            LOGGER.debug("Using GPU backend")
            return
        except RuntimeError as exc:
            LOGGER.warning("GPU backend unavailable (%s), using CPU", exc)
    ti.init(arch=ti.cpu)
    LOGGER.debug("Using CPU backend")


# =============================================================================
# Commands
# =============================================================================


def run_dump(args: argparse.Namespace) -> None:
    from voxsprite.model.vox import load_vox
    from voxsprite.preview.export import save_png, scale_image
    from voxsprite.preview.sprite import render_sprite

    config = ProjectionConfig(max_steps=args.max_steps, scale=args.scale, focus=args.focus)
    heading = Heading.parse(args.heading)

    model = load_vox(args.model)
    sprite = render_sprite(model, heading, focus=config.focus, max_steps=config.max_steps)
    sprite = scale_image(sprite, config.scale)
    save_png(sprite, args.output)
    LOGGER.info("Saved %s sprite (%dx%d) to %s", heading.short_name, sprite.shape[1], sprite.shape[0], args.output)

    if args.show:
        from voxsprite.preview.display import show_sprite

        show_sprite(sprite, title=f"{args.model} ({heading.short_name})")


def run_paint(args: argparse.Namespace) -> None:
    from voxsprite.model.vox import load_vox, save_vox
    from voxsprite.preview.export import load_image
    from voxsprite.preview.sprite import paint_model

    config = ProjectionConfig(max_steps=args.max_steps, focus=args.focus)
    heading = Heading.parse(args.heading)

    model = load_vox(args.model)
    reference = load_image(args.reference)
    painted = paint_model(model, reference, heading, max_steps=config.max_steps, focus=config.focus)

    changed = sum(1 for pos, index in painted.voxels.items() if model.voxels.get(pos) != index)
    LOGGER.info("Repainted %d of %d voxels", changed, len(painted.voxels))
    save_vox(painted, args.output)


def run_build(args: argparse.Namespace) -> None:
    from voxsprite.core.reconstruct import build_model
    from voxsprite.model.vox import save_vox, to_voxel_model
    from voxsprite.preview.export import load_image
    from voxsprite.preview.sprite import strip_outline
    from voxsprite.scene.focus import FocusImage, Prism

    config = ReconstructionConfig(radius=args.radius, outline=args.outline)

    views = []
    for heading in Heading:
        path = getattr(args, heading.short_name)
        if path is None:
            continue
        raw = load_image(path)
        if config.outline is not None:
            raw = strip_outline(raw, config.outline)
        try:
            image = FocusImage.from_array(raw)
        except FocusImageError as exc:
            raise FocusImageError(f"{path}: {exc}") from exc
        views.append(Prism.for_heading(image, heading))
        LOGGER.debug("Loaded %s view from %s, center %s", heading.short_name, path, image.center)

    if not views:
        raise ValueError("At least one of --north/--east/--south/--west is required")

    init_backend(args.arch)
    colors = build_model(views, radius=config.radius)
    model = to_voxel_model(colors)
    save_vox(model, args.output)


COMMANDS = {
    "dump": run_dump,
    "paint": run_paint,
    "build": run_build,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        COMMANDS[args.command](args)
        return 0
    except (ValueError, OSError) as exc:
        LOGGER.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
