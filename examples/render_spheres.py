#!/usr/bin/env python3
"""Render the default sphere scene.

This script renders the stock scene (four spheres on a ground sphere, two
point lights, sky gradient) and writes it as plain PPM or PNG.

Usage:
    python examples/render_spheres.py [options]

Options:
    --width WIDTH            Image width in pixels (default: 1920)
    --height HEIGHT          Image height in pixels (default: 1080)
    --fov DEGREES            Horizontal field of view (default: 45)
    --aa-grid N | NxM        Anti-aliasing sub-pixel grid (default: 4x4)
    --depth DEPTH            Reflection depth (default: 8)
    --output OUTPUT          Output path, .ppm or .png; "-" writes PPM to
                             stdout (default: -)
    --rows-per-batch ROWS    Rows per progress update (default: 64)
    --arch {cpu,gpu}         Taichi backend (default: gpu, falls back to cpu)
    --show                   Display the result with Matplotlib
    --verbose                Log progress per batch
    --quiet                  Only log errors

Example:
    python examples/render_spheres.py --width 640 --height 360 --output spheres.png
    python examples/render_spheres.py > spheres.ppm
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import math
import sys
from pathlib import Path

logger = logging.getLogger("render_spheres")


def parse_grid(value: str) -> tuple[int, int]:
    """Parse "N" or "NxM" into an anti-aliasing grid."""
    parts = value.lower().split("x")
    try:
        if len(parts) == 1:
            n = int(parts[0])
            return n, n
        if len(parts) == 2:
            return int(parts[0]), int(parts[1])
    except ValueError:
        pass
    raise argparse.ArgumentTypeError(f"invalid grid {value!r}, expected N or NxM")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the default sphere scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1920,
        help="Image width in pixels (default: 1920)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=1080,
        help="Image height in pixels (default: 1080)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=45.0,
        help="Horizontal field of view in degrees (default: 45)",
    )
    parser.add_argument(
        "--aa-grid",
        type=parse_grid,
        default=(4, 4),
        help="Anti-aliasing grid, N or NxM (default: 4x4)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=8,
        help="Reflection depth (default: 8)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="-",
        help='Output file (.ppm or .png), "-" for PPM on stdout (default: -)',
    )
    parser.add_argument(
        "--rows-per-batch",
        type=int,
        default=64,
        help="Rows rendered per progress update (default: 64)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="gpu",
        help="Taichi backend (default: gpu, falls back to cpu)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Display the rendered image with Matplotlib",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        action="store_true",
        help="Log progress for every batch of rows",
    )
    verbosity.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors",
    )
    return parser.parse_args(argv)


def init_taichi(arch: str) -> None:
    """Initialize Taichi on the requested backend, falling back to CPU.

    Taichi prints banners on import and on init. stdout may carry the image,
    so both happen with stdout pointed at stderr.
    """
    with contextlib.redirect_stdout(sys.stderr):
        import taichi as ti

        if arch == "cpu":
            ti.init(arch=ti.cpu)
            return
        try:
            ti.init(arch=ti.gpu)
            logger.info("Using GPU backend")
        except Exception:
            ti.init(arch=ti.cpu)
            logger.info("Using CPU backend")


def render_spheres(args: argparse.Namespace) -> Path | None:
    """Render the default scene with the given options and write the result.

    Returns:
        Path of the written file, or None when writing to stdout.
    """
    # Lazy imports to allow Taichi initialization first
    from spheretracer.core.render import RenderSettings
    from spheretracer.preview.display import show_preview
    from spheretracer.preview.export import PPMWriter, save_image, write_image
    from spheretracer.scene.default import create_default_scene

    settings = RenderSettings(
        width=args.width,
        height=args.height,
        fov=math.radians(args.fov),
        aa_grid=args.aa_grid,
        depth=args.depth,
        rows_per_batch=args.rows_per_batch,
    )
    scene = create_default_scene()

    def progress_callback(rows_done: int, total_rows: int) -> None:
        logger.debug(
            "Progress: %d/%d rows (%.1f%%)",
            rows_done,
            total_rows,
            100.0 * rows_done / total_rows,
        )

    framebuffer = settings.render(scene, callback=progress_callback)

    output_file = None
    if args.output == "-":
        write_image(framebuffer, PPMWriter(sys.stdout))
    else:
        output_file = Path(args.output)
        save_image(framebuffer, output_file)
        logger.info("Saved to: %s", output_file.absolute())

    if args.show:
        show_preview(framebuffer)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    # stdout may carry the image, so logs go to stderr
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    init_taichi(args.arch)

    try:
        render_spheres(args)
        return 0
    except Exception as e:
        logger.error("Error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
