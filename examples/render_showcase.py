#!/usr/bin/env python3
"""Render the showcase scene (or a scene file) to an image.

This script demonstrates end-to-end rendering with the Whitted ray tracer.
It builds the scene, sets up the camera and render target, traces one ray
per pixel and writes the result as PPM or PNG.

Usage:
    python -m examples.render_showcase [options]

Options:
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --fov DEGREES       Vertical field of view in degrees (default: 60)
    --scene PATH        JSON scene file (default: built-in showcase scene)
    --output OUTPUT     Output file path, .ppm or .png (default: image.ppm)
    --arch {cpu,gpu}    Taichi backend (default: cpu)
    --quiet             Suppress progress output
    --verbose           Enable debug logging

Example:
    python -m examples.render_showcase --width 512 --height 384 --output out.png
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger("render_showcase")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the Whitted showcase scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1024,
        help="Image width in pixels (default: 1024)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=768,
        help="Image height in pixels (default: 768)",
    )
    parser.add_argument(
        "--fov",
        type=float,
        default=60.0,
        help="Vertical field of view in degrees (default: 60)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file (default: built-in showcase scene)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="image.ppm",
        help="Output file path, .ppm or .png (default: image.ppm)",
    )
    parser.add_argument(
        "--arch",
        choices=("cpu", "gpu"),
        default="cpu",
        help="Taichi backend (default: cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def render_showcase(
    width: int = 1024,
    height: int = 768,
    fov_degrees: float = 60.0,
    scene_path: str | None = None,
    output_path: str = "image.ppm",
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Taichi must already be initialized with default_fp=ti.f64.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        fov_degrees: Vertical field of view in degrees.
        scene_path: Optional JSON scene file; the showcase scene if None.
        output_path: Output file path (.ppm or .png).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports so that fields are created after ti.init()
    from whitted.camera.pinhole import PinholeCamera, setup_camera
    from whitted.core.integrator import get_image_numpy, render_image, setup_render_target
    from whitted.preview.export import save_image
    from whitted.scene.manager import SceneManager
    from whitted.scene.showcase import create_showcase_scene

    fov = math.radians(fov_degrees)
    if scene_path is None:
        scene, camera = create_showcase_scene(width, height, fov)
    else:
        scene = SceneManager()
        scene.load_json(scene_path)
        camera = PinholeCamera(width=width, height=height, fov=fov)

    if not quiet:
        print(
            f"Scene: {scene.get_sphere_count()} spheres, "
            f"{scene.get_light_count()} lights ({width}x{height})"
        )

    setup_camera(camera)
    setup_render_target(width, height)

    start_time = time.time()
    render_image()

    output_file = Path(output_path)
    save_image(get_image_numpy(), output_file)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    arch = ti.gpu if args.arch == "gpu" else ti.cpu
    ti.init(arch=arch, default_fp=ti.f64)

    try:
        render_showcase(
            width=args.width,
            height=args.height,
            fov_degrees=args.fov,
            scene_path=args.scene,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        logger.error("Render failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
