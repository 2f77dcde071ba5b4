#!/usr/bin/env python3
"""Render one of the preset sphere scenes to a PPM file.

This script builds a preset scene, renders it with the shading mode the
preset is meant for, tone maps the result and writes a binary PPM image.

Usage:
    python -m examples.render_spheres [output] [options]

Arguments:
    output              Output file path (default: out.ppm)

Options:
    --scene NAME        Preset scene: shiny, diffuse, flat or empty (default: shiny)
    --width WIDTH       Image width in pixels (default: 1024)
    --height HEIGHT     Image height in pixels (default: 768)
    --cpu               Force the CPU backend
    --quiet             Suppress progress output

Example:
    python -m examples.render_spheres shiny.ppm --scene shiny
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import taichi as ti

DEFAULT_OUTPUT = "out.ppm"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a preset sphere scene to a binary PPM file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        default=DEFAULT_OUTPUT,
        help=f"Output file path (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--scene",
        choices=("shiny", "diffuse", "flat", "empty"),
        default="shiny",
        help="Preset scene to render (default: shiny)",
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
        "--cpu",
        action="store_true",
        help="Force the CPU backend",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_spheres(
    output_path: str = DEFAULT_OUTPUT,
    scene_name: str = "shiny",
    width: int = 1024,
    height: int = 768,
    quiet: bool = False,
) -> Path:
    """Render a preset scene and save it to file.

    Args:
        output_path: Output file path (PPM).
        scene_name: Name of the preset scene.
        width: Image width in pixels.
        height: Image height in pixels.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        OSError: If the output file cannot be written.
    """
    # Lazy imports to allow Taichi initialization first
    from src.tinyray.camera.pinhole import PinholeCamera
    from src.tinyray.core.renderer import render_scene
    from src.tinyray.scene.presets import get_preset

    scene, mode = get_preset(scene_name)
    camera = PinholeCamera(width=width, height=height)

    if not quiet:
        print(
            f"Rendering '{scene_name}' scene ({width}x{height}, "
            f"{len(scene.spheres)} spheres, {len(scene.lights)} lights)..."
        )

    start_time = time.time()
    output_file = render_scene(scene, output_path, camera=camera, mode=mode)

    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {time.time() - start_time:.2f}s")

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Use GPU if available, fall back to CPU
    if args.cpu:
        ti.init(arch=ti.cpu)
    else:
        try:
            ti.init(arch=ti.gpu)
        except RuntimeError:
            ti.init(arch=ti.cpu)

    try:
        render_spheres(
            output_path=args.output,
            scene_name=args.scene,
            width=args.width,
            height=args.height,
            quiet=args.quiet,
        )
        return 0
    except (OSError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
