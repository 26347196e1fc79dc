#!/usr/bin/env python3
"""Render the demo scene (or a scene loaded from JSON).

This script builds the scene, sets up the camera, traces every pixel once and
saves the result as a PNG.

Usage:
    python -m examples.render_demo [options]

Options:
    --width WIDTH       Image width in pixels (default: 512)
    --height HEIGHT     Image height in pixels (default: 512)
    --depth DEPTH       Maximum reflection depth (default: 10)
    --output OUTPUT     Output file path (default: example.png)
    --scene SCENE       JSON scene file (default: built-in demo scene)
    --perspective       Use a pinhole camera instead of the orthographic one
    --cpu               Force the Taichi CPU backend
    --preview           Show the result in a Matplotlib window
    --quiet             Suppress progress output

Example:
    python -m examples.render_demo --width 256 --height 256 --output small.png
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path

import taichi as ti


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the demo scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=512,
        help="Image width in pixels (default: 512)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=512,
        help="Image height in pixels (default: 512)",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=10,
        help="Maximum reflection depth (default: 10)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="example.png",
        help="Output file path (default: example.png)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file with 'primitives' and 'lights' (default: demo scene)",
    )
    parser.add_argument(
        "--perspective",
        action="store_true",
        help="Use a pinhole camera instead of the orthographic one",
    )
    parser.add_argument(
        "--cpu",
        action="store_true",
        help="Force the Taichi CPU backend",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Show the result in a Matplotlib window",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args(argv)


def render_demo(
    width: int = 512,
    height: int = 512,
    max_depth: int = 10,
    output_path: str = "example.png",
    scene_path: str | None = None,
    perspective: bool = False,
    preview: bool = False,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it to file.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        max_depth: Maximum reflection depth.
        output_path: Output file path (PNG).
        scene_path: Optional JSON scene file; the demo scene is used if None.
        perspective: Use a pinhole camera looking at the origin.
        preview: Show the image in a Matplotlib window after saving.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.beamburst.camera.orthographic import OrthographicCamera
    from src.beamburst.camera.pinhole import PinholeCamera
    from src.beamburst.camera.projection import setup_camera
    from src.beamburst.core.renderer import Renderer, RenderSettings
    from src.beamburst.scene.demo import create_demo_scene
    from src.beamburst.scene.manager import Scene

    if scene_path is None:
        if not quiet:
            print(f"Creating demo scene ({width}x{height})...")
        scene, camera = create_demo_scene()
    else:
        if not quiet:
            print(f"Loading scene from {scene_path} ({width}x{height})...")
        with open(scene_path, encoding="utf-8") as f:
            data = json.load(f)
        scene = Scene()
        scene.from_dict(data)
        camera = OrthographicCamera()

    if perspective:
        camera = PinholeCamera(
            lookfrom=(0.0, 0.0, -1000.0),
            lookat=(0.0, 0.0, 0.0),
            vup=(0.0, 1.0, 0.0),
            vfov=30.0,
            aspect_ratio=width / height,
        )

    setup_camera(camera)

    renderer = Renderer(RenderSettings(width=width, height=height, max_depth=max_depth))

    if not quiet:
        print(
            f"Tracing {len(scene.primitives)} primitives, {len(scene.lights)} lights, "
            f"depth {max_depth}..."
        )

    start_time = time.time()
    renderer.render()

    output_file = renderer.save(output_path)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")
        print(f"Total time: {total_time:.2f}s")

    if preview:
        from src.beamburst.preview.display import show_preview

        show_preview(renderer.get_image_numpy())

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Taichi falls back to CPU on its own when no GPU backend is available
    ti.init(arch=ti.cpu if args.cpu else ti.gpu)

    try:
        render_demo(
            width=args.width,
            height=args.height,
            max_depth=args.depth,
            output_path=args.output,
            scene_path=args.scene,
            perspective=args.perspective,
            preview=args.preview,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
