#!/usr/bin/env python3
"""Command-line entry point for Moji Slicer.

Usage examples:
  moji-slicer slice sheet.png --rows 4 --columns 4 -o out/
  moji-slicer slice sheet.png --frame 10 10 300 300 --thickness 2 --name icon -o out/
  moji-slicer batch board.json -o exports/ --timestamped
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from canvas_image import CanvasImage
from config import SliceConfig
from geometry import Rect
from grid import Grid
from project import ProjectFileError, load_project
from slicer import (OutputRootError, make_run_directory, slice_all,
                    slice_grid)

logger = logging.getLogger("moji_slicer")

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="moji-slicer",
        description="Slice images into PNG tiles along grid overlays.",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every cell")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log problems")
    p.add_argument("--compress-level", type=int, default=6,
                   help="PNG compression level 0-9 (default 6)")
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("slice", help="Slice one image with one grid in pixel space")
    s.add_argument("image", help="Source image")
    s.add_argument("--out", "-o", required=True, help="Existing output directory")
    s.add_argument("--rows", "-r", type=int, default=3)
    s.add_argument("--columns", "-c", type=int, default=3)
    s.add_argument("--thickness", "-t", type=float, default=0.0,
                   help="Pixels trimmed from every side of each cell")
    s.add_argument("--frame", nargs=4, type=float, metavar=("X", "Y", "W", "H"),
                   help="Grid area in pixels (default: whole image)")
    s.add_argument("--name", "-n", default="", help="File name prefix (default: 'Grid 1')")

    b = sub.add_parser("batch", help="Slice every grid of a project against every image")
    b.add_argument("project", help="Project JSON file")
    b.add_argument("--out", "-o", required=True, help="Existing output root")
    b.add_argument("--timestamped", action="store_true",
                   help="Write into a new timestamped folder under the output root")
    return p


def configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def run_slice(args: argparse.Namespace, config: SliceConfig) -> int:
    image = CanvasImage.from_file(args.image)
    frame = Rect(*args.frame) if args.frame else image.pixel_bounds
    grid = Grid(frame=frame.intersection(image.pixel_bounds), rows=args.rows,
                columns=args.columns, logical_thickness=args.thickness,
                name=args.name)
    if not grid.frame.is_empty and not grid.thickness_fits():
        logger.warning(
            f"Thickness {grid.logical_thickness} leaves no room in "
            f"{grid.cell_size[0]:.1f}x{grid.cell_size[1]:.1f} cells"
        )
    results, errors = slice_grid(grid, image.pixels, args.out, config=config,
                                 image_id=image.id)
    print(f"Grid '{grid.display_name(1)}' was sliced into {len(results)} pieces.")
    print(f"Output saved to: {args.out}")
    for err in errors:
        logger.warning(f"cell {err.row},{err.column}: {err.kind.value} {err.message}")
    return EXIT_PARTIAL if errors else EXIT_OK


def run_batch(args: argparse.Namespace, config: SliceConfig) -> int:
    project = load_project(args.project)
    if not project.grids:
        logger.error("Project has no grids; create some grids before slicing.")
        return EXIT_FATAL
    if not project.images:
        logger.error("Project has no images; import some images before slicing.")
        return EXIT_FATAL
    root = make_run_directory(args.out, config) if args.timestamped else args.out
    report = slice_all(project.grids, project.images, root, config=config)
    print(report.summary())
    for err in report.errors:
        logger.warning(
            f"grid {err.grid_id} image {err.image_id} cell {err.row},{err.column}: "
            f"{err.kind.value} {err.message}"
        )
    return EXIT_OK if report.succeeded else EXIT_PARTIAL


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    try:
        config = SliceConfig(png_compress_level=args.compress_level)
        if args.command == "slice":
            return run_slice(args, config)
        return run_batch(args, config)
    except OutputRootError as exc:
        logger.error(str(exc))
    except (ProjectFileError, ValueError, OSError) as exc:
        logger.error(f"{type(exc).__name__}: {exc}")
    return EXIT_FATAL


if __name__ == "__main__":
    sys.exit(main())
