"""
Canvas space to pixel space.

Grids are drawn on a shared canvas where many images may sit at different
positions and scales, but cropping has to happen in one image's native
pixels.  Every (grid, image) pair goes through ``transform_to_image_space``
once; everything downstream works in pixels.
"""

from __future__ import annotations

import logging
from typing import Optional

from canvas_image import CanvasImage
from geometry import Rect
from grid import Grid

logger = logging.getLogger(__name__)


def slicing_area(grid: Grid, image: CanvasImage) -> Optional[Rect]:
    """Canvas-space overlap of *grid* and *image*, or None if they miss."""
    area = grid.frame.intersection(image.display_rect)
    return None if area.is_empty else area


def intersects(grid: Grid, image: CanvasImage) -> bool:
    """Cheap canvas-space overlap test used to skip pairs before transforming."""
    return grid.frame.intersects(image.display_rect)


def transform_to_image_space(grid: Grid, image: CanvasImage) -> Grid:
    """Return a copy of *grid* whose frame is in *image*'s pixel space.

    Only the part of the grid that covers the image is kept, and rows and
    columns subdivide that part.  A grid that misses the image comes back with
    a zero frame, which ``slicer.slice_grid`` treats as a no-op.
    """
    display = image.display_rect
    area = slicing_area(grid, image)
    if area is None:
        logger.debug(f"Grid '{grid.name}' does not overlap image '{image.name}'")
        return grid.with_frame(Rect.zero())

    local = area.translated(-display.x, -display.y)
    pixel_frame = local.scaled(1.0 / image.scale)
    # Float error can push the far edge a hair past the image.
    clamped = pixel_frame.intersection(image.pixel_bounds)
    logger.debug(
        f"Grid '{grid.name}' on image '{image.name}': canvas {area} -> pixels {clamped}"
    )
    return grid.with_frame(clamped)
