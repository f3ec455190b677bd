"""
Slicing engine: crop every cell of a grid and write it as a PNG.

Single-grid mode (``slice_grid``) works on a grid that is already in the
image's pixel space and writes ``<grid>_<row>_<col>.png`` into one folder.
Batch mode (``slice_all``) pairs every grid with every canvas image and lays
the output out as:

    <output_root>/
      Grid_<grid>/
        Image_<n>_<image>/
          <grid>_<row>_<col>.png

Per-cell and per-pair problems are collected, never raised, so one bad cell
cannot stop the rest of a batch.  The only exception is ``OutputRootError``,
raised before anything is written when the output location is unusable.
"""

from __future__ import annotations

import logging
import os
import re
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Sequence, Set, Tuple

from PIL import Image

from canvas_image import CanvasImage
from config import DEFAULT_CONFIG, SliceConfig
from geometry import PixelBox, Rect, box_is_empty, clamp_box
from grid import Grid
from transformer import intersects, transform_to_image_space

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


class SliceErrorKind(str, Enum):
    NO_INTERSECTION = "no_intersection"
    DEGENERATE_CELL = "degenerate_cell"
    CROP_FAILURE = "crop_failure"
    WRITE_FAILURE = "write_failure"
    DIRECTORY_CREATION_FAILURE = "directory_creation_failure"


@dataclass(frozen=True)
class SliceResult:
    """One cell written to disk."""
    row: int
    column: int
    path: str


@dataclass(frozen=True)
class SliceError:
    """A cell or (grid, image) pair that produced no output."""
    kind: SliceErrorKind
    grid_id: str
    image_id: Optional[str] = None
    row: Optional[int] = None
    column: Optional[int] = None
    message: str = ""


class OutputRootError(OSError):
    """The output location is missing or cannot be written to."""


@dataclass
class BatchReport:
    """Everything ``slice_all`` managed to do.

    ``skipped`` holds the grid/image pairs that do not overlap; they are
    expected and are not failures.
    """
    output_root: str
    grid_count: int = 0
    processed_pairs: int = 0
    results: List[SliceResult] = field(default_factory=list)
    errors: List[SliceError] = field(default_factory=list)
    skipped: List[SliceError] = field(default_factory=list)

    @property
    def total_sliced(self) -> int:
        return len(self.results)

    @property
    def failure_count(self) -> int:
        return len(self.errors)

    @property
    def skipped_pairs(self) -> int:
        return len(self.skipped)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    def summary(self) -> str:
        text = (f"Processed {self.grid_count} grids and created "
                f"{self.total_sliced} slices.")
        if self.errors:
            text += f" {self.failure_count} cells or folders could not be exported."
        return f"{text}\nOutput saved to: {self.output_root}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def safe_component(name: str) -> str:
    """Make *name* usable as a single path component."""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip().strip(".")
    return cleaned or "_"


def require_writable_dir(path: str) -> None:
    """Raise OutputRootError unless *path* is an existing writable directory."""
    if not os.path.isdir(path):
        raise OutputRootError(f"Output directory does not exist: {path}")
    if not os.access(path, os.W_OK | os.X_OK):
        raise OutputRootError(f"Output directory is not writable: {path}")


def make_run_directory(
    root: str, config: SliceConfig = DEFAULT_CONFIG, timestamp: Optional[float] = None
) -> str:
    """Create ``<root>/<prefix>_<unix time>`` for one batch run."""
    require_writable_dir(root)
    stamp = int(time.time() if timestamp is None else timestamp)
    path = os.path.join(root, f"{config.run_directory_prefix}_{stamp}")
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as exc:
        raise OutputRootError(f"Cannot create {path}: {exc}") from exc
    return path


def compute_crop_boxes(
    grid: Grid, width: int, height: int, config: SliceConfig = DEFAULT_CONFIG
) -> List[Tuple[int, int, Optional[PixelBox]]]:
    """Return ``(row, column, box)`` for every cell, row-major.

    *box* is a Pillow crop box clamped to ``width`` x ``height``, or None when
    the trimmed cell has no area.  Boxes may still be empty if the cell lies
    outside the image.
    """
    bounds = Rect(0.0, 0.0, float(width), float(height))
    boxes: List[Tuple[int, int, Optional[PixelBox]]] = []
    for index, cell in enumerate(grid.cell_frames()):
        row, col = grid.cell_position(index)
        if cell.is_empty:
            boxes.append((row, col, None))
            continue
        clipped = cell.intersection(bounds)
        box = clamp_box(clipped.to_pixel_box(config.snap_tolerance), width, height)
        boxes.append((row, col, box))
    return boxes


# ---------------------------------------------------------------------------
# Slicing
# ---------------------------------------------------------------------------
def slice_grid(
    grid: Grid,
    img: Image.Image,
    output_directory: str,
    config: SliceConfig = DEFAULT_CONFIG,
    image_id: Optional[str] = None,
) -> Tuple[List[SliceResult], List[SliceError]]:
    """Crop each cell of a pixel-space *grid* out of *img* into PNG files.

    A grid with an empty frame (no overlap with the image) is a no-op and
    returns two empty lists.  Results and errors can both be non-empty.
    """
    if grid.frame.is_empty:
        return [], []
    require_writable_dir(output_directory)

    label = safe_component(grid.display_name(1))
    results: List[SliceResult] = []
    errors: List[SliceError] = []

    def fail(kind: SliceErrorKind, row: int, col: int, message: str) -> None:
        logger.debug(f"{label} [{row},{col}] {kind.value}: {message}")
        errors.append(SliceError(kind, grid.id, image_id, row, col, message))

    for row, col, box in compute_crop_boxes(grid, img.width, img.height, config):
        if box is None:
            fail(SliceErrorKind.DEGENERATE_CELL, row, col,
                 f"thickness {grid.logical_thickness} leaves no area")
            continue
        if box_is_empty(box):
            fail(SliceErrorKind.CROP_FAILURE, row, col, f"crop box {box} is empty")
            continue
        try:
            tile = img.crop(box)
        except (ValueError, OSError) as exc:
            fail(SliceErrorKind.CROP_FAILURE, row, col, str(exc))
            continue

        path = os.path.join(output_directory, f"{label}_{row}_{col}.png")
        try:
            tile.save(path, format="PNG", compress_level=config.png_compress_level)
        except (OSError, ValueError) as exc:
            fail(SliceErrorKind.WRITE_FAILURE, row, col, str(exc))
            continue
        results.append(SliceResult(row, col, path))

    logger.info(
        f"Sliced {len(results)} of {grid.cell_count} cells from grid '{label}'"
        + (f" ({len(errors)} failed)" if errors else "")
    )
    return results, errors


def slice_all(
    grids: Sequence[Grid],
    images: Sequence[CanvasImage],
    output_root: str,
    config: SliceConfig = DEFAULT_CONFIG,
) -> BatchReport:
    """Slice every grid against every image it overlaps.

    Raises:
        OutputRootError: *output_root* is missing or unwritable.  Nothing has
            been written when this is raised.
    """
    require_writable_dir(output_root)
    report = BatchReport(output_root=output_root, grid_count=len(grids))
    used_labels: Set[str] = set()

    for grid_pos, grid in enumerate(grids, start=1):
        label = _unique_label(safe_component(grid.display_name(grid_pos)), used_labels)
        grid_dir = os.path.join(output_root, f"Grid_{label}")

        for image_pos, image in enumerate(images, start=1):
            if not intersects(grid, image):
                logger.info(f"Grid '{label}' does not overlap image '{image.name}', skipping")
                report.skipped.append(SliceError(
                    SliceErrorKind.NO_INTERSECTION, grid.id, image.id,
                    message=f"grid '{label}' misses image '{image.name}'"))
                continue

            pixel_grid = replace(transform_to_image_space(grid, image), name=label)
            image_label = safe_component(image.name or "image")
            image_dir = os.path.join(grid_dir, f"Image_{image_pos}_{image_label}")
            try:
                os.makedirs(image_dir, exist_ok=True)
                results, errors = slice_grid(pixel_grid, image.pixels, image_dir,
                                             config=config, image_id=image.id)
            except OSError as exc:
                logger.warning(f"Cannot prepare {image_dir}: {exc}")
                report.errors.append(SliceError(
                    SliceErrorKind.DIRECTORY_CREATION_FAILURE, grid.id, image.id,
                    message=str(exc)))
                continue

            report.results.extend(results)
            report.errors.extend(errors)
            report.processed_pairs += 1

    if report.errors:
        logger.warning(f"{report.failure_count} slicing failures under {output_root}")
    logger.info(report.summary().splitlines()[0])
    return report


def _unique_label(label: str, used: Set[str]) -> str:
    candidate, n = label, 1
    while candidate in used:
        n += 1
        candidate = f"{label}_{n}"
    used.add(candidate)
    return candidate
