"""
Grid overlays and their per-cell boundaries.

A grid is a rows x columns subdivision of a frame.  Cells are numbered
row-major, so cell ``i`` sits at ``(i // columns, i % columns)``:

    0 | 1 | 2
    --+---+--
    3 | 4 | 5

``logical_thickness`` is trimmed from every side of every cell before export;
it is the gap between tiles that never ends up in a sliced file.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Tuple

from config import (DEFAULT_GRID_COLOR, DEFAULT_VISUAL_THICKNESS,
                    MAX_GRID_DIMENSION, MIN_GRID_DIMENSION)
from geometry import Rect


class GridLineStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"
    DOTTED = "dotted"


class GridType(str, Enum):
    SQUARE = "square"
    RECTANGLE = "rectangle"


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Grid:
    """One slicing overlay.

    ``frame`` is in canvas space when the grid comes from the canvas and in
    pixel space once it has been through ``transformer.transform_to_image_space``.
    ``visual_thickness``, ``color`` and ``line_style`` are carried for
    front-ends only; slicing never reads them.
    """
    frame: Rect
    rows: int = 3
    columns: int = 3
    logical_thickness: float = 0.0
    name: str = ""
    visual_thickness: float = DEFAULT_VISUAL_THICKNESS
    color: str = DEFAULT_GRID_COLOR
    line_style: GridLineStyle = GridLineStyle.SOLID
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if self.rows < 1 or self.columns < 1:
            raise ValueError(
                f"Grid needs at least one row and column, got {self.rows}x{self.columns}."
            )
        if self.logical_thickness < 0:
            raise ValueError("logical_thickness must be non-negative.")

    @property
    def cell_size(self) -> Tuple[float, float]:
        return (self.frame.width / self.columns, self.frame.height / self.rows)

    @property
    def cell_count(self) -> int:
        return self.rows * self.columns

    @property
    def max_logical_thickness(self) -> float:
        """Largest thickness below which every cell keeps a positive area."""
        return min(self.cell_size) / 2

    def thickness_fits(self) -> bool:
        return self.logical_thickness < self.max_logical_thickness

    def cell_position(self, index: int) -> Tuple[int, int]:
        """Map a row-major cell index to ``(row, column)``."""
        return divmod(index, self.columns)

    def cell_frames(self) -> List[Rect]:
        """Return the trimmed frame of every cell, row-major.

        A cell whose thickness eats its whole width or height comes back with
        zero size; callers must skip it rather than crop it.
        """
        cell_w, cell_h = self.cell_size
        t = self.logical_thickness
        width = max(0.0, cell_w - 2 * t)
        height = max(0.0, cell_h - 2 * t)
        frames: List[Rect] = []
        for row in range(self.rows):
            for col in range(self.columns):
                x = self.frame.x + col * cell_w + t
                y = self.frame.y + row * cell_h + t
                frames.append(Rect(x, y, width, height))
        return frames

    def with_frame(self, frame: Rect) -> Grid:
        """Copy of this grid (same id) placed at *frame*."""
        return replace(self, frame=frame)

    def display_name(self, position: int) -> str:
        """Name used for output files; blank names become ``Grid <position>``."""
        name = self.name.strip()
        return name if name else f"Grid {position}"


def clamp_dimension(value: int) -> int:
    return max(MIN_GRID_DIMENSION, min(MAX_GRID_DIMENSION, int(value)))


class GridProperties:
    """Settings used to create the next grid.

    In square mode rows and columns are one value; the setters keep them in
    step.  Switching to rectangle mode restores the last rectangle dimensions.
    """

    def __init__(
        self,
        grid_type: GridType = GridType.SQUARE,
        square_size: int = 3,
        rectangle_rows: int = 3,
        rectangle_columns: int = 4,
        logical_thickness: float = 0.0,
        visual_thickness: float = DEFAULT_VISUAL_THICKNESS,
        color: str = DEFAULT_GRID_COLOR,
        line_style: GridLineStyle = GridLineStyle.SOLID,
        tag_name: str = "",
    ) -> None:
        self._grid_type = GridType(grid_type)
        self._square_size = clamp_dimension(square_size)
        self._rect_rows = clamp_dimension(rectangle_rows)
        self._rect_columns = clamp_dimension(rectangle_columns)
        self.logical_thickness = logical_thickness
        self.visual_thickness = visual_thickness
        self.color = color
        self.line_style = GridLineStyle(line_style)
        self.tag_name = tag_name

    @property
    def grid_type(self) -> GridType:
        return self._grid_type

    @property
    def rows(self) -> int:
        if self._grid_type is GridType.SQUARE:
            return self._square_size
        return self._rect_rows

    @property
    def columns(self) -> int:
        if self._grid_type is GridType.SQUARE:
            return self._square_size
        return self._rect_columns

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------
    def set_grid_type(self, grid_type: GridType) -> None:
        self._grid_type = GridType(grid_type)

    def set_square_size(self, size: int) -> None:
        self._square_size = clamp_dimension(size)

    def set_rows(self, rows: int) -> None:
        if self._grid_type is GridType.SQUARE:
            self._square_size = clamp_dimension(rows)
        else:
            self._rect_rows = clamp_dimension(rows)

    def set_columns(self, columns: int) -> None:
        if self._grid_type is GridType.SQUARE:
            self._square_size = clamp_dimension(columns)
        else:
            self._rect_columns = clamp_dimension(columns)

    def make_grid(self, frame: Rect, existing_count: int = 0) -> Grid:
        """Create a grid at *frame*; untagged grids are named by position."""
        name = self.tag_name.strip() or f"Grid {existing_count + 1}"
        return Grid(
            frame=frame,
            rows=self.rows,
            columns=self.columns,
            logical_thickness=self.logical_thickness,
            name=name,
            visual_thickness=self.visual_thickness,
            color=self.color,
            line_style=self.line_style,
        )
