"""Unit tests for grid.py - run with: python -m pytest test_grid.py"""

import pytest

from config import MAX_GRID_DIMENSION
from geometry import Rect
from grid import Grid, GridProperties, GridType


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------
class TestGridValidation:
    def test_zero_rows(self):
        with pytest.raises(ValueError, match="row"):
            Grid(Rect(0, 0, 10, 10), rows=0)

    def test_negative_thickness(self):
        with pytest.raises(ValueError, match="thickness"):
            Grid(Rect(0, 0, 10, 10), logical_thickness=-1)

    def test_ids_are_unique(self):
        assert Grid(Rect.zero()).id != Grid(Rect.zero()).id


class TestCellFrames:
    @pytest.mark.parametrize("rows,cols", [(1, 1), (2, 3), (5, 1), (4, 7)])
    def test_count(self, rows, cols):
        g = Grid(Rect(0, 0, 700, 500), rows=rows, columns=cols)
        assert len(g.cell_frames()) == rows * cols

    def test_row_major_order(self):
        g = Grid(Rect(10, 20, 300, 200), rows=2, columns=3)
        frames = g.cell_frames()
        assert frames[0] == Rect(10, 20, 100, 100)
        assert frames[1] == Rect(110, 20, 100, 100)
        assert frames[3] == Rect(10, 120, 100, 100)
        assert frames[5] == Rect(210, 120, 100, 100)

    def test_thickness_trims_each_side(self):
        g = Grid(Rect(0, 0, 300, 300), rows=3, columns=3, logical_thickness=5)
        frames = g.cell_frames()
        assert frames[0] == Rect(5, 5, 90, 90)
        assert frames[4] == Rect(105, 105, 90, 90)

    def test_oversized_thickness_gives_empty_cells(self):
        g = Grid(Rect(0, 0, 100, 100), rows=2, columns=2, logical_thickness=30)
        assert all(f.is_empty for f in g.cell_frames())

    def test_restartable(self):
        g = Grid(Rect(0, 0, 90, 90), rows=3, columns=3)
        assert g.cell_frames() == g.cell_frames()

    def test_cell_position(self):
        g = Grid(Rect(0, 0, 10, 10), rows=2, columns=3)
        assert g.cell_position(0) == (0, 0)
        assert g.cell_position(4) == (1, 1)
        assert g.cell_position(5) == (1, 2)


class TestGridHelpers:
    def test_thickness_fits(self):
        g = Grid(Rect(0, 0, 200, 100), rows=2, columns=2, logical_thickness=24.9)
        assert g.max_logical_thickness == 25
        assert g.thickness_fits()
        assert not Grid(g.frame, rows=2, columns=2, logical_thickness=25).thickness_fits()

    def test_with_frame_keeps_identity(self):
        g = Grid(Rect(0, 0, 10, 10), rows=2, columns=4, name="tiles")
        moved = g.with_frame(Rect(5, 5, 20, 20))
        assert moved.id == g.id
        assert (moved.rows, moved.columns, moved.name) == (2, 4, "tiles")
        assert g.frame == Rect(0, 0, 10, 10)

    def test_display_name(self):
        assert Grid(Rect.zero(), name="icons").display_name(4) == "icons"
        assert Grid(Rect.zero(), name="  ").display_name(4) == "Grid 4"


# ---------------------------------------------------------------------------
# GridProperties
# ---------------------------------------------------------------------------
class TestGridProperties:
    def test_square_mode_keeps_rows_and_columns_equal(self):
        p = GridProperties(grid_type=GridType.SQUARE, square_size=3)
        p.set_rows(5)
        assert (p.rows, p.columns) == (5, 5)
        p.set_columns(2)
        assert (p.rows, p.columns) == (2, 2)

    def test_rectangle_mode(self):
        p = GridProperties(grid_type=GridType.RECTANGLE,
                           rectangle_rows=2, rectangle_columns=6)
        assert (p.rows, p.columns) == (2, 6)
        p.set_rows(4)
        assert (p.rows, p.columns) == (4, 6)
        assert p.total_cells == 24

    def test_switching_modes_restores_dimensions(self):
        p = GridProperties(square_size=3, rectangle_rows=2, rectangle_columns=5)
        p.set_grid_type(GridType.RECTANGLE)
        assert (p.rows, p.columns) == (2, 5)
        p.set_grid_type(GridType.SQUARE)
        assert (p.rows, p.columns) == (3, 3)

    def test_dimensions_are_clamped(self):
        p = GridProperties()
        p.set_square_size(0)
        assert p.rows == 1
        p.set_rows(1000)
        assert p.rows == MAX_GRID_DIMENSION

    def test_make_grid_names(self):
        p = GridProperties(square_size=2, logical_thickness=1.5)
        g = p.make_grid(Rect(0, 0, 50, 50), existing_count=2)
        assert g.name == "Grid 3"
        assert (g.rows, g.columns, g.logical_thickness) == (2, 2, 1.5)
        p.tag_name = "emoji"
        assert p.make_grid(Rect(0, 0, 50, 50)).name == "emoji"
