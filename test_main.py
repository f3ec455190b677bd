"""Tests for the command-line front-end - run with: python -m pytest test_main.py"""

import json
import os

from PIL import Image

from main import EXIT_FATAL, EXIT_OK, EXIT_PARTIAL, main


def _write_png(path, w=100, h=100):
    Image.new("RGBA", (w, h), (200, 100, 50, 255)).save(path)
    return str(path)


class TestSliceCommand:
    def test_whole_image(self, tmp_path, capsys):
        src = _write_png(tmp_path / "in.png")
        out = tmp_path / "out"
        out.mkdir()
        code = main(["slice", src, "-o", str(out), "--rows", "2",
                     "--columns", "2", "--name", "icon"])
        assert code == EXIT_OK
        assert sorted(os.listdir(out)) == ["icon_0_0.png", "icon_0_1.png",
                                           "icon_1_0.png", "icon_1_1.png"]
        assert "sliced into 4 pieces" in capsys.readouterr().out

    def test_frame_and_thickness(self, tmp_path):
        src = _write_png(tmp_path / "in.png")
        code = main(["slice", src, "-o", str(tmp_path), "-r", "1", "-c", "1",
                     "--frame", "10", "10", "50", "50", "-t", "5", "-n", "x"])
        assert code == EXIT_OK
        with Image.open(tmp_path / "x_0_0.png") as cell:
            assert cell.size == (40, 40)

    def test_degenerate_cells_are_partial(self, tmp_path):
        src = _write_png(tmp_path / "in.png")
        code = main(["slice", src, "-o", str(tmp_path), "-r", "2", "-c", "2",
                     "-t", "30"])
        assert code == EXIT_PARTIAL

    def test_missing_output_directory(self, tmp_path):
        src = _write_png(tmp_path / "in.png")
        assert main(["slice", src, "-o", str(tmp_path / "nope")]) == EXIT_FATAL


class TestBatchCommand:
    def _project(self, tmp_path, grids):
        _write_png(tmp_path / "sheet.png")
        path = tmp_path / "board.json"
        path.write_text(json.dumps({
            "name": "b",
            "images": [{"path": "sheet.png"}],
            "grids": grids,
        }), encoding="utf-8")
        return str(path)

    def test_timestamped_batch(self, tmp_path, capsys):
        project = self._project(tmp_path, [
            {"name": "G", "frame": [-50, -50, 100, 100], "rows": 2, "columns": 2},
        ])
        out = tmp_path / "exports"
        out.mkdir()
        assert main(["-q", "batch", project, "-o", str(out), "--timestamped"]) == EXIT_OK
        (run_dir,) = os.listdir(out)
        assert run_dir.startswith("MojiSlicer_AllGrids_")
        cells = os.listdir(out / run_dir / "Grid_G" / "Image_1_sheet")
        assert len(cells) == 4
        assert "created 4 slices" in capsys.readouterr().out

    def test_project_without_grids(self, tmp_path):
        project = self._project(tmp_path, [])
        assert main(["batch", project, "-o", str(tmp_path)]) == EXIT_FATAL

    def test_bad_project_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[]", encoding="utf-8")
        assert main(["batch", str(path), "-o", str(tmp_path)]) == EXIT_FATAL
