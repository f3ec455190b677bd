"""
Projects: the images and grids of one board, saved as JSON.

    {
      "name": "Stickers",
      "images": [{"path": "sheet.png", "name": "sheet",
                  "position": [0, 0], "scale": 1.0}],
      "grids": [{"name": "Row", "frame": [-200, -200, 400, 400],
                 "rows": 2, "columns": 2, "logical_thickness": 0}],
      "selected_grid_id": null
    }

Image paths are stored relative to the project file.
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from canvas_image import CanvasImage
from config import DEFAULT_GRID_COLOR, DEFAULT_VISUAL_THICKNESS
from geometry import Rect
from grid import Grid, GridLineStyle

logger = logging.getLogger(__name__)


class ProjectFileError(ValueError):
    """A project document is malformed."""


@dataclass
class Project:
    """A board of images and grids.

    The selected grid is tracked by id next to the grid list.
    """
    name: str
    images: List[CanvasImage] = field(default_factory=list)
    grids: List[Grid] = field(default_factory=list)
    selected_grid_id: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def add_grid(self, grid: Grid, select: bool = True) -> None:
        self.grids.append(grid)
        if select:
            self.selected_grid_id = grid.id

    def remove_grid(self, grid_id: str) -> None:
        self.grids = [g for g in self.grids if g.id != grid_id]
        if self.selected_grid_id == grid_id:
            self.selected_grid_id = None

    def select(self, grid_id: Optional[str]) -> None:
        if grid_id is not None and all(g.id != grid_id for g in self.grids):
            raise KeyError(grid_id)
        self.selected_grid_id = grid_id

    def selected_grid(self) -> Optional[Grid]:
        for g in self.grids:
            if g.id == self.selected_grid_id:
                return g
        return None


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------
def grid_to_dict(grid: Grid) -> Dict[str, Any]:
    f = grid.frame
    return {
        "id": grid.id,
        "name": grid.name,
        "frame": [f.x, f.y, f.width, f.height],
        "rows": grid.rows,
        "columns": grid.columns,
        "logical_thickness": grid.logical_thickness,
        "visual_thickness": grid.visual_thickness,
        "color": grid.color,
        "line_style": grid.line_style.value,
    }


def grid_from_dict(data: Dict[str, Any]) -> Grid:
    try:
        x, y, w, h = (float(v) for v in data["frame"])
        kwargs: Dict[str, Any] = dict(
            frame=Rect(x, y, w, h),
            rows=int(data.get("rows", 3)),
            columns=int(data.get("columns", 3)),
            logical_thickness=float(data.get("logical_thickness", 0.0)),
            name=str(data.get("name", "")),
            visual_thickness=float(data.get("visual_thickness", DEFAULT_VISUAL_THICKNESS)),
            color=str(data.get("color", DEFAULT_GRID_COLOR)),
            line_style=GridLineStyle(data.get("line_style", "solid")),
        )
        if "id" in data:
            kwargs["id"] = str(data["id"])
        return Grid(**kwargs)
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectFileError(f"Invalid grid entry {data!r}: {exc}") from exc


def image_to_dict(image: CanvasImage, base_dir: str) -> Dict[str, Any]:
    if image.source_path is None:
        raise ProjectFileError(f"Image '{image.name}' has no source file to reference.")
    return {
        "id": image.id,
        "path": os.path.relpath(image.source_path, base_dir),
        "name": image.name,
        "position": list(image.position),
        "scale": image.scale,
    }


def image_from_dict(data: Dict[str, Any], base_dir: str) -> CanvasImage:
    try:
        path = os.path.join(base_dir, data["path"])
        px, py = (float(v) for v in data.get("position", (0.0, 0.0)))
        scale = float(data.get("scale", 1.0))
    except (KeyError, TypeError, ValueError) as exc:
        raise ProjectFileError(f"Invalid image entry {data!r}: {exc}") from exc
    image = CanvasImage.from_file(path, position=(px, py), scale=scale,
                                  name=data.get("name"))
    if "id" in data:
        image = replace(image, id=str(data["id"]))
    return image


def load_project(path: str) -> Project:
    """Read a project file and load every image it references.

    Raises:
        ProjectFileError: the document is not a valid project.
        OSError: the file or one of its images cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ProjectFileError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ProjectFileError(f"{path} must contain a JSON object.")

    base_dir = os.path.dirname(os.path.abspath(path))
    project = Project(
        name=str(data.get("name") or os.path.splitext(os.path.basename(path))[0]),
        images=[image_from_dict(d, base_dir) for d in data.get("images", [])],
        grids=[grid_from_dict(d) for d in data.get("grids", [])],
    )
    selected = data.get("selected_grid_id")
    if selected is not None:
        try:
            project.select(str(selected))
        except KeyError:
            logger.warning(f"Selected grid {selected} not found in {path}")
    logger.info(
        f"Loaded project '{project.name}': {len(project.images)} images, "
        f"{len(project.grids)} grids"
    )
    return project


def save_project(project: Project, path: str) -> None:
    """Write *project* as JSON; image pixels stay in their source files."""
    base_dir = os.path.dirname(os.path.abspath(path))
    data = {
        "name": project.name,
        "images": [image_to_dict(img, base_dir) for img in project.images],
        "grids": [grid_to_dict(g) for g in project.grids],
        "selected_grid_id": project.selected_grid_id,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
