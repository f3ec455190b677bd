"""Images placed on the canvas."""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from geometry import Point, Rect

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CanvasImage:
    """A bitmap placed on the canvas.

    ``position`` is the centre of the image in canvas space and ``scale``
    multiplies the native pixel size to give its canvas footprint.
    """
    pixels: Image.Image
    name: str = ""
    position: Point = (0.0, 0.0)
    scale: float = 1.0
    source_path: Optional[str] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self) -> None:
        if self.scale <= 0:
            raise ValueError(f"Image scale must be positive, got {self.scale}.")
        if self.pixels.width <= 0 or self.pixels.height <= 0:
            raise ValueError(f"Image '{self.name}' has no pixels.")

    @classmethod
    def from_file(
        cls, path: str, position: Point = (0.0, 0.0), scale: float = 1.0,
        name: Optional[str] = None,
    ) -> CanvasImage:
        """Load *path* as RGBA so transparency survives slicing."""
        with Image.open(path) as src:
            pixels = src.convert("RGBA")
        logger.debug(f"Loaded {path} ({pixels.width}x{pixels.height})")
        if name is None:
            name = os.path.splitext(os.path.basename(path))[0]
        return cls(pixels=pixels, name=name, position=position,
                   scale=scale, source_path=path)

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height

    @property
    def pixel_bounds(self) -> Rect:
        return Rect(0.0, 0.0, float(self.width), float(self.height))

    @property
    def display_rect(self) -> Rect:
        """Canvas-space footprint, centred on ``position``."""
        return Rect.from_center(self.position, self.width * self.scale,
                                self.height * self.scale)
