"""
Axis-aligned rectangles shared by canvas space and pixel space.

A ``Rect`` is stored in top-left form ``(x, y, width, height)`` with the y
axis pointing down, the same orientation Pillow uses for crop boxes.
Zero-area rectangles are valid and mean "nothing here".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

Point = Tuple[float, float]
PixelBox = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Rect:
    """Rectangle in floating-point canvas or pixel units."""
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Rect size must be non-negative, got {self.width}x{self.height}."
            )

    @classmethod
    def zero(cls) -> Rect:
        return cls(0.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_center(cls, center: Point, width: float, height: float) -> Rect:
        cx, cy = center
        return cls(cx - width / 2, cy - height / 2, width, height)

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> Rect:
        """Build from edges, collapsing inverted edges to zero size."""
        return cls(left, top, max(0.0, right - left), max(0.0, bottom - top))

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point:
        return (self.x, self.y)

    @property
    def size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def contains(self, point: Point) -> bool:
        """True if *point* lies inside, left/top edges inclusive."""
        px, py = point
        return self.x <= px < self.max_x and self.y <= py < self.max_y

    def intersection(self, other: Rect) -> Rect:
        """Overlap of both rectangles, or ``Rect.zero()`` if they share no area."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.max_x, other.max_x)
        bottom = min(self.max_y, other.max_y)
        if right <= left or bottom <= top:
            return Rect.zero()
        return Rect(left, top, right - left, bottom - top)

    def intersects(self, other: Rect) -> bool:
        """True if the rectangles overlap with positive area."""
        return not self.intersection(other).is_empty

    def translated(self, dx: float, dy: float) -> Rect:
        return Rect(self.x + dx, self.y + dy, self.width, self.height)

    def scaled(self, factor: float) -> Rect:
        """Scale position and size about the coordinate origin."""
        if factor <= 0:
            raise ValueError(f"Scale factor must be positive, got {factor}.")
        return Rect(self.x * factor, self.y * factor,
                    self.width * factor, self.height * factor)

    def to_pixel_box(self, tolerance: float = 1e-6) -> PixelBox:
        """Round to a Pillow ``(left, top, right, bottom)`` crop box.

        The origin is floored and the far edge ceiled so a partially covered
        pixel is kept. Values within *tolerance* of a whole number are snapped
        to it first, otherwise ``100.00000000001`` would grow a cell by a pixel.
        """
        return (
            math.floor(_snap(self.x, tolerance)),
            math.floor(_snap(self.y, tolerance)),
            math.ceil(_snap(self.max_x, tolerance)),
            math.ceil(_snap(self.max_y, tolerance)),
        )


def clamp_box(box: PixelBox, width: int, height: int) -> PixelBox:
    """Clamp a crop box to ``[0, width] x [0, height]``."""
    left, top, right, bottom = box
    left = min(max(left, 0), width)
    top = min(max(top, 0), height)
    right = min(max(right, left), width)
    bottom = min(max(bottom, top), height)
    return (left, top, right, bottom)


def box_is_empty(box: PixelBox) -> bool:
    left, top, right, bottom = box
    return right <= left or bottom <= top


def _snap(value: float, tolerance: float) -> float:
    nearest = round(value)
    if abs(value - nearest) <= tolerance:
        return float(nearest)
    return value
