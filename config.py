"""Settings shared by the slicing engine and the command-line front-end."""

from __future__ import annotations

from dataclasses import dataclass

# Grid subdivision limits applied when grids are created from GridProperties.
MIN_GRID_DIMENSION = 1
MAX_GRID_DIMENSION = 50

DEFAULT_GRID_COLOR = "#0000FF"
DEFAULT_VISUAL_THICKNESS = 2.0


@dataclass(frozen=True)
class SliceConfig:
    """Export settings.

    Attributes:
        png_compress_level: zlib level handed to Pillow's PNG encoder (0-9).
        snap_tolerance: distance to a whole pixel below which a coordinate is
            treated as exactly on that pixel before floor/ceil rounding.
        run_directory_prefix: name prefix for timestamped batch directories.
    """
    png_compress_level: int = 6
    snap_tolerance: float = 1e-6
    run_directory_prefix: str = "MojiSlicer_AllGrids"

    def __post_init__(self) -> None:
        if not 0 <= self.png_compress_level <= 9:
            raise ValueError(
                f"png_compress_level must be in 0..9, got {self.png_compress_level}."
            )
        if self.snap_tolerance < 0:
            raise ValueError("snap_tolerance must be non-negative.")


DEFAULT_CONFIG = SliceConfig()
