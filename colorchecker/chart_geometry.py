"""
Chart Geometry Module

Reference layout of the 24-patch Macbeth color checker in canonical chart
units. Cells are numbered row-major from the top-left patch.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

Point = Tuple[float, float]


@dataclass(frozen=True)
class ChartGeometry:
    """Canonical corner positions, cell centers and cell size of a chart."""

    outer_corners: Tuple[Point, ...]
    cell_centers: Tuple[Point, ...]
    cell_size: float

    def __post_init__(self):
        if len(self.outer_corners) != 4:
            raise ValueError(f"chart needs 4 outer corners, got {len(self.outer_corners)}")
        if len(self.cell_centers) != 24:
            raise ValueError(f"chart needs 24 cell centers, got {len(self.cell_centers)}")
        if self.cell_size <= 0:
            raise ValueError("cell size must be positive")

    @property
    def cell_count(self) -> int:
        return len(self.cell_centers)

    def cell_corners(self, index: int) -> np.ndarray:
        """
        Square boundary of one cell in canonical space.

        Args:
            index: Cell index in row-major order

        Returns:
            (4, 2) array ordered top-left, top-right, bottom-right, bottom-left
        """
        cx, cy = self.cell_centers[index]
        half = self.cell_size * 0.5
        return np.array([
            (cx - half, cy - half),
            (cx + half, cy - half),
            (cx + half, cy + half),
            (cx - half, cy + half),
        ], dtype=np.float64)


_COLUMNS = (1.50, 4.25, 7.00, 9.75, 12.50, 15.25)
_ROWS = (1.50, 4.25, 7.00, 9.75)

MACBETH_24 = ChartGeometry(
    outer_corners=((0.00, 0.00), (16.75, 0.00), (16.75, 11.25), (0.00, 11.25)),
    cell_centers=tuple((x, y) for y in _ROWS for x in _COLUMNS),
    # Sampled square is half of the 2.5 unit patch
    cell_size=2.50 * 0.5,
)
