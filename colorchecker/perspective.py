"""
Perspective Mapping Module

Fits the planar homography that maps the canonical chart corners onto the
detected image corners, and projects points and quads through it.
"""

from itertools import combinations
from typing import Sequence, Tuple

import cv2
import numpy as np

from .config import PipelineConfig
from .errors import DegenerateGeometryError, DegenerateProjectionError


def _as_corners(points: Sequence, name: str) -> np.ndarray:
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if pts.shape != (4, 2):
        raise DegenerateGeometryError(f"{name} must hold exactly 4 points, got {len(pts)}")
    if not np.all(np.isfinite(pts)):
        raise DegenerateGeometryError(f"{name} contains non-finite coordinates")
    return pts


def check_non_degenerate(points: np.ndarray, name: str = "quad") -> None:
    """Raise DegenerateGeometryError if any three of the 4 points are collinear."""
    extent = float(np.ptp(points, axis=0).max())
    if extent <= 0.0:
        raise DegenerateGeometryError(f"{name} corners are all coincident")

    eps = PipelineConfig.GEOMETRY['COLLINEARITY_EPSILON'] * extent * extent
    for i, j, k in combinations(range(4), 3):
        a, b, c = points[i], points[j], points[k]
        cross = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
        if abs(cross) <= eps:
            raise DegenerateGeometryError(
                f"{name} corners {i}, {j}, {k} are collinear or coincident"
            )


def fit_transform(src_corners: Sequence, dst_corners: Sequence) -> np.ndarray:
    """
    Compute the projective transform mapping src_corners[i] to dst_corners[i].

    Args:
        src_corners: 4 source points
        dst_corners: 4 destination points

    Returns:
        3x3 float64 homography

    Raises:
        DegenerateGeometryError: if either point set cannot define a homography
    """
    src = _as_corners(src_corners, "source")
    dst = _as_corners(dst_corners, "destination")
    check_non_degenerate(src, "source")
    check_non_degenerate(dst, "destination")

    try:
        matrix = cv2.getPerspectiveTransform(src.astype(np.float32), dst.astype(np.float32))
    except cv2.error as e:
        raise DegenerateGeometryError(f"perspective fit failed: {e}") from e

    matrix = np.asarray(matrix, dtype=np.float64)
    if not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) == 0.0:
        raise DegenerateGeometryError("perspective fit produced a singular matrix")
    return matrix


def apply_point(transform: np.ndarray, point: Sequence[float]) -> Tuple[float, float]:
    """Project one 2D point, dividing by the homogeneous coordinate."""
    x, y = float(point[0]), float(point[1])
    px, py, w = transform @ np.array([x, y, 1.0])

    scale = max(1.0, float(np.abs(transform[2]).max()))
    if not np.isfinite(w) or abs(w) <= PipelineConfig.GEOMETRY['PROJECTION_EPSILON'] * scale:
        raise DegenerateProjectionError(f"point ({x}, {y}) projects to infinity")
    return float(px / w), float(py / w)


def make_quad(points: Sequence) -> np.ndarray:
    """Close a 4-point polygon into a 5-point polyline."""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    if len(pts) != 4:
        raise DegenerateGeometryError(f"invalid chart box: expected 4 points, got {len(pts)}")
    return np.vstack([pts, pts[:1]])


def apply_quad(transform: np.ndarray, quad: np.ndarray) -> np.ndarray:
    """Project every vertex of a quad, keeping the closing vertex in place."""
    return np.array([apply_point(transform, p) for p in quad], dtype=np.float64)
