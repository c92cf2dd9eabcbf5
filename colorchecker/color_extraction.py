"""
Patch Color Extraction Module

Turns the flat patch buffer reported by a detector into a calibration record:
24 RGB triples normalized to [0, 1], in chart cell order.
"""

from typing import Sequence

import cv2
import numpy as np

from .chart_geometry import ChartGeometry, MACBETH_24
from .config import PipelineConfig
from .errors import PatchDataError
from .perspective import fit_transform, apply_quad, make_quad


def extract(detection) -> np.ndarray:
    """
    Build the calibration record of a detected chart.

    Args:
        detection: DetectedChart whose patch_colors hold 72 scalars in 8-bit RGB

    Returns:
        (24, 3) float64 array with channels in [0, 1]
    """
    patches = PipelineConfig.SERIALIZATION['PATCH_COUNT']
    channels = PipelineConfig.SERIALIZATION['CHANNELS']

    flat = np.asarray(detection.patch_colors, dtype=np.float64).ravel()
    if flat.size != patches * channels:
        raise PatchDataError(
            f"expected {patches * channels} patch samples, got {flat.size}"
        )
    if not np.all(np.isfinite(flat)):
        raise PatchDataError("patch samples contain non-finite values")

    record = flat.reshape(patches, channels) / 255.0
    return np.clip(record, 0.0, 1.0)


def average_patch_colors(image_bgr: np.ndarray,
                         box_corners: Sequence,
                         geometry: ChartGeometry = MACBETH_24) -> np.ndarray:
    """
    Measure the mean color of every cell of a chart with known corners.

    Args:
        image_bgr: 8-bit BGR image
        box_corners: 4 image-space corners in canonical corner order
        geometry: Chart layout

    Returns:
        Flat array of 72 RGB samples in the 8-bit domain
    """
    transform = fit_transform(geometry.outer_corners, box_corners)
    h, w = image_bgr.shape[:2]

    samples = []
    for index in range(geometry.cell_count):
        quad = apply_quad(transform, make_quad(geometry.cell_corners(index)))
        mask = np.zeros((h, w), dtype=np.uint8)
        cv2.fillConvexPoly(mask, np.round(quad[:4]).astype(np.int32), 255)
        if not mask.any():
            raise PatchDataError(f"cell {index} falls outside the image")
        b, g, r, _ = cv2.mean(image_bgr, mask=mask)
        samples.extend((r, g, b))

    return np.array(samples, dtype=np.float64)
