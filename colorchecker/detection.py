"""
Chart Detection Module

Detectors locate 24-patch color checkers in an 8-bit BGR image and report,
for each chart, its four corners and the average color of every patch.

Detectors receive BGR images and always report patch colors in RGB order.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from .chart_geometry import ChartGeometry, MACBETH_24
from .color_extraction import average_patch_colors
from .config import PipelineConfig


@dataclass(frozen=True, eq=False)
class DetectedChart:
    """One chart found in an image."""

    box_corners: Tuple[Tuple[float, float], ...]
    patch_colors: np.ndarray
    native: Any = field(default=None, repr=False)


class ChartDetector:
    """Interface of a chart localization backend."""

    def detect(self, image_bgr: np.ndarray, max_charts: int = 1) -> List[DetectedChart]:
        """Return up to max_charts detections; an empty list means not found."""
        raise NotImplementedError

    def draw(self, detection: DetectedChart, image_bgr: np.ndarray) -> np.ndarray:
        """Burn the chart annotation into image_bgr and return it."""
        raise NotImplementedError


def _mcc_module():
    mcc = getattr(cv2, 'mcc', None)
    if mcc is None:
        raise RuntimeError(
            "OpenCV was built without the mcc module; install opencv-contrib-python"
        )
    return mcc


class MCCDetector(ChartDetector):
    """Macbeth chart detector backed by OpenCV's contrib mcc module."""

    def __init__(self, color: Tuple[int, int, int] = None, thickness: int = None):
        self.mcc = _mcc_module()
        self.color = color or PipelineConfig.VIZ['DRAW_COLOR']
        self.thickness = thickness or PipelineConfig.VIZ['DRAW_THICKNESS']

    def _create_detector(self):
        if hasattr(self.mcc, 'CCheckerDetector_create'):
            return self.mcc.CCheckerDetector_create()
        return self.mcc.CCheckerDetector.create()

    def detect(self, image_bgr: np.ndarray, max_charts: int = 1) -> List[DetectedChart]:
        detector = self._create_detector()
        if not detector.process(image_bgr, self.mcc.MCC24, max_charts):
            return []

        detections = []
        for checker in detector.getListColorChecker()[:max_charts]:
            box = np.asarray(checker.getBox(), dtype=np.float64).reshape(-1, 2)
            charts_rgb = np.asarray(checker.getChartsRGB(), dtype=np.float64)
            # Column 1 holds the per-channel patch averages
            patch_colors = charts_rgb[:, 1].copy()
            detections.append(DetectedChart(
                box_corners=tuple(map(tuple, box)),
                patch_colors=patch_colors,
                native=checker,
            ))
        return detections

    def draw(self, detection: DetectedChart, image_bgr: np.ndarray) -> np.ndarray:
        if hasattr(self.mcc, 'CCheckerDraw_create'):
            cdraw = self.mcc.CCheckerDraw_create(detection.native, self.color, self.thickness)
        else:
            cdraw = self.mcc.CCheckerDraw.create(detection.native, self.color, self.thickness)
        drawn = cdraw.draw(image_bgr)
        return image_bgr if drawn is None else drawn


class FixedBoxDetector(ChartDetector):
    """
    Detector for charts whose corners are already known.

    Useful with manually annotated corners or synthetic images: the patch
    averages are measured in the image at the given box.
    """

    def __init__(self, box_corners: Optional[Sequence] = None,
                 geometry: ChartGeometry = MACBETH_24):
        self.box_corners = None
        if box_corners is not None:
            corners = np.asarray(box_corners, dtype=np.float64).reshape(-1, 2)
            self.box_corners = tuple(map(tuple, corners))
        self.geometry = geometry

    def detect(self, image_bgr: np.ndarray, max_charts: int = 1) -> List[DetectedChart]:
        if self.box_corners is None or max_charts < 1:
            return []
        colors = average_patch_colors(image_bgr, self.box_corners, self.geometry)
        return [DetectedChart(box_corners=self.box_corners, patch_colors=colors)]

    def draw(self, detection: DetectedChart, image_bgr: np.ndarray) -> np.ndarray:
        viz = PipelineConfig.VIZ
        box = np.round(np.asarray(detection.box_corners)).astype(np.int32)
        cv2.polylines(image_bgr, [box], True, viz['DRAW_COLOR'], viz['DRAW_THICKNESS'])

        # Axis markers: X along the first edge, Y along the last
        origin = tuple(int(v) for v in box[0])
        cv2.arrowedLine(image_bgr, origin, tuple(int(v) for v in box[1]),
                        viz['AXIS_X_COLOR'], 1, cv2.LINE_AA, 0, 0.1)
        cv2.arrowedLine(image_bgr, origin, tuple(int(v) for v in box[3]),
                        viz['AXIS_Y_COLOR'], 1, cv2.LINE_AA, 0, 0.1)
        cv2.circle(image_bgr, origin, viz['AXIS_MARKER_RADIUS'], viz['DRAW_COLOR'], -1)
        return image_bgr
