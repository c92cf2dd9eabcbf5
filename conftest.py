"""Shared fixtures for the color checker tests: synthetic charts and fake detectors."""

import json
from pathlib import Path
from typing import List

import cv2
import numpy as np
import pytest

from colorchecker.chart_geometry import MACBETH_24
from colorchecker.detection import ChartDetector, DetectedChart, FixedBoxDetector
from colorchecker.perspective import apply_quad, fit_transform, make_quad

CHART_BOX = ((10.0, 10.0), (110.0, 10.0), (110.0, 80.0), (10.0, 80.0))
IMAGE_SIZE = (120, 90)  # width, height
BACKGROUND = (128, 128, 128)

# Approximate sRGB values of the classic chart, row-major
CHART_COLORS_RGB = [
    (115, 82, 68), (194, 150, 130), (98, 122, 157), (87, 108, 67), (133, 128, 177), (103, 189, 170),
    (214, 126, 44), (80, 91, 166), (193, 90, 99), (94, 60, 108), (157, 188, 64), (224, 163, 46),
    (56, 61, 150), (70, 148, 73), (175, 54, 60), (231, 199, 31), (187, 86, 149), (8, 133, 161),
    (243, 243, 242), (200, 200, 200), (160, 160, 160), (122, 122, 121), (85, 85, 85), (52, 52, 52),
]


def paint_chart(image_bgr: np.ndarray, box=CHART_BOX, colors=CHART_COLORS_RGB) -> np.ndarray:
    """Paint full-size patches (twice the sampled cell) at their projected positions."""
    transform = fit_transform(MACBETH_24.outer_corners, box)
    for index, (cx, cy) in enumerate(MACBETH_24.cell_centers):
        half = 1.25
        square = [(cx - half, cy - half), (cx + half, cy - half),
                  (cx + half, cy + half), (cx - half, cy + half)]
        quad = apply_quad(transform, make_quad(square))[:4]
        r, g, b = colors[index]
        cv2.fillConvexPoly(image_bgr, np.round(quad).astype(np.int32), (b, g, r))
    return image_bgr


def blank_image(size=IMAGE_SIZE, color=BACKGROUND) -> np.ndarray:
    width, height = size
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:] = color
    return image


def expected_record(colors=CHART_COLORS_RGB) -> np.ndarray:
    return np.array(colors, dtype=np.float64) / 255.0


class FakeDetector(ChartDetector):
    """Returns canned detections and records every call."""

    def __init__(self, detections: List[DetectedChart] = None):
        self.detections = detections or []
        self.calls = []
        self.drawn = []

    def detect(self, image_bgr, max_charts=1):
        self.calls.append((image_bgr.shape, max_charts))
        return list(self.detections[:max_charts])

    def draw(self, detection, image_bgr):
        self.drawn.append(detection)
        box = np.round(np.asarray(detection.box_corners)).astype(np.int32)
        cv2.polylines(image_bgr, [box], True, (0, 0, 250), 3)
        return image_bgr


class ChartPresenceDetector(FixedBoxDetector):
    """Fixed-box detector that reports nothing on a uniform image."""

    def detect(self, image_bgr, max_charts=1):
        if np.ptp(image_bgr) == 0:
            return []
        return super().detect(image_bgr, max_charts)


@pytest.fixture
def chart_image_path(tmp_path) -> Path:
    path = tmp_path / "chart.png"
    cv2.imwrite(str(path), paint_chart(blank_image()))
    return path


@pytest.fixture
def blank_image_path(tmp_path) -> Path:
    path = tmp_path / "blank.png"
    cv2.imwrite(str(path), blank_image())
    return path


@pytest.fixture
def canned_detection() -> DetectedChart:
    samples = np.array(CHART_COLORS_RGB, dtype=np.float64).ravel()
    return DetectedChart(box_corners=CHART_BOX, patch_colors=samples)


@pytest.fixture
def three_view_scene(tmp_path) -> Path:
    """Scene with three views; the second image holds no chart."""
    images = tmp_path / "images"
    images.mkdir()
    cv2.imwrite(str(images / "view_001.png"), paint_chart(blank_image()))
    cv2.imwrite(str(images / "view_002.png"), blank_image())
    cv2.imwrite(str(images / "view_003.png"), paint_chart(blank_image()))

    scene = {
        "version": ["1", "2", "3"],
        "views": [
            {"viewId": "101", "path": "images/view_001.png", "applyWhiteBalance": "1"},
            {"viewId": "102", "path": "images/view_002.png", "applyWhiteBalance": "0"},
            {"viewId": "103", "path": str(images / "view_003.png")},
        ],
    }
    path = tmp_path / "scene.sfm"
    path.write_text(json.dumps(scene), encoding="utf-8")
    return path
