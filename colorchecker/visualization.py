"""
Debug overlay rendering.

Two independent outputs for visual verification of a detection: an SVG
drawing of the chart box and its 24 sampled cells, and a copy of the source
image with the detector's annotation burned in.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union
from xml.sax.saxutils import quoteattr

import cv2
import numpy as np

from .chart_geometry import ChartGeometry, MACBETH_24
from .config import PipelineConfig
from .perspective import apply_quad, fit_transform, make_quad


def build_overlay_quads(detection, geometry: ChartGeometry = MACBETH_24) -> List[np.ndarray]:
    """
    Build the 25 closed quads of the overlay in image space.

    Args:
        detection: DetectedChart with image-space box corners
        geometry: Chart layout

    Returns:
        List of (5, 2) arrays: the chart box followed by one quad per cell
    """
    quads = [make_quad(detection.box_corners)]

    # Canonical chart space -> measured image space
    transform = fit_transform(geometry.outer_corners, detection.box_corners)
    for index in range(geometry.cell_count):
        cell = make_quad(geometry.cell_corners(index))
        quads.append(apply_quad(transform, cell))
    return quads


def svg_document(quads: List[np.ndarray],
                 size: Optional[Tuple[int, int]] = None,
                 stroke: str = None,
                 stroke_width: float = None) -> str:
    """
    Render quads as stroked polylines in a standalone SVG document.

    Args:
        quads: Closed polylines
        size: Optional (width, height) of the source image for the canvas
        stroke: Stroke color name
        stroke_width: Stroke width in pixels
    """
    stroke = stroke or PipelineConfig.VIZ['SVG_STROKE']
    stroke_width = stroke_width or PipelineConfig.VIZ['SVG_STROKE_WIDTH']

    if size is None:
        pts = np.vstack(quads) if quads else np.zeros((1, 2))
        width, height = (int(np.ceil(v)) for v in np.maximum(pts.max(axis=0), 1.0))
    else:
        width, height = size

    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
        f'width="{width}" height="{height}" viewBox="0 0 {width} {height}">',
    ]
    for quad in quads:
        points = ' '.join(f'{x:.3f},{y:.3f}' for x, y in quad)
        lines.append(
            f'  <polyline points={quoteattr(points)} fill="none" '
            f'stroke={quoteattr(stroke)} stroke-width="{stroke_width}"/>'
        )
    lines.append('</svg>')
    return '\n'.join(lines) + '\n'


def write_svg(quads: List[np.ndarray], path: Union[str, Path],
              size: Optional[Tuple[int, int]] = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(svg_document(quads, size), encoding='utf-8')
    return path


def render_raster_overlay(image_bgr: np.ndarray, detection, detector) -> np.ndarray:
    """Annotate a copy of the image with the detector's own chart drawing."""
    vis = image_bgr.copy()
    return detector.draw(detection, vis)


def write_raster(image_bgr: np.ndarray, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    params = [cv2.IMWRITE_JPEG_QUALITY, PipelineConfig.OUTPUT['JPEG_QUALITY']]
    if not cv2.imwrite(str(path), image_bgr, params):
        raise OSError(f"could not write overlay image '{path}'")
    return path
