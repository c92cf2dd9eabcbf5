"""
Color Checker Detection

Measures the 24 patch colors of a Macbeth color checker in photographs and
writes them as calibration data:
- chart_geometry: canonical chart layout
- perspective: homography fit and projection
- detection: chart localization backends
- color_extraction: patch colors to calibration record
- serialization: calibration record text format
- visualization: debug SVG and raster overlays
- pipeline: per-image processing
- batch: processing of a resolved list of images
"""

from .chart_geometry import ChartGeometry, MACBETH_24
from .detection import ChartDetector, DetectedChart, FixedBoxDetector, MCCDetector
from .pipeline import ColorCheckerPipeline, ImageResult, ImageStatus, OutputLayout
from .batch import BatchProcessor

__all__ = [
    'ChartGeometry',
    'MACBETH_24',
    'ChartDetector',
    'DetectedChart',
    'FixedBoxDetector',
    'MCCDetector',
    'ColorCheckerPipeline',
    'ImageResult',
    'ImageStatus',
    'OutputLayout',
    'BatchProcessor',
]
