"""
Color Checker Detection Pipeline

Processes one image end to end:
Load -> Color conversion -> Chart detection -> Patch extraction -> Serialization
and, in debug mode, the SVG and raster overlays.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

import cv2

from .chart_geometry import ChartGeometry, MACBETH_24
from .color_extraction import extract
from .config import PipelineConfig
from .detection import ChartDetector
from .errors import ColorCheckerError
from .image_io import ImageReadOptions, read_image, to_detector_image
from .perspective import fit_transform
from .serialization import serialize
from .visualization import build_overlay_quads, render_raster_overlay, write_raster, write_svg


class ImageStatus(Enum):
    CALIBRATED = 'calibrated'
    NOT_FOUND = 'not_found'
    FAILED = 'failed'


@dataclass
class ImageResult:
    """Outcome of processing one image."""

    image_path: Path
    status: ImageStatus
    outputs: List[Path] = field(default_factory=list)
    error: Optional[str] = None


def _same_file(a: Path, b: Path) -> bool:
    if a.resolve() == b.resolve():
        return True
    # Case-insensitive filesystems and links
    return a.exists() and b.exists() and a.samefile(b)


class OutputLayout:
    """
    Decides where the files of each image are written.

    Either a folder (one '<stem>.txt' per image) or an explicit color data
    file. An explicit file is used as-is for a single image; with several
    images each one gets '<stem>_<file name>' next to it.
    """

    def __init__(self, folder: Union[str, Path], color_data_name: Optional[str] = None,
                 image_count: int = 1):
        self.folder = Path(folder)
        self.color_data_name = color_data_name
        self.image_count = image_count

    @classmethod
    def from_folder(cls, folder: Union[str, Path]) -> 'OutputLayout':
        return cls(folder)

    @classmethod
    def from_color_data_file(cls, path: Union[str, Path], image_count: int = 1) -> 'OutputLayout':
        path = Path(path)
        return cls(path.parent, path.name, image_count)

    def color_data_path(self, image_path: Path) -> Path:
        stem = Path(image_path).stem
        if self.color_data_name is None:
            return self.folder / f"{stem}{PipelineConfig.OUTPUT['COLOR_DATA_EXTENSION']}"
        if self.image_count == 1:
            return self.folder / self.color_data_name
        return self.folder / f"{stem}_{self.color_data_name}"

    def svg_path(self, image_path: Path) -> Path:
        return self._overlay_path(image_path, PipelineConfig.OUTPUT['SVG_EXTENSION'])

    def raster_path(self, image_path: Path) -> Path:
        return self._overlay_path(image_path, PipelineConfig.OUTPUT['RASTER_EXTENSION'])

    def _overlay_path(self, image_path: Path, extension: str) -> Path:
        # Never the source image itself, e.g. a .jpg written into its own folder
        image_path = Path(image_path)
        path = self.folder / f"{image_path.stem}{extension}"
        if _same_file(path, image_path):
            path = self.folder / f"{image_path.stem}{PipelineConfig.OUTPUT['OVERLAY_SUFFIX']}{extension}"
        return path


class ColorCheckerPipeline:
    """Per-image detection-to-calibration-data pipeline."""

    def __init__(self,
                 detector: ChartDetector,
                 layout: OutputLayout,
                 debug: bool = False,
                 logger: Optional[logging.Logger] = None,
                 geometry: ChartGeometry = MACBETH_24):
        """
        Args:
            detector: Chart localization backend
            layout: Output file naming
            debug: Also write the SVG and raster overlays
            logger: Logger to report to, the module logger if None
            geometry: Chart layout
        """
        self.detector = detector
        self.layout = layout
        self.debug = debug
        self.logger = logger or logging.getLogger(__name__)
        self.geometry = geometry
        self.max_charts = PipelineConfig.DETECTION['MAX_CHARTS']

    def process_image(self, image_path: Union[str, Path],
                      read_options: ImageReadOptions = ImageReadOptions()) -> ImageResult:
        """
        Run the pipeline on one image.

        Per-image errors are logged and returned as a FAILED result so the
        caller can move on to the next image.
        """
        image_path = Path(image_path)
        try:
            return self._process(image_path, read_options)
        except (ColorCheckerError, cv2.error, OSError) as e:
            self.logger.error("Failed to process image at: '%s': %s", image_path, e)
            return ImageResult(image_path, ImageStatus.FAILED, error=str(e))

    def _process(self, image_path: Path, read_options: ImageReadOptions) -> ImageResult:
        # Step 1-2: Load and convert to the detector layout
        rgba = read_image(image_path, read_options)
        image_bgr = to_detector_image(rgba)

        # Step 3: Detection
        detections = self.detector.detect(image_bgr, self.max_charts)
        if not detections:
            self.logger.info("Checker not detected in image at: '%s'", image_path)
            return ImageResult(image_path, ImageStatus.NOT_FOUND)

        self.logger.info("Checker successfully detected in '%s'", image_path.stem)

        # Step 4: Compute everything before writing anything
        pending = []
        for detection in detections[:self.max_charts]:
            # Rejects collinear or coincident corners even without debug output
            fit_transform(self.geometry.outer_corners, detection.box_corners)
            record = extract(detection)
            quads = build_overlay_quads(detection, self.geometry) if self.debug else None
            overlay = render_raster_overlay(image_bgr, detection, self.detector) if self.debug else None
            pending.append((record, quads, overlay))

        # Step 5: Write; a failed image keeps none of its files
        outputs = []
        try:
            for record, quads, overlay in pending:
                color_path = self.layout.color_data_path(image_path)
                serialize(record, color_path)
                outputs.append(color_path)
                self.logger.debug("Wrote color data '%s'", color_path)

                if self.debug:
                    height, width = image_bgr.shape[:2]
                    outputs.append(write_svg(quads, self.layout.svg_path(image_path), (width, height)))
                    outputs.append(write_raster(overlay, self.layout.raster_path(image_path)))
                    self.logger.debug("Wrote debug overlays for '%s'", image_path.stem)
        except BaseException:
            self._remove(outputs)
            raise

        return ImageResult(image_path, ImageStatus.CALIBRATED, outputs)

    def _remove(self, paths: List[Path]):
        for path in paths:
            try:
                path.unlink()
            except OSError as e:
                self.logger.warning("Could not remove partial output '%s': %s", path, e)
