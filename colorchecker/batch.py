"""
Batch orchestration.

Drives the per-image pipeline over every resolved input, in order, with a
running progress line. Each image's outcome is independent.
"""

import logging
import threading
from collections import defaultdict
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .image_io import ImageReadOptions
from .pipeline import ColorCheckerPipeline, ImageResult, ImageStatus


class BatchProcessor:
    """Runs a ColorCheckerPipeline over a list of images."""

    def __init__(self, pipeline: ColorCheckerPipeline,
                 logger: Optional[logging.Logger] = None,
                 stop_event: Optional[threading.Event] = None):
        self.pipeline = pipeline
        self.logger = logger or logging.getLogger(__name__)
        self.stop_event = stop_event

    def run(self, entries: Sequence[Tuple[Path, ImageReadOptions]]) -> List[ImageResult]:
        """
        Process every (image path, read options) entry.

        Returns:
            One ImageResult per processed image, in input order. Fewer
            results than entries means the run was cancelled.
        """
        total = len(entries)
        results = []
        self._warn_shared_stems(entries)

        for idx, (image_path, options) in enumerate(entries, 1):
            if self.stop_event is not None and self.stop_event.is_set():
                self.logger.warning("Cancelled after %d/%d images", idx - 1, total)
                break

            self.logger.info("%d/%d - Process image at: '%s'.", idx, total, image_path)
            results.append(self.pipeline.process_image(image_path, options))

        self.logger.info("Done: %s", summarize(results))
        return results

    def _warn_shared_stems(self, entries):
        # Outputs are named after the stem, so these images overwrite each other
        by_stem = defaultdict(list)
        for image_path, _ in entries:
            by_stem[Path(image_path).stem].append(str(image_path))
        for stem, paths in by_stem.items():
            if len(paths) > 1:
                self.logger.warning("Images %s share the name '%s'; their outputs overwrite each other",
                                    ", ".join(paths), stem)


def summarize(results: Iterable[ImageResult]) -> str:
    counts = {status: 0 for status in ImageStatus}
    for result in results:
        counts[result.status] += 1
    return (f"{counts[ImageStatus.CALIBRATED]} calibrated, "
            f"{counts[ImageStatus.NOT_FOUND]} without chart, "
            f"{counts[ImageStatus.FAILED]} failed")
