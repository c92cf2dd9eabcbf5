"""
Image ingestion for the detection pipeline.

Images are decoded with OpenCV into float RGBA in [0, 1], optionally moved
between sRGB and linear encodings, and converted once into the 8-bit BGR
layout the chart detector expects.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from .errors import EmptyImageError, ImageReadError
from .logging_setup import TRACE

logger = logging.getLogger(__name__)


class ColorSpace(Enum):
    NO_CONVERSION = 'no_conversion'
    SRGB = 'srgb'
    LINEAR = 'linear'


@dataclass(frozen=True)
class ImageReadOptions:
    """Per-image read options, passed through unchanged from the input source."""

    output_color_space: ColorSpace = ColorSpace.SRGB
    apply_white_balance: bool = True


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    """IEC 61966-2-1 decoding curve."""
    v = np.clip(values, 0.0, None)
    return np.where(v <= 0.04045, v / 12.92, ((v + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(values: np.ndarray) -> np.ndarray:
    """IEC 61966-2-1 encoding curve."""
    v = np.clip(values, 0.0, None)
    return np.where(v <= 0.0031308, v * 12.92, 1.055 * np.power(v, 1.0 / 2.4) - 0.055)


def _to_float(image: np.ndarray) -> np.ndarray:
    if image.dtype == np.uint8:
        return image.astype(np.float32) / 255.0
    if image.dtype == np.uint16:
        return image.astype(np.float32) / 65535.0
    return image.astype(np.float32)


def _to_rgba(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        image = image[:, :, np.newaxis]
    channels = image.shape[2]
    if channels == 1:
        rgb = np.repeat(image, 3, axis=2)
        alpha = np.ones(image.shape[:2] + (1,), dtype=image.dtype)
    elif channels == 3:
        rgb = image[:, :, ::-1]
        alpha = np.ones(image.shape[:2] + (1,), dtype=image.dtype)
    elif channels == 4:
        rgb = image[:, :, 2::-1]
        alpha = image[:, :, 3:4]
    else:
        raise ImageReadError(f"unsupported channel count: {channels}")
    return np.concatenate([rgb, alpha], axis=2)


def read_image(path: Union[str, Path], options: ImageReadOptions = ImageReadOptions()) -> np.ndarray:
    """
    Decode an image file.

    Args:
        path: Image file path
        options: Color space and white balance handling

    Returns:
        float32 RGBA image, shape (H, W, 4)

    Raises:
        ImageReadError: if the file cannot be decoded
        EmptyImageError: if the decoded image has a zero dimension
    """
    path = Path(path)
    raw = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if raw is None:
        raise ImageReadError(f"Image at: '{path}' cannot be read.")
    if raw.size == 0 or raw.shape[0] == 0 or raw.shape[1] == 0:
        raise EmptyImageError(f"Image at: '{path}' is empty.")

    # Integer encodings are display-referred sRGB, float ones scene-linear
    source_linear = raw.dtype in (np.float16, np.float32, np.float64)
    rgba = _to_rgba(_to_float(raw))

    rgb = rgba[:, :, :3]
    if options.output_color_space is ColorSpace.LINEAR and not source_linear:
        rgba[:, :, :3] = srgb_to_linear(rgb)
    elif options.output_color_space is ColorSpace.SRGB and source_linear:
        rgba[:, :, :3] = linear_to_srgb(rgb)

    logger.log(TRACE, "Read '%s' (%dx%d, %s, color space %s, white balance %s)",
               path, raw.shape[1], raw.shape[0], raw.dtype,
               options.output_color_space.value, options.apply_white_balance)
    return rgba


def to_detector_image(rgba: np.ndarray) -> np.ndarray:
    """Convert float RGBA in [0, 1] to the 8-bit BGR layout used by OpenCV."""
    if rgba.shape[0] == 0 or rgba.shape[1] == 0:
        raise EmptyImageError("cannot convert an empty image")
    rgb = np.nan_to_num(rgba[:, :, :3], nan=0.0, posinf=1.0, neginf=0.0)
    bgr = np.clip(np.rint(rgb[:, :, ::-1] * 255.0), 0, 255).astype(np.uint8)
    return np.ascontiguousarray(bgr)
