"""
Calibration record serialization.

A record is written as plain text, one channel value per line, patches in
chart order and channels in R, G, B order (72 lines for the 24-patch chart).
"""

import os
import tempfile
from pathlib import Path
from typing import Union

import numpy as np

from .config import PipelineConfig
from .errors import PatchDataError


def format_value(value: float) -> str:
    digits = PipelineConfig.SERIALIZATION['SIGNIFICANT_DIGITS']
    return f"{float(value):.{digits}g}"


def serialize(record: np.ndarray, path: Union[str, Path]) -> None:
    """
    Write a calibration record, overwriting any existing file.

    The text goes to a temporary file next to the target which is then renamed
    over it, so an interrupted write leaves no partial record behind.
    """
    values = np.asarray(record, dtype=np.float64).ravel()
    expected = PipelineConfig.SERIALIZATION['PATCH_COUNT'] * PipelineConfig.SERIALIZATION['CHANNELS']
    if values.size != expected:
        raise PatchDataError(f"calibration record must hold {expected} values, got {values.size}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='ascii', newline='\n') as f:
            for value in values:
                f.write(format_value(value) + '\n')
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def parse(path: Union[str, Path]) -> np.ndarray:
    """Read a calibration record back as a (24, 3) array."""
    patches = PipelineConfig.SERIALIZATION['PATCH_COUNT']
    channels = PipelineConfig.SERIALIZATION['CHANNELS']

    lines = [line.strip() for line in Path(path).read_text(encoding='ascii').splitlines()]
    lines = [line for line in lines if line]
    if len(lines) != patches * channels:
        raise PatchDataError(f"{path}: expected {patches * channels} values, got {len(lines)}")

    try:
        values = np.array([float(line) for line in lines], dtype=np.float64)
    except ValueError as e:
        raise PatchDataError(f"{path}: {e}") from e
    return values.reshape(patches, channels)
