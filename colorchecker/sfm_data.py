"""
Scene description loading.

Reads the views of a JSON scene file (AliceVision-style .sfm). Only the
views section is used: each view gives an image path and whether white
balance should be applied when reading it.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .config import PipelineConfig
from .errors import InputResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class View:
    view_id: str
    image_path: Path
    apply_white_balance: bool = True


def is_scene_file(path: Union[str, Path]) -> bool:
    return Path(path).suffix.lower() in PipelineConfig.INPUT['SCENE_EXTENSIONS']


def to_bool(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in ('1', 'true', 'yes', 'on'):
        return True
    if text in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def load_views(path: Union[str, Path]) -> List[View]:
    """
    Load the views of a scene file, in file order.

    Relative image paths are resolved against the scene file's folder.

    Raises:
        InputResolutionError: if the file cannot be read or parsed
    """
    path = Path(path)
    if path.suffix.lower() not in PipelineConfig.INPUT['READABLE_SCENE_EXTENSIONS']:
        raise InputResolutionError(
            f"The input SfMData file '{path}' cannot be read: unsupported format '{path.suffix}'."
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise InputResolutionError(f"The input SfMData file '{path}' cannot be read: {e}") from e

    raw_views = data.get('views') if isinstance(data, dict) else None
    if not isinstance(raw_views, list):
        raise InputResolutionError(f"The input SfMData file '{path}' has no views list.")

    views = []
    for index, entry in enumerate(raw_views):
        try:
            image_path = Path(entry['path'])
            view_id = str(entry.get('viewId', index))
            white_balance = to_bool(entry.get('applyWhiteBalance'), True)
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise InputResolutionError(
                f"The input SfMData file '{path}' has an invalid view at index {index}: {e}"
            ) from e

        if not image_path.is_absolute():
            image_path = path.parent / image_path
        views.append(View(view_id=view_id, image_path=image_path,
                          apply_white_balance=white_balance))

    logger.debug("Loaded %d views from '%s'", len(views), path)
    return views
