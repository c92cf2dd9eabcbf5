"""
Input expression resolution.

An input is a scene file, an image file, a folder of images, or a file name
pattern. Pattern tokens: '#' one digit, '@' one or more digits, '?' one
character, '*' zero or more characters.
"""

import logging
import re
from pathlib import Path
from typing import Callable, List, Tuple, Union

from .config import PipelineConfig
from .errors import InputResolutionError
from .image_io import ColorSpace, ImageReadOptions
from .sfm_data import is_scene_file, load_views

logger = logging.getLogger(__name__)

PATTERN_TOKENS = {
    '#': r'\d',
    '@': r'\d+',
    '?': r'.',
    '*': r'.*',
}


def is_pattern(expression: str) -> bool:
    return any(token in expression for token in PATTERN_TOKENS)


def compile_pattern(pattern: str) -> Callable[[str], bool]:
    """Compile a file name pattern into a full-match predicate."""
    parts = [PATTERN_TOKENS.get(ch, re.escape(ch)) for ch in pattern]
    regex = re.compile(''.join(parts) + r'\Z', re.DOTALL)
    return lambda name: regex.match(name) is not None


def is_image_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in PipelineConfig.INPUT['IMAGE_EXTENSIONS']


def list_images(folder: Path) -> List[Path]:
    return sorted(p for p in folder.iterdir() if is_image_file(p))


def resolve_image_paths(expression: str) -> List[Path]:
    """
    Expand an image file, folder or pattern into an ordered list of images.

    Raises:
        InputResolutionError: if nothing matches
    """
    path = Path(expression)
    if path.is_dir():
        images = list_images(path)
    elif path.is_file():
        images = [path]
    elif is_pattern(path.name):
        folder = path.parent
        if not folder.is_dir():
            raise InputResolutionError(f"Input folder '{folder}' does not exist.")
        matches = compile_pattern(path.name)
        images = [p for p in list_images(folder) if matches(p.name)]
    else:
        raise InputResolutionError(f"Input '{expression}' is not a file, a folder or a pattern.")

    if not images:
        raise InputResolutionError(f"No image found for input '{expression}'.")
    return images


def resolve_inputs(expression: Union[str, Path]) -> List[Tuple[Path, ImageReadOptions]]:
    """
    Resolve an input expression into (image path, read options) pairs.

    Views of a scene file keep their native color space and carry their own
    white balance flag; plain images use the default read options.
    """
    expression = str(expression)
    if is_scene_file(expression):
        views = load_views(expression)
        if not views:
            raise InputResolutionError(f"The input SfMData file '{expression}' contains no view.")
        return [
            (view.image_path,
             ImageReadOptions(output_color_space=ColorSpace.NO_CONVERSION,
                              apply_white_balance=view.apply_white_balance))
            for view in views
        ]

    images = resolve_image_paths(expression)
    logger.debug("Resolved %d image(s) from '%s'", len(images), expression)
    return [(image, ImageReadOptions()) for image in images]
