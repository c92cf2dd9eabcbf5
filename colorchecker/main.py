"""
Color checker detection command line.

Detects a 24-patch color checker in each input image and writes the average
patch colors as calibration data.

Usage:
    colorchecker --input <scene.sfm | image | folder | pattern> --output <folder> [--debug]
    colorchecker --input <image> --outputColorData <colors.txt>
"""

import argparse
import sys
from typing import List, Optional

from .batch import BatchProcessor
from .detection import FixedBoxDetector, MCCDetector
from .errors import ConfigurationError, InputResolutionError
from .input_resolver import resolve_inputs
from .logging_setup import VERBOSE_LEVELS, setup_logging
from .pipeline import ColorCheckerPipeline, OutputLayout
from .sfm_data import to_bool


class ArgumentParser(argparse.ArgumentParser):
    """Parser that reports usage errors as ConfigurationError."""

    def error(self, message):
        raise ConfigurationError(message)


def parse_bool(value: str) -> bool:
    try:
        return to_bool(value, False)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def parse_box(value: str) -> List[List[float]]:
    try:
        coords = [float(v) for v in value.replace(';', ',').split(',') if v.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid chart box: {e}") from None
    if len(coords) != 8:
        raise argparse.ArgumentTypeError("chart box needs 8 values: x1,y1,x2,y2,x3,y3,x4,y4")
    return [coords[i:i + 2] for i in range(0, 8, 2)]


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='colorchecker',
        description='This program is used to perform color checker detection.')

    required = parser.add_argument_group('Required parameters')
    required.add_argument('--input', '-i', required=True,
                          help="SfMData file input, image filenames or regex(es) on the image file path "
                               "(supported regex: '#' matches a single digit, '@' one or more digits, "
                               "'?' one character and '*' zero or more).")
    outputs = required.add_mutually_exclusive_group(required=True)
    outputs.add_argument('--outputColorData',
                         help='Output path for the color data file.')
    outputs.add_argument('--output', '-o',
                         help='Output folder for the color data files.')

    optional = parser.add_argument_group('Optional parameters')
    optional.add_argument('--debug', type=parse_bool, nargs='?', const=True, default=False,
                          help='Output debug data (SVG and JPEG overlays).')
    optional.add_argument('--chartBox', type=parse_box, default=None,
                          help='Known chart corners "x1,y1,x2,y2,x3,y3,x4,y4" '
                               '(top-left, top-right, bottom-right, bottom-left); skips detection.')

    logs = parser.add_argument_group('Log parameters')
    logs.add_argument('--verboseLevel', '-v', default='info', type=str.lower,
                      choices=list(VERBOSE_LEVELS),
                      help='verbosity level (fatal, error, warning, info, debug, trace).')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)
    parser = build_parser()

    if not argv:
        parser.print_help(sys.stdout)
        return 0

    try:
        args = parser.parse_args(argv)
    except ConfigurationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        print("Usage:\n", file=sys.stdout)
        parser.print_help(sys.stdout)
        return 1

    logger = setup_logging(args.verboseLevel)
    logger.debug("Program called with the following parameters: %s", vars(args))

    try:
        entries = resolve_inputs(args.input)
    except InputResolutionError as e:
        logger.error("%s", e)
        return 1

    if args.output:
        layout = OutputLayout.from_folder(args.output)
    else:
        layout = OutputLayout.from_color_data_file(args.outputColorData, len(entries))
        if len(entries) > 1:
            logger.warning("%d images for a single color data file: writing one file per image in '%s'",
                           len(entries), layout.folder)

    try:
        detector = FixedBoxDetector(args.chartBox) if args.chartBox else MCCDetector()
    except RuntimeError as e:
        logger.error("%s", e)
        return 1

    pipeline = ColorCheckerPipeline(detector, layout, debug=args.debug, logger=logger)
    BatchProcessor(pipeline, logger=logger).run(entries)
    return 0


if __name__ == "__main__":
    sys.exit(main())
