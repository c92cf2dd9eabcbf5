"""
Configuration settings for the color checker detection pipeline.
Centralized configuration for all modules.
"""

import numpy as np


class PipelineConfig:
    """Configuration for the entire color checker detection pipeline."""

    # Input resolution
    INPUT = {
        'SCENE_EXTENSIONS': ('.sfm', '.json', '.abc'),
        'READABLE_SCENE_EXTENSIONS': ('.sfm', '.json'),
        'IMAGE_EXTENSIONS': ('.jpg', '.jpeg', '.png', '.bmp', '.tif', '.tiff',
                             '.exr', '.hdr', '.webp', '.ppm', '.pgm'),
    }

    # Output naming
    OUTPUT = {
        'COLOR_DATA_EXTENSION': '.txt',
        'SVG_EXTENSION': '.svg',
        'RASTER_EXTENSION': '.jpg',
        'OVERLAY_SUFFIX': '_overlay',
        'JPEG_QUALITY': 95,
    }

    # Detection
    DETECTION = {
        'MAX_CHARTS': 1,
    }

    # Geometry
    GEOMETRY = {
        'COLLINEARITY_EPSILON': 1e-9,
        'PROJECTION_EPSILON': 1e-12,
    }

    # Calibration record
    SERIALIZATION = {
        'PATCH_COUNT': 24,
        'CHANNELS': 3,
        # digits10 + 2 for an IEEE double
        'SIGNIFICANT_DIGITS': np.finfo(np.float64).precision + 2,
    }

    # Debug overlay styles
    VIZ = {
        'SVG_STROKE': 'red',
        'SVG_STROKE_WIDTH': 2,
        'DRAW_COLOR': (0, 0, 250),   # BGR
        'DRAW_THICKNESS': 3,
        'AXIS_X_COLOR': (0, 0, 255),
        'AXIS_Y_COLOR': (0, 255, 0),
        'AXIS_MARKER_RADIUS': 4,
    }

    # Logging
    LOGGING = {
        'FORMAT': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'DEFAULT_LEVEL': 'info',
    }
