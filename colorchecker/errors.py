"""Custom exceptions for color checker detection."""


class ColorCheckerError(Exception):
    """Base error for the package."""
    pass


class ConfigurationError(ColorCheckerError):
    """Missing or invalid command line configuration."""
    pass


class InputResolutionError(ColorCheckerError):
    """The input expression could not be turned into a list of images."""
    pass


class ImageError(ColorCheckerError):
    """Base error for problems with a single source image."""
    pass


class ImageReadError(ImageError):
    """The image file could not be decoded."""
    pass


class EmptyImageError(ImageError):
    """The decoded image has a zero dimension."""
    pass


class DegenerateGeometryError(ColorCheckerError):
    """Corner set cannot define a projective transform."""
    pass


class DegenerateProjectionError(ColorCheckerError):
    """A point projects to infinity."""
    pass


class PatchDataError(ColorCheckerError):
    """Patch color buffer has an unexpected shape."""
    pass
