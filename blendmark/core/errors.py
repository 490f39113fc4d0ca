"""
Error Types
===========
Every failure of a blend run is one of these. All are terminal for the run:
the front end reports the message and no output file is written.
"""


class WatermarkError(Exception):
    """Base class for all blend run failures."""


class ImageNotFound(WatermarkError, FileNotFoundError):
    """The image path does not exist."""


class UnsupportedFormat(WatermarkError, ValueError):
    """The decoded image is not 3-component 24-bit or 32-bit."""


class DimensionMismatch(WatermarkError, ValueError):
    """The watermark is larger than the base image in either axis."""


class InvalidParameter(WatermarkError, ValueError):
    """A blend parameter or user answer is malformed or out of range."""
