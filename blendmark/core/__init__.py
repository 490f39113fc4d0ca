"""
Core Module - Pure Blending Logic
=================================
This module contains no front-end dependencies.
Pixel blending, placement, transparency and image I/O live here.
"""

from .codec import check_output_filename, load_image, save_image
from .color import blend
from .engine import BlendEngine, BlendParameters, check_dimensions
from .errors import (
    WatermarkError, ImageNotFound, UnsupportedFormat, DimensionMismatch, InvalidParameter
)
from .pixels import Pixel, PixelGrid
from .placement import PlacementMode, Single, Tiled
from .transparency import AlphaChannel, ColorKey, NoTransparency, TransparencyMode

__all__ = [
    # Model
    "Pixel",
    "PixelGrid",
    "PlacementMode",
    "Single",
    "Tiled",
    "TransparencyMode",
    "AlphaChannel",
    "ColorKey",
    "NoTransparency",
    "BlendParameters",

    # Algorithms
    "blend",
    "BlendEngine",
    "check_dimensions",

    # I/O
    "load_image",
    "save_image",
    "check_output_filename",

    # Errors
    "WatermarkError",
    "ImageNotFound",
    "UnsupportedFormat",
    "DimensionMismatch",
    "InvalidParameter",
]
