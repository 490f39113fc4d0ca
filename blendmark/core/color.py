"""
Color Blending
==============
Linear combination of a watermark color and a base color.

    result = (weight * watermark + (100 - weight) * base) // 100

applied to R, G and B independently. The division truncates, so
blend(50, red, black) gives 127 and not 128. The result is always opaque.
"""

import numpy as np

from .errors import InvalidParameter
from .pixels import Pixel, is_integer


def check_weight(weight: int) -> int:
    """
    Validate an opacity weight.
    
    Raises:
        InvalidParameter: If weight is not an integer in 0-100.
    """
    if not is_integer(weight):
        raise InvalidParameter("The transparency percentage isn't an integer number.")
    if not 0 <= weight <= 100:
        raise InvalidParameter("The transparency percentage is out of range.")
    return int(weight)


def blend(weight: int, watermark_color: Pixel, base_color: Pixel) -> Pixel:
    """
    Blend two colors.
    
    Args:
        weight: Watermark contribution, 0-100.
        watermark_color: Watermark pixel (alpha is ignored).
        base_color: Base image pixel (alpha is ignored).
        
    Returns:
        Opaque blended Pixel.
    """
    weight = check_weight(weight)
    return Pixel(*(
        (weight * w + (100 - weight) * b) // 100
        for w, b in zip(watermark_color.rgb, base_color.rgb)
    ))


def blend_arrays(weight: int, watermark_rgb: np.ndarray, base_rgb: np.ndarray) -> np.ndarray:
    """Array form of blend() over matching (..., 3) uint8 blocks."""
    weight = check_weight(weight)
    w = watermark_rgb.astype(np.int32)
    b = base_rgb.astype(np.int32)
    return ((weight * w + (100 - weight) * b) // 100).astype(np.uint8)
