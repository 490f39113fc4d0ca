"""
Transparency Policy
===================
Decides whether a watermark pixel contributes to the blend at all.

Modes:
- AlphaChannel(): only fully opaque pixels (alpha == 255) contribute.
  Partial alpha counts as fully transparent; there is no proportional
  alpha blending.
- ColorKey(r, g, b): pixels whose RGB equals the key are transparent,
  as are pixels with alpha below 255.
- NoTransparency(): every pixel contributes, alpha is ignored.
"""

from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import InvalidParameter
from .pixels import OPAQUE, Pixel, is_integer


@dataclass(frozen=True)
class AlphaChannel:
    """Use the watermark's own alpha channel."""


@dataclass(frozen=True)
class ColorKey:
    """Treat an exact RGB match as transparent."""
    r: int
    g: int
    b: int

    def __post_init__(self):
        if not all(is_integer(c) and 0 <= c <= 255 for c in (self.r, self.g, self.b)):
            raise InvalidParameter("The transparency color input is invalid.")

    @property
    def rgb(self):
        return self.r, self.g, self.b


@dataclass(frozen=True)
class NoTransparency:
    """Every watermark pixel is opaque."""


TransparencyMode = Union[AlphaChannel, ColorKey, NoTransparency]


def is_opaque_at(mode: TransparencyMode, watermark_color: Pixel) -> bool:
    """Return True if the watermark pixel should be blended in."""
    if isinstance(mode, NoTransparency):
        return True
    if isinstance(mode, AlphaChannel):
        return watermark_color.a == OPAQUE
    if isinstance(mode, ColorKey):
        return watermark_color.rgb != mode.rgb and watermark_color.a == OPAQUE
    raise InvalidParameter(f"Unrecognized transparency mode: {mode!r}")


def opacity_mask(mode: TransparencyMode, rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """
    Array form of is_opaque_at().
    
    Args:
        mode: Transparency mode.
        rgb: Watermark colors, shape (..., 3).
        alpha: Watermark alpha, shape (...); 255 where the watermark has none.
        
    Returns:
        Boolean mask of shape (...).
    """
    if isinstance(mode, NoTransparency):
        return np.ones(alpha.shape, dtype=bool)
    if isinstance(mode, AlphaChannel):
        return alpha == OPAQUE
    if isinstance(mode, ColorKey):
        keyed = np.all(rgb == np.array(mode.rgb, dtype=rgb.dtype), axis=-1)
        return ~keyed & (alpha == OPAQUE)
    raise InvalidParameter(f"Unrecognized transparency mode: {mode!r}")
