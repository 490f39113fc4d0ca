"""
Pixel Data Model
================
Structured pixel values and the immutable pixel grid the core works on.

Technical Notes:
- A grid is a read-only numpy uint8 array of shape (height, width, channels)
- 3 channels = 24-bit RGB, 4 channels = 32-bit RGBA
- Coordinates are (x, y), 0-indexed, origin at the top-left corner
- A grid without alpha reports alpha 255 everywhere
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidParameter, UnsupportedFormat

OPAQUE = 255


def is_integer(value) -> bool:
    """True for Python and numpy integers, False for bools and floats."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass(frozen=True)
class Pixel:
    """One 8-bit RGBA color. Alpha defaults to fully opaque."""
    r: int
    g: int
    b: int
    a: int = OPAQUE

    def __post_init__(self):
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not is_integer(value) or not 0 <= value <= 255:
                raise InvalidParameter(
                    f"Channel {name}={value!r} must be an integer in range 0-255"
                )

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b


class PixelGrid:
    """
    Immutable 2D grid of pixels.
    
    The grid owns a private read-only copy of the array it was built from,
    so neither the caller nor the core can change it afterwards.
    """

    def __init__(self, data):
        """
        Build a grid from array-like data.
        
        Args:
            data: Array-like of shape (height, width, 3 or 4) with values 0-255.
            
        Raises:
            UnsupportedFormat: If the shape is not a 3 or 4 channel grid.
            InvalidParameter: If any value falls outside 0-255.
        """
        arr = np.array(data, copy=True)

        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise UnsupportedFormat(
                f"Expected a (height, width, 3|4) pixel grid, got shape {arr.shape}"
            )
        if arr.shape[0] < 1 or arr.shape[1] < 1:
            raise UnsupportedFormat("A pixel grid must be at least 1x1")

        if arr.dtype != np.uint8:
            if arr.size and (arr.min() < 0 or arr.max() > 255):
                raise InvalidParameter("Pixel channel values must be in range 0-255")
            arr = arr.astype(np.uint8)

        arr.flags.writeable = False
        self._data = arr

    @classmethod
    def filled(cls, width: int, height: int, color: Pixel, alpha: bool = False) -> "PixelGrid":
        """Create a grid of a single solid color."""
        channels = (*color.rgb, color.a) if alpha else color.rgb
        return cls(np.full((height, width, len(channels)), channels, dtype=np.uint8))

    @property
    def data(self) -> np.ndarray:
        """The read-only backing array, shape (height, width, channels)."""
        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def has_alpha(self) -> bool:
        return self._data.shape[2] == 4

    @property
    def bit_depth(self) -> int:
        return 8 * self._data.shape[2]

    @property
    def rgb(self) -> np.ndarray:
        return self._data[:, :, :3]

    @property
    def alpha(self) -> np.ndarray:
        if self.has_alpha:
            return self._data[:, :, 3]
        return np.full((self.height, self.width), OPAQUE, dtype=np.uint8)

    def pixel(self, x: int, y: int) -> Pixel:
        """
        Get the pixel at (x, y).
        
        Raises:
            IndexError: If the coordinate lies outside the grid.
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} grid")
        return Pixel(*(int(c) for c in self._data[y, x]))

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self._data.shape == other._data.shape and np.array_equal(self._data, other._data)

    __hash__ = None

    def __repr__(self):
        return f"PixelGrid({self.width}x{self.height}, {self.bit_depth}-bit)"
