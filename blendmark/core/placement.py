"""
Watermark Placement
===================
Maps an output pixel coordinate to the watermark pixel that covers it.

Modes:
- Single(offset_x, offset_y): the watermark is drawn once, its top-left
  corner at the offset
- Tiled(): the watermark repeats over the whole base image
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np

from .errors import InvalidParameter
from .pixels import is_integer


@dataclass(frozen=True)
class Single:
    """Watermark placed once at (offset_x, offset_y)."""
    offset_x: int
    offset_y: int

    def __post_init__(self):
        if not (is_integer(self.offset_x) and is_integer(self.offset_y)):
            raise InvalidParameter("The position input is invalid.")


@dataclass(frozen=True)
class Tiled:
    """Watermark repeated across the base image by coordinate wrap."""


PlacementMode = Union[Single, Tiled]


def offset_bounds(base_size: Tuple[int, int], watermark_size: Tuple[int, int]) -> Tuple[int, int]:
    """Largest valid (offset_x, offset_y) for a single placement."""
    return base_size[0] - watermark_size[0], base_size[1] - watermark_size[1]


def check_offset_bounds(
        placement: PlacementMode,
        base_size: Tuple[int, int],
        watermark_size: Tuple[int, int]
) -> None:
    """
    Check that a single placement keeps the watermark inside the base image.
    
    Raises:
        InvalidParameter: If an offset is outside [0, base - watermark].
    """
    if not isinstance(placement, Single):
        return
    max_x, max_y = offset_bounds(base_size, watermark_size)
    if not (0 <= placement.offset_x <= max_x and 0 <= placement.offset_y <= max_y):
        raise InvalidParameter("The position input is out of range.")


def resolve(
        placement: PlacementMode,
        watermark_size: Tuple[int, int],
        x: int,
        y: int
) -> Optional[Tuple[int, int]]:
    """
    Find the watermark coordinate for output pixel (x, y).
    
    Args:
        placement: Single or Tiled.
        watermark_size: (width, height) of the watermark.
        x, y: Output pixel coordinate.
        
    Returns:
        (wx, wy) inside the watermark, or None if the watermark
        does not cover this pixel. Tiled never returns None.
    """
    width, height = watermark_size

    if isinstance(placement, Tiled):
        return x % width, y % height

    if isinstance(placement, Single):
        wx = x - placement.offset_x
        wy = y - placement.offset_y
        if 0 <= wx < width and 0 <= wy < height:
            return wx, wy
        return None

    raise InvalidParameter(f"Unrecognized placement mode: {placement!r}")


def resolve_grid(
        placement: PlacementMode,
        watermark_size: Tuple[int, int],
        base_size: Tuple[int, int]
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Resolve every output pixel at once.
    
    Args:
        placement: Single or Tiled.
        watermark_size: (width, height) of the watermark.
        base_size: (width, height) of the output image.
        
    Returns:
        Tuple of (wx per column, wy per row, covered mask of shape
        (height, width)). Where covered is False the indices are
        clamped into range and must not be used.
    """
    width, height = watermark_size
    xs = np.arange(base_size[0])
    ys = np.arange(base_size[1])

    if isinstance(placement, Tiled):
        covered = np.ones((base_size[1], base_size[0]), dtype=bool)
        return xs % width, ys % height, covered

    if isinstance(placement, Single):
        wx = xs - placement.offset_x
        wy = ys - placement.offset_y
        x_in = (wx >= 0) & (wx < width)
        y_in = (wy >= 0) & (wy < height)
        covered = y_in[:, None] & x_in[None, :]
        return np.clip(wx, 0, width - 1), np.clip(wy, 0, height - 1), covered

    raise InvalidParameter(f"Unrecognized placement mode: {placement!r}")
