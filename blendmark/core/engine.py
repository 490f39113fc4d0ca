"""
Blend Engine
============
Produces the watermarked image from a base image, a watermark and a
BlendParameters value.

For every output pixel (x, y):
1. Take the base RGB (base alpha is ignored)
2. Resolve the watermark coordinate from the placement mode
3. Not covered -> copy the base pixel
4. Covered -> blend if the watermark pixel is opaque under the
   transparency mode, otherwise copy the base pixel

Pixels are independent, so run() evaluates all of them at once with numpy.
blend_pixel() is the same algorithm for a single coordinate.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from . import placement as placement_mod
from . import transparency as transparency_mod
from .color import blend, blend_arrays, check_weight
from .errors import DimensionMismatch, InvalidParameter
from .pixels import Pixel, PixelGrid
from .placement import PlacementMode, Single, Tiled
from .transparency import AlphaChannel, ColorKey, NoTransparency, TransparencyMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlendParameters:
    """Everything that controls a blend besides the two images."""
    opacity_weight: int
    placement: PlacementMode = field(default_factory=Tiled)
    transparency: TransparencyMode = field(default_factory=NoTransparency)

    def __post_init__(self):
        check_weight(self.opacity_weight)
        if not isinstance(self.placement, (Single, Tiled)):
            raise InvalidParameter(f"Unrecognized placement mode: {self.placement!r}")
        if not isinstance(self.transparency, (AlphaChannel, ColorKey, NoTransparency)):
            raise InvalidParameter(f"Unrecognized transparency mode: {self.transparency!r}")


def check_dimensions(base: PixelGrid, watermark: PixelGrid) -> None:
    """
    Raises:
        DimensionMismatch: If the watermark is larger than the base in either axis.
    """
    if base.width < watermark.width or base.height < watermark.height:
        raise DimensionMismatch("The watermark's dimensions are larger.")


class BlendEngine:
    """Blends a watermark into a base image."""

    def blend_pixel(
            self,
            base: PixelGrid,
            watermark: PixelGrid,
            params: BlendParameters,
            x: int,
            y: int
    ) -> Pixel:
        """
        Compute a single output pixel.
        
        Args:
            base: Base image.
            watermark: Watermark image.
            params: Blend parameters.
            x, y: Output coordinate.
            
        Returns:
            Opaque output Pixel.
        """
        base_color = Pixel(*base.pixel(x, y).rgb)

        coord = placement_mod.resolve(params.placement, watermark.size, x, y)
        if coord is None:
            return base_color

        watermark_color = watermark.pixel(*coord)
        if transparency_mod.is_opaque_at(params.transparency, watermark_color):
            return blend(params.opacity_weight, watermark_color, base_color)
        return base_color

    def run(self, base: PixelGrid, watermark: PixelGrid, params: BlendParameters) -> PixelGrid:
        """
        Blend the whole image.
        
        Args:
            base: Base image (24 or 32-bit).
            watermark: Watermark image (24 or 32-bit), not larger than base.
            params: Blend parameters.
            
        Returns:
            New 24-bit RGB PixelGrid the size of the base image.
            
        Raises:
            DimensionMismatch: If the watermark is larger than the base.
            InvalidParameter: If the parameters are out of range.
        """
        check_dimensions(base, watermark)
        placement_mod.check_offset_bounds(params.placement, base.size, watermark.size)
        weight = check_weight(params.opacity_weight)

        logger.info(
            "Blending %dx%d watermark onto %dx%d image (weight=%d, placement=%s, transparency=%s)",
            watermark.width, watermark.height, base.width, base.height,
            weight, params.placement, params.transparency
        )

        wx, wy, covered = placement_mod.resolve_grid(
            params.placement, watermark.size, base.size
        )

        # Watermark pixels laid out on the output canvas
        rows = wy[:, None]
        cols = wx[None, :]
        wm_rgb = watermark.rgb[rows, cols]
        wm_alpha = watermark.alpha[rows, cols]

        opaque = transparency_mod.opacity_mask(params.transparency, wm_rgb, wm_alpha)
        contributes = covered & opaque

        base_rgb = base.rgb
        blended = blend_arrays(weight, wm_rgb, base_rgb)
        output = np.where(contributes[:, :, None], blended, base_rgb)

        logger.debug("%d of %d pixels blended", int(contributes.sum()), contributes.size)
        return PixelGrid(output)
