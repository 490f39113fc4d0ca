"""
Image Codec
===========
Reads and writes PixelGrids with PIL/Pillow.

Technical Notes:
- Only 3-component images are accepted: RGB (24-bit) or RGBA (32-bit)
- Output is always written as 24-bit RGB, alpha is never preserved
- Output format is "jpg" or "png", taken from the file extension
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageNotFound, InvalidParameter, UnsupportedFormat
from .pixels import PixelGrid

logger = logging.getLogger(__name__)

# Pillow mode -> bits per pixel, for modes with 3 color components
SUPPORTED_MODES = {"RGB": 24, "RGBA": 32}

# Pillow modes with 3 color components but an unsupported depth
THREE_COMPONENT_MODES = {"RGB", "RGBA", "RGBX", "RGBa", "P", "PA", "YCbCr", "LAB", "HSV"}

OUTPUT_FORMATS = {"jpg": "JPEG", "png": "PNG"}


def check_output_filename(name: Union[str, Path]) -> str:
    """
    Validate an output filename and return its format.
    
    Returns:
        "jpg" or "png".
        
    Raises:
        InvalidParameter: If the name does not end in .jpg or .png.
    """
    suffix = str(name)[-4:]
    if suffix not in (".jpg", ".png"):
        raise InvalidParameter('The output file extension isn\'t "jpg" or "png".')
    return suffix[1:]


def _has_wide_channels(img: Image.Image) -> bool:
    """True if the decoder unpacks more than 8 bits per channel."""
    for tile in img.tile:
        args = tile[3]
        rawmode = args[0] if isinstance(args, tuple) else args
        if isinstance(rawmode, str) and ";16" in rawmode:
            return True
    return False


def load_image(path: Union[str, Path], role: str = "image") -> PixelGrid:
    """
    Load an image file into a PixelGrid.
    
    Args:
        path: Path to the image file.
        role: Name used in error messages ("image" or "watermark").
        
    Returns:
        PixelGrid with 3 (RGB) or 4 (RGBA) channels.
        
    Raises:
        ImageNotFound: If the file does not exist.
        UnsupportedFormat: If the file cannot be decoded or is not
            3-component 24/32-bit.
    """
    path = Path(path)
    if not path.is_file():
        raise ImageNotFound(f"The file {path} doesn't exist.")

    try:
        with Image.open(path) as img:
            mode = img.mode
            if mode not in THREE_COMPONENT_MODES:
                raise UnsupportedFormat(f"The number of {role} color components isn't 3.")
            # Pillow reports 48/64-bit images as RGB/RGBA, the rawmode keeps the depth
            if mode not in SUPPORTED_MODES or _has_wide_channels(img):
                raise UnsupportedFormat(f"The {role} isn't 24 or 32-bit.")
            img.load()
            data = np.asarray(img, dtype=np.uint8)
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UnsupportedFormat(f"The {role} file {path} is not a readable image.") from e

    grid = PixelGrid(data)
    logger.debug("Loaded %s %s: %r", role, path, grid)
    return grid


def save_image(image: PixelGrid, path: Union[str, Path], format: Optional[str] = None) -> Path:
    """
    Save a PixelGrid as a 24-bit RGB file.
    
    Args:
        image: Image to save (alpha, if any, is dropped).
        path: Destination path.
        format: "jpg" or "png". If None, taken from the extension.
        
    Returns:
        The path written.
        
    Raises:
        InvalidParameter: If the format is not jpg or png.
    """
    path = Path(path)
    if format is None:
        format = check_output_filename(path)
    if format not in OUTPUT_FORMATS:
        raise InvalidParameter('The output file extension isn\'t "jpg" or "png".')

    path.parent.mkdir(parents=True, exist_ok=True)

    rgb = np.ascontiguousarray(image.rgb)
    with Image.fromarray(rgb) as out:
        if format == "jpg":
            out.save(path, format=OUTPUT_FORMATS[format], quality=95)
        else:
            out.save(path, format=OUTPUT_FORMATS[format])

    logger.debug("Saved %r to %s", image, path)
    return path
