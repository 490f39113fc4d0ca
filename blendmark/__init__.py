"""
BlendMark Application Package
=============================
A command-line tool that blends a watermark image into a base image.

Modules:
    - core: Pure blending logic and image I/O (no front-end dependencies)
    - workers: One load -> blend -> save run
    - ui: Interactive prompt front end

Usage:
    from blendmark.core import BlendEngine, BlendParameters, Single, ColorKey
    from blendmark.workers import BlendWorker, BlendConfig
    from blendmark.ui import PromptSession
"""

__version__ = "1.0.0"
__author__ = "NightCat"
__app_name__ = "BlendMark"

# Core exports
from .core import (
    BlendEngine, BlendParameters, Pixel, PixelGrid,
    Single, Tiled, AlphaChannel, ColorKey, NoTransparency,
    load_image, save_image, WatermarkError
)
# Worker exports
from .workers import BlendWorker, BlendConfig, BlendResult
# UI exports
from .ui import PromptSession

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__app_name__",

    # Core
    "BlendEngine",
    "BlendParameters",
    "Pixel",
    "PixelGrid",
    "Single",
    "Tiled",
    "AlphaChannel",
    "ColorKey",
    "NoTransparency",
    "load_image",
    "save_image",
    "WatermarkError",

    # Workers
    "BlendWorker",
    "BlendConfig",
    "BlendResult",

    # UI
    "PromptSession",
]
