"""
Blend Worker - One Watermarking Run
===================================
Runs the whole pipeline for one base image and one watermark.

Workflow:
1. Load the base image and the watermark
2. Check the watermark fits inside the base image
3. Blend with the configured parameters
4. Save the result (24-bit RGB, jpg or png)
5. Return a BlendResult; failures never reach step 4
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from blendmark.core.codec import check_output_filename, load_image, save_image
from blendmark.core.engine import BlendEngine, BlendParameters
from blendmark.core.errors import WatermarkError
from blendmark.core.pixels import PixelGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlendConfig:
    """Complete configuration for one blend run."""
    image_path: Path
    watermark_path: Path
    params: BlendParameters
    output_path: Path


@dataclass
class BlendResult:
    """Result of a blend run."""
    source_path: Path
    output_path: Optional[Path] = None
    size: Optional[Tuple[int, int]] = None
    success: bool = False
    error_message: str = ""


class BlendWorker:
    """
    Runs a BlendConfig from files on disk to a saved output file.
    
    Images can also be handed in already loaded, which is how the
    interactive front end uses it after asking its questions.
    """

    def __init__(self, config: BlendConfig, engine: Optional[BlendEngine] = None):
        self.config = config
        self._engine = engine or BlendEngine()

    def run(
            self,
            base: Optional[PixelGrid] = None,
            watermark: Optional[PixelGrid] = None
    ) -> BlendResult:
        """
        Execute the run.
        
        Args:
            base: Preloaded base image, or None to load config.image_path.
            watermark: Preloaded watermark, or None to load config.watermark_path.
            
        Returns:
            BlendResult describing the outcome.
        """
        result = BlendResult(source_path=Path(self.config.image_path))

        try:
            output_format = check_output_filename(self.config.output_path)

            if base is None:
                base = load_image(self.config.image_path, role="image")
            if watermark is None:
                watermark = load_image(self.config.watermark_path, role="watermark")

            output = self._engine.run(base, watermark, self.config.params)

            result.output_path = save_image(output, self.config.output_path, output_format)
            result.size = output.size
            result.success = True
            logger.info("Wrote %s (%dx%d)", result.output_path, *output.size)

        except WatermarkError as e:
            result.success = False
            result.error_message = str(e)
            logger.info("Blend run failed: %s", e)

        except OSError as e:
            result.success = False
            result.output_path = None
            result.error_message = f"Could not write {self.config.output_path}: {e}"
            logger.exception("Saving %s failed", self.config.output_path)

        return result
