"""
BlendMark - Main Entry Point
============================
Blend a watermark image into a base image from the command line.

Usage:
    python main.py [-v | -vv]

Architecture:
    - Model: blendmark/core/ (pure algorithms and image I/O)
    - View: blendmark/ui/ (interactive prompts)
    - Controller: This file (wires the prompts to the worker)

Features:
    - Alpha channel or color-key transparency
    - Opacity from 0 to 100 percent
    - Single position or tiled grid placement
    - jpg or png output
"""

import argparse
import logging
import sys
from typing import List, Optional

from blendmark import __app_name__, __version__
from blendmark.core import WatermarkError
from blendmark.ui import PromptSession
from blendmark.workers import BlendWorker, BlendResult

logger = logging.getLogger(__name__)


class BlendController:
    """
    Controller class that connects the prompt session to the worker.
    
    Responsibilities:
    - Run the prompt session and collect a validated configuration
    - Run the worker on the loaded images
    - Report the outcome to the user
    """

    def __init__(self, session: PromptSession):
        self.session = session
        self.last_result: Optional[BlendResult] = None

    def run(self) -> bool:
        """
        Ask, blend and save.
        
        Returns:
            True if the output image was written.
        """
        try:
            gathered = self.session.gather()
        except WatermarkError as e:
            self.session.say(str(e))
            return False

        worker = BlendWorker(gathered.config)
        result = worker.run(base=gathered.base, watermark=gathered.watermark)
        self.last_result = result

        if not result.success:
            self.session.say(result.error_message)
            return False

        self.session.say(f"The watermarked image {gathered.config.output_path} has been created.")
        return True


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="blendmark",
        description="Blend a watermark image into a base image."
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress (-v) or debug details (-vv) to stderr"
    )
    parser.add_argument("--version", action="version", version=f"{__app_name__} {__version__}")
    return parser.parse_args(argv)


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s:%(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    """Application entry point."""
    args = parse_args(argv)
    configure_logging(args.verbose)

    controller = BlendController(PromptSession())
    try:
        ok = controller.run()
    except (EOFError, KeyboardInterrupt):
        print("\nNo more input, nothing was written.")
        return 1

    logger.debug("Run finished, success=%s", ok)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
