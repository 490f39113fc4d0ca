"""
Interactive Prompt Session
==========================
Asks the user for the two images and the blend settings, one question per
line, and turns the answers into a BlendConfig.

Question order:
1. Base image filename, then watermark filename
2. Alpha channel (watermark has alpha) or transparency color (it has not)
3. Opacity percentage
4. Position method, and the position for "single"
5. Output filename

Each answer is parsed by a plain function that raises InvalidParameter,
so a bad answer ends the session with the parser's message.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from blendmark.core.codec import check_output_filename, load_image
from blendmark.core.color import check_weight
from blendmark.core.engine import BlendParameters, check_dimensions
from blendmark.core.errors import InvalidParameter
from blendmark.core.pixels import PixelGrid
from blendmark.core.placement import PlacementMode, Single, Tiled, offset_bounds
from blendmark.core.transparency import (
    AlphaChannel, ColorKey, NoTransparency, TransparencyMode
)
from blendmark.workers import BlendConfig


# ===== Answer parsers =====

def parse_yes_no(answer: str) -> bool:
    """Only "yes" (any case) counts as yes."""
    return answer.strip().lower() == "yes"


def parse_percentage(answer: str) -> int:
    try:
        value = int(answer.strip())
    except ValueError:
        raise InvalidParameter("The transparency percentage isn't an integer number.") from None
    return check_weight(value)


def parse_color_key(answer: str) -> ColorKey:
    """Parse "R G B" into a ColorKey; each channel must be 0-255."""
    parts = answer.split()
    if len(parts) != 3:
        raise InvalidParameter("The transparency color input is invalid.")
    try:
        red, green, blue = (int(p) for p in parts)
    except ValueError:
        raise InvalidParameter("The transparency color input is invalid.") from None
    return ColorKey(red, green, blue)


def parse_placement_method(answer: str) -> str:
    method = answer.strip().lower()
    if method not in ("single", "grid"):
        raise InvalidParameter("The position method input is invalid.")
    return method


def parse_position(answer: str, max_x: int, max_y: int) -> Single:
    """
    Parse "X Y" into a Single placement.
    
    Raises:
        InvalidParameter: If the answer is not two integers, or the point
            is outside [0, max_x] x [0, max_y].
    """
    parts = answer.split()
    if len(parts) != 2:
        raise InvalidParameter("The position input is invalid.")
    try:
        x, y = (int(p) for p in parts)
    except ValueError:
        raise InvalidParameter("The position input is invalid.") from None

    if not (0 <= x <= max_x and 0 <= y <= max_y):
        raise InvalidParameter("The position input is out of range.")
    return Single(x, y)


# ===== Session =====

@dataclass
class GatheredRun:
    """Answers collected by a session, with the images already loaded."""
    config: BlendConfig
    base: PixelGrid
    watermark: PixelGrid


class PromptSession:
    """
    Question/answer front end.
    
    input_func and output_func default to input() and print() and can be
    replaced to drive the session from a script or a test.
    """

    def __init__(
            self,
            input_func: Callable[[], str] = input,
            output_func: Callable[[str], None] = print
    ):
        self._input = input_func
        self._output = output_func

    def ask(self, question: str) -> str:
        self._output(question)
        return self._input()

    def say(self, message: str) -> None:
        self._output(message)

    def ask_transparency(self, watermark: PixelGrid) -> TransparencyMode:
        if watermark.has_alpha:
            use_alpha = parse_yes_no(self.ask("Do you want to use the watermark's Alpha channel?"))
            return AlphaChannel() if use_alpha else NoTransparency()

        if parse_yes_no(self.ask("Do you want to set a transparency color?")):
            return parse_color_key(self.ask("Input a transparency color ([Red] [Green] [Blue]):"))
        return NoTransparency()

    def ask_placement(self, base: PixelGrid, watermark: PixelGrid) -> PlacementMode:
        method = parse_placement_method(self.ask("Choose the position method (single, grid):"))
        if method == "grid":
            return Tiled()

        max_x, max_y = offset_bounds(base.size, watermark.size)
        answer = self.ask(f"Input the watermark position ([x 0-{max_x}] [y 0-{max_y}]):")
        return parse_position(answer, max_x, max_y)

    def gather(self) -> GatheredRun:
        """
        Ask every question and load both images.
        
        Returns:
            GatheredRun ready to hand to a BlendWorker.
            
        Raises:
            WatermarkError: On the first bad answer or unusable image.
        """
        image_path = Path(self.ask("Input the image filename:").strip())
        base = load_image(image_path, role="image")

        watermark_path = Path(self.ask("Input the watermark image filename:").strip())
        watermark = load_image(watermark_path, role="watermark")

        check_dimensions(base, watermark)

        transparency = self.ask_transparency(watermark)
        weight = parse_percentage(
            self.ask("Input the watermark transparency percentage (Integer 0-100):")
        )
        placement = self.ask_placement(base, watermark)

        output_name = self.ask("Input the output image filename (jpg or png extension):").strip()
        check_output_filename(output_name)

        config = BlendConfig(
            image_path=image_path,
            watermark_path=watermark_path,
            params=BlendParameters(
                opacity_weight=weight,
                placement=placement,
                transparency=transparency
            ),
            output_path=Path(output_name)
        )
        return GatheredRun(config=config, base=base, watermark=watermark)
