"""
UI Module - Interactive Front End
=================================
Collects the blend settings from the user and validates every answer.
"""

from .prompts import (
    PromptSession,
    GatheredRun,
    parse_yes_no,
    parse_percentage,
    parse_color_key,
    parse_placement_method,
    parse_position,
)

__all__ = [
    "PromptSession",
    "GatheredRun",
    "parse_yes_no",
    "parse_percentage",
    "parse_color_key",
    "parse_placement_method",
    "parse_position",
]
