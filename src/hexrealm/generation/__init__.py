"""Procedural realm generation package.

This package implements noise-based terrain classification for hex realms,
including highland formations, terrain clustering and placement of holdings,
landmarks, myths and barriers.
"""

from .config import GenerationOptions, HexShape, ShapeDescriptor, SquareShape, load_options
from .generator import GenerationResult, generate, generate_and_save_realm
from .presets import TERRAIN_TEMPLATES, apply_preset, list_presets
from .validation import OptionError, validate_options

__all__ = [
    "GenerationOptions",
    "GenerationResult",
    "HexShape",
    "OptionError",
    "ShapeDescriptor",
    "SquareShape",
    "TERRAIN_TEMPLATES",
    "apply_preset",
    "generate",
    "generate_and_save_realm",
    "list_presets",
    "load_options",
    "validate_options",
]
