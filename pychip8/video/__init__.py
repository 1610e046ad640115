"""Video helpers for the CHIP-8 interpreter."""

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH, Display
from .font import FONT_START, FONTSET, GLYPH_BYTES, glyph_address
from .palette import MONOCHROME, PALETTES, validate_palette
from .renderer import RenderResult, Renderer

__all__ = [
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",
    "FONTSET",
    "FONT_START",
    "GLYPH_BYTES",
    "glyph_address",
    "MONOCHROME",
    "PALETTES",
    "validate_palette",
    "RenderResult",
    "Renderer",
]
