"""Built-in hexadecimal glyph font."""

from __future__ import annotations

FONT_START = 0x000
GLYPH_BYTES = 5
GLYPH_COUNT = 16

FONTSET: bytes = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)

FONT_END = FONT_START + len(FONTSET) - 1


def glyph_address(digit: int) -> int:
    """Return the address of the glyph for the low nibble of ``digit``."""

    return FONT_START + GLYPH_BYTES * (digit & 0xF)


def glyph(digit: int) -> bytes:
    offset = GLYPH_BYTES * (digit & 0xF)
    return FONTSET[offset : offset + GLYPH_BYTES]
