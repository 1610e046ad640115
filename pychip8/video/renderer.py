"""Framebuffer to RGB conversion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from .palette import MONOCHROME, RGBColor, validate_palette


@dataclass
class RenderResult:
    """Packed RGB pixels for one rendered frame."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        return (self.pixels[offset], self.pixels[offset + 1], self.pixels[offset + 2])

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build a surface") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale a 64x32 on/off framebuffer into an RGB image."""

    def __init__(
        self,
        palette: Sequence[RGBColor] = MONOCHROME,
        *,
        width: int = DISPLAY_WIDTH,
        height: int = DISPLAY_HEIGHT,
    ) -> None:
        self._background, self._foreground = validate_palette(palette)
        self._width = width
        self._height = height

    def render(self, framebuffer: Sequence[bool], *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")
        if len(framebuffer) != self._width * self._height:
            raise ValueError(
                f"framebuffer must contain {self._width * self._height} cells, got {len(framebuffer)}"
            )

        off = bytes(self._background) * scale
        on = bytes(self._foreground) * scale
        lines: list[bytes] = []
        for y in range(self._height):
            start = y * self._width
            row = b"".join(on if cell else off for cell in framebuffer[start : start + self._width])
            lines.extend([row] * scale)
        return RenderResult(self._width * scale, self._height * scale, b"".join(lines))
