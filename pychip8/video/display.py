"""Monochrome 64x32 framebuffer."""

from __future__ import annotations

from typing import Iterable, Iterator

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


class Display:
    """Row-major grid of on/off cells mutated only by XOR sprite draws."""

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self._revision = 0

    @property
    def revision(self) -> int:
        """Counter bumped on every mutation."""

        return self._revision

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))
        self._revision += 1

    def get_pixel(self, x: int, y: int) -> bool:
        return bool(self._cells[self._index(x, y)])

    def toggle(self, x: int, y: int) -> bool:
        """XOR one cell (coordinates wrap); return True if it was switched off."""

        index = self._index(x % self.width, y % self.height)
        was_on = self._cells[index] != 0
        self._cells[index] ^= 1
        self._revision += 1
        return was_on

    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """XOR an 8-pixel-wide sprite at ``(x, y)``.

        Every coordinate wraps around the screen edges. Returns True when at
        least one lit cell was turned off by this draw.
        """

        origin_x = x % self.width
        origin_y = y % self.height
        collision = False
        for row_offset, bits in enumerate(rows):
            py = (origin_y + row_offset) % self.height
            for column in range(SPRITE_WIDTH):
                if not bits & (0x80 >> column):
                    continue
                px = (origin_x + column) % self.width
                index = py * self.width + px
                if self._cells[index]:
                    collision = True
                self._cells[index] ^= 1
        self._revision += 1
        return collision

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(bool(cell) for cell in self._cells)

    def rows(self) -> Iterator[tuple[bool, ...]]:
        for y in range(self.height):
            start = y * self.width
            yield tuple(bool(cell) for cell in self._cells[start : start + self.width])

    def lit_count(self) -> int:
        return sum(self._cells)

    def _index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return y * self.width + x
