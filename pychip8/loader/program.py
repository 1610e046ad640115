"""Program metadata structures for CHIP-8 loaders."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RomImage:
    """Describes a raw program image written into memory."""

    name: str = ""
    start: int = 0x200
    length: int = 0

    @property
    def end(self) -> int:
        return self.start + self.length - 1
