"""CHIP-8 virtual machine.

The interpreter core lives in :mod:`pychip8.cpu` and is assembled with its
memory, framebuffer and keypad by :mod:`pychip8.system`. The loader, video and
ui packages provide the host side: ROM files, RGB frames and a pygame loop.
"""

from __future__ import annotations

from . import bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
