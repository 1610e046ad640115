"""Raw ROM loader for CHIP-8 program images.

CHIP-8 programs carry no header: the file contents are copied byte for byte
into memory starting at the program entry point.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.bus import PROGRAM_START
from pychip8.system import MAX_PROGRAM_SIZE, Machine
from pychip8.utils import debug_enabled, debug_log

from .program import RomImage


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be used."""


def load_rom(
    stream: BinaryIO,
    machine: Machine,
    *,
    offset: int = PROGRAM_START,
    name: str = "",
) -> RomImage:
    """Load a raw ROM from ``stream`` into ``machine`` and return metadata."""

    # one byte past the limit is enough to detect an oversize image
    data = stream.read(MAX_PROGRAM_SIZE + 1)
    if not data:
        raise RomFormatError("ROM image is empty")
    length = machine.load_program(data, offset)
    if debug_enabled("loader"):
        debug_log("loader", "rom=%s start=%03x length=%d", name or "<stream>", offset, length)
    return RomImage(name=name, start=offset, length=length)


def load_rom_from_path(path: Path, machine: Machine, *, offset: int = PROGRAM_START) -> RomImage:
    """Load a raw ROM from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, machine, offset=offset, name=path.stem)
