"""Tests for the raw ROM loader."""

from __future__ import annotations

import io

import pytest

from pychip8.bus import OutOfBoundsError
from pychip8.loader import RomFormatError, load_rom, load_rom_from_path
from pychip8.system import MAX_PROGRAM_SIZE, create_machine


def test_load_rom_from_stream() -> None:
    machine = create_machine()

    image = load_rom(io.BytesIO(b"\x00\xE0\x12\x00"), machine, name="demo")

    assert image.name == "demo"
    assert image.start == 0x200
    assert image.length == 4
    assert image.end == 0x203
    assert machine.memory.load_block(0x200, 4) == b"\x00\xE0\x12\x00"


def test_load_rom_from_path(tmp_path) -> None:
    rom_path = tmp_path / "pong.ch8"
    rom_path.write_bytes(bytes(range(16)))
    machine = create_machine()

    image = load_rom_from_path(rom_path, machine)

    assert image.name == "pong"
    assert image.length == 16
    assert machine.memory.load_block(0x200, 16) == bytes(range(16))


def test_empty_rom_rejected() -> None:
    machine = create_machine()

    with pytest.raises(RomFormatError):
        load_rom(io.BytesIO(b""), machine)


def test_oversize_rom_rejected() -> None:
    machine = create_machine()

    with pytest.raises(OutOfBoundsError):
        load_rom(io.BytesIO(bytes([0xAA]) * (MAX_PROGRAM_SIZE + 1)), machine)
    assert machine.memory.load8(0x200) == 0


def test_loaded_rom_executes() -> None:
    machine = create_machine()
    load_rom(io.BytesIO(b"\x6A\x2A\x7A\x01"), machine)

    machine.cycle()
    machine.cycle()

    assert machine.cpu.state.v[0xA] == 0x2B
