"""Chip8App ROM loading and frame stepping."""

from __future__ import annotations

import pytest

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.utils import reload_categories


def test_app_creates_machine_with_rom(tmp_path) -> None:
    rom_path = tmp_path / "test.ch8"
    rom_path.write_bytes(b"\x60\x01\x70\x01\x12\x02")

    app = Chip8App(AppConfig(rom_path=rom_path, cycles_per_frame=5))
    machine = app._create_machine(rom_path)

    executed = app.step_frame(machine)

    assert executed == 5
    assert machine.cpu.state.v[0] == 3


def test_app_rejects_oversize_rom(tmp_path) -> None:
    rom_path = tmp_path / "huge.ch8"
    rom_path.write_bytes(bytes(0x1000))

    app = Chip8App(AppConfig(rom_path=rom_path))

    with pytest.raises(RuntimeError, match="cannot load ROM"):
        app._create_machine(rom_path)


def test_step_frame_reports_fault(tmp_path) -> None:
    rom_path = tmp_path / "ret.ch8"
    rom_path.write_bytes(b"\x00\xEE")

    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="machine fault at pc=0x200"):
        app.step_frame(machine)


def test_key_events_require_machine(tmp_path) -> None:
    rom_path = tmp_path / "keys.ch8"
    rom_path.write_bytes(b"\xF3\x0A")
    app = Chip8App(AppConfig(rom_path=rom_path))
    app._handle_key_event("w", pressed=True)

    app._machine = app._create_machine(rom_path)
    app._handle_key_event("w", pressed=True)
    app.step_frame(app._machine)

    assert app._machine.cpu.state.v[3] == 0x5
    app._handle_key_event("w", pressed=False)
    assert app._machine.keypad.first_pressed() is None


def test_invalid_config_rejected() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(scale=0))
    with pytest.raises(ValueError):
        Chip8App(AppConfig(cycles_per_frame=0))


def test_fault_is_recorded_in_trace(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("CHIP8_DEBUG", "trace")
    reload_categories()
    try:
        rom_path = tmp_path / "fault.ch8"
        rom_path.write_bytes(b"\x60\x01\x00\xEE")
        app = Chip8App(AppConfig(rom_path=rom_path))
        machine = app._create_machine(rom_path)

        with pytest.raises(RuntimeError):
            app.step_frame(machine)

        entry = app._trace_recorder.last_entry()
        assert entry is not None
        assert entry.pc == 0x202
        assert entry.word == 0x00EE
        assert entry.mnemonic == "RET"
        assert entry.note == "fault"
        assert len(app._trace_recorder) == 2
    finally:
        monkeypatch.delenv("CHIP8_DEBUG")
        reload_categories()
