"""CHIP-8 machine assembly and host-facing interface."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import MEMORY_SIZE, PROGRAM_START, Memory, OutOfBoundsError
from pychip8.cpu import Chip8CPU, Instruction
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONT_START, FONTSET, Display

MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    seed: Optional[int] = None
    rng: Optional[random.Random] = None
    program: Optional[bytes] = None


@dataclass
class Machine:
    """Aggregates the core components of the CHIP-8 interpreter."""

    memory: Memory
    cpu: Chip8CPU
    display: Display
    keypad: Keypad

    def reset(self) -> None:
        """Return to the power-on state: empty program area, font installed."""

        self.memory.clear()
        install_font(self.memory)
        self.display.clear()
        self.keypad.reset()
        self.cpu.reset()

    def load_program(self, data: bytes, offset: int = PROGRAM_START) -> int:
        """Copy ``data`` verbatim into memory at ``offset``.

        Registers and pc are left untouched. Raises :class:`OutOfBoundsError`
        when the image would overlap the reserved area below ``0x200`` or run
        past the end of memory.
        """

        payload = bytes(data)
        if offset < PROGRAM_START or offset + len(payload) > MEMORY_SIZE:
            raise OutOfBoundsError(offset, len(payload))
        self.memory.store_block(offset, payload)
        if debug_enabled("loader"):
            debug_log("loader", "loaded %d bytes at %03x", len(payload), offset)
        return len(payload)

    def cycle(self) -> Instruction:
        """Run one instruction, then decay both timers."""

        instruction = self.cpu.step()
        self.cpu.tick_timers()
        return instruction

    def key_down(self, index: int) -> None:
        self.keypad.press(index)

    def key_up(self, index: int) -> None:
        self.keypad.release(index)

    def framebuffer(self) -> tuple[bool, ...]:
        """Flat, row-major 64x32 snapshot of the screen."""

        return self.display.snapshot()

    def timers(self) -> tuple[int, int]:
        """Return ``(delay_timer, sound_timer)``."""

        state = self.cpu.state
        return state.delay_timer, state.sound_timer

    @property
    def sound_active(self) -> bool:
        return self.cpu.state.sound_timer > 0

    @property
    def waiting_for_key(self) -> bool:
        return self.cpu.waiting_for_key


def install_font(memory: Memory) -> None:
    memory.store_block(FONT_START, FONTSET)


def create_machine(config: MachineConfig | None = None) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    config = config or MachineConfig()

    memory = Memory(MEMORY_SIZE)
    install_font(memory)

    display = Display()
    keypad = Keypad()

    rng = config.rng or random.Random(config.seed)
    cpu = Chip8CPU(memory, display, keypad, rng=rng)
    cpu.reset()

    machine = Machine(memory=memory, cpu=cpu, display=display, keypad=keypad)
    if config.program is not None:
        machine.load_program(config.program)
    return machine
