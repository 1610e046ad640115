"""CHIP-8 interpreter core: fetch, decode, execute and timer decay."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

from pychip8.bus import PROGRAM_START, Memory, OutOfBoundsError
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video.display import Display
from pychip8.video.font import glyph_address

from .opcodes import DECODE_TABLE, DecodeTable, Instruction, decode


class CPUError(Exception):
    """Base error for interpreter faults."""


class StackOverflowError(CPUError):
    """Raised when a call is made with all stack slots in use."""


class StackUnderflowError(CPUError):
    """Raised when a return is executed with an empty stack."""


REGISTER_COUNT = 16
STACK_DEPTH = 16
FLAG_REGISTER = 0xF


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    v: list[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)
    i: int = 0x0000
    pc: int = PROGRAM_START
    sp: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            list(self.v),
            self.i,
            self.pc,
            self.sp,
            list(self.stack),
            self.delay_timer,
            self.sound_timer,
        )


@dataclass
class Chip8CPU:
    """Executes one instruction per :meth:`step`.

    Every handler owns the program counter update for its instruction, so
    exactly one pc policy applies per step: +2 for ordinary instructions,
    +4 for a taken skip, a direct assignment for jumps, calls and returns,
    and no change at all while ``Fx0A`` waits for a key.
    """

    memory: Memory
    display: Display
    keypad: Keypad
    rng: random.Random = field(default_factory=random.Random)
    decode_table: DecodeTable = field(default=DECODE_TABLE)

    state: CPUState = field(default_factory=CPUState)
    instruction_count: int = 0
    waiting_for_key: bool = False

    def reset(self) -> None:
        """Zero the register file and point pc at the program entry."""

        self.state = CPUState()
        self.instruction_count = 0
        self.waiting_for_key = False

    def fetch(self) -> int:
        return self.memory.load16(self.state.pc)

    def step(self) -> Instruction:
        """Execute a single instruction and return it."""

        pc_before = self.state.pc
        instruction = decode(self.fetch(), self.decode_table)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%03x op=%04x %s", pc_before, instruction.word, instruction.mnemonic)

        if instruction.handler is None:
            self._advance()
        else:
            handler = getattr(self, instruction.handler, None)
            if handler is None:
                raise CPUError(f"handler '{instruction.handler}' not implemented")
            handler(instruction)

        self.instruction_count += 1
        return instruction

    def tick_timers(self) -> None:
        """Count both timers down by one, stopping at zero."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    # ------------------------------------------------------------------
    # 0nnn / flow control

    def op_cls(self, _: Instruction) -> None:
        self.display.clear()
        self._advance()

    def op_ret(self, _: Instruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(f"return with empty stack at pc={state.pc:#05x}")
        state.sp -= 1
        state.pc = (state.stack[state.sp] + 2) & 0xFFFF

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        state = self.state
        if state.sp >= STACK_DEPTH:
            raise StackOverflowError(f"call depth exceeds {STACK_DEPTH} at pc={state.pc:#05x}")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn + self.state.v[0]

    # ------------------------------------------------------------------
    # Conditional skips

    def op_se_byte(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] == instruction.kk)

    def op_sne_byte(self, instruction: Instruction) -> None:
        self._skip_if(self.state.v[instruction.x] != instruction.kk)

    def op_se_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] == v[instruction.y])

    def op_sne_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        self._skip_if(v[instruction.x] != v[instruction.y])

    def op_skp(self, instruction: Instruction) -> None:
        self._skip_if(self.keypad.is_pressed(self.state.v[instruction.x]))

    def op_sknp(self, instruction: Instruction) -> None:
        self._skip_if(not self.keypad.is_pressed(self.state.v[instruction.x]))

    # ------------------------------------------------------------------
    # Register loads and arithmetic

    def op_ld_byte(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = instruction.kk
        self._advance()

    def op_add_byte(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = (v[instruction.x] + instruction.kk) & 0xFF
        self._advance()

    def op_ld_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] = v[instruction.y]
        self._advance()

    def op_or(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] |= v[instruction.y]
        self._advance()

    def op_and(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] &= v[instruction.y]
        self._advance()

    def op_xor(self, instruction: Instruction) -> None:
        v = self.state.v
        v[instruction.x] ^= v[instruction.y]
        self._advance()

    def op_add_reg(self, instruction: Instruction) -> None:
        v = self.state.v
        total = v[instruction.x] + v[instruction.y]
        self._set_with_flag(instruction.x, total & 0xFF, total > 0xFF)

    def op_sub(self, instruction: Instruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        self._set_with_flag(instruction.x, (x - y) & 0xFF, x >= y)

    def op_subn(self, instruction: Instruction) -> None:
        v = self.state.v
        x, y = v[instruction.x], v[instruction.y]
        self._set_with_flag(instruction.x, (y - x) & 0xFF, y >= x)

    def op_shr(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        self._set_with_flag(instruction.x, value >> 1, value & 0x01)

    def op_shl(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        self._set_with_flag(instruction.x, (value << 1) & 0xFF, (value >> 7) & 0x01)

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.rng.randrange(0x100) & instruction.kk
        self._advance()

    # ------------------------------------------------------------------
    # Index register, memory and display

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.i = instruction.nnn
        self._advance()

    def op_add_i(self, instruction: Instruction) -> None:
        state = self.state
        state.i = (state.i + state.v[instruction.x]) & 0xFFFF
        self._advance()

    def op_ld_f(self, instruction: Instruction) -> None:
        self.state.i = glyph_address(self.state.v[instruction.x])
        self._advance()

    def op_ld_b(self, instruction: Instruction) -> None:
        value = self.state.v[instruction.x]
        digits = (value // 100, (value // 10) % 10, value % 10)
        self._store_program_block(self.state.i, digits)
        self._advance()

    def op_ld_i_vx(self, instruction: Instruction) -> None:
        state = self.state
        self._store_program_block(state.i, state.v[: instruction.x + 1])
        self._advance()

    def op_ld_vx_i(self, instruction: Instruction) -> None:
        state = self.state
        values = self.memory.load_block(state.i, instruction.x + 1)
        state.v[: instruction.x + 1] = list(values)
        self._advance()

    def op_drw(self, instruction: Instruction) -> None:
        state = self.state
        rows = self.memory.load_block(state.i, instruction.n)
        collision = self.display.draw_sprite(state.v[instruction.x], state.v[instruction.y], rows)
        state.v[FLAG_REGISTER] = 1 if collision else 0
        self._advance()

    # ------------------------------------------------------------------
    # Timers and keypad

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.v[instruction.x] = self.state.delay_timer
        self._advance()

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.v[instruction.x]
        self._advance()

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.v[instruction.x]
        self._advance()

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # pc stays put so the same instruction runs again next cycle
            if not self.waiting_for_key and debug_enabled("input"):
                debug_log("input", "waiting for key at pc=%03x", self.state.pc)
            self.waiting_for_key = True
            return
        self.waiting_for_key = False
        self.state.v[instruction.x] = key
        self._advance()

    # ------------------------------------------------------------------
    # Helpers

    def _advance(self, amount: int = 2) -> None:
        self.state.pc = (self.state.pc + amount) & 0xFFFF

    def _store_program_block(self, address: int, values: Sequence[int]) -> None:
        # the font and reserved area below 0x200 are read-only to programs
        if address < PROGRAM_START:
            raise OutOfBoundsError(address, len(values))
        self.memory.store_block(address, values)

    def _skip_if(self, condition: bool) -> None:
        self._advance(4 if condition else 2)

    def _set_with_flag(self, register: int, value: int, flag: int | bool) -> None:
        # VF is written last so the flag wins when register == VF
        v = self.state.v
        v[register] = value & 0xFF
        v[FLAG_REGISTER] = 1 if flag else 0
        self._advance()
