"""Opcode metadata and instruction decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Final, Iterable, List, Sequence


class Opcode(Enum):
    """Every instruction understood by the interpreter."""

    CLS = auto()
    RET = auto()
    JP = auto()
    CALL = auto()
    SE_BYTE = auto()
    SNE_BYTE = auto()
    SE_REG = auto()
    LD_BYTE = auto()
    ADD_BYTE = auto()
    LD_REG = auto()
    OR = auto()
    AND = auto()
    XOR = auto()
    ADD_REG = auto()
    SUB = auto()
    SHR = auto()
    SUBN = auto()
    SHL = auto()
    SNE_REG = auto()
    LD_I = auto()
    JP_V0 = auto()
    RND = auto()
    DRW = auto()
    SKP = auto()
    SKNP = auto()
    LD_VX_DT = auto()
    LD_VX_K = auto()
    LD_DT_VX = auto()
    LD_ST_VX = auto()
    ADD_I = auto()
    LD_F = auto()
    LD_B = auto()
    LD_I_VX = auto()
    LD_VX_I = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class InstructionSpec:
    """Pattern describing one opcode: ``word & mask == pattern``."""

    opcode: Opcode
    mnemonic: str
    mask: int
    pattern: int
    handler: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF:
            raise ValueError(f"mask out of range: {self.mask:#x}")
        if self.pattern & ~self.mask:
            raise ValueError(f"pattern {self.pattern:#06x} has bits outside mask {self.mask:#06x}")

    def matches(self, word: int) -> bool:
        return (word & self.mask) == self.pattern


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word with its operand fields."""

    word: int
    opcode: Opcode
    mnemonic: str
    handler: str | None

    @property
    def nibbles(self) -> tuple[int, int, int, int]:
        return (
            (self.word >> 12) & 0xF,
            (self.word >> 8) & 0xF,
            (self.word >> 4) & 0xF,
            self.word & 0xF,
        )

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def kk(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF

    def __str__(self) -> str:
        return f"{self.word:04X} {self.mnemonic}"


_FAMILY_MASK: Final[int] = 0xF000
_XY_MASK: Final[int] = 0xF00F
_X_MASK: Final[int] = 0xF0FF


DEFAULT_SPECS: Sequence[InstructionSpec] = (
    InstructionSpec(Opcode.CLS, "CLS", 0xFFFF, 0x00E0, "op_cls"),
    InstructionSpec(Opcode.RET, "RET", 0xFFFF, 0x00EE, "op_ret"),
    InstructionSpec(Opcode.JP, "JP", _FAMILY_MASK, 0x1000, "op_jp"),
    InstructionSpec(Opcode.CALL, "CALL", _FAMILY_MASK, 0x2000, "op_call"),
    InstructionSpec(Opcode.SE_BYTE, "SE", _FAMILY_MASK, 0x3000, "op_se_byte"),
    InstructionSpec(Opcode.SNE_BYTE, "SNE", _FAMILY_MASK, 0x4000, "op_sne_byte"),
    InstructionSpec(Opcode.SE_REG, "SE", _XY_MASK, 0x5000, "op_se_reg"),
    InstructionSpec(Opcode.LD_BYTE, "LD", _FAMILY_MASK, 0x6000, "op_ld_byte"),
    InstructionSpec(Opcode.ADD_BYTE, "ADD", _FAMILY_MASK, 0x7000, "op_add_byte"),
    # 8xyN arithmetic/logic family
    InstructionSpec(Opcode.LD_REG, "LD", _XY_MASK, 0x8000, "op_ld_reg"),
    InstructionSpec(Opcode.OR, "OR", _XY_MASK, 0x8001, "op_or"),
    InstructionSpec(Opcode.AND, "AND", _XY_MASK, 0x8002, "op_and"),
    InstructionSpec(Opcode.XOR, "XOR", _XY_MASK, 0x8003, "op_xor"),
    InstructionSpec(Opcode.ADD_REG, "ADD", _XY_MASK, 0x8004, "op_add_reg"),
    InstructionSpec(Opcode.SUB, "SUB", _XY_MASK, 0x8005, "op_sub"),
    InstructionSpec(Opcode.SHR, "SHR", _XY_MASK, 0x8006, "op_shr"),
    InstructionSpec(Opcode.SUBN, "SUBN", _XY_MASK, 0x8007, "op_subn"),
    InstructionSpec(Opcode.SHL, "SHL", _XY_MASK, 0x800E, "op_shl"),
    InstructionSpec(Opcode.SNE_REG, "SNE", _XY_MASK, 0x9000, "op_sne_reg"),
    InstructionSpec(Opcode.LD_I, "LD", _FAMILY_MASK, 0xA000, "op_ld_i"),
    InstructionSpec(Opcode.JP_V0, "JP", _FAMILY_MASK, 0xB000, "op_jp_v0"),
    InstructionSpec(Opcode.RND, "RND", _FAMILY_MASK, 0xC000, "op_rnd"),
    InstructionSpec(Opcode.DRW, "DRW", _FAMILY_MASK, 0xD000, "op_drw"),
    InstructionSpec(Opcode.SKP, "SKP", _X_MASK, 0xE09E, "op_skp"),
    InstructionSpec(Opcode.SKNP, "SKNP", _X_MASK, 0xE0A1, "op_sknp"),
    # Fx timer, keypad and index family
    InstructionSpec(Opcode.LD_VX_DT, "LD", _X_MASK, 0xF007, "op_ld_vx_dt"),
    InstructionSpec(Opcode.LD_VX_K, "LD", _X_MASK, 0xF00A, "op_ld_vx_k"),
    InstructionSpec(Opcode.LD_DT_VX, "LD", _X_MASK, 0xF015, "op_ld_dt_vx"),
    InstructionSpec(Opcode.LD_ST_VX, "LD", _X_MASK, 0xF018, "op_ld_st_vx"),
    InstructionSpec(Opcode.ADD_I, "ADD", _X_MASK, 0xF01E, "op_add_i"),
    InstructionSpec(Opcode.LD_F, "LD", _X_MASK, 0xF029, "op_ld_f"),
    InstructionSpec(Opcode.LD_B, "LD", _X_MASK, 0xF033, "op_ld_b"),
    InstructionSpec(Opcode.LD_I_VX, "LD", _X_MASK, 0xF055, "op_ld_i_vx"),
    InstructionSpec(Opcode.LD_VX_I, "LD", _X_MASK, 0xF065, "op_ld_vx_i"),
)


class DecodeTable:
    """Family-indexed lookup built from :class:`InstructionSpec` entries."""

    _FAMILIES: Final[int] = 0x10

    def __init__(self) -> None:
        self._families: List[List[InstructionSpec]] = [[] for _ in range(self._FAMILIES)]

    def register(self, spec: InstructionSpec) -> None:
        family = self._family_of(spec)
        for existing in self._families[family]:
            if _overlaps(existing, spec):
                raise ValueError(
                    f"pattern {spec.pattern:#06x} ({spec.mnemonic}) overlaps "
                    f"{existing.pattern:#06x} ({existing.mnemonic})"
                )
        self._families[family].append(spec)

    def register_all(self, specs: Iterable[InstructionSpec]) -> None:
        for spec in specs:
            self.register(spec)

    def lookup(self, word: int) -> InstructionSpec | None:
        for spec in self._families[(word >> 12) & 0xF]:
            if spec.matches(word):
                return spec
        return None

    @staticmethod
    def _family_of(spec: InstructionSpec) -> int:
        if spec.mask & _FAMILY_MASK != _FAMILY_MASK:
            raise ValueError(f"{spec.mnemonic}: mask must cover the family nibble")
        return (spec.pattern >> 12) & 0xF


def _overlaps(a: InstructionSpec, b: InstructionSpec) -> bool:
    common = a.mask & b.mask
    return (a.pattern & common) == (b.pattern & common)


def build_decode_table(specs: Iterable[InstructionSpec]) -> DecodeTable:
    """Build and validate a decode table."""

    table = DecodeTable()
    table.register_all(specs)
    return table


DECODE_TABLE: DecodeTable = build_decode_table(DEFAULT_SPECS)


def decode(word: int, table: DecodeTable = DECODE_TABLE) -> Instruction:
    """Decode a 16-bit word; unmatched words become ``Opcode.UNKNOWN``."""

    word &= 0xFFFF
    spec = table.lookup(word)
    if spec is None:
        return Instruction(word, Opcode.UNKNOWN, "???", None)
    return Instruction(word, spec.opcode, spec.mnemonic, spec.handler)
