"""Flat 4 KiB memory for the CHIP-8 interpreter.

The address space is a single byte array. Unlike the CPU registers, memory
addresses never wrap: touching a cell outside ``0x000``-``0xFFF`` is a fault
reported through :class:`OutOfBoundsError`.
"""

from __future__ import annotations

from typing import Iterable

MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200


class MemoryAccessError(Exception):
    """Raised when the memory is used incorrectly."""


class OutOfBoundsError(MemoryAccessError):
    """Raised when an access falls outside the addressable range."""

    def __init__(self, address: int, length: int = 1) -> None:
        self.address = address
        self.length = length
        if length == 1:
            message = f"address {address:#05x} outside memory 0x000-{MEMORY_SIZE - 1:#05x}"
        else:
            message = (
                f"range {address:#05x}+{length} outside memory 0x000-{MEMORY_SIZE - 1:#05x}"
            )
        super().__init__(message)


class Memory:
    """Byte-addressable memory with strict bounds checking."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        if size <= 0:
            raise MemoryAccessError("memory must have a positive size")
        self._data = bytearray(size)

    def __len__(self) -> int:
        return len(self._data)

    def _check(self, address: int, length: int = 1) -> None:
        if address < 0 or length < 0 or address + length > len(self._data):
            raise OutOfBoundsError(address, length)

    def load8(self, address: int) -> int:
        self._check(address)
        return self._data[address]

    def store8(self, address: int, value: int) -> None:
        self._check(address)
        self._data[address] = value & 0xFF

    def load16(self, address: int) -> int:
        self._check(address, 2)
        high = self._data[address]
        low = self._data[address + 1]
        return (high << 8) | low

    def store16(self, address: int, value: int) -> None:
        self._check(address, 2)
        self._data[address] = (value >> 8) & 0xFF
        self._data[address + 1] = value & 0xFF

    def load_block(self, address: int, length: int) -> bytes:
        self._check(address, length)
        return bytes(self._data[address : address + length])

    def store_block(self, address: int, data: Iterable[int]) -> None:
        payload = bytes(value & 0xFF for value in data)
        self._check(address, len(payload))
        self._data[address : address + len(payload)] = payload

    def clear(self) -> None:
        self._data[:] = bytes(len(self._data))

    def snapshot(self) -> bytes:
        return bytes(self._data)
