"""CHIP-8 system assembly helpers."""

from __future__ import annotations

from .machine import MAX_PROGRAM_SIZE, Machine, MachineConfig, create_machine

__all__ = [
    "MAX_PROGRAM_SIZE",
    "MachineConfig",
    "Machine",
    "create_machine",
]
