"""Input helpers for the CHIP-8 interpreter."""

from .keypad import KEY_COUNT, KEY_LAYOUT, Keypad, KeypadError

__all__ = [
    "KEY_COUNT",
    "KEY_LAYOUT",
    "Keypad",
    "KeypadError",
]
