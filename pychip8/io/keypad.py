"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


KEY_LAYOUT: Mapping[str, int] = {
    # host key -> keypad index
    # 1 2 3 C      1 2 3 4
    # 4 5 6 D  <-  q w e r
    # 7 8 9 E      a s d f
    # A 0 B F      z x c v
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "4": 0xC,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "r": 0xD,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "f": 0xE,
    "z": 0xA,
    "x": 0x0,
    "c": 0xB,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


class KeypadError(IndexError):
    """Raised when a key index outside 0x0-0xF is used."""


@dataclass
class Keypad:
    """Sixteen independent pressed/released flags."""

    _keys: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _listeners: list[Callable[[int, bool], None]] = field(default_factory=list)

    def press(self, index: int) -> None:
        self._check(index)
        before = self._keys[index]
        self._keys[index] = True
        if debug_enabled("input"):
            debug_log("input", "key_down=%X", index)
        if not before:
            self._notify_listeners(index, True)

    def release(self, index: int) -> None:
        self._check(index)
        before = self._keys[index]
        self._keys[index] = False
        if debug_enabled("input"):
            debug_log("input", "key_up=%X", index)
        if before:
            self._notify_listeners(index, False)

    def is_pressed(self, index: int) -> bool:
        self._check(index)
        return self._keys[index]

    def first_pressed(self) -> int | None:
        """Return the lowest pressed key index, or None."""

        for index, pressed in enumerate(self._keys):
            if pressed:
                return index
        return None

    def press_name(self, key_name: str) -> bool:
        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self.press(index)
        return True

    def release_name(self, key_name: str) -> bool:
        index = self._lookup(key_name)
        if index is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        self.release(index)
        return True

    def reset(self) -> None:
        """Release every key, notifying listeners for keys that were down."""

        for index, pressed in enumerate(self._keys):
            if pressed:
                self._keys[index] = False
                self._notify_listeners(index, False)

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._keys)

    def add_listener(self, listener: Callable[[int, bool], None]) -> None:
        self._listeners.append(listener)

    @staticmethod
    def _check(index: int) -> None:
        if not 0 <= index < KEY_COUNT:
            raise KeypadError(f"key index {index:#x} outside 0x0-0xF")

    @staticmethod
    def _lookup(key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_LAYOUT.get(name)

    def _notify_listeners(self, index: int, pressed: bool) -> None:
        for listener in tuple(self._listeners):
            listener(index, pressed)
