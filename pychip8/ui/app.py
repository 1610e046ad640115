"""Pygame frontend for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from pychip8.bus import OutOfBoundsError
from pychip8.cpu import CPUError, decode
from pychip8.io import KeypadError
from pychip8.loader import RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import DISPLAY_HEIGHT, DISPLAY_WIDTH, MONOCHROME, Renderer
from pychip8.video.palette import RGBColor


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 10
    fullscreen: bool = False
    cycles_per_frame: int = 10
    frame_rate: int = 60
    palette: Sequence[RGBColor] = MONOCHROME
    seed: Optional[int] = None


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        if config.cycles_per_frame <= 0:
            raise ValueError("cycles_per_frame must be positive")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._renderer = Renderer(config.palette)
        self._last_revision = -1
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def machine(self) -> Machine | None:
        return self._machine

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required; pass --rom <path>")
        rom_path = self._config.rom_path
        if not rom_path.exists():
            raise RuntimeError(f"ROM file not found: {rom_path}")

        machine = self._create_machine(rom_path)
        self._machine = machine

        pygame.init()
        pygame.display.set_caption(f"CHIP-8 - {rom_path.name}")

        surface_size = (DISPLAY_WIDTH * self._config.scale, DISPLAY_HEIGHT * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._enter_debug_shell(machine)
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame.key.name(event.key), pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame.key.name(event.key), pressed=False)

                frame_start = time.perf_counter()
                self.step_frame(machine)

                if machine.display.revision != self._last_revision:
                    frame = self._renderer.render(machine.framebuffer(), scale=self._config.scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()
                    self._last_revision = machine.display.revision

                if self._perf_enabled:
                    self._perf_frame += 1
                    debug_log(
                        "perf",
                        "frame=%d frame_ms=%.3f",
                        self._perf_frame,
                        (time.perf_counter() - frame_start) * 1000.0,
                    )

                clock.tick(self._config.frame_rate)
        finally:
            pygame.quit()

    def step_frame(self, machine: Machine) -> int:
        """Run one frame worth of cycles; return how many were executed."""

        trace = self._trace_recorder
        executed = 0
        try:
            for _ in range(self._config.cycles_per_frame):
                if trace is not None:
                    state_before = machine.cpu.state.clone()
                    instruction = machine.cycle()
                    note = "wait-key" if machine.waiting_for_key else ""
                    trace.record_step(state_before, instruction.word, mnemonic=instruction.mnemonic, note=note)
                else:
                    machine.cycle()
                executed += 1
        except (CPUError, OutOfBoundsError, KeypadError) as exc:
            self._running = False
            debug_log("cpu", "fault pc=%03x: %s", machine.cpu.state.pc, exc)
            if trace is not None:
                self._record_fault(machine, trace)
                trace.dump("trace", 32)
            raise RuntimeError(f"machine fault at pc={machine.cpu.state.pc:#05x}: {exc}") from exc
        return executed

    @staticmethod
    def _record_fault(machine: Machine, trace: TraceRecorder) -> None:
        # a faulting step leaves pc on the offending instruction
        try:
            instruction = decode(machine.cpu.fetch())
        except OutOfBoundsError:
            trace.record_step(machine.cpu.state, None, note="fault")
            return
        trace.record_step(machine.cpu.state, instruction.word, mnemonic=instruction.mnemonic, note="fault")

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(MachineConfig(seed=self._config.seed))
        try:
            image = load_rom_from_path(rom_path, machine)
        except (RomFormatError, OutOfBoundsError) as exc:
            raise RuntimeError(f"cannot load ROM {rom_path}: {exc}") from exc
        if debug_enabled("loader"):
            debug_log("loader", "name=%s start=%03x end=%03x", image.name, image.start, image.end)
        return machine

    def _handle_key_event(self, key_name: str, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        if pressed:
            machine.keypad.press_name(key_name)
        else:
            machine.keypad.release_name(key_name)

    # ------------------------------------------------------------------
    # Debug shell

    def _enter_debug_shell(self, machine: Machine) -> None:
        print("\n=== CHIP-8 Debug Menu ===")
        print("Enter command: [c]pu, [m]em, [t]race, [q]uit, [Enter] resume")

        paused = True
        while paused and self._running:
            try:
                command = input("debug> ").strip().lower()
            except (EOFError, KeyboardInterrupt):
                print("Resuming emulator.")
                break

            if command == "" or command in {"resume"}:
                paused = False
            elif command in {"c", "cpu"}:
                self._dump_cpu(machine)
            elif command in {"t", "trace"}:
                self._dump_trace()
            elif command.startswith("m"):
                spec = command[1:].strip()
                self._dump_memory(machine, spec if spec else None)
            elif command in {"q", "quit", "exit"}:
                print("Exiting emulator.")
                self._running = False
                paused = False
            else:
                print("Commands: [Enter]=resume, [c]pu, [m]em, [t]race, [q]uit")

    def _dump_cpu(self, machine: Machine) -> None:
        state = machine.cpu.state
        print(
            "CPU PC={:03X} I={:04X} SP={:02d} DT={:02X} ST={:02X}".format(
                state.pc,
                state.i,
                state.sp,
                state.delay_timer,
                state.sound_timer,
            )
        )
        print(" ".join(f"V{index:X}={value:02X}" for index, value in enumerate(state.v)))
        if state.sp:
            print("Stack: " + " ".join(f"{address:03X}" for address in state.stack[: state.sp]))

    def _dump_trace(self, limit: int = 64) -> None:
        if self._trace_recorder is None:
            print("Trace disabled (set CHIP8_DEBUG=trace)")
            return
        for line in self._trace_recorder.format_entries(limit):
            print(line)

    def _dump_memory(self, machine: Machine, spec: str | None = None) -> None:
        start = machine.cpu.state.i
        length = 0x40
        if spec:
            parts = spec.split()
            try:
                start = int(parts[0], 16)
                if len(parts) > 1:
                    length = int(parts[1], 16)
            except ValueError:
                print("Usage: m <start-hex> [length-hex]")
                return
        end = min(start + length, len(machine.memory))
        for row in range(start, end, 16):
            data = machine.memory.load_block(row, min(16, end - row))
            print(f"{row:03X}: " + " ".join(f"{value:02X}" for value in data))
