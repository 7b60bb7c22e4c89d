"""CHIP-8 emulator package."""

from chipjax.state import (
    EmulatorState, Quirks, create_state, reset, load_program, load_rom_file,
    set_key, clear_redraw,
)
from chipjax.emulator import StepResult, execute, fetch, step, run, tick_timers
from chipjax.decode import DecodedInstruction, Op, decode, disassemble
from chipjax.errors import (
    Chip8Error, CapacityExceeded, OutOfBounds, DecodeError, StackOverflow,
    StackUnderflow, MachineHalted,
)
from chipjax.machine import Chip8
from chipjax.constants import *
from chipjax.rendering import chip8_display_to_rgb, create_color_scheme, display_to_text, save_frame

__all__ = [
    "EmulatorState",
    "Quirks",
    "create_state",
    "reset",
    "load_program",
    "load_rom_file",
    "set_key",
    "clear_redraw",
    "StepResult",
    "fetch",
    "execute",
    "step",
    "run",
    "tick_timers",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "Chip8Error",
    "CapacityExceeded",
    "OutOfBounds",
    "DecodeError",
    "StackOverflow",
    "StackUnderflow",
    "MachineHalted",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MEMORY_SIZE",
    "MAX_PROGRAM_SIZE",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_text",
    "save_frame",
]
