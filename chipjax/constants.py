"""CHIP-8 machine constants."""

import jax.numpy as jnp

MEMORY_SIZE = 4096
REGISTER_COUNT = 16
STACK_SIZE = 16
KEYPAD_SIZE = 16

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START
FONT_START = 0x50
FONT_GLYPH_SIZE = 5

ADDRESS_MASK = 0xFFF
FLAG_REGISTER = 0xF

FONT_DATA = jnp.array([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
], dtype=jnp.uint8)

__all__ = [
    "MEMORY_SIZE",
    "REGISTER_COUNT",
    "STACK_SIZE",
    "KEYPAD_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "PROGRAM_START",
    "MAX_PROGRAM_SIZE",
    "FONT_START",
    "FONT_GLYPH_SIZE",
    "ADDRESS_MASK",
    "FLAG_REGISTER",
    "FONT_DATA",
]
