"""Tests for machine state creation, loading and keypad input."""

import jax.numpy as jnp
import numpy as np
import pytest
from chipjax import (
    create_state, reset, load_program, load_rom_file, set_key, clear_redraw, execute,
    CapacityExceeded, FONT_START, PROGRAM_START, MAX_PROGRAM_SIZE, Quirks,
)
from chipjax.constants import FONT_DATA


def test_initial_state(fresh_state):
    assert fresh_state.pc == PROGRAM_START
    assert fresh_state.I == 0
    assert fresh_state.stack.pointer == 0
    assert jnp.sum(fresh_state.V) == 0
    assert jnp.sum(fresh_state.display) == 0
    assert not jnp.any(fresh_state.keypad)
    assert fresh_state.delay_timer == 0
    assert fresh_state.sound_timer == 0
    assert not fresh_state.draw_flag


def test_font_loaded(fresh_state):
    font = fresh_state.memory[FONT_START:FONT_START + 80]
    assert jnp.array_equal(font, FONT_DATA)
    assert jnp.sum(fresh_state.memory[:FONT_START]) == 0
    assert jnp.sum(fresh_state.memory[FONT_START + 80:]) == 0


def test_load_program(fresh_state):
    state = load_program(fresh_state, b"\x12\x34\x56")
    assert [int(b) for b in state.memory[0x200:0x204]] == [0x12, 0x34, 0x56, 0x00]


def test_load_program_from_int_sequence(fresh_state):
    state = load_program(fresh_state, [0xA2, 0x2A])
    assert state.memory[0x200] == 0xA2
    assert state.memory[0x201] == 0x2A


def test_load_program_rejects_non_bytes(fresh_state):
    with pytest.raises(ValueError):
        load_program(fresh_state, [0x100])


def test_load_program_at_capacity(fresh_state):
    data = bytes([0xAB]) * MAX_PROGRAM_SIZE
    state = load_program(fresh_state, data)
    assert MAX_PROGRAM_SIZE == 4096 - 0x200
    assert state.memory[0x200] == 0xAB
    assert state.memory[0xFFF] == 0xAB


def test_load_program_over_capacity(fresh_state):
    state = load_program(fresh_state, b"\x01\x02")
    with pytest.raises(CapacityExceeded) as excinfo:
        load_program(state, bytes(MAX_PROGRAM_SIZE + 1))
    assert excinfo.value.size == MAX_PROGRAM_SIZE + 1
    assert excinfo.value.capacity == MAX_PROGRAM_SIZE
    # Prior contents are still in place
    assert state.memory[0x200] == 0x01
    assert state.memory[0x201] == 0x02


def test_load_rom_file(fresh_state, tmp_path):
    rom = tmp_path / "test.ch8"
    rom.write_bytes(b"\x00\xE0\x12\x00")
    state = load_rom_file(fresh_state, str(rom))
    assert [int(b) for b in state.memory[0x200:0x204]] == [0x00, 0xE0, 0x12, 0x00]


def test_set_key(fresh_state):
    state = set_key(fresh_state, 0xA, True)
    assert state.keypad[0xA]
    state = set_key(state, 0xA, False)
    assert not state.keypad[0xA]


@pytest.mark.parametrize("index", [16, 255, -1])
def test_set_key_out_of_range_is_ignored(fresh_state, index):
    state = set_key(fresh_state, index, True)
    assert state is fresh_state


def test_reset(fresh_state):
    state = load_program(fresh_state, b"\x12\x34")
    state = execute(state, 0x6A55)
    state = execute(state, 0xA321)
    state = execute(state, 0x2400)
    state = execute(state, 0x00E0)
    state = set_key(state, 3, True)
    state = state.replace(delay_timer=jnp.astype(9, jnp.uint8))

    state = reset(state)

    assert state.pc == PROGRAM_START
    assert state.I == 0
    assert state.stack.pointer == 0
    assert jnp.sum(state.V) == 0
    assert not jnp.any(state.keypad)
    assert state.delay_timer == 0
    assert not state.draw_flag
    assert state.memory[0x200] == 0
    assert jnp.array_equal(state.memory[FONT_START:FONT_START + 80], FONT_DATA)


def test_reset_keeps_quirks(quirky_state):
    assert reset(quirky_state).quirks == quirky_state.quirks
    assert create_state().quirks == Quirks()


def test_clear_redraw(fresh_state):
    state = execute(fresh_state, 0x00E0)
    assert state.draw_flag
    state = clear_redraw(state)
    assert not state.draw_flag


def test_load_program_accepts_numpy(fresh_state):
    state = load_program(fresh_state, np.array([1, 2, 3], dtype=np.uint8))
    assert state.memory[0x202] == 3
