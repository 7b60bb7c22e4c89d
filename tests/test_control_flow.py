"""Tests for control flow instructions."""

import pytest
from chipjax import execute, step, set_key
from conftest import load_words


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_does_not_add_two(self, fresh_state, quiet_logger):
        state = load_words(fresh_state, 0x1ABC)
        state, _ = step(state, logger=quiet_logger)
        assert state.pc == 0xABC

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 is ignored
        state = execute(state, 0xB250)
        assert state.pc == 0x260

    def test_jump_with_offset_past_12_bits_is_not_wrapped(self, fresh_state):
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x42))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[5].set(0x41))
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x10))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = fresh_state.replace(V=fresh_state.V.at[3].set(0x20))
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc

    def test_inverted_skip_not_equal_quirk(self, quirky_state):
        """4XNN with the swapped branch skips on equality."""
        state = quirky_state.replace(V=quirky_state.V.at[3].set(0x20))
        initial_pc = state.pc

        assert execute(state, 0x4320).pc == initial_pc + 2
        assert execute(state, 0x4321).pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x55))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[1].set(0x55))
        state = state.replace(V=state.V.at[2].set(0x44))
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xAA))
        state = state.replace(V=state.V.at[8].set(0xBB))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = fresh_state
        state = state.replace(V=state.V.at[7].set(0xCC))
        state = state.replace(V=state.V.at[8].set(0xCC))
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = fresh_state.replace(V=fresh_state.V.at[0].set(0xFF))
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2

    @pytest.mark.parametrize("word, skipped", [
        (0x3000, True),   # V0 == 0
        (0x3001, False),
        (0x4001, True),   # V0 != 1
        (0x4000, False),
        (0x5010, True),   # V0 == V1
        (0x9010, False),
    ])
    def test_step_advances_four_or_two(self, fresh_state, quiet_logger, word, skipped):
        state = load_words(fresh_state, word)
        state, _ = step(state, logger=quiet_logger)
        assert state.pc == (0x204 if skipped else 0x202)


class TestKeySkips:
    """EX9E/EXA1 - Skip on key state."""

    def test_skip_if_key_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)  # V0 = 5
        state = set_key(state, 5, True)
        initial_pc = state.pc

        assert execute(state, 0xE09E).pc == initial_pc + 2
        assert execute(state, 0xE0A1).pc == initial_pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        state = execute(fresh_state, 0x6005)  # V0 = 5
        initial_pc = state.pc

        assert execute(state, 0xE0A1).pc == initial_pc + 2
        assert execute(state, 0xE09E).pc == initial_pc

    def test_key_index_uses_low_nibble(self, fresh_state):
        state = execute(fresh_state, 0x6015)  # V0 = 0x15 -> key 5
        state = set_key(state, 5, True)
        assert execute(state, 0xE09E).pc == state.pc + 2
