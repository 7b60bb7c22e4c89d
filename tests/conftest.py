"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipjax import Chip8, Quirks, create_state, load_program
from chipjax.logging import EmulatorLogger


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def quirky_state():
    """Provide a fresh state with every quirk switched on."""
    return create_state(quirks=Quirks(
        shift_uses_vy=True,
        load_store_increments_index=True,
        inverted_skip_not_equal=True,
    ))


@pytest.fixture
def quiet_logger():
    """Logger that only prints critical messages."""
    return EmulatorLogger(log_level="CRITICAL", use_colors=False, show_timestamps=False)


@pytest.fixture
def machine(quiet_logger):
    """Provide a machine wrapper with a deterministic random source."""
    return Chip8(random_source=lambda: 0xFF, logger=quiet_logger)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program_bytes(*words):
    """Encode 16-bit instruction words as big-endian ROM bytes."""
    data = bytearray()
    for word in words:
        data += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(data)


def load_words(state, *words):
    """Load instruction words at 0x200."""
    return load_program(state, program_bytes(*words))
