"""CHIP-8 emulator state structures."""

import dataclasses
from typing import Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np
from flax.struct import dataclass, PyTreeNode, field

from chipjax.constants import (
    MEMORY_SIZE, PROGRAM_START, MAX_PROGRAM_SIZE, FONT_START, FONT_DATA,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, KEYPAD_SIZE, REGISTER_COUNT,
)
from chipjax.errors import CapacityExceeded, OutOfBounds

ProgramData = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray, jnp.ndarray]


@dataclasses.dataclass(frozen=True)
class Quirks:
    """Behaviour switches for opcodes whose semantics differ between interpreters.

    Attributes:
        shift_uses_vy: 8XY6/8XYE shift VY into VX instead of shifting VX in place
        load_store_increments_index: FX55/FX65 leave I pointing past the last register
        inverted_skip_not_equal: 4XNN skips when VX == NN (swapped branch of some interpreters)
    """
    shift_uses_vy: bool = False
    load_store_increments_index: bool = False
    inverted_skip_not_equal: bool = False


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state."""
    rng: jax.random.PRNGKey
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(KEYPAD_SIZE, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    draw_flag: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    quirks: Quirks = field(pytree_node=False, default=Quirks())


def create_state(rng: jax.random.PRNGKey = jax.random.PRNGKey(0), quirks: Quirks = Quirks()) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    state = EmulatorState(rng, quirks=quirks)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))


def reset(state: EmulatorState) -> EmulatorState:
    """Return a power-on state, keeping the random key and quirks of ``state``."""
    return create_state(state.rng, state.quirks)


def _as_program_bytes(data: ProgramData) -> np.ndarray:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(data), dtype=np.uint8)
    values = np.asarray(data, dtype=np.int64).ravel()
    if values.size and (values.min() < 0 or values.max() > 0xFF):
        raise ValueError("Program data must contain byte values in range 0..255")
    return values.astype(np.uint8)


def load_program(state: EmulatorState, data: ProgramData) -> EmulatorState:
    """Copy program bytes into memory starting at 0x200.

    Raises:
        CapacityExceeded: if the program is larger than the memory above 0x200.
            The given state is left unmodified.
    """
    program = _as_program_bytes(data)
    if len(program) > MAX_PROGRAM_SIZE:
        raise CapacityExceeded(len(program), MAX_PROGRAM_SIZE)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(program)].set(jnp.asarray(program))
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data from a file into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)


def set_key(state: EmulatorState, index: int, pressed: bool) -> EmulatorState:
    """Set the state of one of the 16 keypad keys. Unknown keys are ignored."""
    index = int(index)
    if not 0 <= index < KEYPAD_SIZE:
        return state
    return state.replace(keypad=state.keypad.at[index].set(bool(pressed)))


def clear_redraw(state: EmulatorState) -> EmulatorState:
    """Acknowledge the current frame by clearing the redraw flag."""
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))


def check_address_range(state: EmulatorState, start: int, length: int) -> None:
    """Raise OutOfBounds unless ``memory[start:start + length]`` lies inside memory.

    Called from instruction handlers, where pc already points past the instruction.
    """
    last = int(start) + max(int(length), 1) - 1
    if last >= MEMORY_SIZE:
        raise OutOfBounds(last, pc=(int(state.pc) - 2) & 0xFFFF)
