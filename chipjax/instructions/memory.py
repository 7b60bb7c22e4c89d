"""CHIP-8 memory and register operations."""

from typing import Callable, Optional

import jax
import jax.numpy as jnp
from chipjax.state import EmulatorState
from chipjax.decode import DecodedInstruction

RandomSource = Callable[[], int]


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    return state.replace(V=state.V.at[instruction.x].set(instruction.nn))


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, wrapping at 256. VF is not affected."""
    return state.replace(V=state.V.at[instruction.x].add(instruction.nn))


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    return state.replace(I=jnp.astype(instruction.nnn, jnp.uint16))


def execute_random(
    state: EmulatorState,
    instruction: DecodedInstruction,
    random_source: Optional[RandomSource] = None,
) -> EmulatorState:
    """CXNN - Set VX = random & NN.

    Uses ``random_source`` when given, otherwise draws from the state's PRNG key.
    """
    if random_source is not None:
        random_value = int(random_source()) & 0xFF
        return state.replace(V=state.V.at[instruction.x].set(random_value & instruction.nn))

    key, subkey = jax.random.split(state.rng)
    random_value = jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32)
    random_value = jnp.astype(random_value, jnp.uint8)
    return state.replace(V=state.V.at[instruction.x].set(random_value & instruction.nn), rng=key)
