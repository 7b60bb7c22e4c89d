"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipjax.state import EmulatorState, check_address_range
from chipjax.decode import DecodedInstruction
from chipjax.constants import FONT_START, FONT_GLYPH_SIZE


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (16-bit wraparound, VF unaffected)."""
    new_i = jnp.astype(state.I, jnp.uint32) + state.V[instruction.x]
    return state.replace(I=jnp.astype(new_i & 0xFFFF, jnp.uint16))


def key_is_pressed(state: EmulatorState) -> bool:
    return bool(jnp.any(state.keypad))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press (blocking).

    With no key down the pc is moved back onto this instruction so it runs again.
    """
    if not key_is_pressed(state):
        return state.replace(pc=state.pc - 2)
    pressed_key = jnp.argmax(jnp.astype(state.keypad, jnp.int32))
    return state.replace(V=state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8)))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    check_address_range(state, state.I, 3)
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    start = int(state.I)
    return state.replace(memory=state.memory.at[start:start + 3].set(digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    check_address_range(state, state.I, count)
    start = int(state.I)
    new_memory = state.memory.at[start:start + count].set(state.V[:count])

    if state.quirks.load_store_increments_index:
        return state.replace(memory=new_memory, I=state.I + count)
    return state.replace(memory=new_memory)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = instruction.x + 1
    check_address_range(state, state.I, count)
    start = int(state.I)
    new_V = state.V.at[:count].set(state.memory[start:start + count])

    if state.quirks.load_store_increments_index:
        return state.replace(V=new_V, I=state.I + count)
    return state.replace(V=new_V)
