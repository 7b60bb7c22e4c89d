"""CHIP-8 display operations."""

import jax.numpy as jnp
from chipjax.state import EmulatorState, check_address_range
from chipjax.decode import DecodedInstruction
from chipjax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Start coordinates wrap around the screen; pixels past the right or bottom
    edge are clipped.
    """
    if instruction.n:
        check_address_range(state, state.I, instruction.n)

    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    in_screen = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = jnp.where(in_screen, yy - sprite_y, 0)
    col_offset = jnp.where(in_screen, xx - sprite_x, 0)
    sprite_bytes = state.memory[jnp.astype(state.I, jnp.int32) + row_offset]
    sprite = ((sprite_bytes >> (7 - col_offset)) & 1).astype(jnp.bool_) & in_screen

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones((), dtype=jnp.bool_)
    )
