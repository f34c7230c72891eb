"""CHIP-8 display operations."""

import jax.numpy as jnp
from vipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER, ADDRESS_MASK
from vipax.state import EmulatorState
from vipax.decode import DecodedInstruction

# Pre-computed (row, column) grids matching the (height, width) display layout
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw an 8xN sprite from memory[I] at (VX, VY).

    The origin wraps onto the screen, the sprite itself is clipped at the
    right and bottom edges. VF is set when a lit pixel is switched off.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32) % SCREEN_WIDTH
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32) % SCREEN_HEIGHT

    in_sprite = (xx >= sprite_x) & (xx < sprite_x + 8) & (yy >= sprite_y) & (yy < sprite_y + instruction.n)

    row_offset = yy - sprite_y
    col_offset = jnp.clip(xx - sprite_x, 0, 7)
    sprite_bytes = state.memory[(jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK]
    sprite = (((sprite_bytes >> (7 - col_offset)) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        draw_flag=jnp.ones((), dtype=jnp.bool_),
    )
