"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import ADDRESS_MASK, FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT

SPRITE_WIDTH = 8

# Pre-computed coordinate grids for display operations, shaped like the display
yy, xx = jnp.meshgrid(jnp.arange(SCREEN_HEIGHT), jnp.arange(SCREEN_WIDTH), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprite pixels XOR onto the display and wrap around both screen edges.
    VF is set when any lit pixel is turned off.
    """
    sprite_x = state.V[instruction.x] % SCREEN_WIDTH
    sprite_y = state.V[instruction.y] % SCREEN_HEIGHT

    # Offsets of every screen pixel from the sprite origin, modulo the screen
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < instruction.n)

    sprite_bytes = state.memory[(state.I + row_offset) & ADDRESS_MASK]
    shift = jnp.clip(SPRITE_WIDTH - 1 - col_offset, 0, SPRITE_WIDTH - 1)
    sprite = (((sprite_bytes >> shift) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
    )
