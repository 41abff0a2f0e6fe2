"""CHIP-8 emulator state structures."""

from typing import Optional

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from chip8vm.constants import (
    FONT_DATA, FONT_START, MEMORY_SIZE, NO_KEY, NUM_REGISTERS, PROGRAM_START,
    SCREEN_HEIGHT, SCREEN_WIDTH,
)


class StackState(PyTreeNode):
    """Return addresses for subroutine calls, most recent last."""
    frames: tuple = ()
    limit: Optional[int] = field(pytree_node=False, default=None)

    @property
    def depth(self) -> int:
        return len(self.frames)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The state is immutable: every instruction returns a successor state and
    the caller rebinds its reference to it.
    """
    rng: jax.random.PRNGKey
    memory: jnp.ndarray
    pc: jnp.ndarray
    display: jnp.ndarray  # (SCREEN_HEIGHT, SCREEN_WIDTH), indexed [y, x]
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    key_pressed: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray
    increment_pc: bool = True
    waiting_for_key: bool = False
    unknown_opcodes: int = 0


def create_state(
    rng: jax.random.PRNGKey = jax.random.PRNGKey(0),
    stack_limit: Optional[int] = None,
) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: JAX random key consumed by CXNN
        stack_limit: Maximum call depth, or None for an unbounded stack

    Returns:
        Fresh EmulatorState with pc at PROGRAM_START
    """
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(
        jnp.array(FONT_DATA, dtype=jnp.uint8)
    )
    return EmulatorState(
        rng=rng,
        memory=memory,
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_),
        stack=StackState(limit=stack_limit),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        key_pressed=jnp.asarray(NO_KEY, dtype=jnp.uint8),
        V=jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
    )
