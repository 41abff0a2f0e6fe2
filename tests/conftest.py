"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8vm import create_state, logger
from chip8vm.constants import STACK_SIZE


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def bounded_state():
    """Provide a fresh state with the traditional 16-level stack."""
    return create_state(stack_limit=STACK_SIZE)


@pytest.fixture
def quiet_logger():
    """Route engine diagnostics to stdout at WARNING."""
    saved = (logger.log_level, logger.stream)
    logger.set_level("WARNING")
    logger.stream = None
    yield logger
    logger.log_level, logger.stream = saved


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. set_registers(state, V1=3)."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )
