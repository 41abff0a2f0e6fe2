"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import (
    ADDRESS_MASK, FLAG_REGISTER, GLYPH_SIZE, INDEX_OVERFLOW, NO_KEY, NUM_REGISTERS,
)


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
    """FX1E - Add VX to I register.

    A sum past 0x1000 resets I to 0 and sets VF. Otherwise VF is untouched.
    """
    new_i = jnp.astype(state.I, jnp.int32) + state.V[instruction.x]
    if new_i > INDEX_OVERFLOW:
        return state.replace(
            I=jnp.zeros((), dtype=jnp.uint16),
            V=state.V.at[FLAG_REGISTER].set(1),
        )
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Without a key the step holds pc in place and flags the state as waiting,
    so the driver re-runs this instruction on its next step.
    """
    if int(state.key_pressed) == NO_KEY:
        return state.replace(increment_pc=False, waiting_for_key=True)
    return state.replace(V=state.V.at[instruction.x].set(state.key_pressed))


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to VX * 5, the glyph stride of the built-in font."""
    font_address = jnp.astype(state.V[instruction.x], jnp.uint16) * GLYPH_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (state.I + jnp.arange(3)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(digits))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = instruction.x + 1
    indices = (state.I + jnp.arange(count)) & ADDRESS_MASK
    return state.replace(memory=state.memory.at[indices].set(state.V[:count]))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (state.I + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    new_V = jnp.where(register_mask, state.memory[base_indices], state.V)
    return state.replace(V=new_V)
