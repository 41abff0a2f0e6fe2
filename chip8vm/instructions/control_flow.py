"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chip8vm.constants import ADDRESS_MASK, INSTRUCTION_SIZE
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction
from chip8vm.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.asarray(instruction.nnn, dtype=jnp.uint16), increment_pc=False)


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN, pushing the address of this call."""
    pc = int(state.pc)
    state = state.replace(stack=push(state.stack, pc, pc))
    return execute_jump(state, instruction)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        new_pc = jnp.where(condition, state.pc + INSTRUCTION_SIZE, state.pc)
        return state.replace(pc=jnp.astype(new_pc, jnp.uint16))
    return skip_instruction


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
)

# An idle keypad reports NO_KEY, which is compared like any other key code
execute_skip_if_key = make_skip_instruction(
    lambda state, inst: state.key_pressed == state.V[inst.x]
)

execute_skip_if_not_key = make_skip_instruction(
    lambda state, inst: state.key_pressed != state.V[inst.x]
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16), increment_pc=False)
