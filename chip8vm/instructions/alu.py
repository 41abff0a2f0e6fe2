"""CHIP-8 ALU operations (8xxx)."""

from typing import Callable, Optional

import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Operation

# (vx, vy) -> (result, flag); a flag of None leaves VF alone
AluFn = Callable[[jnp.ndarray, jnp.ndarray], tuple[jnp.ndarray, Optional[jnp.ndarray]]]


def alu_set(vx, vy):
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx, vy):
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx, vy):
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx, vy):
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx, vy):
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = result > 0xFF
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx, vy):
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow."""
    no_borrow = vx >= vy
    return jnp.astype((vx - vy) & 0xFF, jnp.uint8), no_borrow


def alu_shift_right(vx, vy):
    """8XY6 - Shift right: VX >>= 1, VF = shifted-out low bit."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx, vy):
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow."""
    no_borrow = vy >= vx
    return jnp.astype((vy - vx) & 0xFF, jnp.uint8), no_borrow


def alu_shift_left(vx, vy):
    """8XYE - Shift left: VX <<= 1, VF = shifted-out high bit."""
    return jnp.astype((vx << 1) & 0xFF, jnp.uint8), (vx & 0x80) >> 7


ALU_OPERATIONS: dict[Operation, AluFn] = {
    Operation.MOVE: alu_set,
    Operation.OR: alu_or,
    Operation.AND: alu_and,
    Operation.XOR: alu_xor,
    Operation.ADD: alu_add,
    Operation.SUB: alu_sub_xy,
    Operation.SHIFT_RIGHT: alu_shift_right,
    Operation.SUBN: alu_sub_yx,
    Operation.SHIFT_LEFT: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    result, vf = ALU_OPERATIONS[instruction.operation](vx, vy)

    new_V = state.V.at[instruction.x].set(jnp.astype(result, jnp.uint8))
    # Flag goes last so it wins when X is F
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(jnp.astype(vf, jnp.uint8))
    return state.replace(V=new_V)
