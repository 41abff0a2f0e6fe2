"""CHIP-8 instruction decoding."""

import enum

from chex import dataclass


class Operation(enum.Enum):
    """Closed set of operations an opcode can decode to."""
    NOP = enum.auto()
    CLEAR_SCREEN = enum.auto()
    RETURN = enum.auto()
    JUMP = enum.auto()
    CALL = enum.auto()
    SKIP_EQ_IMMEDIATE = enum.auto()
    SKIP_NE_IMMEDIATE = enum.auto()
    SKIP_EQ_REGISTER = enum.auto()
    LOAD_IMMEDIATE = enum.auto()
    ADD_IMMEDIATE = enum.auto()
    MOVE = enum.auto()
    OR = enum.auto()
    AND = enum.auto()
    XOR = enum.auto()
    ADD = enum.auto()
    SUB = enum.auto()
    SHIFT_RIGHT = enum.auto()
    SUBN = enum.auto()
    SHIFT_LEFT = enum.auto()
    SKIP_NE_REGISTER = enum.auto()
    SET_INDEX = enum.auto()
    JUMP_OFFSET = enum.auto()
    RANDOM = enum.auto()
    DRAW = enum.auto()
    SKIP_KEY = enum.auto()
    SKIP_NOT_KEY = enum.auto()
    GET_DELAY = enum.auto()
    WAIT_KEY = enum.auto()
    SET_DELAY = enum.auto()
    SET_SOUND = enum.auto()
    ADD_INDEX = enum.auto()
    FONT = enum.auto()
    BCD = enum.auto()
    STORE = enum.auto()
    LOAD = enum.auto()
    UNKNOWN = enum.auto()


# Families whose operation is fixed by the high nibble alone
_FAMILY_OPERATIONS = {
    0x1: Operation.JUMP,
    0x2: Operation.CALL,
    0x3: Operation.SKIP_EQ_IMMEDIATE,
    0x4: Operation.SKIP_NE_IMMEDIATE,
    0x6: Operation.LOAD_IMMEDIATE,
    0x7: Operation.ADD_IMMEDIATE,
    0xA: Operation.SET_INDEX,
    0xB: Operation.JUMP_OFFSET,
    0xC: Operation.RANDOM,
    0xD: Operation.DRAW,
}

_SYSTEM_OPERATIONS = {
    0x0000: Operation.NOP,
    0x00E0: Operation.CLEAR_SCREEN,
    0x00EE: Operation.RETURN,
}

_ALU_OPERATIONS = {
    0x0: Operation.MOVE,
    0x1: Operation.OR,
    0x2: Operation.AND,
    0x3: Operation.XOR,
    0x4: Operation.ADD,
    0x5: Operation.SUB,
    0x6: Operation.SHIFT_RIGHT,
    0x7: Operation.SUBN,
    0xE: Operation.SHIFT_LEFT,
}

_KEY_OPERATIONS = {
    0x9E: Operation.SKIP_KEY,
    0xA1: Operation.SKIP_NOT_KEY,
}

_MISC_OPERATIONS = {
    0x07: Operation.GET_DELAY,
    0x0A: Operation.WAIT_KEY,
    0x15: Operation.SET_DELAY,
    0x18: Operation.SET_SOUND,
    0x1E: Operation.ADD_INDEX,
    0x29: Operation.FONT,
    0x33: Operation.BCD,
    0x55: Operation.STORE,
    0x65: Operation.LOAD,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)
    operation: Operation


def classify(instruction: int) -> Operation:
    """Map a 16-bit instruction to its operation, UNKNOWN if undefined."""
    family = (instruction & 0xF000) >> 12
    if family in _FAMILY_OPERATIONS:
        return _FAMILY_OPERATIONS[family]
    if family == 0x0:
        return _SYSTEM_OPERATIONS.get(instruction, Operation.UNKNOWN)
    if family == 0x5 and instruction & 0x000F == 0:
        return Operation.SKIP_EQ_REGISTER
    if family == 0x9 and instruction & 0x000F == 0:
        return Operation.SKIP_NE_REGISTER
    if family == 0x8:
        return _ALU_OPERATIONS.get(instruction & 0x000F, Operation.UNKNOWN)
    if family == 0xE:
        return _KEY_OPERATIONS.get(instruction & 0x00FF, Operation.UNKNOWN)
    if family == 0xF:
        return _MISC_OPERATIONS.get(instruction & 0x00FF, Operation.UNKNOWN)
    return Operation.UNKNOWN


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
        operation=classify(instruction),
    )
