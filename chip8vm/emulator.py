"""Main CHIP-8 emulator execution engine."""

from typing import Callable

import jax.numpy as jnp
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Operation, decode
from chip8vm.constants import (
    ADDRESS_MASK, INSTRUCTION_SIZE, INSTRUCTIONS_PER_FRAME, MEMORY_SIZE, NO_KEY, PROGRAM_START,
)
from chip8vm.errors import LoadOverflow
from chip8vm.logging import frame_progress, logger
from chip8vm.instructions.system import execute_clear_screen, execute_return, no_op
from chip8vm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key, execute_skip_if_not_key,
)
from chip8vm.instructions.alu import ALU_OPERATIONS, execute_alu_operation
from chip8vm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8vm.instructions.display import execute_display
from chip8vm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers,
)

Handler = Callable[[EmulatorState, DecodedInstruction], EmulatorState]

HANDLERS: dict[Operation, Handler] = {
    Operation.NOP: no_op,
    Operation.CLEAR_SCREEN: execute_clear_screen,
    Operation.RETURN: execute_return,
    Operation.JUMP: execute_jump,
    Operation.CALL: execute_call,
    Operation.SKIP_EQ_IMMEDIATE: execute_skip_if_equal_immediate,
    Operation.SKIP_NE_IMMEDIATE: execute_skip_if_not_equal_immediate,
    Operation.SKIP_EQ_REGISTER: execute_skip_if_equal_register,
    Operation.LOAD_IMMEDIATE: execute_set,
    Operation.ADD_IMMEDIATE: execute_add,
    **{operation: execute_alu_operation for operation in ALU_OPERATIONS},
    Operation.SKIP_NE_REGISTER: execute_skip_if_not_equal_register,
    Operation.SET_INDEX: execute_set_index,
    Operation.JUMP_OFFSET: execute_jump_with_offset,
    Operation.RANDOM: execute_random,
    Operation.DRAW: execute_display,
    Operation.SKIP_KEY: execute_skip_if_key,
    Operation.SKIP_NOT_KEY: execute_skip_if_not_key,
    Operation.GET_DELAY: execute_get_delay_timer,
    Operation.WAIT_KEY: execute_wait_for_key,
    Operation.SET_DELAY: execute_set_delay_timer,
    Operation.SET_SOUND: execute_set_sound_timer,
    Operation.ADD_INDEX: execute_add_to_index,
    Operation.FONT: execute_font_character,
    Operation.BCD: execute_bcd_conversion,
    Operation.STORE: execute_store_registers,
    Operation.LOAD: execute_load_registers,
}


def _unknown_opcode(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Report an undefined opcode and carry on as a no-op."""
    logger.warning(f"Unknown opcode {instruction.raw:04X} at 0x{int(state.pc):03X}")
    return state.replace(unknown_opcodes=state.unknown_opcodes + 1)


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Args:
        state: Current emulator state
        instruction: 16-bit opcode

    Returns:
        Successor state. pc is left for the caller to advance unless the
        instruction cleared ``increment_pc``.

    Raises:
        StackUnderflow: On 00EE with an empty stack.
        StackOverflow: On 2NNN with the stack at its configured limit.
    """
    decoded_instruction = decode(instruction)

    if logger.is_enabled_for("DEBUG"):
        logger.debug(
            f"0x{int(state.pc):03X}: {decoded_instruction.raw:04X} "
            f"{decoded_instruction.operation.name}"
        )

    handler = HANDLERS.get(decoded_instruction.operation, _unknown_opcode)
    return handler(state.replace(waiting_for_key=False), decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> int:
    """Pack two bytes into a 16-bit opcode."""
    return (int(high) << 8) | int(low)


def fetch(state: EmulatorState) -> int:
    """Fetch the big-endian instruction at pc without advancing it."""
    pc = int(state.pc) & ADDRESS_MASK
    return _pack_u16(state.memory[pc], state.memory[(pc + 1) & ADDRESS_MASK])


def step(state: EmulatorState) -> EmulatorState:
    """Fetch, execute and advance pc by one instruction."""
    state = execute(state, fetch(state))
    if state.increment_pc:
        state = state.replace(pc=jnp.astype(state.pc + INSTRUCTION_SIZE, jnp.uint16))
    return state.replace(increment_pc=True)


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Decrement delay and sound timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.astype(jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0), jnp.uint8),
        sound_timer=jnp.astype(jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0), jnp.uint8),
    )


def run_frame(
    state: EmulatorState,
    key: int = NO_KEY,
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME,
) -> EmulatorState:
    """Run one 60 Hz frame: latch the key, step the CPU, tick the timers."""
    state = state.replace(key_pressed=jnp.asarray(key, dtype=jnp.uint8))
    for _ in range(instructions_per_frame):
        state = step(state)
    return tick_timers(state)


def run_frames(
    state: EmulatorState,
    frames: int,
    key: int = NO_KEY,
    instructions_per_frame: int = INSTRUCTIONS_PER_FRAME,
    progress: bool = False,
) -> EmulatorState:
    """Run several frames with a fixed key, optionally showing progress."""
    with frame_progress(frames, enabled=progress) as bar:
        for _ in range(frames):
            state = run_frame(state, key, instructions_per_frame)
            bar.update(1)
    return state


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    Raises:
        LoadOverflow: If the ROM would run past the end of memory. The
            state is not modified.
    """
    capacity = MEMORY_SIZE - PROGRAM_START
    if len(rom_data) > capacity:
        raise LoadOverflow(len(rom_data), capacity)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Read a ROM file from disk and load it at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    logger.info(f"Loaded {len(rom_data)} bytes from {filename}")
    return load_rom(state, rom_data)
