"""Tests for system instructions (0xxx) and the call stack."""

import jax.numpy as jnp
import pytest
from chip8vm import execute, step, StackOverflow, StackUnderflow
from conftest import setup_sprite_in_memory


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))
    state = state.replace(display=state.display.at[31, 63].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.display.shape == (32, 64)


def test_nop_changes_nothing(fresh_state, quiet_logger, capsys):
    """0000 is a silent no-op."""
    state = execute(fresh_state, 0x0000)

    assert state.pc == fresh_state.pc
    assert state.unknown_opcodes == 0
    assert capsys.readouterr().out == ""


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = int(state.pc)

    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert not state.increment_pc
    assert state.stack.frames == (initial_pc,)

    state = state.replace(increment_pc=True)
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.increment_pc
    assert state.stack.depth == 0


def test_call_return_through_step(fresh_state):
    """A called subroutine returns to the instruction after the call."""
    program = [0x23, 0x00,  # 0x200: CALL 0x300
               0x61, 0x07]  # 0x202: V1 = 7
    state = setup_sprite_in_memory(fresh_state, 0x200, program)
    state = setup_sprite_in_memory(state, 0x300, [0x60, 0x05, 0x00, 0xEE])  # V0 = 5; RET

    for _ in range(4):
        state = step(state)

    assert state.V[0] == 5
    assert state.V[1] == 7
    assert state.pc == 0x204


def test_nested_calls_unwind_in_order(fresh_state):
    """Returns pop addresses in LIFO order."""
    state = execute(fresh_state, 0x2300)
    state = execute(state.replace(pc=jnp.uint16(0x310)), 0x2400)

    assert state.stack.frames == (0x200, 0x310)

    state = execute(state, 0x00EE)
    assert state.pc == 0x310
    state = execute(state, 0x00EE)
    assert state.pc == 0x200


class TestStackErrors:
    """Stack underflow and overflow handling."""

    def test_return_with_empty_stack_raises(self, fresh_state):
        """00EE on an empty stack raises and leaves the caller's state untouched."""
        with pytest.raises(StackUnderflow) as excinfo:
            execute(fresh_state, 0x00EE)

        assert excinfo.value.pc == 0x200
        assert fresh_state.pc == 0x200
        assert fresh_state.stack.depth == 0

    def test_unbounded_stack_by_default(self, fresh_state):
        """Without a limit the stack grows past 16 frames."""
        state = fresh_state
        for _ in range(20):
            state = execute(state, 0x2200)

        assert state.stack.depth == 20

    def test_bounded_stack_overflow(self, bounded_state):
        """A configured limit turns the 17th nested call into an error."""
        state = bounded_state
        for _ in range(16):
            state = execute(state, 0x2200)

        with pytest.raises(StackOverflow) as excinfo:
            execute(state, 0x2200)

        assert excinfo.value.limit == 16
        assert state.stack.depth == 16


def test_call_pushes_current_pc(fresh_state):
    """2NNN pushes the address of the call itself."""
    state = execute(fresh_state, 0x2400)
    assert state.stack.frames[-1] == 0x200


def test_nested_call_return_through_step(fresh_state):
    """Two levels of calls each return past their own CALL."""
    state = setup_sprite_in_memory(fresh_state, 0x200, [0x23, 0x00, 0x61, 0x07])  # CALL 0x300; V1 = 7
    state = setup_sprite_in_memory(state, 0x300, [0x24, 0x00, 0x00, 0xEE])  # CALL 0x400; RET
    state = setup_sprite_in_memory(state, 0x400, [0x00, 0xEE])  # RET

    for _ in range(5):
        state = step(state)

    assert state.V[1] == 7
    assert state.pc == 0x204
    assert state.stack.depth == 0
