"""Tests for control flow instructions."""

import pytest
from chip8vm import execute, NO_KEY
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1
        assert not state.increment_pc

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0x6230)  # V2 = 0x30, ignored
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260
        assert not state.increment_pc

    def test_jump_with_offset_wraps_to_12_bits(self, fresh_state):
        """BNNN past the end of memory wraps the address."""
        state = set_registers(fresh_state, V0=0x20)
        state = execute(state, 0xBFF0)
        assert state.pc == 0x010


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = set_registers(fresh_state, V5=0x42)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2
        assert state.increment_pc

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = set_registers(fresh_state, V5=0x41)
        initial_pc = state.pc

        state = execute(state, 0x3542)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = set_registers(fresh_state, V3=0x10)
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = set_registers(fresh_state, V3=0x20)
        initial_pc = state.pc

        state = execute(state, 0x4320)
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)
        assert state.pc == initial_pc

    @pytest.mark.parametrize("instruction", [0x5121, 0x912F])
    def test_register_skip_requires_zero_low_nibble(self, fresh_state, quiet_logger, instruction):
        """5XYN/9XYN with N != 0 are not defined."""
        state = execute(fresh_state, instruction)
        assert state.pc == fresh_state.pc
        assert state.unknown_opcodes == 1

    def test_skip_with_zero_values(self, fresh_state):
        """V0 == 0 on a fresh machine, so 3000 skips."""
        state = execute(fresh_state, 0x3000)
        assert state.pc == fresh_state.pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = set_registers(fresh_state, V0=0xFF)
        state = execute(state, 0x30FF)
        assert state.pc == fresh_state.pc + 2


class TestKeySkips:
    """Test EX9E / EXA1 against the single pressed key."""

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when the pressed key equals VX."""
        state = set_registers(fresh_state, V0=5).replace(key_pressed=5)
        state = execute(state, 0xE09E)
        assert state.pc == fresh_state.pc + 2

    def test_no_skip_if_other_key_pressed(self, fresh_state):
        """EX9E - Another key does not count."""
        state = set_registers(fresh_state, V0=5).replace(key_pressed=6)
        state = execute(state, 0xE09E)
        assert state.pc == fresh_state.pc

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EXA1 - Skip while no key is held."""
        state = set_registers(fresh_state, V0=5)
        assert state.key_pressed == NO_KEY

        state = execute(state, 0xE0A1)
        assert state.pc == fresh_state.pc + 2

    def test_no_skip_if_key_not_pressed_but_held(self, fresh_state):
        """EXA1 - Holding VX's key suppresses the skip."""
        state = set_registers(fresh_state, V3=0xA).replace(key_pressed=0xA)
        state = execute(state, 0xE3A1)
        assert state.pc == fresh_state.pc

    def test_undefined_key_instruction(self, fresh_state, quiet_logger):
        """EX00 is not a key instruction."""
        state = execute(fresh_state, 0xE000)
        assert state.pc == fresh_state.pc
        assert state.unknown_opcodes == 1
