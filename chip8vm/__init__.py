"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, StackState, create_state
from chip8vm.emulator import (
    execute, fetch, step, tick_timers, run_frame, run_frames, load_rom, load_rom_file,
)
from chip8vm.decode import DecodedInstruction, Operation, decode
from chip8vm.errors import Chip8Error, StackUnderflow, StackOverflow, LoadOverflow
from chip8vm.constants import *
from chip8vm.logging import logger, set_log_level
from chip8vm.rendering import display_to_rgb, create_color_scheme, format_display

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "run_frame",
    "run_frames",
    "load_rom",
    "load_rom_file",
    "DecodedInstruction",
    "Operation",
    "decode",
    "Chip8Error",
    "StackUnderflow",
    "StackOverflow",
    "LoadOverflow",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "NO_KEY",
    "logger",
    "set_log_level",
    "display_to_rgb",
    "create_color_scheme",
    "format_display",
]
