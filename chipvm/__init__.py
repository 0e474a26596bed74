"""CHIP-8 interpreter package."""

from chipvm.state import MachineState, ExecutionMode, StackState, create_state
from chipvm.emulator import (
    execute, fetch, step, resolve_key_wait, tick_timers, present, load_program, load_rom,
)
from chipvm.decode import DecodedInstruction, decode
from chipvm.errors import MachineError, DecodeError, BoundsError, RomLoadError
from chipvm.interpreter import Interpreter
from chipvm.constants import *
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme

__all__ = [
    "MachineState",
    "ExecutionMode",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "resolve_key_wait",
    "tick_timers",
    "present",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "MachineError",
    "DecodeError",
    "BoundsError",
    "RomLoadError",
    "Interpreter",
    "PROGRAM_START",
    "FONT_START",
    "MEMORY_SIZE",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "STACK_SIZE",
    "chip8_display_to_rgb",
    "create_color_scheme",
]
