"""Main CHIP-8 execution engine."""

import jax.numpy as jnp

from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction, decode
from chipvm.constants import PROGRAM_START, MAX_PROGRAM_SIZE
from chipvm.errors import DecodeError, RomLoadError
from chipvm.memory import read_word
from chipvm.instructions.system import SYSTEM_INSTRUCTIONS
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, KEY_INSTRUCTIONS,
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import MISC_INSTRUCTIONS, resolve_key_wait


def _dispatch_on_kk(table: dict, family: str):
    """Build a family handler that picks its instruction from the low byte."""
    def dispatch(state: MachineState, instruction: DecodedInstruction) -> MachineState:
        handler = table.get(instruction.kk)
        if handler is None:
            raise DecodeError(f"unknown {family} instruction", pc=int(state.pc), word=instruction.raw)
        return handler(state, instruction)
    return dispatch


INSTRUCTION_FAMILIES = {
    0x0: _dispatch_on_kk(SYSTEM_INSTRUCTIONS, "system"),
    0x1: execute_jump,
    0x2: execute_call,
    0x3: execute_skip_if_equal_immediate,
    0x4: execute_skip_if_not_equal_immediate,
    0x5: execute_skip_if_equal_register,
    0x6: execute_set,
    0x7: execute_add,
    0x8: execute_alu_operation,
    0x9: execute_skip_if_not_equal_register,
    0xA: execute_set_index,
    0xB: execute_jump_with_offset,
    0xC: execute_random,
    0xD: execute_display,
    0xE: _dispatch_on_kk(KEY_INSTRUCTIONS, "key"),
    0xF: _dispatch_on_kk(MISC_INSTRUCTIONS, "misc"),
}


def execute(state: MachineState, instruction: int) -> MachineState:
    """Execute single CHIP-8 instruction.

    The handler is responsible for moving PC; an instruction word without a
    handler raises DecodeError.
    """
    decoded_instruction = decode(instruction)
    handler = INSTRUCTION_FAMILIES.get(decoded_instruction.opcode)
    if handler is None:
        raise DecodeError("unknown opcode", pc=int(state.pc), word=decoded_instruction.raw)
    return handler(state, decoded_instruction)


def fetch(state: MachineState) -> int:
    """Fetch the big-endian instruction word at PC."""
    pc = int(state.pc)
    return read_word(state.memory, pc, pc=pc)


def step(state: MachineState) -> MachineState:
    """Fetch and execute the instruction at PC."""
    return execute(state, fetch(state))


def tick_timers(state: MachineState) -> tuple[MachineState, bool]:
    """Decrement both timers once.

    Returns the new state and whether the sound timer just went from 1 to 0.
    """
    delay = int(state.delay_timer)
    sound = int(state.sound_timer)
    play_sound = sound == 1
    state = state.replace(
        delay_timer=jnp.asarray(max(delay - 1, 0), dtype=jnp.uint8),
        sound_timer=jnp.asarray(max(sound - 1, 0), dtype=jnp.uint8),
    )
    return state, play_sound


def present(state: MachineState):
    """Consume the dirty flag.

    Returns the new state and the display grid when it changed since the last
    call, otherwise ``None``.
    """
    if not state.display_dirty:
        return state, None
    return state.replace(display_dirty=False), state.display


def load_program(state: MachineState, data: bytes) -> MachineState:
    """Copy program bytes into memory starting at 0x200."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomLoadError(
            f"program is {len(data)} bytes, only {MAX_PROGRAM_SIZE} fit",
            address=PROGRAM_START,
        )
    program = jnp.array(list(data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(data)].set(program)
    return state.replace(memory=new_memory)


def load_rom(state: MachineState, filename: str) -> MachineState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    try:
        with open(filename, 'rb') as f:
            rom_data = f.read()
    except OSError as err:
        raise RomLoadError(f"cannot read {filename}: {err.strerror or err}") from err
    return load_program(state, rom_data)


__all__ = [
    "INSTRUCTION_FAMILIES",
    "execute",
    "fetch",
    "step",
    "resolve_key_wait",
    "tick_timers",
    "present",
    "load_program",
    "load_rom",
]
