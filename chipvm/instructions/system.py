"""CHIP-8 system instructions (0x0xxx)."""

import jax.numpy as jnp

from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.stack import pop
from chipvm.instructions.base import advance, set_pc


def execute_clear_screen(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00E0 - Clear display."""
    state = state.replace(display=jnp.zeros_like(state.display), display_dirty=True)
    return advance(state)


def execute_return(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """00EE - Return from subroutine.

    The stack holds the address of the call itself, so execution resumes two
    bytes after it.
    """
    stack, address = pop(state.stack, pc=int(state.pc))
    return set_pc(state.replace(stack=stack), address + 2)


SYSTEM_INSTRUCTIONS = {
    0xE0: execute_clear_screen,
    0xEE: execute_return,
}
