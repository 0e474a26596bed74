"""Helpers shared by the instruction handlers."""

import jax.numpy as jnp

from chipvm.constants import FLAG_REGISTER
from chipvm.state import MachineState


def set_pc(state: MachineState, address: int) -> MachineState:
    return state.replace(pc=jnp.asarray(address & 0xFFFF, dtype=jnp.uint16))


def advance(state: MachineState, amount: int = 2) -> MachineState:
    """Move PC past the current instruction (``amount=4`` skips the next one)."""
    return set_pc(state, int(state.pc) + amount)


def skip_if(state: MachineState, condition: bool) -> MachineState:
    return advance(state, 4 if condition else 2)


def set_register(state: MachineState, index: int, value: int) -> MachineState:
    return state.replace(V=state.V.at[index].set(value & 0xFF))


def set_result_and_flag(state: MachineState, index: int, value: int, flag: int) -> MachineState:
    """Store an ALU result, then overwrite VF with the flag.

    When ``index`` is VF the flag wins, matching the order the hardware writes.
    """
    new_V = state.V.at[index].set(value & 0xFF)
    new_V = new_V.at[FLAG_REGISTER].set(flag & 0xFF)
    return state.replace(V=new_V)
