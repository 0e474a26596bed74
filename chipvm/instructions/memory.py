"""CHIP-8 register load and immediate operations."""

import jax
import jax.numpy as jnp

from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.instructions.base import advance, set_register


def execute_set(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """6XKK - Set VX = KK."""
    return advance(set_register(state, instruction.x, instruction.kk))


def execute_add(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """7XKK - Add KK to VX.

    Wraps at 8 bits and leaves VF alone, unlike 8XY4.
    """
    value = int(state.V[instruction.x]) + instruction.kk
    return advance(set_register(state, instruction.x, value))


def execute_set_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """ANNN - Set I = NNN."""
    return advance(state.replace(I=jnp.asarray(instruction.nnn, dtype=jnp.uint16)))


def execute_random(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """CXKK - Set VX = random & KK."""
    key, subkey = jax.random.split(state.rng)
    random_value = int(jax.random.bits(subkey, dtype=jnp.uint8))
    state = set_register(state.replace(rng=key), instruction.x, random_value & instruction.kk)
    return advance(state)
