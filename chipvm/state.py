"""CHIP-8 machine state structures."""

import enum

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chipvm.constants import (
    MEMORY_SIZE, PROGRAM_START, FONT_START, FONT_DATA, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS,
)


class ExecutionMode(enum.IntEnum):
    """Execution progress of the interpreter."""
    RUNNING = 0
    AWAITING_KEY = 1


@dataclass(frozen=True)
class StackState:
    """Return addresses for subroutine calls.

    ``pointer`` counts the addresses currently pushed, so it ranges over
    ``[0, STACK_SIZE]``.
    """
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class MachineState(PyTreeNode):
    """Complete CHIP-8 machine state.

    The display is row-major, indexed ``display[y, x]``. ``V[0xF]`` doubles as
    the carry/borrow/collision flag for the instructions that write it.
    """
    rng: jax.Array
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_HEIGHT, SCREEN_WIDTH), dtype=jnp.bool_))
    display_dirty: bool = False
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    mode: ExecutionMode = field(pytree_node=False, default=ExecutionMode.RUNNING)
    wait_register: int = field(pytree_node=False, default=0)

    @property
    def awaiting_key(self) -> bool:
        return self.mode == ExecutionMode.AWAITING_KEY


def create_state(rng: jax.Array = jax.random.PRNGKey(0)) -> MachineState:
    """Create initial machine state with font data loaded."""
    state = MachineState(rng)
    font = jnp.array(FONT_DATA, dtype=jnp.uint8)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(font))
