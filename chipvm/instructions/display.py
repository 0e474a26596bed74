"""CHIP-8 display operations."""

import numpy as np
import jax.numpy as jnp

from chipvm.state import MachineState
from chipvm.decode import DecodedInstruction
from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, FLAG_REGISTER
from chipvm.memory import read_block
from chipvm.instructions.base import advance

# Bit masks for the 8 sprite columns, most significant bit first
_COLUMN_BITS = np.array([0x80 >> column for column in range(8)], dtype=np.uint8)


def blit_sprite(
    display: jnp.ndarray, sprite: jnp.ndarray, x: int, y: int
) -> tuple[jnp.ndarray, bool]:
    """XOR ``sprite`` rows onto ``display`` at ``(x, y)``, wrapping both axes.

    Returns the new display and whether any set pixel was cleared.
    """
    rows = np.asarray(sprite, dtype=np.uint8)
    bits = (rows[:, None] & _COLUMN_BITS[None, :]) != 0
    row_index, column_index = np.nonzero(bits)
    if row_index.size == 0:
        return display, False

    ys = (y + row_index) % SCREEN_HEIGHT
    xs = (x + column_index) % SCREEN_WIDTH
    collision = bool(jnp.any(display[ys, xs]))
    return display.at[ys, xs].set(~display[ys, xs]), collision


def execute_display(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """DXYN - Draw N-byte sprite from I at (VX, VY), VF = collision."""
    sprite = read_block(state.memory, int(state.I), instruction.n, pc=int(state.pc))
    display, collision = blit_sprite(
        state.display, sprite, int(state.V[instruction.x]), int(state.V[instruction.y])
    )
    state = state.replace(
        display=display,
        display_dirty=True,
        V=state.V.at[FLAG_REGISTER].set(int(collision)),
    )
    return advance(state)
