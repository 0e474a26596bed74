"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp

from chipvm.state import MachineState, ExecutionMode
from chipvm.decode import DecodedInstruction
from chipvm.constants import FONT_START, FONT_GLYPH_SIZE, FLAG_REGISTER
from chipvm.errors import BoundsError
from chipvm.memory import read_block, write_block, check_register_block
from chipvm.instructions.base import advance, set_register


def execute_get_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX07 - Set VX to delay timer value."""
    return advance(set_register(state, instruction.x, int(state.delay_timer)))


def lowest_pressed_key(keypad: jnp.ndarray):
    """Index of the lowest pressed key, or None when no key is down."""
    pressed = jnp.flatnonzero(keypad)
    if pressed.size == 0:
        return None
    return int(pressed[0])


def resolve_key_wait(state: MachineState) -> MachineState:
    """Complete a pending FX0A once a key is down.

    Stores the lowest pressed key in the waiting register, moves PC past the
    instruction and returns to RUNNING. Without a pressed key the state is
    returned unchanged.
    """
    key = lowest_pressed_key(state.keypad)
    if key is None:
        return state
    state = set_register(state, state.wait_register, key)
    return advance(state.replace(mode=ExecutionMode.RUNNING, wait_register=0))


def execute_wait_for_key(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX0A - Wait for key press, store key in VX.

    Enters AWAITING_KEY with PC still on this instruction; the interpreter
    polls input and calls ``resolve_key_wait`` until a key is pressed.
    """
    state = state.replace(mode=ExecutionMode.AWAITING_KEY, wait_register=instruction.x)
    return resolve_key_wait(state)


def execute_set_delay_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX15 - Set delay timer to VX."""
    return advance(state.replace(delay_timer=state.V[instruction.x]))


def execute_set_sound_timer(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX18 - Set sound timer to VX."""
    return advance(state.replace(sound_timer=state.V[instruction.x]))


def execute_add_to_index(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX1E - Add VX to I register, VF = 1 when the sum passes 0xFF."""
    total = int(state.I) + int(state.V[instruction.x])
    state = state.replace(
        I=jnp.asarray(total & 0xFFFF, dtype=jnp.uint16),
        V=state.V.at[FLAG_REGISTER].set(int(total > 0xFF)),
    )
    return advance(state)


def execute_font_character(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x])
    if digit > 0xF:
        raise BoundsError(f"no font glyph for 0x{digit:02X}", pc=int(state.pc), word=instruction.raw)
    font_address = FONT_START + digit * FONT_GLYPH_SIZE
    return advance(state.replace(I=jnp.asarray(font_address, dtype=jnp.uint16)))


def execute_bcd_conversion(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    memory = write_block(state.memory, int(state.I), digits, pc=int(state.pc))
    return advance(state.replace(memory=memory))


def execute_store_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX55 - Store V0 through VX in memory starting at I. I is unchanged."""
    check_register_block(instruction.x, pc=int(state.pc))
    memory = write_block(state.memory, int(state.I), state.V[:instruction.x + 1], pc=int(state.pc))
    return advance(state.replace(memory=memory))


def execute_load_registers(state: MachineState, instruction: DecodedInstruction) -> MachineState:
    """FX65 - Load V0 through VX from memory starting at I. I is unchanged."""
    check_register_block(instruction.x, pc=int(state.pc))
    values = read_block(state.memory, int(state.I), instruction.x + 1, pc=int(state.pc))
    return advance(state.replace(V=state.V.at[:instruction.x + 1].set(values)))


MISC_INSTRUCTIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}
