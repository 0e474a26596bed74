"""Bounds-checked access to memory, the register file and the keypad."""

from typing import Optional

import jax.numpy as jnp

from chipvm.constants import MEMORY_SIZE, NUM_REGISTERS, NUM_KEYS
from chipvm.errors import BoundsError


def check_range(address: int, width: int, pc: Optional[int] = None) -> None:
    """Raise BoundsError unless ``[address, address + width)`` is inside memory."""
    if address < 0 or address + width > MEMORY_SIZE:
        raise BoundsError(f"{width}-byte memory access out of range", pc=pc, address=address)


def read_byte(memory: jnp.ndarray, address: int, pc: Optional[int] = None) -> int:
    check_range(address, 1, pc)
    return int(memory[address])


def read_word(memory: jnp.ndarray, address: int, pc: Optional[int] = None) -> int:
    """Read a big-endian 16-bit word."""
    check_range(address, 2, pc)
    return (int(memory[address]) << 8) | int(memory[address + 1])


def read_block(memory: jnp.ndarray, address: int, width: int, pc: Optional[int] = None) -> jnp.ndarray:
    check_range(address, width, pc)
    return memory[address:address + width]


def write_block(memory: jnp.ndarray, address: int, values, pc: Optional[int] = None) -> jnp.ndarray:
    """Return a copy of ``memory`` with ``values`` stored at ``address``."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_range(address, values.shape[0], pc)
    return memory.at[address:address + values.shape[0]].set(values)


def check_register_block(last: int, pc: Optional[int] = None) -> None:
    """Raise BoundsError unless registers V0..V{last} fit the register file."""
    if last < 0 or last >= NUM_REGISTERS:
        raise BoundsError(f"register block V0..V{last:X} exceeds register file", pc=pc)


def check_key(index: int, pc: Optional[int] = None) -> None:
    if index < 0 or index >= NUM_KEYS:
        raise BoundsError(f"key index 0x{index:X} out of range", pc=pc)
