"""CHIP-8 stack operations."""

from typing import Optional

import jax.numpy as jnp

from chipvm.constants import STACK_SIZE
from chipvm.errors import BoundsError
from chipvm.state import StackState


def push(stack: StackState, address: int, pc: Optional[int] = None) -> StackState:
    """Push address onto stack."""
    if stack.pointer >= STACK_SIZE:
        raise BoundsError("call stack overflow", pc=pc)
    new_data = stack.data.at[stack.pointer].set(jnp.asarray(address, dtype=jnp.uint16))
    return stack.replace(data=new_data, pointer=stack.pointer + 1)


def pop(stack: StackState, pc: Optional[int] = None) -> tuple[StackState, int]:
    """Pop address from stack."""
    if stack.pointer <= 0:
        raise BoundsError("call stack underflow", pc=pc)
    new_pointer = stack.pointer - 1
    popped_address = int(stack.data[new_pointer])
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
