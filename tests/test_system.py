"""Tests for system instructions (0xxx)."""

import pytest
import jax.numpy as jnp
from chipvm import execute, DecodeError


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.display_dirty
    assert state.pc == 0x202


def test_clear_screen_keeps_shape(fresh_state):
    state = execute(fresh_state, 0x00E0)
    assert state.display.shape == (32, 64)
    assert state.display.dtype == jnp.bool_


@pytest.mark.parametrize("instruction", [0x0000, 0x0123, 0x00E1, 0x00FF])
def test_unknown_system_instruction(fresh_state, instruction):
    """0NNN machine code calls are not supported."""
    with pytest.raises(DecodeError) as excinfo:
        execute(fresh_state, instruction)

    assert excinfo.value.word == instruction
    assert "0x200" in str(excinfo.value)
