"""Test configuration and fixtures for CHIP-8 interpreter tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, load_program


@pytest.fixture
def fresh_state():
    """Provide a fresh machine state for each test."""
    return create_state()


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def program(*words):
    """Encode instruction words as big-endian program bytes."""
    return b"".join(word.to_bytes(2, "big") for word in words)


def load_words(state, *words):
    """Helper to load instruction words at 0x200."""
    return load_program(state, program(*words))


def keys_down(*indices):
    pressed = [False] * 16
    for index in indices:
        pressed[index] = True
    return pressed


class FakeKeys:
    """Scripted key source.

    ``frames`` is consumed one entry per poll; the last entry repeats. Setting
    ``quit_after`` makes ``quit_requested`` turn True after that many polls.
    ``on_poll`` is called before each poll, for tests that inspect machine
    state while the interpreter is waiting.
    """

    def __init__(self, frames=None, quit_after=None, on_poll=None):
        self.frames = list(frames or [keys_down()])
        self.quit_after = quit_after
        self.on_poll = on_poll
        self.polls = 0

    def poll(self):
        if self.on_poll is not None:
            self.on_poll(self.polls)
        index = min(self.polls, len(self.frames) - 1)
        self.polls += 1
        return self.frames[index]

    def quit_requested(self):
        return self.quit_after is not None and self.polls >= self.quit_after


class RecordingDisplay:
    def __init__(self):
        self.frames = []

    def present(self, display):
        self.frames.append(display)


class RecordingSound:
    def __init__(self):
        self.beeps = 0

    def beep(self):
        self.beeps += 1
