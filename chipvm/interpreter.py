"""Run loop driving the machine through its collaborators."""

import time
from typing import Any, Dict, Optional, Sequence

import jax.numpy as jnp

from chipvm.constants import NUM_KEYS
from chipvm.decode import decode
from chipvm.emulator import fetch, execute, resolve_key_wait, tick_timers, present
from chipvm.errors import MachineError
from chipvm.interfaces import KeySource, DisplaySink, SoundSink, NullDisplay, NullSound
from chipvm.logging import InterpreterCallback
from chipvm.state import MachineState


class Interpreter:
    """Owns a MachineState and runs it one outer cycle at a time.

    Each cycle refreshes the keypad, executes exactly one instruction, ticks
    the timers and presents the display if it changed, in that order. An FX0A
    instruction keeps the cycle open, polling input, until a key is pressed or
    quit is requested; timers do not move while it waits.
    """

    def __init__(
        self,
        state: MachineState,
        keys: KeySource,
        display: Optional[DisplaySink] = None,
        sound: Optional[SoundSink] = None,
        callbacks: Sequence[InterpreterCallback] = (),
        cycle_delay: float = 0.0,
        config: Optional[Dict[str, Any]] = None,
    ):
        self.state = state
        self.keys = keys
        self.display = display or NullDisplay()
        self.sound = sound or NullSound()
        self.callbacks = list(callbacks)
        self.cycle_delay = cycle_delay
        self.config = dict(config or {})
        self.instruction_count = 0

    def _refresh_keys(self):
        pressed = list(self.keys.poll())
        if len(pressed) != NUM_KEYS:
            raise ValueError(f"key source returned {len(pressed)} keys, expected {NUM_KEYS}")
        self.state = self.state.replace(keypad=jnp.asarray(pressed, dtype=jnp.bool_))

    def _wait_for_key(self) -> bool:
        """Poll until the pending key wait resolves. False if quit came first."""
        while self.state.awaiting_key:
            if self.keys.quit_requested():
                return False
            self._refresh_keys()
            self.state = resolve_key_wait(self.state)
        return True

    def cycle(self) -> bool:
        """Run one outer cycle. Returns False if quit was observed mid-cycle."""
        self._refresh_keys()

        instruction = fetch(self.state)
        self.state = execute(self.state, instruction)
        if not self._wait_for_key():
            return False

        self.instruction_count += 1
        decoded_instruction = decode(instruction)
        for callback in self.callbacks:
            callback.on_instruction(self.state, decoded_instruction)

        self.state, play_sound = tick_timers(self.state)
        if play_sound:
            self.sound.beep()

        self.state, frame = present(self.state)
        if frame is not None:
            self.display.present(frame)
        return True

    def run(self) -> MachineState:
        """Cycle until quit is requested. MachineErrors propagate after callbacks see them."""
        for callback in self.callbacks:
            callback.on_start(self.config)

        error = None
        try:
            while not self.keys.quit_requested():
                if not self.cycle():
                    break
                if self.cycle_delay > 0:
                    time.sleep(self.cycle_delay)
        except MachineError as err:
            error = err
            raise
        finally:
            for callback in self.callbacks:
                callback.on_halt(self.instruction_count, error)
        return self.state
