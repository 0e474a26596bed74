"""Tests for the interpreter run loop and the key wait state machine."""

import pytest
import jax.numpy as jnp
from chipvm import Interpreter, ExecutionMode, DecodeError, BoundsError
from chipvm.logging import InterpreterCallback, StatsCallback
from conftest import FakeKeys, RecordingDisplay, RecordingSound, keys_down, load_words


class RecordingCallback(InterpreterCallback):
    def __init__(self):
        self.events = []

    def on_start(self, config):
        self.events.append(("start", config))

    def on_instruction(self, state, instruction):
        self.events.append(("instruction", instruction.raw))

    def on_halt(self, instruction_count, error=None):
        self.events.append(("halt", instruction_count, error))


def make_interpreter(state, keys=None, **kwargs):
    return Interpreter(
        state,
        keys or FakeKeys(),
        RecordingDisplay(),
        RecordingSound(),
        **kwargs,
    )


class TestCycle:
    def test_cycle_executes_one_instruction(self, fresh_state):
        interpreter = make_interpreter(load_words(fresh_state, 0x6105, 0x6206))

        assert interpreter.cycle()

        assert interpreter.state.V[1] == 5
        assert interpreter.state.V[2] == 0
        assert interpreter.instruction_count == 1

    def test_keys_refreshed_before_execution(self, fresh_state):
        state = load_words(fresh_state, 0x6003, 0xE09E)  # V0 = 3; skip if key 3
        interpreter = make_interpreter(state, FakeKeys([keys_down(), keys_down(3)]))

        interpreter.cycle()
        interpreter.cycle()

        assert interpreter.state.pc == 0x206

    def test_timers_tick_after_execution(self, fresh_state):
        state = load_words(fresh_state, 0x6005, 0xF015, 0xF107)  # DT = 5; V1 = DT
        interpreter = make_interpreter(state)

        for _ in range(3):
            interpreter.cycle()

        # Set to 5, ticked once after FX15, read before the next tick
        assert interpreter.state.V[1] == 4
        assert interpreter.state.delay_timer == 3

    def test_sound_requested_once(self, fresh_state):
        state = load_words(fresh_state, 0x6002, 0xF018, 0x1204)
        interpreter = make_interpreter(state)

        for _ in range(6):
            interpreter.cycle()

        assert interpreter.sound.beeps == 1

    def test_display_presented_only_when_dirty(self, fresh_state):
        state = load_words(fresh_state, 0x00E0, 0x6000, 0x00E0)
        interpreter = make_interpreter(state)

        for _ in range(3):
            interpreter.cycle()

        assert len(interpreter.display.frames) == 2
        assert not interpreter.state.display_dirty

    def test_key_source_must_report_sixteen_keys(self, fresh_state):
        interpreter = make_interpreter(load_words(fresh_state, 0x6000), FakeKeys([[True] * 4]))
        with pytest.raises(ValueError):
            interpreter.cycle()


class TestKeyWait:
    def test_wait_holds_machine_until_key(self, fresh_state):
        state = load_words(fresh_state, 0xF50A)
        state = state.replace(delay_timer=jnp.asarray(10, dtype=jnp.uint8))
        interpreter = None
        snapshots = []

        def snapshot(poll):
            if poll > 0:
                snapshots.append((
                    int(interpreter.state.pc),
                    int(interpreter.state.delay_timer),
                    interpreter.state.mode,
                ))

        frames = [keys_down()] * 5 + [keys_down(0xA, 0xC)]
        interpreter = make_interpreter(state, FakeKeys(frames, on_poll=snapshot))

        assert interpreter.cycle()

        assert snapshots == [(0x200, 10, ExecutionMode.AWAITING_KEY)] * 5
        assert interpreter.state.V[5] == 10
        assert interpreter.state.pc == 0x202
        assert interpreter.state.mode == ExecutionMode.RUNNING
        assert interpreter.state.delay_timer == 9  # Ticked once for the whole cycle
        assert interpreter.instruction_count == 1

    def test_quit_during_wait(self, fresh_state):
        state = load_words(fresh_state, 0xF50A)
        keys = FakeKeys(quit_after=3)
        interpreter = make_interpreter(state, keys)

        assert not interpreter.cycle()

        assert interpreter.state.awaiting_key
        assert interpreter.state.V[5] == 0
        assert interpreter.state.pc == 0x200
        assert interpreter.instruction_count == 0

    def test_run_stops_when_quit_during_wait(self, fresh_state):
        state = load_words(fresh_state, 0x6001, 0xF50A, 0x6002)
        callback = RecordingCallback()
        interpreter = make_interpreter(state, FakeKeys(quit_after=4), callbacks=[callback])

        interpreter.run()

        assert interpreter.state.V[0] == 1
        assert interpreter.instruction_count == 1
        assert callback.events[-1] == ("halt", 1, None)


class TestRun:
    def test_run_until_quit(self, fresh_state):
        state = load_words(fresh_state, 0x7001, 0x1200)
        callback = RecordingCallback()
        interpreter = make_interpreter(
            state, FakeKeys(quit_after=6), callbacks=[callback], config={"rom_path": "loop.ch8"}
        )

        interpreter.run()

        assert interpreter.instruction_count == 6
        assert interpreter.state.V[0] == 3
        assert callback.events[0] == ("start", {"rom_path": "loop.ch8"})
        assert callback.events[1:4] == [
            ("instruction", 0x7001), ("instruction", 0x1200), ("instruction", 0x7001)
        ]

    def test_run_propagates_decode_error(self, fresh_state):
        state = load_words(fresh_state, 0x6001, 0x8009)
        callback = RecordingCallback()
        interpreter = make_interpreter(state, callbacks=[callback])

        with pytest.raises(DecodeError) as excinfo:
            interpreter.run()

        assert excinfo.value.pc == 0x202
        assert excinfo.value.word == 0x8009
        halt = callback.events[-1]
        assert halt[0] == "halt" and halt[1] == 1 and halt[2] is excinfo.value

    def test_run_propagates_stack_overflow(self, fresh_state):
        state = load_words(fresh_state, 0x2200)  # Calls itself forever
        interpreter = make_interpreter(state)

        with pytest.raises(BoundsError):
            interpreter.run()
        assert interpreter.instruction_count == 16

    def test_stats_callback_counts_families(self, fresh_state):
        state = load_words(fresh_state, 0x6001, 0x7001, 0x1202)
        stats = StatsCallback()
        interpreter = make_interpreter(state, FakeKeys(quit_after=5), callbacks=[stats])

        interpreter.run()

        assert stats.get_statistics() == {"0x1 JP": 2, "0x6 LD": 1, "0x7 ADD": 2}
