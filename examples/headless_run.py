"""Run a CHIP-8 program without a window and print the final screen as text.

Usage: python examples/headless_run.py ROM [CYCLES]
"""

import sys

import jax

from chipvm import Interpreter, create_state, load_rom
from chipvm.logging import ConsoleLogger, StatsCallback


class IdleKeys:
    """No keys pressed; requests quit after a fixed number of cycles."""

    def __init__(self, cycles: int):
        self.remaining = cycles

    def poll(self):
        self.remaining -= 1
        return [False] * 16

    def quit_requested(self):
        return self.remaining <= 0


class TextDisplay:
    def __init__(self):
        self.last = None

    def present(self, display):
        self.last = display


if __name__ == "__main__":
    if len(sys.argv) not in (2, 3):
        print(__doc__, file=sys.stderr)
        sys.exit(1)

    cycles = int(sys.argv[2]) if len(sys.argv) == 3 else 2000
    state = load_rom(create_state(jax.random.PRNGKey(0)), sys.argv[1])
    display = TextDisplay()
    interpreter = Interpreter(
        state, IdleKeys(cycles), display, callbacks=[StatsCallback(ConsoleLogger())]
    )
    interpreter.run()

    if display.last is not None:
        for row in display.last.tolist():
            print("".join("#" if pixel else "." for pixel in row))
