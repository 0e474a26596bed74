"""Command line entry point: ``chipvm ROM``."""

import argparse
import sys
from typing import Optional, Sequence

import jax

from chipvm.config import EmulatorConfig
from chipvm.emulator import load_rom
from chipvm.errors import MachineError
from chipvm.interpreter import Interpreter
from chipvm.logging import ConsoleLogger, TraceCallback, StatsCallback
from chipvm.rendering import create_color_scheme, COLOR_SCHEMES
from chipvm.state import create_state


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chipvm", description="Run a CHIP-8 program.")
    parser.add_argument("rom", help="program file loaded at 0x200")
    parser.add_argument("--scale", type=int, default=20, help="window pixels per CHIP-8 pixel")
    parser.add_argument("--delay", type=float, default=0.003, help="seconds between cycles")
    parser.add_argument("--color-scheme", choices=COLOR_SCHEMES, default="white")
    parser.add_argument("--seed", type=int, default=None, help="random seed for CXKK")
    parser.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    parser.add_argument("--trace", action="store_true", help="log every instruction")
    return parser


def parse_config(argv: Optional[Sequence[str]] = None) -> EmulatorConfig:
    args = build_parser().parse_args(argv)
    return EmulatorConfig(
        rom_path=args.rom,
        scale=args.scale,
        cycle_delay=args.delay,
        color_scheme=args.color_scheme,
        seed=args.seed,
        log_level="DEBUG" if args.trace else args.log_level,
        trace=args.trace,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = parse_config(argv)
    logger = ConsoleLogger(log_level=config.log_level)

    print(f"Loading {config.rom_path}")
    try:
        state = create_state(jax.random.PRNGKey(config.resolved_seed()))
        state = load_rom(state, config.rom_path)
    except MachineError as err:
        logger.critical(str(err))
        return 1

    callbacks = [StatsCallback(logger)]
    if config.trace:
        callbacks.append(TraceCallback(logger))

    # Imported here so loading errors are reported without touching the display
    from chipvm.frontend import open_frontend

    on_color, off_color = create_color_scheme(config.color_scheme)
    with open_frontend(config.rom_path, config.scale, on_color, off_color) as (keys, display, sound):
        interpreter = Interpreter(
            state, keys, display, sound,
            callbacks=callbacks,
            cycle_delay=config.cycle_delay,
            config=config.asdict(),
        )
        try:
            interpreter.run()
        except MachineError as err:
            logger.critical(str(err))
            return 1

    print("DONE")
    return 0


if __name__ == "__main__":
    sys.exit(main())
