"""Runtime configuration for the command line emulator."""

import dataclasses
import time
from typing import Optional


@dataclasses.dataclass(frozen=True)
class EmulatorConfig:
    """Settings for one emulator run.

    Attributes:
        rom_path: Program file loaded at 0x200
        scale: Window pixels per CHIP-8 pixel
        cycle_delay: Seconds slept between cycles
        color_scheme: Name passed to ``create_color_scheme``
        seed: PRNG seed for CXKK, taken from the clock when None
        log_level: Console logger level
        trace: Log every executed instruction
    """
    rom_path: str
    scale: int = 20
    cycle_delay: float = 0.003
    color_scheme: str = "white"
    seed: Optional[int] = None
    log_level: str = "INFO"
    trace: bool = False

    def resolved_seed(self) -> int:
        return self.seed if self.seed is not None else time.time_ns() & 0x7FFFFFFF

    def asdict(self) -> dict:
        return dataclasses.asdict(self)
