"""Console logging utilities for chipvm.

A small leveled console logger plus an interpreter callback system, used by
the command line entry point to report progress, traces and fatal errors.
"""

import time
import sys
from collections import Counter
from typing import Any, Dict, Optional, TextIO

from chipvm.decode import DecodedInstruction

MNEMONICS = {
    0x0: "SYS", 0x1: "JP", 0x2: "CALL", 0x3: "SE", 0x4: "SNE", 0x5: "SE",
    0x6: "LD", 0x7: "ADD", 0x8: "ALU", 0x9: "SNE", 0xA: "LD I", 0xB: "JP V0",
    0xC: "RND", 0xD: "DRW", 0xE: "SKP", 0xF: "MISC",
}


class ConsoleLogger:
    """Leveled console logger with optional colors and elapsed-time stamps."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream or sys.stdout
        self.error_stream = error_stream or sys.stderr
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order)}"
            )

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            stream = self.error_stream if self.level_order.get(level.upper(), 1) >= 3 else self.stream
            print(formatted, file=stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class InterpreterCallback:
    """Base class for interpreter callbacks."""

    def on_start(self, config: Dict[str, Any]):
        """Called before the first cycle."""
        pass

    def on_instruction(self, state: Any, instruction: DecodedInstruction):
        """Called after each executed instruction with the resulting state."""
        pass

    def on_halt(self, instruction_count: int, error: Optional[BaseException] = None):
        """Called once when the run loop stops, with the fatal error if any."""
        pass


class TraceCallback(InterpreterCallback):
    """Logs every executed instruction at DEBUG level."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or ConsoleLogger(log_level="DEBUG")

    def on_start(self, config: Dict[str, Any]):
        self.logger.debug("Tracing enabled")
        for key, value in config.items():
            self.logger.debug(f"  {key}: {value}")

    def on_instruction(self, state: Any, instruction: DecodedInstruction):
        self.logger.debug(
            f"{instruction.raw:04X} {MNEMONICS[instruction.opcode]:<6s}"
            f" -> pc=0x{int(state.pc):03X} I=0x{int(state.I):03X}"
        )


class StatsCallback(InterpreterCallback):
    """Counts executed instructions per opcode family."""

    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger
        self.family_counts = Counter()

    def on_instruction(self, state: Any, instruction: DecodedInstruction):
        self.family_counts[instruction.opcode] += 1

    def get_statistics(self) -> Dict[str, int]:
        """Instruction counts keyed by family mnemonic, e.g. ``"0xD DRW"``."""
        return {
            f"0x{opcode:X} {MNEMONICS[opcode]}": count
            for opcode, count in sorted(self.family_counts.items())
        }

    def on_halt(self, instruction_count: int, error: Optional[BaseException] = None):
        if self.logger is None:
            return
        self.logger.info(f"Executed {instruction_count} instructions")
        for family, count in self.get_statistics().items():
            self.logger.info(f"  {family}: {count}")
