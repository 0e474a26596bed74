"""Fatal interpreter conditions."""

from typing import Optional


class MachineError(Exception):
    """Base class for errors that halt the interpreter.

    Carries the program counter, the raw instruction word and the offending
    address when they are known, and renders them in hex.
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        word: Optional[int] = None,
        address: Optional[int] = None,
    ):
        self.message = message
        self.pc = pc
        self.word = word
        self.address = address
        super().__init__(self._format())

    def _format(self) -> str:
        details = []
        if self.pc is not None:
            details.append(f"pc=0x{self.pc:03X}")
        if self.word is not None:
            details.append(f"instruction=0x{self.word:04X}")
        if self.address is not None:
            details.append(f"address=0x{self.address:03X}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class DecodeError(MachineError):
    """Instruction word has no defined semantics."""


class BoundsError(MachineError):
    """Memory, stack or register-range access past its fixed capacity."""


class RomLoadError(MachineError):
    """Program could not be read or does not fit in memory."""
