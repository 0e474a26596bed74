"""Collaborator interfaces the interpreter is driven through."""

from typing import Protocol, Sequence

import jax.numpy as jnp


class KeySource(Protocol):
    """Input collaborator."""

    def poll(self) -> Sequence[bool]:
        """Return the pressed state of all 16 keys."""
        ...

    def quit_requested(self) -> bool:
        """Sticky: once True, stays True."""
        ...


class DisplaySink(Protocol):
    def present(self, display: jnp.ndarray) -> None:
        ...


class SoundSink(Protocol):
    def beep(self) -> None:
        ...


class NullDisplay:
    """Discards frames."""

    def present(self, display: jnp.ndarray) -> None:
        pass


class NullSound:
    """Discards sound requests."""

    def beep(self) -> None:
        pass
