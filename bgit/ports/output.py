"""Output port for user-facing text emitted while a command runs."""

from collections.abc import Sequence
from typing import Protocol


class Output(Protocol):
    """Protocol for writing human-readable output."""

    def line(self, message: str) -> None:
        """Write one informational line to standard output."""
        ...

    def trace(self, argv: Sequence[str]) -> None:
        """Write a "+ <tool> <args>" trace line to diagnostic output."""
        ...
