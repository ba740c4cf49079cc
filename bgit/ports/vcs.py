"""Version Control System (VCS) port interface.

Defines the abstract interface the engine uses to talk to git. Reads go
through `query`; anything that changes the repository or the remote goes
through `run` (live) or `plan` (dry-run).
"""

from collections.abc import Sequence
from typing import Protocol

from bgit.domain.entities import ExecutionOutcome


class VCS(Protocol):
    """Protocol for invoking the version control tool."""

    def query(self, args: Sequence[str]) -> ExecutionOutcome:
        """Run a read-only command.

        Never raises for a non-zero exit; absence is reported through the
        returned outcome so callers can treat it as an empty result.

        Args:
            args: Arguments without the program name.

        Returns:
            Classified outcome with captured output.
        """
        ...

    def run(self, args: Sequence[str], *, allow_failure: bool = False) -> ExecutionOutcome:
        """Run a mutating command.

        Args:
            args: Arguments without the program name.
            allow_failure: Return failed outcomes instead of raising.

        Returns:
            Classified outcome with captured output.

        Raises:
            SubprocessFailureError: If the command fails and allow_failure is False.
        """
        ...

    def plan(self, args: Sequence[str]) -> ExecutionOutcome:
        """Record a mutating command without executing it.

        Returns:
            Synthetic success outcome marked as planned.
        """
        ...
