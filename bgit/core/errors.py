"""CLI error handling with actionable hints.

Provides consistent error formatting for all bgit commands.
"""

import click

from bgit.domain.entities import ExitCode, ExitSignal


class BgitCliError(click.ClickException):
    """CLI error with actionable hint and a specific exit code.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.
        detail: Raw git output shown beneath the message.
        exit_code: Process exit code.

    Example:
        raise BgitCliError(
            "Working tree has uncommitted changes",
            hint="Commit and push them with 'bgit ship'",
            exit_code=ExitCode.DIRTY_TREE,
        )
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        detail: str | None = None,
        exit_code: int = ExitCode.INVALID_USAGE,
    ) -> None:
        super().__init__(message)
        self.hint = hint
        self.detail = detail
        self.exit_code = int(exit_code)

    def format_message(self) -> str:
        """Format the error message with git output and hint if present."""
        msg = self.message
        if self.detail:
            msg += f"\n{self.detail}"
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg

    @classmethod
    def from_signal(cls, signal: ExitSignal) -> "BgitCliError":
        return cls(
            signal.error or "Command failed",
            hint=signal.hint,
            detail=signal.detail,
            exit_code=signal.code,
        )
