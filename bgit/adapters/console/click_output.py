"""Click-based implementation of the Output port."""

import logging
from collections.abc import Sequence

import click

from bgit.adapters.git_cmd.git_adapter import format_command


class ClickOutput:
    """Writes informational lines to stdout and traces to stderr via click."""

    def line(self, message: str) -> None:
        click.echo(message)

    def trace(self, argv: Sequence[str]) -> None:
        click.echo(format_command(argv), err=True)


class ClickEchoHandler(logging.Handler):
    """Logging handler that routes records through click.echo(err=True).

    click.echo resolves the current stderr on every call, so output follows
    stream redirection (including click's test runner).
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)
