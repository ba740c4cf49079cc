"""Progress reporting utilities for CLI commands.

Provides Rich-based progress bars and context managers for visual feedback
while long command plans are applied.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

logger = logging.getLogger(__name__)


class RichProgressCallback:
    """Rich-based progress callback for visual progress reporting."""

    def __init__(self, progress: Progress) -> None:
        self.progress = progress
        self.task_id: int | None = None

    def on_start(self, total: int, description: str) -> None:
        """Create progress bar when operation starts."""
        self.task_id = self.progress.add_task(description, total=total, current_step="")

    def on_progress(self, current: int, item_description: str | None = None) -> None:
        """Update progress bar with current step."""
        if self.task_id is not None:
            self.progress.update(
                self.task_id, completed=current, current_step=item_description or ""
            )

    def on_complete(self) -> None:
        """Mark progress as complete and hide it."""
        if self.task_id is not None:
            self.progress.remove_task(self.task_id)
            self.task_id = None


@contextmanager
def progress_context(
    quiet_mode: bool = False,
) -> Generator[RichProgressCallback | None, None, None]:
    """Context manager for creating progress bars.

    Progress is drawn on stderr and only when stderr is a terminal.

    Args:
        quiet_mode: If True, returns None (no progress reporting).

    Yields:
        RichProgressCallback if progress should be shown, None otherwise.
    """
    console = Console(stderr=True)
    if quiet_mode or not console.is_terminal:
        yield None
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TextColumn("[cyan]{task.fields[current_step]}"),
            console=console,
            transient=True,
        ) as progress:
            yield RichProgressCallback(progress)
