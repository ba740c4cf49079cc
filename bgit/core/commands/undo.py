"""Undo use case: drop the latest commit locally and on origin."""

import logging
from dataclasses import dataclass

from bgit.core.commands.base import UseCase
from bgit.core.guards import require_attached_head, require_remote
from bgit.domain.entities import REMOTE_NAME, CommandPlan, ExitSignal
from bgit.domain.exceptions import NothingToUndoError

logger = logging.getLogger(__name__)


@dataclass
class UndoRequest:
    pass


class UndoUseCase(UseCase):
    """Hard-reset the current branch to its parent and force-push it.

    Reset and push are separate steps; a local reset that was not pushed
    yet is a valid, merely unpublished state.
    """

    operation_name = "undo"

    def _run(self, request: UndoRequest) -> ExitSignal:
        context = self.inspector.snapshot()
        require_remote(context)
        require_attached_head(context, "undo")

        if context.commit_count == 0:
            raise NothingToUndoError(f"Nothing to undo: '{context.branch}' has no commits")
        if context.commit_count == 1:
            raise NothingToUndoError(
                "Cannot undo the only commit.",
                hint="Use git directly if you really want to discard it",
            )

        undone = self.inspector.head_summary()
        self.confirm(f"Discard commit {undone} on '{context.branch}' locally and on {REMOTE_NAME}?")

        plan = CommandPlan().add("Discard the latest commit", "reset", "--hard", "HEAD~1")
        if context.upstream is not None:
            remote, _, remote_branch = context.upstream.partition("/")
            plan.add(
                f"Overwrite {context.upstream}",
                "push", "--force", remote, f"HEAD:{remote_branch}",
            )
        self.apply(plan, "Undo failed")

        lines = [f"Undone: {undone}"]
        if context.upstream is None:
            lines.append(f"'{context.branch}' is not published; only the local branch was changed.")
        return self.finish(*lines)
