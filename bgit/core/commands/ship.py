"""Ship use case: sync with origin, stage everything, commit and push."""

import logging
from dataclasses import dataclass
from datetime import datetime

from bgit.core.commands.base import UseCase
from bgit.core.guards import pull_fast_forward, ship_preflight
from bgit.domain.entities import (
    REMOTE_NAME,
    CommandPlan,
    ExitSignal,
    OutcomeTag,
    RepositoryContext,
)
from bgit.domain.exceptions import (
    DivergedHistoryError,
    InvalidUsageError,
    SubprocessFailureError,
)

logger = logging.getLogger(__name__)

ALREADY_UP_TO_DATE = "Already up to date."
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def auto_commit_message(branch: str, diffstat: str, now: datetime | None = None) -> str:
    """Build "<branch>: <diffstat summary> (<YYYY-MM-DD HH:MM:SS>)".

    Args:
        branch: Branch being committed to.
        diffstat: One-line summary such as "2 files changed, 3 insertions(+)".
        now: Timestamp to embed; defaults to the current local time.
    """
    stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    summary = diffstat.strip() or "update"
    return f"{branch}: {summary} ({stamp})"


@dataclass
class ShipRequest:
    """Request to ship the current branch.

    Attributes:
        message: Commit message, or None to generate one.
    """

    message: str | None = None


class ShipUseCase(UseCase):
    """start -> synced -> staged -> committed -> published, or the clean shortcut."""

    operation_name = "ship"

    def validate(self, request: ShipRequest) -> None:
        if request.message is not None and not request.message.strip():
            raise InvalidUsageError(
                "Commit message cannot be empty",
                hint="Pass a message with -m, or leave -m out to generate one",
            )
        if request.message is None and not self.env.settings.ship.auto_message:
            raise InvalidUsageError(
                "A commit message is required",
                hint="Pass one with -m, or set auto_message = true under [ship]",
            )

    def _run(self, request: ShipRequest) -> ExitSignal:
        context = ship_preflight(self.inspector)

        if context.upstream is not None:
            pull_fast_forward(self.runner, context.branch, context.upstream)
            context = self.inspector.snapshot()

        return self.publish(context, request.message)

    def publish(self, context: RepositoryContext, message: str | None) -> ExitSignal:
        """Stage, commit (if anything changed) and push the current branch.

        Also used by merge to publish a freshly created merge commit.
        """
        changes = len(self.inspector.status_lines())
        outgoing = self._outgoing_commits(context)
        if changes == 0 and outgoing == 0:
            return ExitSignal.ok(ALREADY_UP_TO_DATE)

        lines: list[str] = []
        if changes:
            self.apply(CommandPlan().add("Stage all changes", "add", "-A"), "Staging failed")
            if message is None:
                message = auto_commit_message(context.branch, self._diffstat(changes))
            self.apply(CommandPlan().add("Commit staged changes", "commit", "-m", message), "Commit failed")
            if not self.dry_run:
                lines.append(f"Committed: {self.inspector.head_summary()}")

        self._push(context)
        lines.append(f"Shipped {context.branch} to {REMOTE_NAME}.")
        return self.finish(*lines)

    def _outgoing_commits(self, context: RepositoryContext) -> int:
        if context.upstream is not None:
            return context.sync.ahead
        if self.inspector.remote_branch_exists(context.branch):
            return self.inspector.unpublished_count()
        # Publishing a branch that is not on the remote yet is itself outgoing work
        return context.commit_count

    def _diffstat(self, changes: int) -> str:
        if self.dry_run:
            # Nothing was staged, so describe the pending status entries instead
            return f"{changes} file{'s' if changes != 1 else ''} changed"
        return self.inspector.staged_shortstat()

    def _push(self, context: RepositoryContext) -> None:
        plan = CommandPlan()
        if context.upstream is not None:
            # the upstream branch may be named differently from the local one
            remote, _, remote_branch = context.upstream.partition("/")
            plan.add(f"Push {context.branch} to {context.upstream}", "push", remote, f"HEAD:{remote_branch}")
        else:
            plan.add(
                f"Publish {context.branch} and set its upstream",
                "push", "-u", REMOTE_NAME, context.branch,
            )
        result = self.runner.execute(plan)
        if result.succeeded:
            return
        if result.failure.tag is OutcomeTag.NON_FAST_FORWARD:
            raise DivergedHistoryError(
                f"Push of '{context.branch}' was rejected: {REMOTE_NAME} has new commits",
                hint="Run 'bgit ship' again to fast-forward first, or resolve manually with git",
                detail=result.failure.diagnostic or None,
            )
        raise SubprocessFailureError(result.failure, "Push failed")
