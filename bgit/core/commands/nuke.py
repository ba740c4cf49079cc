"""Nuke use case: make the local repository an exact copy of origin.

Every remote branch gets a same-named local branch pointing at the remote
tip and tracking it, local-only branches are deleted, and the working tree
is hard-reset and cleaned. Steps are only planned when they would change
something, so running nuke twice leaves the second run with nothing to
update or delete.
"""

import logging
from dataclasses import dataclass

from bgit.core.commands.base import UseCase
from bgit.core.commands.branch import fetch_plan
from bgit.core.guards import require_remote
from bgit.domain.entities import DETACHED, REMOTE_NAME, CommandPlan, ExitSignal
from bgit.domain.exceptions import RemoteMissingError

logger = logging.getLogger(__name__)


@dataclass
class NukeRequest:
    pass


class NukeUseCase(UseCase):
    """Destructive hard sync of every branch to origin."""

    operation_name = "nuke"

    def _run(self, request: NukeRequest) -> ExitSignal:
        context = self.inspector.snapshot()
        require_remote(context)
        start = context.branch

        self.confirm(
            f"Discard ALL local changes, commits and branches not on {REMOTE_NAME}?"
        )
        self.apply(fetch_plan(), "Fetch failed")

        remote_branches = self.inspector.remote_branches()
        default = self.inspector.default_remote_branch()
        if not remote_branches or default is None:
            raise RemoteMissingError(
                f"{REMOTE_NAME} has no branches to sync with",
                hint=f"Push a branch to {REMOTE_NAME} first",
            )
        final = start if start in remote_branches else default
        logger.debug("Nuke: start=%s default=%s final=%s", start, default, final)

        plan = self.build_plan(start, final, remote_branches)
        self.apply(plan, "Nuke failed", description="Syncing with origin")
        return self.finish(f"Nuked: local repository now matches {REMOTE_NAME}/{final}.")

    def build_plan(self, start: str, final: str, remote_branches: list[str]) -> CommandPlan:
        """Plan branch updates, deletions and the final reset."""
        updates = CommandPlan()
        touched: set[str] = set()
        for name in remote_branches:
            remote_ref = f"{REMOTE_NAME}/{name}"
            remote_sha = self.inspector.resolve_sha(f"refs/remotes/{remote_ref}")
            local_sha = self.inspector.resolve_sha(f"refs/heads/{name}")
            if local_sha != remote_sha:
                updates.add(f"Point {name} at {remote_ref}", "branch", "--force", "--no-track", name, remote_ref)
                touched.add(name)
            if name in touched or self.inspector.upstream_of(name) != remote_ref:
                updates.add(f"Track {remote_ref}", "branch", f"--set-upstream-to={remote_ref}", name)

        deletions = CommandPlan()
        for name in self.inspector.local_branches():
            if name not in remote_branches:
                deletions.add(f"Delete local-only {name}", "branch", "-D", name)
                touched.add(name)

        plan = CommandPlan()
        # git refuses to move or delete the checked-out branch
        if start != DETACHED and start in touched:
            plan.add("Detach HEAD", "checkout", "--force", "--detach")
        plan.extend(deletions).extend(updates)

        if start != final or start in touched:
            plan.add(f"Switch to {final}", "checkout", "--force", final)
        plan.add(f"Reset to {REMOTE_NAME}/{final}", "reset", "--hard", f"{REMOTE_NAME}/{final}")
        plan.add("Remove untracked and ignored files", "clean", "-ffdx")
        return plan
