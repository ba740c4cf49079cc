"""Branch use case: switch to, track, or create-and-publish a branch."""

import logging
from dataclasses import dataclass

from bgit.core.commands.base import UseCase
from bgit.core.guards import pull_fast_forward, require_clean_tree, require_remote
from bgit.domain.entities import REMOTE_NAME, BranchRef, CommandPlan, ExitSignal
from bgit.domain.exceptions import InvalidUsageError

logger = logging.getLogger(__name__)


@dataclass
class BranchRequest:
    name: str


def fetch_plan() -> CommandPlan:
    return CommandPlan().add(f"Fetch from {REMOTE_NAME}", "fetch", "--prune", REMOTE_NAME)


class BranchUseCase(UseCase):
    """Switch to a branch, resolving local, remote-only and brand-new names."""

    operation_name = "branch"

    def validate(self, request: BranchRequest) -> None:
        if not request.name or not request.name.strip():
            raise InvalidUsageError(
                "Branch name is required",
                hint="Usage: bgit branch <name>",
            )

    def _run(self, request: BranchRequest) -> ExitSignal:
        name = request.name.strip()
        if not self.inspector.is_valid_branch_name(name):
            raise InvalidUsageError(f"'{name}' is not a valid branch name")

        context = self.inspector.snapshot()
        require_clean_tree(context)
        require_remote(context)

        self.apply(fetch_plan(), "Fetch failed")
        target = self.inspector.branch_ref(name)
        logger.debug("Resolved %s", target)

        if target.exists_locally:
            return self._switch_local(target, already_on=context.branch == name)
        if target.exists_on_remote:
            return self._track_remote(target)
        return self._create_and_publish(target)

    def _switch_local(self, target: BranchRef, already_on: bool) -> ExitSignal:
        if not already_on:
            self.apply(CommandPlan().add(f"Switch to {target.name}", "switch", target.name), "Switch failed")
        return self._sync_after_switch(target)

    def _track_remote(self, target: BranchRef) -> ExitSignal:
        plan = CommandPlan().add(
            f"Create {target.name} tracking {target.remote_ref}",
            "switch", "--track", "-c", target.name, target.remote_ref,
        )
        self.apply(plan, "Switch failed")
        return self.finish(f"Switched to new branch '{target.name}' tracking {target.remote_ref}.")

    def _create_and_publish(self, target: BranchRef) -> ExitSignal:
        plan = (
            CommandPlan()
            .add(f"Create {target.name}", "switch", "-c", target.name)
            .add(f"Publish {target.name}", "push", "-u", REMOTE_NAME, target.name)
        )
        self.apply(plan, "Could not create branch")
        return self.finish(f"Created and published branch '{target.name}'.")

    def _sync_after_switch(self, target: BranchRef) -> ExitSignal:
        # In a dry run the switch did not happen, so look the upstream up by name
        upstream = self.inspector.upstream_of(target.name)
        if upstream is None:
            return self.finish(
                f"Switched to '{target.name}'.",
                f"Branch '{target.name}' is not published yet. Run 'bgit ship' to publish it.",
            )
        pull_fast_forward(self.runner, target.name, upstream)
        return self.finish(f"Switched to '{target.name}' and synced with {upstream}.")
