"""Merge use case: merge one fully shipped branch into another and publish."""

import logging
import re
from dataclasses import dataclass

from bgit.core.commands.base import UseCase
from bgit.core.commands.branch import fetch_plan
from bgit.core.commands.ship import ShipUseCase
from bgit.core.guards import (
    pull_fast_forward,
    require_clean_tree,
    require_remote,
    require_shipped,
)
from bgit.domain.entities import BranchRef, CommandPlan, ExitSignal, OutcomeTag
from bgit.domain.exceptions import (
    BranchNotFoundError,
    InvalidUsageError,
    MergeConflictError,
    SubprocessFailureError,
)

logger = logging.getLogger(__name__)

MERGE_SEPARATOR = "->"
MERGE_USAGE = "Usage: bgit merge <source> -> <destination>"

_WHITESPACE = re.compile(r"\s")


@dataclass(frozen=True)
class MergeSpec:
    source: str
    destination: str


def parse_merge_spec(tokens: list[str] | tuple[str, ...]) -> MergeSpec:
    """Parse "<source> -> <destination>" strictly.

    The separator may stand alone or be attached ("a->b"); anything that
    does not split into exactly two branch tokens is rejected, as is a
    merge of a branch into itself.

    Raises:
        InvalidUsageError: On any malformed input.
    """
    text = " ".join(token.strip() for token in tokens).strip()
    if text.count(MERGE_SEPARATOR) != 1:
        raise InvalidUsageError(f"Invalid merge format: '{text}'", hint=MERGE_USAGE)

    source, destination = (part.strip() for part in text.split(MERGE_SEPARATOR))
    for part in (source, destination):
        if not part or _WHITESPACE.search(part):
            raise InvalidUsageError(f"Invalid merge format: '{text}'", hint=MERGE_USAGE)

    if source == destination:
        raise InvalidUsageError(
            f"Cannot merge '{source}' into itself",
            hint="Source and destination must be different branches",
        )
    return MergeSpec(source=source, destination=destination)


@dataclass
class MergeRequest:
    tokens: tuple[str, ...]


class MergeUseCase(UseCase):
    """Merge <source> into <destination> with a merge commit, then ship it."""

    operation_name = "merge"
    validate_first = True

    def validate(self, request: MergeRequest) -> None:
        self.spec = parse_merge_spec(request.tokens)

    def _run(self, request: MergeRequest) -> ExitSignal:
        spec = self.spec
        context = self.inspector.snapshot()
        require_remote(context)
        require_clean_tree(context)

        self.apply(fetch_plan(), "Fetch failed")
        source = self._resolve(spec.source)
        destination = self._resolve(spec.destination)

        for branch in (source, destination):
            self.note(f"Checking that '{branch.name}' is fully shipped...")
            self._switch(branch.name)
            require_shipped(self.inspector, self.runner, branch.name)

        self._switch(destination.name)
        destination_context = self.inspector.snapshot()
        pull_fast_forward(self.runner, destination.name, destination_context.upstream)

        self._merge(source.name, destination.name)
        self.note(f"Merged '{source.name}' into '{destination.name}'.")

        publish = ShipUseCase(self.env).publish(self.inspector.snapshot(), message=None)
        return ExitSignal.ok(*publish.lines)

    def _resolve(self, name: str) -> BranchRef:
        """Make sure a local branch exists, creating a tracking one if needed.

        Raises:
            BranchNotFoundError: If the branch exists neither locally nor on origin.
        """
        ref = self.inspector.branch_ref(name)
        if ref.exists_locally:
            return ref
        if ref.exists_on_remote:
            plan = CommandPlan().add(
                f"Create {name} tracking {ref.remote_ref}",
                "branch", "--track", name, ref.remote_ref,
            )
            self.apply(plan, f"Could not create tracking branch '{name}'")
            return self.inspector.branch_ref(name)
        raise BranchNotFoundError(
            f"Branch '{name}' not found locally or on origin",
            hint="Check the name with 'git branch -a'",
        )

    def _switch(self, name: str) -> None:
        if self.inspector.current_branch() != name:
            self.apply(CommandPlan().add(f"Switch to {name}", "switch", name), "Switch failed")

    def _merge(self, source: str, destination: str) -> None:
        plan = CommandPlan().add(
            f"Merge {source} into {destination}",
            "merge", "--no-ff", "--no-edit", source,
        )
        result = self.runner.execute(plan)
        if result.succeeded:
            return
        if result.failure.tag is OutcomeTag.CONFLICT:
            raise MergeConflictError(
                f"Merging '{source}' into '{destination}' produced conflicts",
                hint=f"Resolve the conflicts, then run 'bgit ship' on '{destination}'",
                detail=result.failure.diagnostic or None,
            )
        raise SubprocessFailureError(result.failure, "Merge failed")
